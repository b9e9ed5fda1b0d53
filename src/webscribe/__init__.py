"""
WebScribe - extract the readable content of web pages into clean notes.
"""

from __future__ import annotations

__version__ = "0.1.0"

from .config import Config
from .extractor import ExtractionOrchestrator, ExtractionResult, FrameArbiter
from .pipeline import ScribePipeline

__all__ = ["__version__", "Config", "ExtractionOrchestrator", "ExtractionResult", "FrameArbiter", "ScribePipeline"]
