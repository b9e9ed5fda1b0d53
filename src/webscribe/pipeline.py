"""
End-to-end pipeline: load a source, arbitrate across its frames, and
render the chosen result.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional
from urllib.parse import urlparse

import structlog

from webscribe.config.config import Config
from webscribe.crawler.page_loader import FETCHABLE_SCHEMES, Page, PageLoader
from webscribe.export import RenderOptions, get_exporter
from webscribe.extractor.arbiter import FrameArbiter, select_result
from webscribe.extractor.models import ExtractionResult
from webscribe.extractor.orchestrator import ExtractionOrchestrator
from webscribe.extractor.protocols import ReadabilityParser
from webscribe.extractor.readability_extractor import ReadabilityExtractor
from webscribe.notes.analyzer import NotesAnalyzer, StudyNotes

logger = structlog.get_logger(__name__)


def is_url(source: str) -> bool:
    return urlparse(source).scheme in FETCHABLE_SCHEMES


@dataclass
class FrameReport:
    """Per-frame outcome shown by ``webscribe inspect``."""

    frame_id: int
    url: str
    result: Optional[ExtractionResult]

    @property
    def node_count(self) -> int:
        return self.result.node_count if self.result is not None else 0


class ScribePipeline:
    """Wires page loading, per-frame extraction, arbitration, notes and export.

    Args:
        config: Application configuration
        readability: Fallback parser; defaults to the readability-lxml adapter
    """

    def __init__(self, config: Optional[Config] = None, readability: Optional[ReadabilityParser] = None) -> None:
        self.config = config or Config()
        self.orchestrator = ExtractionOrchestrator(
            self.config.extraction, readability=readability if readability is not None else ReadabilityExtractor()
        )
        self.arbiter = FrameArbiter(self.config.arbiter)
        self.loader = PageLoader(self.config.crawler, parser=self.config.extraction.parser)
        self.analyzer = NotesAnalyzer()

    async def load(self, source: str) -> Page:
        """Fetch a URL or read a local file."""
        if is_url(source):
            return await self.loader.load(source)
        return self.loader.load_file(Path(source).expanduser())

    async def extract(self, source: str) -> ExtractionResult:
        """Extract the best content of ``source`` across all of its frames.

        Raises:
            PageLoadError: If the source cannot be loaded
            NoActiveContextError: If no frame answered
            EmptyContentError: If no frame produced content
        """
        page = await self.load(source)
        result = await self.arbiter.arbitrate(page.channels(self.orchestrator))
        logger.info("Source extracted", source=source, frame_id=result.origin_frame_id, node_count=result.node_count)
        return result

    async def inspect(self, source: str) -> tuple[List[FrameReport], Optional[ExtractionResult]]:
        """Extract every frame once and report which one would be chosen."""
        page = await self.load(source)
        candidates = await self.arbiter.collect(page.channels(self.orchestrator))
        reports = [FrameReport(frame.frame_id, frame.url, candidate) for frame, candidate in zip(page.frames, candidates)]
        return reports, select_result(candidates, self.config.arbiter.main_preference_ratio)

    def notes(self, result: ExtractionResult) -> StudyNotes:
        return self.analyzer.analyze(result.nodes)

    def export(
        self,
        result: ExtractionResult,
        format_name: Optional[str] = None,
        destination: Optional[Path] = None,
        options: Optional[RenderOptions] = None,
    ) -> Path:
        """Render ``result`` and write it, returning the written path."""
        options = options or RenderOptions.from_settings(self.config.export)
        exporter = get_exporter(format_name or self.config.export.default_format, options)
        notes = self.notes(result) if options.include_notes else None
        return exporter.export(result, destination or self.config.export.output_dir, options, notes)
