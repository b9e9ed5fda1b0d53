"""Configuration models and loaders."""

from .config import (
    ArbiterSettings,
    Config,
    CrawlerConfig,
    ExportSettings,
    ExtractionSettings,
    MonitoringConfig,
    find_config_file,
    load_config,
)

__all__ = [
    "ArbiterSettings",
    "Config",
    "CrawlerConfig",
    "ExportSettings",
    "ExtractionSettings",
    "MonitoringConfig",
    "find_config_file",
    "load_config",
]
