"""
Shared exporter machinery: render options, output naming and atomic writes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import structlog

from webscribe.config.config import ExportSettings
from webscribe.extractor.models import ExtractionResult, Heading
from webscribe.notes.analyzer import StudyNotes
from webscribe.utils.atomic import atomic_write_text
from webscribe.utils.slugify import safe_filename

logger = structlog.get_logger(__name__)

NOTES_TITLE = "Study Notes"
CONTENTS_TITLE = "Contents"


@dataclass(frozen=True)
class RenderOptions:
    include_toc: bool = True
    include_images: bool = True
    include_notes: bool = False
    auto_print: bool = False

    @classmethod
    def from_settings(cls, settings: ExportSettings) -> RenderOptions:
        return cls(
            include_toc=settings.include_toc,
            include_images=settings.include_images,
            include_notes=settings.include_notes,
        )


class BaseExporter(ABC):
    """Abstract base class for document renderers."""

    format_name: str = ""
    extension: str = ""

    def __init__(self, options: Optional[RenderOptions] = None):
        self.options = options or RenderOptions()

    @abstractmethod
    def render(
        self, result: ExtractionResult, options: Optional[RenderOptions] = None, notes: Optional[StudyNotes] = None
    ) -> str:
        """Renders an extraction result to a document string."""
        pass

    @staticmethod
    def headings(result: ExtractionResult) -> List[Heading]:
        return [node for node in result.nodes if isinstance(node, Heading)]

    def output_path(self, result: ExtractionResult, destination: Path) -> Path:
        """Resolve ``destination`` to a file path; directories get a name derived from the title."""
        destination = Path(destination).expanduser()
        if destination.is_dir() or not destination.suffix:
            return destination / f"{safe_filename(result.metadata.title)}{self.extension}"
        return destination

    def export(
        self,
        result: ExtractionResult,
        destination: Path,
        options: Optional[RenderOptions] = None,
        notes: Optional[StudyNotes] = None,
    ) -> Path:
        """Render and write the document atomically, returning the written path."""
        path = self.output_path(result, destination)
        logger.info("Exporting document", format=self.format_name, path=str(path), node_count=result.node_count)
        atomic_write_text(path, self.render(result, options, notes))
        logger.info("Export complete", format=self.format_name, path=str(path))
        return path
