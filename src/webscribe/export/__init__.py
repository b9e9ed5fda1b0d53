"""Renderers turning extraction results into Markdown or print-ready HTML."""

from typing import Dict, Optional, Type

from webscribe.utils.slugify import safe_filename

from .base import BaseExporter, RenderOptions
from .markdown import MarkdownExporter
from .print_html import PrintHtmlExporter, escape_html

EXPORTERS: Dict[str, Type[BaseExporter]] = {
    MarkdownExporter.format_name: MarkdownExporter,
    PrintHtmlExporter.format_name: PrintHtmlExporter,
}


def get_exporter(format_name: str, options: Optional[RenderOptions] = None) -> BaseExporter:
    """Instantiate the exporter registered for ``format_name``."""
    try:
        return EXPORTERS[format_name](options)
    except KeyError:
        raise ValueError(f"Unsupported export format: '{format_name}'. Supported formats: {', '.join(EXPORTERS)}")


__all__ = [
    "EXPORTERS",
    "BaseExporter",
    "MarkdownExporter",
    "PrintHtmlExporter",
    "RenderOptions",
    "escape_html",
    "get_exporter",
    "safe_filename",
]
