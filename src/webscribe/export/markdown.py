"""
Markdown renderer producing notes ready for Obsidian-style vaults.
"""

from __future__ import annotations

import re
from typing import List, Optional, Sequence

from webscribe.extractor.models import (
    Blockquote,
    Code,
    ContentNode,
    ExtractionResult,
    Heading,
    HorizontalRule,
    Image,
    ListNode,
    PageMetadata,
    Paragraph,
    Table,
)
from webscribe.notes.analyzer import StudyNotes
from webscribe.utils.slugify import slugify

from .base import CONTENTS_TITLE, NOTES_TITLE, BaseExporter, RenderOptions

_WHITESPACE = re.compile(r"\s+")


def clean_text(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


def escape_markdown(text: str) -> str:
    return re.sub(r'(["\\])', r"\\\1", text)


def escape_front_matter(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"').replace("\n", " ")


def escape_cell(text: str) -> str:
    return clean_text(text).replace("|", "\\|")


class MarkdownExporter(BaseExporter):
    """Renders extraction results as Markdown with YAML front matter."""

    format_name = "markdown"
    extension = ".md"

    def render(
        self, result: ExtractionResult, options: Optional[RenderOptions] = None, notes: Optional[StudyNotes] = None
    ) -> str:
        options = options or self.options
        parts = [self.front_matter(result.metadata)]

        if options.include_notes and notes is not None and not notes.is_empty:
            parts.append(self.notes_block(notes))

        headings = self.headings(result)
        if options.include_toc and len(headings) > 1:
            parts.append(self.table_of_contents(headings))

        for node in result.nodes:
            markdown = self.render_node(node, options.include_images)
            if markdown:
                parts.append(markdown)

        parts.append(self.footer(result.metadata))
        return "\n".join(parts)

    @staticmethod
    def front_matter(metadata: PageMetadata) -> str:
        lines = [
            "---",
            f'title: "{escape_front_matter(metadata.title)}"',
            f'source: "{escape_front_matter(metadata.canonical_url)}"',
        ]
        lines.append(f"date: {metadata.iso_date}")
        if metadata.description:
            lines.append(f'description: "{escape_front_matter(metadata.description)}"')
        lines.extend(["tags: [webscribe]", "---"])
        return "\n".join(lines)

    @staticmethod
    def notes_block(notes: StudyNotes) -> str:
        parts = [f"\n## {NOTES_TITLE}\n"]
        if notes.summary:
            parts.append("### Summary\n")
            parts.append(notes.summary + "\n")
        if notes.key_points:
            parts.append("### Key Points\n")
            parts.extend(f"- {point}" for point in notes.key_points)
            parts.append("")
        if notes.definitions:
            parts.append("### Key Terms\n")
            parts.extend(f"**{term}**: {definition}" for term, definition in notes.definitions)
            parts.append("")
        parts.append("---\n")
        return "\n".join(parts)

    @staticmethod
    def table_of_contents(headings: Sequence[Heading]) -> str:
        lines = [f"\n## {CONTENTS_TITLE}\n"]
        for heading in headings:
            indent = "  " * max(0, heading.level - 1)
            lines.append(f"{indent}- [{heading.text}](#{slugify(heading.text)})")
        lines.append("")
        return "\n".join(lines)

    def render_node(self, node: ContentNode, include_images: bool = True) -> Optional[str]:
        if isinstance(node, Heading):
            return f"\n{'#' * node.level} {node.text}\n"
        if isinstance(node, Paragraph):
            text = clean_text(node.text)
            return f"\n{text}\n" if text else None
        if isinstance(node, ListNode):
            lines = [
                f"{index}. {clean_text(item)}" if node.ordered else f"- {clean_text(item)}"
                for index, item in enumerate(node.items, start=1)
            ]
            return "\n" + "\n".join(lines) + "\n"
        if isinstance(node, Code):
            fence = "````" if "```" in node.code else "```"
            return f"\n{fence}{node.language}\n{node.code}\n{fence}\n"
        if isinstance(node, Blockquote):
            return "\n" + "\n".join(f"> {line}" for line in node.text.split("\n")) + "\n"
        if isinstance(node, Image):
            if not include_images:
                return None
            return f"\n![{node.alt_text or 'image'}]({node.src})\n"
        if isinstance(node, Table):
            return self.table(node)
        if isinstance(node, HorizontalRule):
            return "\n---\n"
        return None

    @staticmethod
    def table(node: Table) -> Optional[str]:
        if not node.rows:
            return None
        header = node.rows[0]
        width = max(len(row) for row in node.rows)

        def row_line(row: Sequence[str]) -> str:
            cells: List[str] = [escape_cell(cell) for cell in row] + [""] * (width - len(row))
            return "| " + " | ".join(cells) + " |"

        lines = [row_line(header), "| " + " | ".join(["---"] * width) + " |"]
        lines.extend(row_line(row) for row in node.rows[1:])
        return "\n" + "\n".join(lines) + "\n"

    @staticmethod
    def footer(metadata: PageMetadata) -> str:
        return (
            f"\n---\n*Source: [{escape_markdown(metadata.title)}]({metadata.canonical_url})*  \n"
            f"*Saved with WebScribe on {metadata.iso_date}*"
        )
