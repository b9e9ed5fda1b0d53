"""
Print-ready HTML renderer.

Produces a standalone document with embedded print CSS; opening it in a
browser and printing to PDF yields the formatted notes.
"""

from __future__ import annotations

from typing import Optional, Sequence

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

PRINT_CSS = """
    *, *::before, *::after { box-sizing: border-box; margin: 0; padding: 0; }
    body { font-family: system-ui, -apple-system, 'Segoe UI', sans-serif; font-size: 11pt; line-height: 1.75; color: #1a1a2e; background: #fff; }
    .page-wrapper { max-width: 740px; margin: 0 auto; padding: 48px 52px; }
    .doc-header { border-bottom: 2px solid #e0e7ff; padding-bottom: 20px; margin-bottom: 32px; }
    .doc-badge { display: inline-block; font-size: 8pt; font-weight: 600; letter-spacing: 0.12em; text-transform: uppercase; color: #6366f1; background: #eef2ff; padding: 3px 10px; border-radius: 100px; margin-bottom: 10px; }
    .doc-title { font-size: 22pt; font-weight: 700; margin-bottom: 8px; line-height: 1.2; }
    .doc-meta { font-size: 8.5pt; color: #6b7280; }
    .doc-meta a { color: #6366f1; text-decoration: none; }
    .notes-block { background: #f5f7ff; border: 1px solid #c7d2fe; border-radius: 10px; padding: 20px 24px; margin: 24px 0; }
    .notes-block h2 { font-size: 11pt; color: #6366f1; margin-bottom: 12px; border: none; }
    .notes-block h3 { font-size: 9pt; text-transform: uppercase; letter-spacing: .06em; color: #818cf8; margin: 12px 0 6px; }
    .notes-block p, .notes-block li { font-size: 10pt; color: #374151; }
    .toc { background: #f8fafc; border-left: 3px solid #6366f1; padding: 16px 20px; margin: 24px 0; border-radius: 0 8px 8px 0; }
    .toc-title { font-size: 9pt; font-weight: 700; text-transform: uppercase; letter-spacing: .1em; color: #6366f1; margin-bottom: 10px; }
    .toc a { color: #374151; text-decoration: none; font-size: 10pt; }
    .toc ul { padding-left: 18px; }
    h1 { font-size: 18pt; margin: 28px 0 10px; line-height: 1.25; }
    h2 { font-size: 14pt; margin: 24px 0 8px; padding-bottom: 4px; border-bottom: 1px solid #e2e8f0; }
    h3 { font-size: 12pt; margin: 18px 0 6px; }
    h4, h5, h6 { font-size: 10.5pt; margin: 12px 0 4px; color: #475569; }
    p { margin: 0 0 12px; }
    ul, ol { padding-left: 22px; margin: 0 0 12px; }
    li { margin-bottom: 4px; }
    pre { background: #0f172a; color: #e2e8f0; font-family: ui-monospace, monospace; font-size: 9pt; padding: 16px 20px; border-radius: 8px; margin: 14px 0; line-height: 1.6; overflow-x: auto; }
    code { font-family: ui-monospace, monospace; font-size: 9pt; }
    blockquote { border-left: 4px solid #6366f1; margin: 14px 0; padding: 10px 18px; background: #f8f9ff; color: #475569; }
    img { max-width: 100%; height: auto; border-radius: 8px; margin: 14px 0; display: block; }
    table { border-collapse: collapse; width: 100%; margin: 14px 0; font-size: 10pt; }
    th { background: #f1f5f9; font-weight: 600; padding: 8px 12px; text-align: left; border: 1px solid #e2e8f0; }
    td { padding: 7px 12px; border: 1px solid #e2e8f0; }
    hr { border: none; border-top: 1px solid #e2e8f0; margin: 24px 0; }
    .source-footer { margin-top: 36px; padding-top: 16px; border-top: 1px solid #e2e8f0; font-size: 8.5pt; color: #9ca3af; }
    @media print {
      .page-wrapper { padding: 20px 24px; max-width: 100%; }
      pre { white-space: pre-wrap; word-break: break-all; }
      a { color: inherit; }
    }
"""

AUTO_PRINT_SCRIPT = "<script>window.onload = function() { setTimeout(function() { window.print(); }, 500); };</script>"


def escape_html(value: object) -> str:
    """Escape ``& < > "`` for element content and double-quoted attributes."""
    return str(value).replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;").replace('"', "&quot;")


class PrintHtmlExporter(BaseExporter):
    """Renders extraction results as a standalone print-ready HTML page."""

    format_name = "html"
    extension = ".html"

    def render(
        self, result: ExtractionResult, options: Optional[RenderOptions] = None, notes: Optional[StudyNotes] = None
    ) -> str:
        options = options or self.options
        metadata = result.metadata
        body = [self.header(metadata)]

        if options.include_notes and notes is not None and not notes.is_empty:
            body.append(self.notes_block(notes))

        headings = self.headings(result)
        if options.include_toc and len(headings) > 2:
            body.append(self.table_of_contents(headings))

        for node in result.nodes:
            html = self.render_node(node, options.include_images)
            if html:
                body.append(html)
        body.append(self.footer(metadata))

        script = AUTO_PRINT_SCRIPT if options.auto_print else ""
        content = "\n    ".join(body)
        return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <title>{escape_html(metadata.title)}</title>
  <style>{PRINT_CSS}  </style>
</head>
<body>
  <div class="page-wrapper">
    {content}
  </div>
  {script}
</body>
</html>
"""

    @staticmethod
    def header(metadata: PageMetadata) -> str:
        url = escape_html(metadata.canonical_url)
        return (
            '<div class="doc-header">'
            '<div class="doc-badge">WebScribe Notes</div>'
            f'<h1 class="doc-title">{escape_html(metadata.title)}</h1>'
            f'<div class="doc-meta"><a href="{url}">{url}</a> &middot; {escape_html(metadata.iso_date)}</div>'
            "</div>"
        )

    @staticmethod
    def notes_block(notes: StudyNotes) -> str:
        inner = [f'<div class="notes-block"><h2>{NOTES_TITLE}</h2>']
        if notes.summary:
            inner.append(f"<h3>Summary</h3><p>{escape_html(notes.summary)}</p>")
        if notes.key_points:
            inner.append("<h3>Key Points</h3><ul>")
            inner.extend(f"<li>{escape_html(point)}</li>" for point in notes.key_points)
            inner.append("</ul>")
        if notes.definitions:
            inner.append("<h3>Key Terms</h3><ul>")
            inner.extend(
                f"<li><strong>{escape_html(term)}</strong>: {escape_html(definition)}</li>"
                for term, definition in notes.definitions
            )
            inner.append("</ul>")
        inner.append("</div>")
        return "".join(inner)

    @staticmethod
    def table_of_contents(headings: Sequence[Heading]) -> str:
        items = []
        for heading in headings:
            indent = f' style="margin-left:{(heading.level - 1) * 14}px"' if heading.level > 1 else ""
            items.append(f'<li{indent}><a href="#{slugify(heading.text)}">{escape_html(heading.text)}</a></li>')
        return f'<div class="toc"><div class="toc-title">{CONTENTS_TITLE}</div><ul>{"".join(items)}</ul></div>'

    def render_node(self, node: ContentNode, include_images: bool = True) -> str:
        if isinstance(node, Heading):
            return f'<h{node.level} id="{slugify(node.text)}">{escape_html(node.text)}</h{node.level}>'
        if isinstance(node, Paragraph):
            return f"<p>{escape_html(node.text)}</p>"
        if isinstance(node, ListNode):
            tag = "ol" if node.ordered else "ul"
            items = "".join(f"<li>{escape_html(item)}</li>" for item in node.items)
            return f"<{tag}>{items}</{tag}>"
        if isinstance(node, Code):
            return f'<pre><code class="language-{escape_html(node.language)}">{escape_html(node.code)}</code></pre>'
        if isinstance(node, Blockquote):
            return f"<blockquote>{escape_html(node.text)}</blockquote>"
        if isinstance(node, Image):
            if not include_images:
                return ""
            return f'<img src="{escape_html(node.src)}" alt="{escape_html(node.alt_text)}" loading="lazy">'
        if isinstance(node, Table):
            return self.table(node)
        if isinstance(node, HorizontalRule):
            return "<hr>"
        return ""

    @staticmethod
    def table(node: Table) -> str:
        if not node.rows:
            return ""
        header = "".join(f"<th>{escape_html(cell)}</th>" for cell in node.rows[0])
        body = "".join(
            "<tr>" + "".join(f"<td>{escape_html(cell)}</td>" for cell in row) + "</tr>" for row in node.rows[1:]
        )
        return f"<table><thead><tr>{header}</tr></thead><tbody>{body}</tbody></table>"

    @staticmethod
    def footer(metadata: PageMetadata) -> str:
        url = escape_html(metadata.canonical_url)
        return (
            f'<div class="source-footer">Source: <a href="{url}">{escape_html(metadata.title)}</a>'
            f" &middot; Saved with WebScribe on {escape_html(metadata.iso_date)}</div>"
        )
