"""
Data models for the structured content model produced by extraction.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple, Union


@dataclass(slots=True, frozen=True)
class Heading:
    """Section heading, level 1..6."""

    level: int
    text: str
    type: str = field(default="heading", init=False)

    def __post_init__(self) -> None:
        """Validate the heading level."""
        if not (1 <= self.level <= 6):
            raise ValueError("Heading level must be between 1 and 6")


@dataclass(slots=True, frozen=True)
class Paragraph:
    """Prose paragraph.

    ``raw_markup`` keeps the original inner HTML; it is only read by the
    notes analyzer for term/definition extraction, never rendered.
    """

    text: str
    raw_markup: str = ""
    type: str = field(default="paragraph", init=False)


@dataclass(slots=True, frozen=True)
class Code:
    """Preformatted or standalone code block."""

    code: str
    language: str = ""
    type: str = field(default="code", init=False)


@dataclass(slots=True, frozen=True)
class Blockquote:
    text: str
    type: str = field(default="blockquote", init=False)


@dataclass(slots=True, frozen=True)
class ListNode:
    """Ordered or unordered list of item texts."""

    ordered: bool
    items: Tuple[str, ...]
    type: str = field(default="list", init=False)


@dataclass(slots=True, frozen=True)
class Table:
    """Table rows; row 0 is the header."""

    rows: Tuple[Tuple[str, ...], ...]
    type: str = field(default="table", init=False)


@dataclass(slots=True, frozen=True)
class Image:
    src: str
    alt_text: str = ""
    type: str = field(default="image", init=False)


@dataclass(slots=True, frozen=True)
class HorizontalRule:
    type: str = field(default="hr", init=False)


ContentNode = Union[Heading, Paragraph, Code, Blockquote, ListNode, Table, Image, HorizontalRule]


@dataclass(slots=True, frozen=True)
class PageMetadata:
    """Page-level metadata, derived once per extraction."""

    title: str
    canonical_url: str
    iso_date: str
    description: str = ""


@dataclass(slots=True, frozen=True)
class ExtractionResult:
    """Terminal result of one extraction context (main document or frame)."""

    metadata: PageMetadata
    nodes: Tuple[ContentNode, ...]
    origin_frame_id: int = 0

    @property
    def node_count(self) -> int:
        return len(self.nodes)

    @property
    def is_empty(self) -> bool:
        return not self.nodes


# --- Wire helpers ---


def node_to_dict(node: ContentNode) -> Dict[str, Any]:
    """Serialize a content node to its wire representation."""
    if isinstance(node, Heading):
        return {"type": node.type, "level": node.level, "text": node.text}
    if isinstance(node, Paragraph):
        return {"type": node.type, "text": node.text, "html": node.raw_markup}
    if isinstance(node, Code):
        return {"type": node.type, "lang": node.language, "code": node.code}
    if isinstance(node, Blockquote):
        return {"type": node.type, "text": node.text}
    if isinstance(node, ListNode):
        return {"type": node.type, "ordered": node.ordered, "items": list(node.items)}
    if isinstance(node, Table):
        return {"type": node.type, "rows": [list(row) for row in node.rows]}
    if isinstance(node, Image):
        return {"type": node.type, "src": node.src, "alt": node.alt_text}
    if isinstance(node, HorizontalRule):
        return {"type": node.type}
    raise TypeError(f"Unsupported content node: {type(node).__name__}")


def node_from_dict(data: Dict[str, Any]) -> ContentNode:
    """Rebuild a content node from its wire representation.

    Raises:
        ValueError: If the node type tag is unknown
    """
    kind = data.get("type")
    if kind == "heading":
        return Heading(level=int(data["level"]), text=data["text"])
    if kind == "paragraph":
        return Paragraph(text=data["text"], raw_markup=data.get("html", ""))
    if kind == "code":
        return Code(code=data["code"], language=data.get("lang", ""))
    if kind == "blockquote":
        return Blockquote(text=data["text"])
    if kind == "list":
        return ListNode(ordered=bool(data.get("ordered", False)), items=tuple(data.get("items", ())))
    if kind == "table":
        return Table(rows=tuple(tuple(row) for row in data.get("rows", ())))
    if kind == "image":
        return Image(src=data["src"], alt_text=data.get("alt", ""))
    if kind == "hr":
        return HorizontalRule()
    raise ValueError(f"Unknown content node type: {kind!r}")


def metadata_to_dict(metadata: PageMetadata) -> Dict[str, str]:
    return {
        "title": metadata.title,
        "url": metadata.canonical_url,
        "date": metadata.iso_date,
        "description": metadata.description,
    }


def metadata_from_dict(data: Dict[str, Any]) -> PageMetadata:
    return PageMetadata(
        title=data.get("title") or "Untitled",
        canonical_url=data.get("url", ""),
        iso_date=data.get("date", ""),
        description=data.get("description", ""),
    )


def result_to_dict(result: ExtractionResult) -> Dict[str, Any]:
    return {
        "metadata": metadata_to_dict(result.metadata),
        "nodes": [node_to_dict(node) for node in result.nodes],
        "frameId": result.origin_frame_id,
    }


def result_from_dict(data: Dict[str, Any]) -> ExtractionResult:
    return ExtractionResult(
        metadata=metadata_from_dict(data.get("metadata") or {}),
        nodes=tuple(node_from_dict(node) for node in data.get("nodes") or ()),
        origin_frame_id=int(data.get("frameId", 0)),
    )
