"""
Structural walk: converts a DOM subtree into an ordered sequence of
content nodes.

Every classified element (heading, paragraph, code, quote, list, table,
rule, image) emits at most one node and is never descended into, so
nested structures are not emitted twice. Anything else is a transparent
container whose children are walked one level deeper.
"""

from __future__ import annotations

import re
from typing import Callable, Dict, List, Optional
from urllib.parse import urljoin

import structlog
from bs4 import Tag

from webscribe.config.config import ExtractionSettings

from .models import (
    Blockquote,
    Code,
    ContentNode,
    Heading,
    HorizontalRule,
    Image,
    ListNode,
    Paragraph,
    Table,
)
from .noise import is_noisy
from .policy import HEADING_TAGS
from .text import inner_text, normalize_text
from .visibility import VisibilityOracle

logger = structlog.get_logger(__name__)

_LANGUAGE_CLASS = re.compile(r"^(?:language|lang)-(.+)$")


def detect_code_language(element: Optional[Tag]) -> str:
    """Language from a ``language-*``/``lang-*`` class or a data-language/data-lang attribute."""
    if element is None:
        return ""
    classes = element.get("class") or []
    if isinstance(classes, str):
        classes = classes.split()
    for name in classes:
        match = _LANGUAGE_CLASS.match(name)
        if match:
            return match.group(1)
    for attribute in ("data-language", "data-lang"):
        value = element.get(attribute)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return ""


def resolve_url(src: str, base_url: Optional[str]) -> str:
    """Resolve a possibly relative URL against the document URL."""
    if not base_url:
        return src
    try:
        return urljoin(base_url, src)
    except ValueError:
        return src


def _attr(element: Tag, name: str) -> str:
    value = element.get(name)
    if isinstance(value, list):
        value = " ".join(value)
    return value or ""


class StructuralWalker:
    """Walks a content root into content nodes.

    Args:
        oracle: Visibility oracle of the document being walked
        settings: Length thresholds and depth limit
        base_url: URL image sources are resolved against
    """

    def __init__(
        self,
        oracle: Optional[VisibilityOracle] = None,
        settings: Optional[ExtractionSettings] = None,
        base_url: Optional[str] = None,
    ) -> None:
        self.oracle = oracle or VisibilityOracle()
        self.settings = settings or ExtractionSettings()
        self.base_url = base_url
        self._handlers: Dict[str, Callable[[Tag, str], Optional[ContentNode]]] = {
            "p": self._paragraph,
            "pre": self._preformatted,
            "code": self._inline_code,
            "blockquote": self._blockquote,
            "ul": self._list,
            "ol": self._list,
            "table": self._table,
            "hr": self._rule,
            "img": self._image,
            "figure": self._image,
        }
        for heading in HEADING_TAGS:
            self._handlers[heading] = self._heading

    def walk(self, root: Optional[Tag], depth_limit: Optional[int] = None) -> List[ContentNode]:
        """Walk ``root`` and return its content nodes in document order."""
        nodes: List[ContentNode] = []
        if root is None:
            return nodes
        limit = self.settings.depth_limit if depth_limit is None else depth_limit
        self._walk(root, nodes, 0, limit)
        return nodes

    def _walk(self, root: Tag, nodes: List[ContentNode], depth: int, depth_limit: int) -> None:
        if depth > depth_limit:
            return
        for element in root.find_all(True, recursive=False):
            if is_noisy(element) or not self.oracle.is_visible(element):
                continue

            tag = (element.name or "").lower()
            handler = self._handlers.get(tag)
            if handler is None:
                self._walk(element, nodes, depth + 1, depth_limit)
                continue

            try:
                node = handler(element, tag)
            except (AttributeError, TypeError, ValueError) as e:
                logger.debug("Skipping malformed element", tag=tag, error=str(e))
                continue
            if node is not None:
                nodes.append(node)

    # --- Classifiers ---

    def _heading(self, element: Tag, tag: str) -> Optional[ContentNode]:
        text = inner_text(element, self.oracle)
        if len(text) > self.settings.heading_min_length:
            return Heading(level=int(tag[1]), text=text)
        return None

    def _paragraph(self, element: Tag, tag: str) -> Optional[ContentNode]:
        text = inner_text(element, self.oracle)
        if len(text) > self.settings.paragraph_min_length:
            return Paragraph(text=text, raw_markup=element.decode_contents())
        return None

    def _preformatted(self, element: Tag, tag: str) -> Optional[ContentNode]:
        code_element = element.find("code") or element
        language = detect_code_language(code_element)
        if not language and code_element is not element:
            language = detect_code_language(element)
        code = code_element.get_text().strip()
        if code:
            return Code(code=code, language=language)
        return None

    def _inline_code(self, element: Tag, tag: str) -> Optional[ContentNode]:
        if element.find_parent("pre") is not None:
            return None
        code = element.get_text().strip()
        if len(code) > self.settings.inline_code_min_length:
            return Code(code=code, language="code")
        return None

    def _blockquote(self, element: Tag, tag: str) -> Optional[ContentNode]:
        text = inner_text(element, self.oracle)
        return Blockquote(text=text) if text else None

    def _list(self, element: Tag, tag: str) -> Optional[ContentNode]:
        items = [inner_text(item, self.oracle) for item in element.find_all("li", recursive=False)]
        items = [item for item in items if item]
        if items:
            return ListNode(ordered=tag == "ol", items=tuple(items))
        return None

    def _table(self, element: Tag, tag: str) -> Optional[ContentNode]:
        rows = []
        for row in element.find_all("tr"):
            cells = tuple(inner_text(cell, self.oracle) for cell in row.find_all(["th", "td"]))
            if any(cells):
                rows.append(cells)
        if len(rows) > 1:
            return Table(rows=tuple(rows))
        return None

    def _rule(self, element: Tag, tag: str) -> Optional[ContentNode]:
        return HorizontalRule()

    def _image(self, element: Tag, tag: str) -> Optional[ContentNode]:
        image = element if tag == "img" else element.find("img")
        if image is None:
            return None
        src = (_attr(image, "src") or _attr(image, "data-src")).strip()
        if not src or src.lower().startswith("data:"):
            return None
        alt = normalize_text(_attr(image, "alt"))
        if not alt:
            alt = inner_text(element.find("figcaption"), self.oracle)
        return Image(src=resolve_url(src, self.base_url), alt_text=alt)


def walk(
    root: Optional[Tag],
    oracle: Optional[VisibilityOracle] = None,
    depth_limit: int = 20,
    base_url: Optional[str] = None,
) -> List[ContentNode]:
    """Walk ``root`` into content nodes with a fresh walker."""
    return StructuralWalker(oracle=oracle, base_url=base_url).walk(root, depth_limit=depth_limit)
