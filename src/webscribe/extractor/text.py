"""
Visible-text rendering for parsed elements.

Approximates the browser's ``innerText``: hidden subtrees and
non-rendered tags are skipped, whitespace inside text collapses, block
elements are separated by a line break, paragraphs by a blank line, and
``<br>`` is a literal newline.
"""

from __future__ import annotations

import re
from typing import List, Optional, Union

from bs4 import CData, Comment, Declaration, Doctype, NavigableString, ProcessingInstruction, Tag

from .visibility import VisibilityOracle

NON_RENDERED_TAGS = frozenset(
    {"script", "style", "noscript", "template", "head", "title", "meta", "link", "iframe", "object"}
)

BLOCK_TAGS = frozenset(
    {
        "address", "article", "aside", "blockquote", "body", "caption", "dd", "details", "dialog",
        "div", "dl", "dt", "fieldset", "figcaption", "figure", "footer", "form", "h1", "h2", "h3",
        "h4", "h5", "h6", "header", "hgroup", "hr", "html", "li", "main", "nav", "ol", "p", "pre",
        "section", "summary", "table", "tbody", "tfoot", "thead", "tr", "ul",
    }
)

PARAGRAPH_BREAK_TAGS = frozenset({"p"})
CELL_TAGS = frozenset({"td", "th"})
PREFORMATTED_TAGS = frozenset({"pre", "textarea", "listing", "plaintext"})

_SKIPPED_STRINGS = (Comment, CData, Declaration, Doctype, ProcessingInstruction)
_WHITESPACE = re.compile(r"\s+")
# A required line break (int) or a run of text (str)
_Item = Union[int, str]


class _Preformatted(str):
    """Text from inside a preformatted element; its whitespace is kept verbatim."""


def normalize_text(text: Optional[str]) -> str:
    """Collapse whitespace runs to one space and trim."""
    if not text:
        return ""
    return _WHITESPACE.sub(" ", text).strip()


def _collect(root: Tag, oracle: VisibilityOracle) -> List[_Item]:
    items: List[_Item] = []
    # (node, preformatted, is_root) entries; closing breaks and cell separators are pushed before children
    stack: List[object] = [(root, False, True)]
    while stack:
        entry = stack.pop()
        if isinstance(entry, int):
            items.append(entry)
            continue
        if isinstance(entry, str):
            items.append(entry)
            continue
        node, preformatted, is_root = entry  # type: ignore[misc]

        if isinstance(node, NavigableString):
            if isinstance(node, _SKIPPED_STRINGS):
                continue
            text = str(node)
            items.append(_Preformatted(text) if preformatted else _WHITESPACE.sub(" ", text))
            continue
        if not isinstance(node, Tag):
            continue

        name = (node.name or "").lower()
        if name in NON_RENDERED_TAGS and not is_root:
            continue
        if not is_root and not oracle.is_visible(node):
            continue
        if name == "br":
            items.append("\n")
            continue

        breaks = 2 if name in PARAGRAPH_BREAK_TAGS else 1 if name in BLOCK_TAGS else 0
        child_preformatted = preformatted or name in PREFORMATTED_TAGS

        if breaks:
            items.append(breaks)
            stack.append(breaks)
        elif name in CELL_TAGS:
            stack.append(" ")
        for child in reversed(node.contents):
            stack.append((child, child_preformatted, False))
    return items


def _trim_line_end(out: List[str]) -> None:
    if out and not isinstance(out[-1], _Preformatted):
        out[-1] = out[-1].rstrip(" \t")


def _resolve(items: List[_Item]) -> str:
    out: List[str] = []
    pending = 0
    at_line_start = True
    for item in items:
        if isinstance(item, int):
            pending = max(pending, item)
            continue
        preformatted = isinstance(item, _Preformatted)
        if not preformatted and (pending or at_line_start):
            item = item.lstrip(" \t")
        if not item:
            continue
        if pending and out:
            _trim_line_end(out)
            out.append("\n" * pending)
        elif item.startswith("\n") and not preformatted:
            _trim_line_end(out)
        pending = 0
        out.append(item)
        at_line_start = item.endswith("\n")
    return "".join(out).strip()


def visible_text(element: Optional[Tag], oracle: Optional[VisibilityOracle] = None) -> str:
    """Render the visible text of an element's subtree."""
    if element is None:
        return ""
    if isinstance(element, NavigableString):
        return normalize_text(str(element))
    return _resolve(_collect(element, oracle or VisibilityOracle()))


def inner_text(element: Optional[Tag], oracle: Optional[VisibilityOracle] = None) -> str:
    """Visible text with whitespace normalised, as stored in content nodes."""
    return normalize_text(visible_text(element, oracle))
