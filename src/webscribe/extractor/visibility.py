"""
Best-effort visibility checks for parsed documents.

There is no layout engine here. The effective style of an element is
resolved from the ``hidden`` attribute, the top-level rules of the
document's ``<style>`` blocks and the inline ``style`` attribute, in that
order of precedence (lowest first). Anything that cannot be resolved
fails open: the element is treated as visible.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple

import structlog
from bs4 import BeautifulSoup, Tag
from soupsieve import SelectorSyntaxError

from webscribe.exceptions import StyleComputationError

logger = structlog.get_logger(__name__)

STYLE_PROPERTIES = ("display", "visibility", "opacity")
MIN_OPACITY = 0.01

# Style blocks under these tags are not applied by a scripting browser
INERT_STYLE_CONTAINERS = ["noscript", "template"]
SCREEN_MEDIA = frozenset({"all", "screen"})

_COMMENT_PATTERN = re.compile(r"/\*.*?\*/", re.DOTALL)
_IMPORTANT_PATTERN = re.compile(r"\s*!\s*important\s*$", re.IGNORECASE)


@dataclass(frozen=True)
class EffectiveStyle:
    display: str = ""
    visibility: str = ""
    opacity: float = 1.0

    @property
    def removes_subtree(self) -> bool:
        """Hidden together with every descendant, whatever they declare."""
        return self.display == "none" or self.opacity < MIN_OPACITY

    @property
    def visibility_hidden(self) -> Optional[bool]:
        """Own ``visibility`` value; None when it is inherited from the parent."""
        if self.visibility in ("", "inherit"):
            return None
        return self.visibility in ("hidden", "collapse")


def parse_declarations(text: Optional[str]) -> Dict[str, str]:
    """Parse a CSS declaration block, keeping only visibility-related properties."""
    declarations: Dict[str, str] = {}
    if not text:
        return declarations
    for chunk in text.split(";"):
        name, sep, value = chunk.partition(":")
        if not sep:
            continue
        name = name.strip().lower()
        if name in STYLE_PROPERTIES:
            declarations[name] = _IMPORTANT_PATTERN.sub("", value).strip().lower()
    return declarations


def parse_opacity(value: str) -> float:
    """Parse a CSS opacity value ("0.5", "50%").

    Raises:
        StyleComputationError: If the value is not a number
    """
    value = value.strip()
    try:
        if value.endswith("%"):
            return float(value[:-1]) / 100.0
        return float(value)
    except ValueError as e:
        raise StyleComputationError(f"Unparsable opacity: {value!r}") from e


def iter_top_level_rules(css: str) -> Iterator[Tuple[str, str]]:
    """Yield ``(selector, declarations)`` for every top-level rule of a stylesheet.

    At-rule blocks (``@media``, ``@supports``, ...) are skipped whole.
    """
    css = _COMMENT_PATTERN.sub("", css)
    pos = 0
    length = len(css)
    while pos < length:
        brace = css.find("{", pos)
        if brace == -1:
            return
        prelude = css[pos:brace].strip()
        # Statement at-rules (@import ...;) end with a semicolon before the block
        if prelude.startswith("@") and ";" in prelude:
            pos = css.find(";", pos) + 1
            continue
        depth = 1
        cursor = brace + 1
        while cursor < length and depth:
            if css[cursor] == "{":
                depth += 1
            elif css[cursor] == "}":
                depth -= 1
            cursor += 1
        body = css[brace + 1 : cursor - 1]
        pos = cursor
        if prelude and not prelude.startswith("@"):
            yield prelude, body


def applies_on_screen(style_tag: Tag) -> bool:
    """True for ``<style>`` blocks a scripting browser applies to screen media."""
    if style_tag.find_parent(INERT_STYLE_CONTAINERS) is not None:
        return False
    media = style_tag.get("media") or ""
    if isinstance(media, list):
        media = " ".join(media)
    if not media.strip():
        return True
    return any(query.strip().lower() in SCREEN_MEDIA for query in media.split(","))


class VisibilityOracle:
    """Decides whether elements of one document are effectively visible.

    Built once per extraction context. Stylesheet rules are matched up front;
    per-element results are memoised for the lifetime of the oracle.
    """

    def __init__(self, document: Optional[BeautifulSoup | Tag] = None) -> None:
        self._sheet_styles: Dict[int, Dict[str, str]] = {}
        # id -> (removed with an ancestor, visibility hidden)
        self._cache: Dict[int, Tuple[bool, bool]] = {}
        # Keeps matched elements alive so their ids stay unique
        self._matched: List[Tag] = []
        if document is not None:
            self._load_stylesheets(document)

    def _load_stylesheets(self, document: BeautifulSoup | Tag) -> None:
        for style_tag in document.find_all("style"):
            if not applies_on_screen(style_tag):
                logger.debug("Skipping inactive style block", media=style_tag.get("media"))
                continue
            css = style_tag.string or style_tag.get_text()
            if not css:
                continue
            for selector, body in iter_top_level_rules(css):
                declarations = parse_declarations(body)
                if not declarations:
                    continue
                try:
                    matches = document.select(selector)
                except (SelectorSyntaxError, NotImplementedError, ValueError) as e:
                    logger.debug("Skipping unsupported stylesheet selector", selector=selector, error=str(e))
                    continue
                for element in matches:
                    self._sheet_styles.setdefault(id(element), {}).update(declarations)
                    self._matched.append(element)

    def computed_style(self, element: Tag) -> EffectiveStyle:
        """Resolve the visibility-related style of a single element.

        Raises:
            StyleComputationError: If a declared value cannot be interpreted
        """
        props: Dict[str, str] = {}
        if element.has_attr("hidden"):
            props["display"] = "none"
        props.update(self._sheet_styles.get(id(element), {}))
        style_attr = element.get("style")
        if isinstance(style_attr, list):
            style_attr = " ".join(style_attr)
        props.update(parse_declarations(style_attr))

        opacity = parse_opacity(props["opacity"]) if "opacity" in props else 1.0
        return EffectiveStyle(
            display=props.get("display", ""),
            visibility=props.get("visibility", ""),
            opacity=opacity,
        )

    def _own_state(self, element: Tag) -> Tuple[bool, Optional[bool]]:
        """Return ``(removes_subtree, visibility_hidden)`` declared on the element itself."""
        try:
            style = self.computed_style(element)
        except (StyleComputationError, TypeError, AttributeError) as e:
            logger.debug("Style computation failed, assuming visible", tag=element.name, error=str(e))
            return False, None
        return style.removes_subtree, style.visibility_hidden

    def is_visible(self, element: object) -> bool:
        """Return False when the element or one of its ancestors hides it.

        ``display: none`` and near-zero opacity hide every descendant;
        ``visibility`` is inherited but a descendant may set it back to
        ``visible``.
        """
        if not isinstance(element, Tag):
            return True

        # Collect the chain of ancestors whose state is not yet known
        chain: List[Tag] = []
        node: Optional[Tag] = element
        removed, visibility_hidden = False, False
        while isinstance(node, Tag) and not isinstance(node, BeautifulSoup):
            cached = self._cache.get(id(node))
            if cached is not None:
                removed, visibility_hidden = cached
                break
            chain.append(node)
            node = node.parent

        for tag in reversed(chain):
            own_removed, own_hidden = self._own_state(tag)
            removed = removed or own_removed
            if own_hidden is not None:
                visibility_hidden = own_hidden
            self._cache[id(tag)] = (removed, visibility_hidden)
        return not (removed or visibility_hidden)


def is_visible(element: object) -> bool:
    """Visibility from the ``hidden`` attribute and inline styles only."""
    return VisibilityOracle().is_visible(element)
