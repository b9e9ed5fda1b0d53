"""
Per-context extraction pipeline.

One extraction runs as a small state machine:

    INIT -> ROOT_LOCATED -> WALKED -> [FALLBACK_READABILITY] -> [FALLBACK_RAW_TEXT] -> DONE

The readability tier only runs when the direct walk under-produces; the
raw-text tier only runs when nothing at all was found. Absence of content
is an empty node sequence, never an exception.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from datetime import date
from enum import Enum
from typing import Any, Callable, List, Optional

import structlog
from bs4 import BeautifulSoup, FeatureNotFound, Tag

from webscribe.config.config import ExtractionSettings
from .models import ContentNode, ExtractionResult, PageMetadata, Paragraph
from .protocols import ReadabilityParser
from .root_locator import ContentRootLocator
from .text import normalize_text, visible_text
from .visibility import VisibilityOracle
from .walker import StructuralWalker

logger = structlog.get_logger(__name__)

_BLANK_LINES = re.compile(r"\n{2,}")
DEFAULT_TITLE = "Untitled"


class ExtractionState(str, Enum):
    INIT = "init"
    ROOT_LOCATED = "root_located"
    WALKED = "walked"
    FALLBACK_READABILITY = "fallback_readability"
    FALLBACK_RAW_TEXT = "fallback_raw_text"
    DONE = "done"


def parse_html(html: str, parser: str = "lxml") -> BeautifulSoup:
    """Parse HTML, falling back to the built-in parser when ``parser`` is not installed."""
    try:
        return BeautifulSoup(html or "", parser)
    except FeatureNotFound:
        logger.warning("HTML parser not available, using html.parser", parser=parser)
        return BeautifulSoup(html or "", "html.parser")


@dataclass
class DocumentContext:
    """One extraction context: a parsed document and its traversal state.

    Contexts share nothing; each owns its tree and visibility oracle.
    """

    document: BeautifulSoup
    url: str = ""
    frame_id: int = 0
    oracle: Optional[VisibilityOracle] = field(default=None, repr=False)
    initialized: bool = False

    @classmethod
    def from_html(cls, html: str, url: str = "", frame_id: int = 0, parser: str = "lxml") -> DocumentContext:
        context = cls(document=parse_html(html, parser), url=url, frame_id=frame_id)
        context.prepare()
        return context

    def prepare(self) -> None:
        """Build per-context state once; later calls are no-ops."""
        if self.initialized:
            return
        self.oracle = VisibilityOracle(self.document)
        self.initialized = True

    @property
    def body(self) -> BeautifulSoup | Tag:
        body = self.document.find("body")
        return body if isinstance(body, Tag) else self.document

    def meta_content(self, name: str) -> str:
        element = self.document.select_one(f'meta[name="{name}"], meta[property="{name}"]')
        if element is None:
            return ""
        content = element.get("content")
        return content.strip() if isinstance(content, str) else ""


@dataclass
class _Run:
    """Mutable state of one extraction run."""

    context: DocumentContext
    state: ExtractionState = ExtractionState.INIT
    metadata: Optional[PageMetadata] = None
    root: Optional[Tag] = None
    nodes: List[ContentNode] = field(default_factory=list)


class ExtractionOrchestrator:
    """Runs locate -> walk -> fallbacks for a single document context.

    Args:
        settings: Extraction thresholds
        readability: Optional general-purpose extractor for the first fallback tier
        today: Clock used for the metadata date
    """

    def __init__(
        self,
        settings: Optional[ExtractionSettings] = None,
        readability: Optional[ReadabilityParser] = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.settings = settings or ExtractionSettings()
        self.readability = readability if self.settings.use_readability else None
        self.today = today

    def extract(self, context: DocumentContext) -> ExtractionResult:
        """Extract the content of one document context."""
        context.prepare()
        run = _Run(context=context)
        log = logger.bind(frame_id=context.frame_id, url=context.url)

        run.metadata = self._build_metadata(context)
        run.root = ContentRootLocator(self.settings, context.oracle).find_root(context.document)
        self._advance(run, ExtractionState.ROOT_LOCATED, log)

        run.nodes = self._walker(context.oracle, context.url).walk(run.root)
        self._advance(run, ExtractionState.WALKED, log)

        if len(run.nodes) < self.settings.min_node_count and self.readability is not None:
            self._advance(run, ExtractionState.FALLBACK_READABILITY, log)
            self._readability_fallback(run, log)

        if not run.nodes:
            self._advance(run, ExtractionState.FALLBACK_RAW_TEXT, log)
            run.nodes = self._raw_text_fallback(context)

        self._advance(run, ExtractionState.DONE, log)
        log.info("Extraction finished", node_count=len(run.nodes), title=run.metadata.title)
        return ExtractionResult(metadata=run.metadata, nodes=tuple(run.nodes), origin_frame_id=context.frame_id)

    def extract_html(self, html: str, url: str = "", frame_id: int = 0) -> ExtractionResult:
        """Parse ``html`` into a fresh context and extract it."""
        return self.extract(DocumentContext.from_html(html, url=url, frame_id=frame_id, parser=self.settings.parser))

    # --- Steps ---

    def _advance(self, run: _Run, state: ExtractionState, log: Any) -> None:
        log.debug("Extraction state", previous=run.state.value, state=state.value, node_count=len(run.nodes))
        run.state = state

    def _walker(self, oracle: Optional[VisibilityOracle], base_url: str) -> StructuralWalker:
        return StructuralWalker(oracle=oracle, settings=self.settings, base_url=base_url or None)

    def _build_metadata(self, context: DocumentContext) -> PageMetadata:
        title = context.meta_content("og:title")
        if not title and context.document.title is not None:
            title = normalize_text(context.document.title.get_text())
        description = context.meta_content("og:description") or context.meta_content("description")
        return PageMetadata(
            title=title or DEFAULT_TITLE,
            canonical_url=context.url,
            iso_date=self.today().isoformat(),
            description=description,
        )

    def _readability_fallback(self, run: _Run, log: Any) -> None:
        if self.readability is None or not self.readability.available:
            return
        try:
            article = self.readability.parse(str(run.context.document), url=run.context.url or None)
        except Exception as e:
            # ReadabilityFallbackError from our adapter, anything else from custom parsers
            log.warning(
                "Readability fallback failed, keeping direct walk", error=str(e), error_type=type(e).__name__
            )
            return
        if article is None or not article.content:
            log.debug("Readability fallback returned no content")
            return

        parsed = parse_html(article.content, self.settings.parser)
        body = parsed.find("body")
        oracle = VisibilityOracle(parsed)
        fallback_nodes = self._walker(oracle, run.context.url).walk(body if isinstance(body, Tag) else parsed)

        if len(fallback_nodes) <= len(run.nodes):
            log.debug("Readability result not richer, keeping direct walk", readability=len(fallback_nodes))
            return

        log.debug("Using readability result", direct=len(run.nodes), readability=len(fallback_nodes))
        run.nodes = fallback_nodes
        if article.title and run.metadata is not None:
            run.metadata = replace(run.metadata, title=article.title)

    def _raw_text_fallback(self, context: DocumentContext) -> List[ContentNode]:
        text = visible_text(context.body, context.oracle)
        nodes: List[ContentNode] = []
        for block in _BLANK_LINES.split(text):
            block = normalize_text(block)
            if len(block) > self.settings.raw_block_min_length:
                nodes.append(Paragraph(text=block))
        return nodes
