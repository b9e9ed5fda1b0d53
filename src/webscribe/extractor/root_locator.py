"""
Content root discovery.

Curated selectors catch common CMS layouts cheaply; when none of them
scores well enough, every generic container in the document is scored.
"""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

import structlog
from bs4 import BeautifulSoup, Tag
from soupsieve import SelectorSyntaxError

from webscribe.config.config import ExtractionSettings

from .noise import is_noisy
from .policy import CANDIDATE_CONTAINERS, ROOT_SELECTORS
from .scorer import score
from .visibility import VisibilityOracle

logger = structlog.get_logger(__name__)


class ContentRootLocator:
    """Finds the element most likely to hold a document's article body."""

    def __init__(
        self,
        settings: Optional[ExtractionSettings] = None,
        oracle: Optional[VisibilityOracle] = None,
        selectors: Sequence[str] = ROOT_SELECTORS,
    ) -> None:
        self.settings = settings or ExtractionSettings()
        self.oracle = oracle or VisibilityOracle()
        self.selectors = tuple(selectors)

    def _score(self, element: Tag) -> int:
        return score(element, self.oracle, self.settings)

    def _best_curated(self, document: BeautifulSoup | Tag) -> Tuple[Optional[Tag], int]:
        best: Optional[Tag] = None
        best_score = -1
        for selector in self.selectors:
            try:
                element = document.select_one(selector)
            except (SelectorSyntaxError, NotImplementedError) as e:
                logger.debug("Skipping invalid root selector", selector=selector, error=str(e))
                continue
            if element is None or not self.oracle.is_visible(element):
                continue
            element_score = self._score(element)
            if element_score > best_score:
                best, best_score = element, element_score
        return best, best_score

    def _best_container(
        self, document: BeautifulSoup | Tag, best: Optional[Tag], best_score: int
    ) -> Tuple[Optional[Tag], int]:
        for element in document.select(CANDIDATE_CONTAINERS):
            if not self.oracle.is_visible(element) or is_noisy(element):
                continue
            element_score = self._score(element)
            # Strictly greater: earlier elements win ties
            if element_score > best_score:
                best, best_score = element, element_score
        return best, best_score

    def find_root(self, document: BeautifulSoup | Tag) -> Tag:
        """Return the best-scoring content root, or ``<body>`` when nothing qualifies."""
        best, best_score = self._best_curated(document)
        curated_hit = best is not None

        if best is None or best_score < self.settings.root_score_floor:
            best, best_score = self._best_container(document, best, best_score)

        if best is None:
            body = document.find("body")
            best = body if isinstance(body, Tag) else document

        logger.debug(
            "Content root located",
            tag=best.name,
            element_id=best.get("id"),
            score=best_score,
            curated=curated_hit,
        )
        return best


def find_root(
    document: BeautifulSoup | Tag,
    oracle: Optional[VisibilityOracle] = None,
    settings: Optional[ExtractionSettings] = None,
) -> Tag:
    """Locate the content root of a document."""
    return ContentRootLocator(settings=settings, oracle=oracle).find_root(document)
