"""
Contentfulness scoring for candidate content roots.

Rewards dense, low-link prose; the structural bonus favours article bodies
over long sidebars of plain text.
"""

from __future__ import annotations

from typing import Optional

from bs4 import Tag

from webscribe.config.config import ExtractionSettings

from .policy import STRUCTURAL_TAGS
from .text import visible_text
from .visibility import VisibilityOracle


def link_ratio(element: Tag, total_length: int, oracle: Optional[VisibilityOracle] = None) -> float:
    """Share of the element's visible text that sits inside anchors."""
    link_length = sum(len(visible_text(anchor, oracle)) for anchor in element.find_all("a"))
    return link_length / (total_length or 1)


def score(
    element: Tag,
    oracle: Optional[VisibilityOracle] = None,
    settings: Optional[ExtractionSettings] = None,
) -> int:
    """Score an element as a candidate article root.

    Args:
        element: Candidate root element
        oracle: Visibility oracle of the element's document
        settings: Thresholds (defaults when omitted)

    Returns:
        0 for sparse or navigation-dominated elements, otherwise
        ``round(totalLen * (1 - linkRatio)) + structuralCount * bonus``
    """
    settings = settings or ExtractionSettings()
    oracle = oracle or VisibilityOracle()

    total_length = len(visible_text(element, oracle).strip())
    if total_length < settings.min_text_length:
        return 0

    ratio = link_ratio(element, total_length, oracle)
    if ratio > settings.max_link_ratio:
        return 0

    structural_count = len(element.find_all(list(STRUCTURAL_TAGS)))
    return round(total_length * (1 - ratio)) + structural_count * settings.structural_bonus
