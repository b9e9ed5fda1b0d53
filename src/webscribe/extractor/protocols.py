"""
Protocols for the extractor's external collaborators.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol, runtime_checkable


@dataclass(frozen=True)
class ReadabilityArticle:
    """Output of a general-purpose readability extractor."""

    title: Optional[str]
    content: str  # HTML


@runtime_checkable
class ReadabilityParser(Protocol):
    """General-purpose article extractor used as the first fallback tier."""

    @property
    def available(self) -> bool:
        ...

    def parse(self, document_html: str, url: Optional[str] = None) -> Optional[ReadabilityArticle]:
        """Parse a copy of the whole document.

        Args:
            document_html: Serialized document
            url: Optional document URL

        Returns:
            Title and content HTML, or None when nothing usable was found
        """
        ...


@runtime_checkable
class FrameChannel(Protocol):
    """Message channel to one extraction context (main document or frame)."""

    frame_id: int

    async def request(self, message: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Send a request and return the raw response, or None when the frame does not answer."""
        ...
