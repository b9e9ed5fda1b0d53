"""
Readability-based fallback parser.

Wraps readability-lxml as the optional general-purpose extractor used by
the orchestrator's first fallback tier.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import structlog

from webscribe.exceptions import ReadabilityFallbackError

from .protocols import ReadabilityArticle

logger = structlog.get_logger(__name__)

# Import with graceful fallback
try:
    from readability import Document  # type: ignore[import-not-found]

    HAS_READABILITY = True
except ImportError:
    Document = None
    HAS_READABILITY = False


class ReadabilityExtractor:
    """Readability parser backed by readability-lxml."""

    name = "readability"

    def __init__(self) -> None:
        self.config: Dict[str, Any] = {
            "min_text_length": 25,
            "retry_length": 250,
            "positive_keywords": [
                "article",
                "body",
                "content",
                "entry",
                "hentry",
                "main",
                "page",
                "post",
                "text",
                "blog",
                "story",
            ],
            "negative_keywords": [
                "combx",
                "comment",
                "com-",
                "contact",
                "foot",
                "footer",
                "footnote",
                "masthead",
                "media",
                "meta",
                "outbrain",
                "promo",
                "related",
                "scroll",
                "shoutbox",
                "sidebar",
                "sponsor",
                "shopping",
                "tags",
                "tool",
                "widget",
            ],
        }

    @property
    def available(self) -> bool:
        return HAS_READABILITY and Document is not None

    def parse(self, document_html: str, url: Optional[str] = None) -> Optional[ReadabilityArticle]:
        """Run readability over a copy of the whole document.

        Args:
            document_html: Serialized document to parse
            url: Optional document URL for link resolution

        Returns:
            Article title and content HTML, or None when readability is not
            installed or the document is empty

        Raises:
            ReadabilityFallbackError: If readability fails on the document
        """
        if not self.available or not document_html.strip():
            return None

        try:
            doc = Document(
                document_html,
                url=url,
                min_text_length=self.config["min_text_length"],
                retry_length=self.config["retry_length"],
                positive_keywords=self.config["positive_keywords"],
                negative_keywords=self.config["negative_keywords"],
            )
            title = doc.short_title() or doc.title()
            content = doc.summary(html_partial=False)
        except Exception as e:
            raise ReadabilityFallbackError(f"Readability extraction failed: {e}") from e

        if not content or not content.strip():
            return None

        logger.debug("Readability parsed document", title=title, content_length=len(content))
        return ReadabilityArticle(title=title or None, content=content)
