"""
WebScribe content extraction.

Deterministic, heuristic extraction of a page's readable content:

1. Noise classification and best-effort visibility checks
2. Content-root location (curated selectors, then a full container scan)
3. Structural walk into a typed content model
4. Fallback tiers: readability re-walk, then raw-text paragraphs
5. Cross-frame arbitration between the main document and its iframes
"""

from .arbiter import FrameArbiter, select_result
from .models import (
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
from .noise import is_noisy
from .orchestrator import DocumentContext, ExtractionOrchestrator, ExtractionState
from .protocols import FrameChannel, ReadabilityArticle, ReadabilityParser
from .readability_extractor import ReadabilityExtractor
from .root_locator import ContentRootLocator, find_root
from .scorer import score
from .transport import ExtractRequest, ExtractResponse, LocalFrameChannel
from .visibility import VisibilityOracle, is_visible
from .walker import StructuralWalker, walk

__all__ = [
    "Blockquote",
    "Code",
    "ContentNode",
    "ContentRootLocator",
    "DocumentContext",
    "ExtractRequest",
    "ExtractResponse",
    "ExtractionOrchestrator",
    "ExtractionResult",
    "ExtractionState",
    "FrameArbiter",
    "FrameChannel",
    "Heading",
    "HorizontalRule",
    "Image",
    "ListNode",
    "LocalFrameChannel",
    "PageMetadata",
    "Paragraph",
    "ReadabilityArticle",
    "ReadabilityExtractor",
    "ReadabilityParser",
    "StructuralWalker",
    "Table",
    "VisibilityOracle",
    "find_root",
    "is_noisy",
    "is_visible",
    "score",
    "select_result",
    "walk",
]
