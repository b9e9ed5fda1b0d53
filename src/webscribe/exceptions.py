"""
Exception hierarchy for WebScribe.

Only context-level failures reach callers. Per-element problems
(style resolution, readability fallback) are raised and caught inside
the extractor package.
"""

from __future__ import annotations


class WebScribeError(Exception):
    """Base exception for all WebScribe errors."""
    pass


class NoActiveContextError(WebScribeError):
    """Raised when no extraction context answered (no responsive frame)."""

    def __init__(self, message: str = "Could not reach the page. Reload it and try again.") -> None:
        super().__init__(message)


class EmptyContentError(WebScribeError):
    """Raised when extraction ran but produced no content nodes after every fallback tier."""

    def __init__(self, message: str = "No readable content found on this page.") -> None:
        super().__init__(message)


class StyleComputationError(WebScribeError):
    """Raised when an element's effective style cannot be resolved."""
    pass


class ReadabilityFallbackError(WebScribeError):
    """Raised when the readability fallback fails or yields nothing usable."""
    pass


class PageLoadError(WebScribeError):
    """Raised when the main page cannot be fetched or read."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to load {url}: {reason}")


class ConfigurationError(WebScribeError):
    """Raised when a configuration file cannot be loaded or validated."""
    pass
