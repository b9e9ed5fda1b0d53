"""Utility helpers for WebScribe."""

from .atomic import atomic_write_text
from .slugify import safe_filename, slugify

__all__ = ["atomic_write_text", "safe_filename", "slugify"]
