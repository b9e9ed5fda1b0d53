"""Page loading: main document plus frame discovery."""

from .page_loader import FrameRef, LoadedFrame, Page, PageLoader, discover_frames

__all__ = ["FrameRef", "LoadedFrame", "Page", "PageLoader", "discover_frames"]
