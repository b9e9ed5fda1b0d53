"""
Page loading with frame discovery.

Fetches a page and the documents of its ``<iframe>`` elements so every
frame can be extracted as its own context. Frame 0 is always the main
document; embedded frames are numbered in document order.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple
from urllib.parse import urljoin, urlparse

import aiohttp
import structlog
from bs4.dammit import EncodingDetector
from charset_normalizer import from_bytes

from webscribe.config.config import CrawlerConfig
from webscribe.exceptions import PageLoadError
from webscribe.extractor.orchestrator import ExtractionOrchestrator, parse_html
from webscribe.extractor.transport import LocalFrameChannel

logger = structlog.get_logger(__name__)

FETCHABLE_SCHEMES = ("http", "https")


@dataclass(frozen=True)
class LoadedFrame:
    frame_id: int
    url: str
    html: str


@dataclass
class Page:
    """A loaded page: the main document plus every reachable frame."""

    url: str
    frames: List[LoadedFrame] = field(default_factory=list)

    @property
    def main_frame(self) -> Optional[LoadedFrame]:
        return next((frame for frame in self.frames if frame.frame_id == 0), None)

    def channels(self, orchestrator: Optional[ExtractionOrchestrator] = None) -> List[LocalFrameChannel]:
        orchestrator = orchestrator or ExtractionOrchestrator()
        return [
            LocalFrameChannel(frame.frame_id, frame.html, url=frame.url, orchestrator=orchestrator)
            for frame in self.frames
        ]


@dataclass(frozen=True)
class FrameRef:
    """An iframe found in the main document: a URL to fetch or inline ``srcdoc`` markup."""

    url: str
    srcdoc: Optional[str] = None


def decode_html(body: bytes, charset: Optional[str] = None) -> str:
    """Decode an HTML document.

    The transport charset wins, then the document's own ``<meta charset>``
    declaration; undeclared documents are detected with charset_normalizer.
    """
    if not body:
        return ""
    declared = [charset, EncodingDetector.find_declared_encoding(body, is_html=True)]
    for encoding in filter(None, declared):
        try:
            return body.decode(encoding)
        except (LookupError, UnicodeDecodeError) as e:
            logger.debug("Declared encoding unusable", encoding=encoding, error=str(e))

    best = from_bytes(body).best()
    if best is not None:
        logger.debug("Detected document encoding", encoding=best.encoding)
        return str(best)
    return body.decode("utf-8", errors="replace")


def discover_frames(html: str, base_url: str, max_frames: int, parser: str = "lxml") -> List[FrameRef]:
    """List the iframes of a document in order, resolved against ``base_url``."""
    refs: List[FrameRef] = []
    seen: set[str] = set()
    for iframe in parse_html(html, parser).find_all("iframe"):
        if len(refs) >= max_frames:
            logger.info("Frame limit reached", max_frames=max_frames)
            break
        srcdoc = iframe.get("srcdoc")
        if isinstance(srcdoc, str) and srcdoc.strip():
            refs.append(FrameRef(url=base_url, srcdoc=srcdoc))
            continue
        src = iframe.get("src")
        if not isinstance(src, str) or not src.strip():
            continue
        url = urljoin(base_url, src.strip())
        if urlparse(url).scheme not in FETCHABLE_SCHEMES or url in seen:
            continue
        seen.add(url)
        refs.append(FrameRef(url=url))
    return refs


class PageLoader:
    """Loads pages over HTTP (aiohttp) or from local files."""

    def __init__(self, config: Optional[CrawlerConfig] = None, parser: str = "lxml") -> None:
        self.config = config or CrawlerConfig()
        self.parser = parser

    def _session(self) -> aiohttp.ClientSession:
        return aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=self.config.timeout),
            headers={"User-Agent": self.config.user_agent, "Accept": "text/html,application/xhtml+xml"},
        )

    async def _fetch(self, session: aiohttp.ClientSession, url: str) -> Tuple[str, str]:
        """Return ``(final_url, html)`` for one URL."""
        async with session.get(url, allow_redirects=True) as response:
            response.raise_for_status()
            body = await response.read()
            if len(body) > self.config.max_bytes:
                logger.warning("Response truncated", url=url, size=len(body), max_bytes=self.config.max_bytes)
                body = body[: self.config.max_bytes]
            return str(response.url), decode_html(body, response.charset)

    async def _fetch_frame(
        self, session: aiohttp.ClientSession, frame_id: int, ref: FrameRef
    ) -> Optional[LoadedFrame]:
        if ref.srcdoc is not None:
            return LoadedFrame(frame_id=frame_id, url=ref.url, html=ref.srcdoc)
        try:
            final_url, html = await self._fetch(session, ref.url)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.warning("Frame fetch failed", frame_id=frame_id, url=ref.url, error=str(e))
            return None
        return LoadedFrame(frame_id=frame_id, url=final_url, html=html)

    async def load(self, url: str) -> Page:
        """Fetch a page and its frames.

        Raises:
            PageLoadError: If the main document cannot be fetched
        """
        if urlparse(url).scheme not in FETCHABLE_SCHEMES:
            raise PageLoadError(url, "only http and https URLs can be fetched")

        async with self._session() as session:
            try:
                final_url, html = await self._fetch(session, url)
            except aiohttp.ClientResponseError as e:
                raise PageLoadError(url, f"HTTP {e.status}") from e
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                raise PageLoadError(url, str(e) or type(e).__name__) from e

            refs = discover_frames(html, final_url, self.config.max_frames, self.parser)
            loaded = await asyncio.gather(
                *(self._fetch_frame(session, frame_id, ref) for frame_id, ref in enumerate(refs, start=1))
            )

        frames = [LoadedFrame(frame_id=0, url=final_url, html=html)]
        frames.extend(frame for frame in loaded if frame is not None)
        logger.info("Page loaded", url=final_url, frames=len(frames), discovered=len(refs))
        return Page(url=final_url, frames=frames)

    def load_file(self, path: Path) -> Page:
        """Build a page from a local HTML file; only inline ``srcdoc`` frames are followed.

        Raises:
            PageLoadError: If the file cannot be read
        """
        path = Path(path)
        try:
            html = decode_html(path.read_bytes())
        except OSError as e:
            raise PageLoadError(str(path), e.strerror or str(e)) from e

        url = path.resolve().as_uri()
        frames = [LoadedFrame(frame_id=0, url=url, html=html)]
        refs = [ref for ref in discover_frames(html, url, self.config.max_frames, self.parser) if ref.srcdoc is not None]
        frames.extend(
            LoadedFrame(frame_id=frame_id, url=ref.url, html=ref.srcdoc or "")
            for frame_id, ref in enumerate(refs, start=1)
        )
        return Page(url=url, frames=frames)
