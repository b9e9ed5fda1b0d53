"""
Unit tests for page loading and frame discovery.
"""

import aiohttp
import pytest
from aioresponses import aioresponses

from webscribe.config.config import CrawlerConfig
from webscribe.crawler import FrameRef, Page, PageLoader, discover_frames
from webscribe.crawler.page_loader import LoadedFrame, decode_html
from webscribe.exceptions import PageLoadError
from webscribe.extractor.transport import LocalFrameChannel

MAIN_URL = "https://example.com/article"

LEGACY_HTML = (
    '<html><head><meta charset="windows-1252"><title>Caf\u00e9</title></head>'
    "<body><p>Le caf\u00e9 est tr\u00e8s bon ici.</p></body></html>"
).encode("cp1252")

MAIN_HTML = """
<html><body>
<p>Main document text that is long enough to matter.</p>
<iframe src="/embed/one"></iframe>
<iframe src="https://cdn.example.net/two.html"></iframe>
</body></html>
"""


class TestDiscoverFrames:
    def test_resolves_relative_sources(self):
        refs = discover_frames(MAIN_HTML, MAIN_URL, max_frames=10)

        assert refs == [
            FrameRef(url="https://example.com/embed/one"),
            FrameRef(url="https://cdn.example.net/two.html"),
        ]

    def test_ignores_unfetchable_schemes(self):
        html = """
        <iframe src="about:blank"></iframe>
        <iframe src="javascript:void(0)"></iframe>
        <iframe src="data:text/html,<p>x</p>"></iframe>
        <iframe></iframe>
        <iframe src="/real"></iframe>
        """

        refs = discover_frames(html, MAIN_URL, max_frames=10)

        assert refs == [FrameRef(url="https://example.com/real")]

    def test_deduplicates(self):
        html = '<iframe src="/same"></iframe><iframe src="https://example.com/same"></iframe>'

        assert len(discover_frames(html, MAIN_URL, max_frames=10)) == 1

    def test_srcdoc_frames_are_inline(self):
        html = '<iframe srcdoc="&lt;p&gt;Inline frame&lt;/p&gt;" src="/ignored"></iframe>'

        refs = discover_frames(html, MAIN_URL, max_frames=10)

        assert refs == [FrameRef(url=MAIN_URL, srcdoc="<p>Inline frame</p>")]

    def test_max_frames(self):
        html = "".join(f'<iframe src="/f{i}"></iframe>' for i in range(5))

        assert len(discover_frames(html, MAIN_URL, max_frames=2)) == 2
        assert discover_frames(html, MAIN_URL, max_frames=0) == []


@pytest.mark.network
class TestPageLoader:
    @pytest.mark.asyncio
    async def test_load_main_and_frames(self):
        loader = PageLoader(CrawlerConfig())

        with aioresponses() as m:
            m.get(MAIN_URL, status=200, body=MAIN_HTML, content_type="text/html")
            m.get("https://example.com/embed/one", status=200, body="<p>Frame one</p>", content_type="text/html")
            m.get("https://cdn.example.net/two.html", status=200, body="<p>Frame two</p>", content_type="text/html")

            page = await loader.load(MAIN_URL)

        assert [frame.frame_id for frame in page.frames] == [0, 1, 2]
        assert page.main_frame.html == MAIN_HTML
        assert page.frames[1].url == "https://example.com/embed/one"
        assert "Frame two" in page.frames[2].html

    @pytest.mark.asyncio
    async def test_failed_frame_is_dropped(self):
        loader = PageLoader(CrawlerConfig())

        with aioresponses() as m:
            m.get(MAIN_URL, status=200, body=MAIN_HTML, content_type="text/html")
            m.get("https://example.com/embed/one", status=500)
            m.get("https://cdn.example.net/two.html", exception=aiohttp.ClientConnectionError("refused"))

            page = await loader.load(MAIN_URL)

        assert [frame.frame_id for frame in page.frames] == [0]

    @pytest.mark.asyncio
    async def test_frame_ids_keep_document_order(self):
        loader = PageLoader(CrawlerConfig())

        with aioresponses() as m:
            m.get(MAIN_URL, status=200, body=MAIN_HTML, content_type="text/html")
            m.get("https://example.com/embed/one", status=404)
            m.get("https://cdn.example.net/two.html", status=200, body="<p>Two</p>", content_type="text/html")

            page = await loader.load(MAIN_URL)

        assert [frame.frame_id for frame in page.frames] == [0, 2]

    @pytest.mark.asyncio
    async def test_main_http_error(self):
        loader = PageLoader(CrawlerConfig())

        with aioresponses() as m:
            m.get(MAIN_URL, status=404)

            with pytest.raises(PageLoadError, match="HTTP 404"):
                await loader.load(MAIN_URL)

    @pytest.mark.asyncio
    async def test_main_connection_error(self):
        loader = PageLoader(CrawlerConfig())

        with aioresponses() as m:
            m.get(MAIN_URL, exception=aiohttp.ClientConnectionError("refused"))

            with pytest.raises(PageLoadError, match="refused"):
                await loader.load(MAIN_URL)

    @pytest.mark.asyncio
    async def test_rejects_non_http_url(self):
        with pytest.raises(PageLoadError, match="only http and https"):
            await PageLoader().load("ftp://example.com/file.html")

    @pytest.mark.asyncio
    async def test_truncates_large_body(self):
        loader = PageLoader(CrawlerConfig(max_bytes=10))

        with aioresponses() as m:
            m.get(MAIN_URL, status=200, body="<p>0123456789abcdef</p>", content_type="text/html")

            page = await loader.load(MAIN_URL)

        assert page.main_frame.html == "<p>0123456"


class TestLoadFile:
    def test_reads_file_and_srcdoc_frames(self, tmp_path):
        path = tmp_path / "page.html"
        path.write_text(
            '<p>Main</p><iframe srcdoc="&lt;p&gt;Inline&lt;/p&gt;"></iframe><iframe src="/remote"></iframe>',
            encoding="utf-8",
        )

        page = PageLoader().load_file(path)

        assert page.url == path.resolve().as_uri()
        assert [frame.frame_id for frame in page.frames] == [0, 1]
        assert page.frames[1].html == "<p>Inline</p>"

    def test_missing_file(self, tmp_path):
        with pytest.raises(PageLoadError):
            PageLoader().load_file(tmp_path / "missing.html")


def test_page_channels(orchestrator):
    page = Page(
        url=MAIN_URL,
        frames=[LoadedFrame(0, MAIN_URL, "<p>a</p>"), LoadedFrame(3, "https://x.test/", "<p>b</p>")],
    )

    channels = page.channels(orchestrator)

    assert all(isinstance(channel, LocalFrameChannel) for channel in channels)
    assert [channel.frame_id for channel in channels] == [0, 3]
    assert channels[1].orchestrator is orchestrator


def test_main_frame_missing():
    assert Page(url=MAIN_URL).main_frame is None


class TestDecodeHtml:
    def test_meta_charset_is_honoured(self):
        assert "café est très bon" in decode_html(LEGACY_HTML)

    def test_transport_charset_wins(self):
        body = "<p>naïve</p>".encode("latin-1")
        assert decode_html(body, "iso-8859-1") == "<p>naïve</p>"

    def test_unknown_declared_charset_falls_through(self):
        body = "<p>plain ascii text</p>".encode("ascii")
        assert decode_html(body, "no-such-charset") == "<p>plain ascii text</p>"

    def test_undeclared_document_is_detected(self):
        text = "<p>Съешь же ещё этих мягких французских булок, да выпей чаю.</p>"
        assert decode_html(text.encode("utf-8")) == text

    def test_empty_body(self):
        assert decode_html(b"") == ""


@pytest.mark.network
@pytest.mark.asyncio
async def test_load_legacy_page_without_header_charset():
    with aioresponses() as m:
        m.get(MAIN_URL, status=200, body=LEGACY_HTML, content_type="text/html")

        page = await PageLoader().load(MAIN_URL)

    assert "café est très bon" in page.main_frame.html


def test_load_file_honours_meta_charset(tmp_path):
    path = tmp_path / "legacy.html"
    path.write_bytes(LEGACY_HTML)

    assert "café est très bon" in PageLoader().load_file(path).main_frame.html
