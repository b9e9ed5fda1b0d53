"""
Integration tests: load -> per-frame extraction -> arbitration -> export.
"""

import pytest
from aioresponses import aioresponses

from webscribe.config.config import ArbiterSettings, Config, ExportSettings, ExtractionSettings
from webscribe.pipeline import ScribePipeline

PAGE_URL = "https://learn.example.com/lesson"
FRAME_URL = "https://player.example.com/embed/42"

SHELL_HTML = """
<html><head><title>Lesson Shell</title></head><body>
<nav><a href="/">Home</a><a href="/courses">Courses</a></nav>
<p>Loading lesson content in the embedded player below.</p>
<iframe src="https://player.example.com/embed/42"></iframe>
<footer><p>Copyright 2024 Example Learning</p></footer>
</body></html>
"""

LESSON_HTML = """
<html><head><title>Binary Search</title></head><body>
<main>
<h1>Binary Search</h1>
<p>Binary search finds an item in a sorted list by halving the search range on every step.</p>
<p>The key invariant is that the target, if present, always lies between the two bounds.</p>
<h2>Complexity</h2>
<p>Each comparison discards half of the remaining items, so the search takes logarithmic time.</p>
<pre><code class="language-python">def search(items, target):
    lo, hi = 0, len(items)</code></pre>
<ul><li>Sorted input</li><li>Random access</li></ul>
</main>
</body></html>
"""


@pytest.fixture
def config(tmp_path) -> Config:
    return Config(
        extraction=ExtractionSettings(use_readability=False),
        arbiter=ArbiterSettings(retry_delay=0.0, frame_timeout=5.0),
        export=ExportSettings(output_dir=tmp_path),
    )


@pytest.mark.integration
@pytest.mark.network
class TestRemotePage:
    @pytest.mark.asyncio
    async def test_embedded_lesson_wins(self, config, tmp_path):
        pipeline = ScribePipeline(config)

        with aioresponses() as m:
            m.get(PAGE_URL, status=200, body=SHELL_HTML, content_type="text/html")
            m.get(FRAME_URL, status=200, body=LESSON_HTML, content_type="text/html")

            result = await pipeline.extract(PAGE_URL)

        assert result.origin_frame_id == 1
        assert result.metadata.title == "Binary Search"
        assert result.metadata.canonical_url == FRAME_URL

        path = pipeline.export(result, "markdown")
        content = path.read_text(encoding="utf-8")
        assert path.name == "binary-search.md"
        assert "```python\ndef search(items, target):\n    lo, hi = 0, len(items)\n```" in content
        assert "- Sorted input" in content
        assert "Copyright" not in content

    @pytest.mark.asyncio
    async def test_main_frame_kept_when_frame_fails(self, config):
        pipeline = ScribePipeline(config)

        with aioresponses() as m:
            m.get(PAGE_URL, status=200, body=SHELL_HTML, content_type="text/html")
            m.get(FRAME_URL, status=503)

            result = await pipeline.extract(PAGE_URL)

        assert result.origin_frame_id == 0
        assert result.metadata.title == "Lesson Shell"
        assert "Copyright" not in " ".join(getattr(node, "text", "") for node in result.nodes)


@pytest.mark.integration
class TestLocalFile:
    @pytest.mark.asyncio
    async def test_srcdoc_frame_and_html_export(self, config, tmp_path):
        srcdoc = LESSON_HTML.replace("&", "&amp;").replace('"', "&quot;").replace("<", "&lt;").replace(">", "&gt;")
        source = tmp_path / "shell.html"
        source.write_text(SHELL_HTML.replace(f'src="{FRAME_URL}"', f'srcdoc="{srcdoc}"'), encoding="utf-8")
        pipeline = ScribePipeline(config)

        result = await pipeline.extract(str(source))
        path = pipeline.export(result, "html", tmp_path / "lesson.html")

        assert result.origin_frame_id == 1
        content = path.read_text(encoding="utf-8")
        assert '<h1 id="binary-search">Binary Search</h1>' in content
        assert 'class="language-python"' in content
        assert "lo, hi = 0, len(items)" in content
