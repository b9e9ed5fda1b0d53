"""
Shared test configuration for WebScribe.

Provides HTML documents covering the common page layouts, a fixed clock,
and pre-wired extraction components.
"""

import asyncio
from datetime import date
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from bs4 import BeautifulSoup

from webscribe.config.config import ArbiterSettings, ExtractionSettings
from webscribe.extractor.orchestrator import ExtractionOrchestrator

FIXED_DATE = date(2024, 5, 1)

# ============================================================================
# Pytest Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: Integration tests across modules")
    config.addinivalue_line("markers", "network: Tests that exercise the HTTP layer (mocked)")


@pytest_asyncio.fixture(autouse=True)
async def cleanup_tasks() -> AsyncGenerator[None, None]:
    """Cancel any task a test leaves behind."""
    tasks_before = asyncio.all_tasks()
    yield
    for task in asyncio.all_tasks() - tasks_before:
        if not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass


# ============================================================================
# HTML Fixtures
# ============================================================================

ARTICLE_HTML = """
<!DOCTYPE html>
<html>
<head>
    <title>Understanding Event Loops</title>
    <meta name="description" content="A short guide to event loops">
    <style>.visually-gone { display: none }</style>
</head>
<body>
    <header class="site-header"><a href="/">Home</a> <a href="/blog">Blog</a></header>
    <nav><a href="/a">A</a> <a href="/b">B</a></nav>
    <div class="layout">
        <article class="post-content">
            <h1>Understanding Event Loops</h1>
            <p>An event loop waits for events and dispatches them to handlers one at a time.</p>
            <p>Note that a blocking call inside a handler stalls every other task on the loop.</p>
            <h2>Scheduling</h2>
            <p>Callbacks are queued and run in the order they were scheduled by the loop.</p>
            <pre><code class="language-python">loop = asyncio.new_event_loop()
loop.run_forever()</code></pre>
            <ul><li>Timers</li><li>I/O readiness</li><li>Signals</li></ul>
            <p class="visually-gone">This paragraph is hidden by the stylesheet and must not appear.</p>
            <div class="share-buttons"><p>Share this article on every social network you know</p></div>
            <table>
                <tr><th>Phase</th><th>Work</th></tr>
                <tr><td>poll</td><td>wait for I/O</td></tr>
            </table>
            <img src="/img/loop.png" alt="Loop diagram">
        </article>
        <aside class="sidebar"><p>Subscribe to our newsletter for weekly updates on everything.</p></aside>
    </div>
    <footer class="site-footer"><p>Copyright 2024 Example Corp. All rights reserved.</p></footer>
</body>
</html>
"""

LINK_DIRECTORY_HTML = """
<html><body>
<div class="directory">
    <a href="/1">Link number one to another page</a>
    <a href="/2">Link number two to another page</a>
    <a href="/3">Link number three to another page</a>
    <a href="/4">Link number four to another page</a>
    <a href="/5">Link number five to another page</a>
</div>
</body></html>
"""

RAW_TEXT_HTML = "<html><body><div>block one long text<br><br>block two long text</div></body></html>"


@pytest.fixture
def article_html() -> str:
    return ARTICLE_HTML


@pytest.fixture
def link_directory_html() -> str:
    return LINK_DIRECTORY_HTML


@pytest.fixture
def raw_text_html() -> str:
    return RAW_TEXT_HTML


@pytest.fixture
def soup():
    """Parse a document with the default parser."""

    def _parse(html: str) -> BeautifulSoup:
        return BeautifulSoup(html, "lxml")

    return _parse


# ============================================================================
# Component Fixtures
# ============================================================================


@pytest.fixture
def extraction_settings() -> ExtractionSettings:
    return ExtractionSettings(use_readability=False)


@pytest.fixture
def fast_arbiter_settings() -> ArbiterSettings:
    return ArbiterSettings(retry_delay=0.0, frame_timeout=0.5)


@pytest.fixture
def orchestrator(extraction_settings) -> ExtractionOrchestrator:
    """Orchestrator without the readability tier and with a fixed clock."""
    return ExtractionOrchestrator(extraction_settings, today=lambda: FIXED_DATE)
