"""
Unit tests for content root discovery.
"""

from bs4 import BeautifulSoup

from webscribe.config.config import ExtractionSettings
from webscribe.extractor.root_locator import ContentRootLocator, find_root
from webscribe.extractor.visibility import VisibilityOracle

PARAGRAPH = "Event loops dispatch callbacks one at a time and never run two handlers concurrently."


def parse(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


class TestFindRoot:
    def test_article_beats_link_directory(self, link_directory_html):
        directory = link_directory_html.replace("<html><body>", "").replace("</body></html>", "")
        soup = parse(
            f"<html><body>{directory}"
            f"<article class='post-content'><p>{PARAGRAPH}</p><p>{PARAGRAPH}</p><p>{PARAGRAPH}</p></article>"
            "</body></html>"
        )
        root = find_root(soup, VisibilityOracle(soup))
        assert root.name == "article"
        assert root["class"] == ["post-content"]

    def test_container_scan_when_no_curated_match(self):
        soup = parse(f"<body><div class='wrapper-x'><p>short</p></div><div id='text'><p>{PARAGRAPH}</p><p>{PARAGRAPH}</p></div></body>")
        assert find_root(soup).get("id") == "text"

    def test_earlier_container_wins_ties(self):
        soup = parse(
            f"<body><div id='first'><p>{PARAGRAPH}</p><p>{PARAGRAPH}</p></div>"
            f"<div id='second'><p>{PARAGRAPH}</p><p>{PARAGRAPH}</p></div></body>"
        )
        assert find_root(soup).get("id") == "first"

    def test_weak_curated_match_is_replaced_by_better_container(self):
        soup = parse(
            "<body><main><p>Just a little text here in the main element, which stays well under the root score "
            "floor of two hundred points.</p></main>"
            f"<div id='story'><p>{PARAGRAPH}</p><p>{PARAGRAPH}</p><p>{PARAGRAPH}</p></div></body>"
        )
        assert find_root(soup).get("id") == "story"

    def test_hidden_curated_candidate_is_skipped(self):
        soup = parse(
            f"<body><article style='display:none'><p>{PARAGRAPH}</p><p>{PARAGRAPH}</p></article>"
            f"<div id='visible'><p>{PARAGRAPH}</p><p>{PARAGRAPH}</p></div></body>"
        )
        assert find_root(soup).get("id") == "visible"

    def test_noisy_containers_are_skipped(self):
        soup = parse(f"<body><div class='sidebar'><p>{PARAGRAPH}</p><p>{PARAGRAPH}</p></div></body>")
        assert find_root(soup).name == "body"

    def test_falls_back_to_body(self):
        soup = parse("<html><body><p>Hi</p></body></html>")
        assert find_root(soup).name == "body"

    def test_falls_back_to_document_without_body(self):
        soup = parse("just text")
        assert find_root(soup) is soup


class TestContentRootLocator:
    def test_invalid_selectors_are_skipped(self):
        soup = parse(f"<body><section><p>{PARAGRAPH}</p><p>{PARAGRAPH}</p><p>{PARAGRAPH}</p></section></body>")
        locator = ContentRootLocator(selectors=("p:::bad", "section"))
        assert locator.find_root(soup).name == "section"

    def test_score_floor_is_configurable(self):
        soup = parse(
            f"<body><main><p>{PARAGRAPH}</p><p>{PARAGRAPH}</p></main>"
            f"<div id='longer'><p>{PARAGRAPH}</p><p>{PARAGRAPH}</p><p>{PARAGRAPH}</p></div></body>"
        )
        assert ContentRootLocator().find_root(soup).name == "main"
        # A higher floor rejects <main> and scans every container
        locator = ContentRootLocator(settings=ExtractionSettings(root_score_floor=300))
        assert locator.find_root(soup).get("id") == "longer"
