"""
Unit tests for the visibility oracle.
"""

import pytest
from bs4 import BeautifulSoup

from webscribe.exceptions import StyleComputationError
from webscribe.extractor.visibility import (
    VisibilityOracle,
    is_visible,
    iter_top_level_rules,
    parse_declarations,
    parse_opacity,
)


def oracle_for(html: str):
    soup = BeautifulSoup(html, "html.parser")
    return soup, VisibilityOracle(soup)


class TestInlineVisibility:
    @pytest.mark.parametrize(
        "style",
        ["display:none", "display: NONE !important", "visibility:hidden", "visibility: collapse", "opacity:0", "opacity: 0.005"],
    )
    def test_hidden_inline_styles(self, style):
        soup = BeautifulSoup(f'<p style="{style}">x</p>', "html.parser")
        assert is_visible(soup.p) is False

    @pytest.mark.parametrize("style", ["", "display:block", "opacity:0.5", "opacity: 50%", "color: red"])
    def test_visible_inline_styles(self, style):
        soup = BeautifulSoup(f'<p style="{style}">x</p>', "html.parser")
        assert is_visible(soup.p) is True

    def test_hidden_attribute(self):
        soup = BeautifulSoup("<p hidden>x</p>", "html.parser")
        assert is_visible(soup.p) is False

    def test_hidden_ancestor_hides_descendants(self):
        soup = BeautifulSoup('<div style="display:none"><section><p>x</p></section></div>', "html.parser")
        assert is_visible(soup.p) is False

    def test_non_elements_are_visible(self):
        assert is_visible("text") is True
        assert is_visible(None) is True


class TestStylesheetVisibility:
    def test_class_rule_hides_element(self):
        soup, oracle = oracle_for("<style>.gone { display: none; }</style><p class='gone'>x</p><p>y</p>")
        hidden, shown = soup.find_all("p")
        assert oracle.is_visible(hidden) is False
        assert oracle.is_visible(shown) is True

    def test_inline_style_overrides_sheet(self):
        soup, oracle = oracle_for("<style>p { display: none }</style><p style='display:block'>x</p>")
        assert oracle.is_visible(soup.p) is True

    def test_media_blocks_are_ignored(self):
        soup, oracle = oracle_for("<style>@media print { p { display: none } }</style><p>x</p>")
        assert oracle.is_visible(soup.p) is True

    def test_unsupported_selector_is_skipped(self):
        soup, oracle = oracle_for("<style>p:::bogus { display: none } .x { display: none }</style><p class='x'>x</p>")
        assert oracle.is_visible(soup.p) is False

    def test_unparsable_opacity_fails_open(self):
        soup, oracle = oracle_for('<p style="opacity: banana">x</p>')
        assert oracle.is_visible(soup.p) is True

    def test_results_are_memoised(self):
        soup, oracle = oracle_for('<div><p>x</p></div>')
        assert oracle.is_visible(soup.p) is True
        soup.p["style"] = "display:none"
        assert oracle.is_visible(soup.p) is True


class TestParsing:
    def test_parse_declarations_keeps_visibility_properties(self):
        assert parse_declarations("Display: None; color: red; opacity:0.3 !important") == {
            "display": "none",
            "opacity": "0.3",
        }

    def test_parse_declarations_empty(self):
        assert parse_declarations(None) == {}
        assert parse_declarations("garbage") == {}

    def test_parse_opacity(self):
        assert parse_opacity("0.25") == 0.25
        assert parse_opacity("40%") == 0.4
        with pytest.raises(StyleComputationError):
            parse_opacity("half")

    def test_iter_top_level_rules(self):
        css = "/* c */ @import url(x.css); a { display: none } @media screen { b { color: red } } .c, .d { opacity: 0 }"
        assert list(iter_top_level_rules(css)) == [("a", " display: none "), (".c, .d", " opacity: 0 ")]


class TestInactiveStyleBlocks:
    def test_noscript_styles_are_not_applied(self):
        soup, oracle = oracle_for(
            "<noscript><style>.lazyload { display: none }</style></noscript>"
            '<img class="lazyload" data-src="/img/chart.png">'
        )
        assert oracle.is_visible(soup.img) is True

    def test_template_styles_are_not_applied(self):
        soup, oracle = oracle_for("<template><style>p { display: none }</style></template><p>x</p>")
        assert oracle.is_visible(soup.p) is True

    @pytest.mark.parametrize(
        "media, hidden",
        [("print", False), ("speech", False), ("screen", True), ("all", True), ("print, screen", True)],
    )
    def test_media_attribute(self, media, hidden):
        soup, oracle = oracle_for(f'<style media="{media}">p {{ display: none }}</style><p>x</p>')
        assert oracle.is_visible(soup.p) is not hidden


class TestInheritance:
    def test_visible_child_of_visibility_hidden_parent(self):
        soup, oracle = oracle_for(
            '<div style="visibility:hidden"><p style="visibility:visible">shown</p><span>hidden</span></div>'
        )
        assert oracle.is_visible(soup.div) is False
        assert oracle.is_visible(soup.p) is True
        assert oracle.is_visible(soup.span) is False

    def test_display_none_hides_regardless_of_child_visibility(self):
        soup, oracle = oracle_for('<div style="display:none"><p style="visibility:visible">x</p></div>')
        assert oracle.is_visible(soup.p) is False

    def test_transparent_parent_hides_descendants(self):
        soup, oracle = oracle_for('<div style="opacity:0"><p style="visibility:visible">x</p></div>')
        assert oracle.is_visible(soup.p) is False

    def test_inherit_keeps_parent_visibility(self):
        soup, oracle = oracle_for('<div style="visibility:hidden"><p style="visibility:inherit">x</p></div>')
        assert oracle.is_visible(soup.p) is False
