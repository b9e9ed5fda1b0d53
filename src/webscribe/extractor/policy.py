"""
Policy tables for noise classification and content-root discovery.

Every entry maps a pattern to the reason it exists, so the tables can be
unit-tested and extended without touching traversal logic.
"""

from __future__ import annotations

from typing import Dict, FrozenSet, Tuple

# Tags that never carry article content.
NOISE_TAGS: Dict[str, str] = {
    "script": "executable code",
    "style": "stylesheet",
    "noscript": "no-JS fallback markup",
    "iframe": "embedded document, extracted as its own frame",
    "svg": "vector graphics",
    "canvas": "bitmap drawing surface",
    "nav": "site navigation",
    "header": "page or section masthead",
    "footer": "page or section footer",
    "aside": "sidebar content",
    "form": "input forms",
}

# Substrings of the lower-cased "class id" string that mark an element as noise.
NOISE_PATTERNS: Dict[str, str] = {
    "nav": "navigation bars and menus",
    "menu": "menus",
    "header": "mastheads",
    "footer": "footers",
    "sidebar": "sidebars",
    "side-bar": "sidebars",
    "ad-": "advertising slots (ad-slot, ad-container)",
    "-ad": "advertising slots (top-ad, sidebar-ad)",
    "advert": "advertising",
    "banner": "banners",
    "promo": "promotions",
    "promotion": "promotions",
    "cookie": "cookie notices",
    "gdpr": "consent banners",
    "consent": "consent banners",
    "popup": "popups",
    "modal": "modal dialogs",
    "overlay": "overlays",
    "newsletter": "newsletter signup",
    "subscribe": "subscription prompts",
    "signup": "signup prompts",
    "sign-up": "signup prompts",
    "comment": "comment threads",
    "disqus": "comment threads",
    "share": "social sharing",
    "social": "social widgets",
    "tweet": "embedded tweets",
    "facebook": "social widgets",
    "related": "related-content widgets",
    "recommend": "recommendation widgets",
    "suggested": "suggested-content widgets",
    "more-article": "more-articles rails",
    "widget": "generic widgets",
    "toolbar": "toolbars",
    "breadcrumb": "breadcrumbs",
    "pagination": "pagination",
    "pager": "pagination",
    "toc-float": "floating tables of contents",
    "sticky": "sticky UI",
    "fixed-": "fixed-position UI",
    "back-to-top": "scroll helpers",
}

# Whole class/id tokens that are noise but too short to match as substrings.
NOISE_TOKENS: Dict[str, str] = {
    "ad": "advertising slot",
    "ads": "advertising slots",
}

# ARIA landmark roles that are never the article body.
NOISE_ROLES: Dict[str, str] = {
    "navigation": "navigation landmark",
    "banner": "site header landmark",
    "complementary": "sidebar landmark",
    "contentinfo": "site footer landmark",
}

# Candidate content roots, most specific first.
ROOT_SELECTORS: Tuple[str, ...] = (
    'article[class*="content"]',
    'article[class*="post"]',
    'article[class*="article"]',
    "article",
    '[role="main"] article',
    '[role="article"]',
    "main article",
    "main",
    '[role="main"]',
    ".post-content",
    ".post-body",
    ".post__content",
    ".article-content",
    ".article-body",
    ".article__body",
    ".entry-content",
    ".entry-body",
    ".content-body",
    ".page-content",
    ".page-body",
    ".main-content",
    ".main__content",
    ".markdown-body",
    ".prose",
    ".rich-text",
    ".blog-content",
    ".blog-post",
    ".blog__content",
    ".story-body",
    ".story__body",
    ".text-content",
    ".body-content",
    "#article-body",
    "#post-body",
    "#content-body",
    "#main-content",
    "#article",
    "#post",
    ".container > article",
    "section > article",
)

# Generic containers scanned when no curated selector scores well enough.
CANDIDATE_CONTAINERS = "div, section, article, main"

# Descendants that earn the structural-richness bonus.
STRUCTURAL_TAGS: FrozenSet[str] = frozenset(
    {"p", "h1", "h2", "h3", "h4", "h5", "h6", "pre", "blockquote", "li"}
)

HEADING_TAGS: FrozenSet[str] = frozenset({"h1", "h2", "h3", "h4", "h5", "h6"})
