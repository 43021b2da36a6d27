"""Markup presence checks.

Every check is a plain substring test against the raw document text; none of
them parses the HTML, so an empty or malformed document simply fails them.
"""

from typing import Callable, List, Tuple

PAGE_LOAD_TIME = "Page Load Time"
PAGE_SIZE = "Page Size"
IMAGES_COUNT = "Images Count"
MOBILE_VIEWPORT = "Mobile Viewport"
META_DESCRIPTION = "Meta Description"
FAVICON = "Favicon"
H1_TAG = "H1 Tag"
CANONICAL_TAG = "Canonical Tag"
HTTPS = "HTTPS"
ROBOTS_TXT = "Robots.txt"
SITEMAP = "Sitemap"
SCHEMA_MARKUP = "Schema Markup"
OPEN_GRAPH_TAGS = "Open Graph Tags"
TWITTER_CARDS = "Twitter Cards"
IMAGE_ALT_TAGS = "Image Alt Tags"
HTML_LANG_ATTRIBUTE = "HTML Lang Attribute"
STRUCTURED_DATA = "Structured Data"
AMP_VERSION = "AMP Version"
WEB_APP_MANIFEST = "Web App Manifest"

METRIC_ORDER = (
    PAGE_LOAD_TIME, PAGE_SIZE, IMAGES_COUNT, MOBILE_VIEWPORT, META_DESCRIPTION,
    FAVICON, H1_TAG, CANONICAL_TAG, HTTPS, ROBOTS_TXT, SITEMAP, SCHEMA_MARKUP,
    OPEN_GRAPH_TAGS, TWITTER_CARDS, IMAGE_ALT_TAGS, HTML_LANG_ATTRIBUTE,
    STRUCTURED_DATA, AMP_VERSION, WEB_APP_MANIFEST,
)


def count_images(html: str) -> int:
    return html.count("<img")


def page_size_kb(html: str) -> float:
    return len(html.encode("utf-8")) / 1024


def has_viewport(html: str) -> bool:
    return 'name="viewport"' in html


def has_meta_description(html: str) -> bool:
    return 'name="description"' in html


def has_favicon(html: str) -> bool:
    return 'rel="icon"' in html or 'rel="shortcut icon"' in html


def has_h1(html: str) -> bool:
    return "<h1" in html


def has_canonical(html: str) -> bool:
    return 'rel="canonical"' in html


def uses_https(url: str) -> bool:
    return url.startswith("https://")


def mentions_robots_txt(html: str) -> bool:
    return "robots.txt" in html


def mentions_sitemap(html: str) -> bool:
    return "sitemap.xml" in html


def has_schema_markup(html: str) -> bool:
    return "application/ld+json" in html


def has_open_graph(html: str) -> bool:
    return 'property="og:' in html


def has_twitter_cards(html: str) -> bool:
    return 'name="twitter:' in html


def images_have_alt(html: str) -> bool:
    # Weak: one alt attribute anywhere satisfies the check for all images.
    return "<img" not in html or 'alt="' in html


def has_lang_attribute(html: str) -> bool:
    return '<html lang="' in html


def has_structured_data(html: str) -> bool:
    return "@context" in html


def has_amp_version(html: str) -> bool:
    return "amphtml" in html


def has_manifest(html: str) -> bool:
    return "manifest.json" in html


# Presence checks in presentation order. HTTPS is handled separately since it
# inspects the URL and renders Yes/No.
PRESENCE_CHECKS: List[Tuple[str, Callable[[str], bool]]] = [
    (MOBILE_VIEWPORT, has_viewport),
    (META_DESCRIPTION, has_meta_description),
    (FAVICON, has_favicon),
    (H1_TAG, has_h1),
    (CANONICAL_TAG, has_canonical),
    (ROBOTS_TXT, mentions_robots_txt),
    (SITEMAP, mentions_sitemap),
    (SCHEMA_MARKUP, has_schema_markup),
    (OPEN_GRAPH_TAGS, has_open_graph),
    (TWITTER_CARDS, has_twitter_cards),
    (IMAGE_ALT_TAGS, images_have_alt),
    (HTML_LANG_ATTRIBUTE, has_lang_attribute),
    (STRUCTURED_DATA, has_structured_data),
    (AMP_VERSION, has_amp_version),
    (WEB_APP_MANIFEST, has_manifest),
]


def presence_label(flag: bool) -> str:
    return "Present" if flag else "Missing"


def yes_no_label(flag: bool) -> str:
    return "Yes" if flag else "No"
