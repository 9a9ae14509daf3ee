"""
Write-time sanitisation of rich-text (markdown with inline HTML) fields.

Stored content is rendered as raw markup by the front end, so only an
allowlist of formatting tags, attributes and URL schemes survives.
"""

import html
import re
from typing import Optional

import nh3

ALLOWED_TAGS = {
    "a", "abbr", "b", "blockquote", "br", "caption", "code", "del", "div", "em",
    "figcaption", "figure", "h1", "h2", "h3", "h4", "h5", "h6", "hr", "i", "img",
    "ins", "li", "ol", "p", "pre", "s", "small", "span", "strong", "sub", "sup",
    "table", "tbody", "td", "tfoot", "th", "thead", "tr", "u", "ul",
}
ALLOWED_ATTRIBUTES = {
    "a": {"href", "title"},
    "abbr": {"title"},
    "img": {"src", "alt", "title", "width", "height"},
    "td": {"colspan", "rowspan"},
    "th": {"colspan", "rowspan", "scope"},
}
ALLOWED_URL_SCHEMES = {"http", "https", "mailto"}

# [text](destination) in markdown; the destination is not HTML so nh3 never sees it
_MARKDOWN_LINK = re.compile(r"\]\(\s*([^)\s]*)")
_URL_NOISE = re.compile(r"[\s\x00-\x1f]+")
_SAFE_LINK = re.compile(r"^(?:https?:|mailto:|[/#?.]|[^:/?#]*(?:[/?#]|$))", re.IGNORECASE)
# Leading "> " quote markers, which the HTML serialiser escapes
_BLOCKQUOTE_MARKERS = re.compile(r"^([ \t]*)((?:&gt;[ \t]?)+)", re.MULTILINE)
_ANY_TAG = re.compile(r"<[^>]*>")


def _neutralise_markdown_link(match: "re.Match[str]") -> str:
    destination = _URL_NOISE.sub("", html.unescape(match.group(1)))
    if _SAFE_LINK.match(destination):
        return match.group(0)
    return "](#"


def sanitize_rich_text(value: Optional[str]) -> Optional[str]:
    """Keep allowlisted formatting; drop scripts, handlers and unsafe URLs."""
    if value is None:
        return None
    cleaned = _MARKDOWN_LINK.sub(_neutralise_markdown_link, value)
    cleaned = nh3.clean(
        cleaned,
        tags=ALLOWED_TAGS,
        attributes=ALLOWED_ATTRIBUTES,
        url_schemes=ALLOWED_URL_SCHEMES,
    )
    return _BLOCKQUOTE_MARKERS.sub(
        lambda m: m.group(1) + m.group(2).replace("&gt;", ">"), cleaned
    )


def sanitize_plain_text(value: Optional[str]) -> Optional[str]:
    """Titles and summaries: no markup at all, surrounding whitespace trimmed."""
    if value is None:
        return None
    return _ANY_TAG.sub("", value).strip()
