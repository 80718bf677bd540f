"""
Pattern-based clean-up of feed-supplied HTML.

Every function here is a pure str -> str transform that tolerates malformed markup;
nothing in this module performs I/O. Remote enrichment lives in `lajme.enrichment`.
"""
from __future__ import annotations

import re
from html import escape
from typing import Optional

from .fields import normalize_field
from .models import RawFeedItem

PREVIEW_LIMIT = 300
PREVIEW_SUFFIX = " ..."
PREVIEW_WORD_BOUNDARY = 250

_FLAGS = re.IGNORECASE | re.DOTALL

# WordPress export artifact: "The post <a>Title</a> appeared first on <a>Site</a>."
_POST_PARAGRAPH_RE = re.compile(r"<p\b[^>]*>\s*The post\b.*?</p\s*>", _FLAGS)
_POST_SENTENCE_RE = re.compile(r"(?:^|\s)The post\s[^\n]*?appeared first on[^\n]*", re.IGNORECASE)

_ENTITY_RE = re.compile(r"&(#[0-9]+|#[xX][0-9a-fA-F]+|[A-Za-z][A-Za-z0-9]*);")
_NAMED_ENTITIES = {
    "quot": '"',
    "amp": "&",
    "lt": "<",
    "gt": ">",
    "apos": "'",
    "nbsp": "\u00a0",
    "mdash": "—",
    "ndash": "–",
    "lsquo": "‘",
    "rsquo": "’",
    "ldquo": "“",
    "rdquo": "”",
    "laquo": "«",
    "raquo": "»",
    "hellip": "…",
    "euml": "ë",
    "Euml": "Ë",
    "ccedil": "ç",
    "Ccedil": "Ç",
    "uuml": "ü",
    "Uuml": "Ü",
}

_SCRIPT_RE = re.compile(r"<(script|style|noscript)\b[^>]*>.*?</\1\s*>", _FLAGS)
_WIDGET_BLOCK_RE = re.compile(
    r"<(div|ul|section|aside|nav)\b[^>]*\bclass\s*=\s*[\"'][^\"']*"
    r"(?:share|sharing|social|sharedaddy|addtoany|a2a_kit|jp-relatedposts|related-posts)"
    r"[^\"']*[\"'][^>]*>.*?</\1\s*>",
    _FLAGS,
)
_SHARE_LINK_RE = re.compile(
    r"<a\b[^>]*\bhref\s*=\s*[\"'][^\"']*"
    r"(?:sharer|share=|/share\?|intent/tweet|whatsapp:|viber:|mailto:\?|pinterest\.com/pin/create)"
    r"[^\"']*[\"'][^>]*>.*?</a\s*>",
    _FLAGS,
)
_GENERIC_LINK_RE = re.compile(
    r"<a\b[^>]*>\s*(?:read more|continue reading|lexo më shumë|lexo me shume|lexo më tepër"
    r"|vazhdo leximin|burimi|source)\b[^<]*</a\s*>",
    re.IGNORECASE,
)
_EMPTY_CONTAINER_RE = re.compile(
    r"<(p|div|span|section|figure|strong|em|b|i)\b[^>]*>(?:\s|&nbsp;|<br\s*/?>)*</\1\s*>",
    re.IGNORECASE,
)

SOCIAL_EMBED_MARKERS = (
    "instagram.com",
    "instagr.am",
    "instagram-media",
    "data-instgrm",
    "facebook.com",
    "fb-post",
    "fb-video",
    "connect.facebook.net",
    "a post shared by",
)
_PLATFORM_RE = re.compile(r"instagram|facebook", re.IGNORECASE)
_BLOCKQUOTE_RE = re.compile(r"<blockquote\b[^>]*>.*?</blockquote\s*>", _FLAGS)
_SOCIAL_IFRAME_RE = re.compile(
    r"<iframe\b[^>]*(?:instagram|facebook)[^>]*>(?:.*?</iframe\s*>)?", _FLAGS
)
_SOCIAL_DIV_RE = re.compile(
    r"<div\b[^>]*\bclass\s*=\s*[\"'][^\"']*(?:fb-post|fb-video|instagram-media)[^\"']*[\"'][^>]*>"
    r".*?</div\s*>",
    _FLAGS,
)
_PARAGRAPH_RE = re.compile(r"<p\b[^>]*>.*?</p\s*>", _FLAGS)

_TAG_RE = re.compile(r"<[^>]*>")
_WHITESPACE_RE = re.compile(r"\s+")
_IMG_TAG_RE = re.compile(r"<img\b", re.IGNORECASE)


def select_raw_content(item: RawFeedItem) -> str:
    """Richest available body: content:encoded > content > snippet > description."""
    for value in (item.content_encoded, item.content, item.content_snippet, item.description):
        text = normalize_field(value)
        if text.strip():
            return text
    return ""


def strip_post_attribution(html: str) -> str:
    html = _POST_PARAGRAPH_RE.sub("", html)
    return _POST_SENTENCE_RE.sub("", html)


def _decode_entity(m: re.Match) -> str:
    ref = m.group(1)
    if ref[0] == "#":
        try:
            code = int(ref[2:], 16) if ref[1] in "xX" else int(ref[1:])
        except ValueError:
            return m.group(0)
        if 0 < code <= 0x10FFFF and not 0xD800 <= code <= 0xDFFF:
            return chr(code)
        return m.group(0)
    return _NAMED_ENTITIES.get(ref, m.group(0))


def decode_entities(text: str) -> str:
    """Decode numeric, hex and a fixed set of named entities in a single pass."""
    return _ENTITY_RE.sub(_decode_entity, text)


def strip_widgets(html: str) -> str:
    """Drop scripts, share/social widgets, share and "read more" links, and empty containers."""
    html = _SCRIPT_RE.sub("", html)
    html = _WIDGET_BLOCK_RE.sub("", html)
    html = _SHARE_LINK_RE.sub("", html)
    html = _GENERIC_LINK_RE.sub("", html)
    # Removing one empty container can empty its parent
    for _ in range(5):
        cleaned = _EMPTY_CONTAINER_RE.sub("", html)
        if cleaned == html:
            break
        html = cleaned
    return html


def has_social_embed(html: str) -> bool:
    lowered = html.lower()
    return any(marker in lowered for marker in SOCIAL_EMBED_MARKERS)


def _drop_if_social(m: re.Match) -> str:
    return "" if has_social_embed(m.group(0)) else m.group(0)


def _drop_if_platform(m: re.Match) -> str:
    return "" if _PLATFORM_RE.search(m.group(0)) else m.group(0)


def strip_social_embeds(html: str) -> str:
    """Remove embedded Instagram/Facebook posts and any paragraph mentioning the platforms."""
    if not has_social_embed(html):
        return html
    html = _BLOCKQUOTE_RE.sub(_drop_if_social, html)
    html = _SOCIAL_IFRAME_RE.sub("", html)
    html = _SOCIAL_DIV_RE.sub("", html)
    return _PARAGRAPH_RE.sub(_drop_if_platform, html)


def sanitize_html(html: str) -> str:
    html = strip_post_attribution(html)
    html = decode_entities(html)
    html = strip_widgets(html)
    html = strip_social_embeds(html)
    return html.strip()


def finalize_html(html: str) -> str:
    # Earlier transforms can expose attribution text that was nested in removed markup
    return strip_post_attribution(html).strip()


def html_to_text(html: str) -> str:
    text = _SCRIPT_RE.sub(" ", html)
    text = _TAG_RE.sub(" ", text)
    text = decode_entities(text)
    return _WHITESPACE_RE.sub(" ", text).strip()


def truncate_preview(text: str, limit: int = PREVIEW_LIMIT) -> str:
    """
    Cap `text` at `limit` characters including the " ..." suffix.

    Longer text is cut to leave room for the suffix, then pulled back to the last
    space if one lies beyond PREVIEW_WORD_BOUNDARY.
    """
    if len(text) <= limit:
        return text
    cut = text[: limit - len(PREVIEW_SUFFIX)]
    space = cut.rfind(" ")
    if space > PREVIEW_WORD_BOUNDARY:
        cut = cut[:space]
    return cut.rstrip() + PREVIEW_SUFFIX


def build_preview(html: str) -> str:
    return truncate_preview(html_to_text(html))


def inject_image(html: str, image_url: Optional[str], title: str) -> str:
    """Prepend the article image unless the body already shows one."""
    if not image_url or _IMG_TAG_RE.search(html):
        return html
    tag = f'<img src="{escape(image_url)}" alt="{escape(title)}" />'
    return f"{tag}{html}"
