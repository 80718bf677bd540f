"""
Pick at most one image per article.

Extractors are tried in priority order and the first non-empty URL wins:
media:content, image enclosures, media:thumbnail, then the first <img> found in
content:encoded, content, description and the plain snippet.
"""
from __future__ import annotations

import re
from typing import Any, Callable, List, Optional, Sequence
from urllib.parse import quote, urlparse

from .config import PipelineConfig, host_matches
from .fields import node_attr, node_list, normalize_field
from .models import RawFeedItem

_IMG_SRC_RE = re.compile(
    r"""<img\b[^>]*?(?<![\w-])src\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s"'>]+))""",
    re.IGNORECASE,
)
_RESOLUTION_RE = re.compile(r"[-_]\d+x\d+", re.IGNORECASE)

# encodeURIComponent leaves these unescaped
_URI_COMPONENT_SAFE = "!~*'()"

Extractor = Callable[[RawFeedItem, bool], Optional[str]]


def decode_url_entities(url: str) -> str:
    url = url.replace("&amp;", "&")
    url = url.replace("&quot;", '"')
    url = url.replace("&#39;", "'")
    url = url.replace("&lt;", "<")
    url = url.replace("&gt;", ">")
    return url


def extract_image_from_html(html: Any) -> Optional[str]:
    """Return the src of the first <img> in `html`, exactly as written (quoted or not)."""
    text = normalize_field(html)
    if not text:
        return None
    for m in _IMG_SRC_RE.finditer(text):
        url = next((g for g in m.groups() if g), None)
        if url and url.strip():
            return url
    return None


def _filename(url: str) -> str:
    path = urlparse(url).path or url
    return path.rsplit("/", 1)[-1]


def has_resolution_token(url: str) -> bool:
    return bool(_RESOLUTION_RE.search(_filename(url)))


def _is_image_node(node: Any) -> bool:
    medium = node_attr(node, "medium").lower()
    if medium and medium != "image":
        return False
    ctype = node_attr(node, "type").lower()
    return not ctype or ctype.startswith("image/")


def _from_media_content(item: RawFeedItem, prefer_resolution: bool) -> Optional[str]:
    candidates: List[str] = []
    for node in node_list(item.media_content):
        if isinstance(node, str):
            url = node.strip()
        elif _is_image_node(node):
            url = node_attr(node, "url")
        else:
            continue
        if url:
            candidates.append(url)
    if not candidates:
        return None
    if prefer_resolution:
        for url in candidates:
            if has_resolution_token(url):
                return url
    return candidates[0]


def _from_enclosure(item: RawFeedItem, prefer_resolution: bool) -> Optional[str]:
    for node in node_list(item.enclosures):
        if node_attr(node, "type").lower().startswith("image/"):
            url = node_attr(node, "url") or node_attr(node, "href")
            if url:
                return url
    return None


def _from_thumbnail(item: RawFeedItem, prefer_resolution: bool) -> Optional[str]:
    for node in node_list(item.thumbnail):
        url = node.strip() if isinstance(node, str) else node_attr(node, "url")
        if url:
            return url
    return None


def _html_field(name: str) -> Extractor:
    def extract(item: RawFeedItem, prefer_resolution: bool) -> Optional[str]:
        return extract_image_from_html(getattr(item, name))

    extract.__name__ = f"_from_{name}"
    return extract


EXTRACTORS: Sequence[Extractor] = (
    _from_media_content,
    _from_enclosure,
    _from_thumbnail,
    _html_field("content_encoded"),
    _html_field("content"),
    _html_field("description"),
    _html_field("content_snippet"),
)


def find_image_url(item: RawFeedItem, *, prefer_resolution: bool = False) -> Optional[str]:
    """Run the extractors in priority order; the URL is trimmed and entity-decoded only."""
    for extractor in EXTRACTORS:
        url = extractor(item, prefer_resolution)
        if url and url.strip():
            return decode_url_entities(url.strip())
    return None


def needs_proxy(url: str, hotlink_hosts: Sequence[str]) -> bool:
    host = urlparse(url).hostname or ""
    return bool(host) and any(host_matches(host, h) for h in hotlink_hosts)


def proxy_url(url: str, referer: str = "", proxy_path: str = "/image-proxy") -> str:
    out = f"{proxy_path}?url={quote(url, safe=_URI_COMPONENT_SAFE)}"
    if referer:
        out += f"&referer={quote(referer, safe=_URI_COMPONENT_SAFE)}"
    return out


def resolve_image(item: RawFeedItem, config: PipelineConfig) -> Optional[str]:
    """Best image for `item`, rewritten to the relay path for hotlink-protected hosts."""
    prefer = item.source in config.resolution_preferring_sources
    url = find_image_url(item, prefer_resolution=prefer)
    if not url:
        return None
    if needs_proxy(url, config.hotlink_hosts):
        return proxy_url(url, normalize_field(item.link).strip(), config.proxy_path)
    return url
