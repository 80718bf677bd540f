from __future__ import annotations

import calendar
from typing import Any, Dict, Mapping, Optional

from feedparser.datetimes import _parse_date

from .config import UNKNOWN_SOURCE
from .models import RawFeedItem
from .sanitizer import html_to_text


def _html_content(entry: Mapping[str, Any]) -> Optional[str]:
    """First HTML body from the entry's content list (where content:encoded lands)."""
    content = entry.get("content")
    if isinstance(content, list):
        for block in content:
            if not isinstance(block, Mapping):
                continue
            val = block.get("value")
            ctype = str(block.get("type") or "")
            if isinstance(val, str) and val.strip() and (not ctype or "html" in ctype):
                return val
    return None


def parse_entry(entry: Mapping[str, Any], source: str = UNKNOWN_SOURCE) -> RawFeedItem:
    """
    Map a raw feed entry (from feedparser) onto a RawFeedItem tagged with `source`.

    Field values are carried over in their original shape; nothing is coerced here.
    """
    description = entry.get("description")
    if description is None:
        description = entry.get("summary")

    content_encoded = entry.get("content_encoded") or _html_content(entry)

    snippet = entry.get("content_snippet")
    if snippet is None:
        basis = content_encoded or (description if isinstance(description, str) else "")
        snippet = html_to_text(basis) if basis else None

    pub_date = entry.get("published") or entry.get("pubdate") or entry.get("updated")
    creator = entry.get("author") or entry.get("creator") or entry.get("dc_creator")

    return RawFeedItem(
        title=entry.get("title"),
        link=entry.get("link"),
        description=description,
        content=entry.get("content"),
        content_snippet=snippet,
        pub_date=pub_date,
        creator=creator,
        categories=entry.get("tags") or entry.get("categories"),
        media_content=entry.get("media_content"),
        enclosures=entry.get("enclosures") or entry.get("enclosure"),
        thumbnail=entry.get("media_thumbnail") or entry.get("thumbnail"),
        content_encoded=content_encoded,
        guid=entry.get("id") or entry.get("guid"),
        source=source,
    )


def feed_metadata(parsed: Any) -> Dict[str, str]:
    """Title/link/description of a parsed feed document, for diagnostics."""
    meta = getattr(parsed, "feed", None) or {}
    return {
        "title": str(meta.get("title") or ""),
        "link": str(meta.get("link") or ""),
        "description": str(meta.get("subtitle") or meta.get("description") or ""),
    }


def parse_timestamp(value: str) -> float:
    """
    Best-effort epoch seconds for a feed date string (RFC 822, ISO 8601 and the other
    formats feedparser understands). Unparsable or empty dates map to 0.0.
    """
    if not value or not value.strip():
        return 0.0
    try:
        parsed = _parse_date(value.strip())
    except Exception:
        return 0.0
    if parsed is None:
        return 0.0
    return float(calendar.timegm(parsed))
