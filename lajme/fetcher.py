from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

import feedparser
import httpx

from .config import resolve_source_name
from .exceptions import RSSFetchError
from .models import RawFeedItem
from .parser import feed_metadata, parse_entry

logger = logging.getLogger(__name__)

FEED_ACCEPT = "application/rss+xml, application/atom+xml, application/xml;q=0.9, text/xml;q=0.8, */*;q=0.5"


async def fetch_feed_entries(client: httpx.AsyncClient, url: str) -> List[Dict[str, Any]]:
    """
    Fetch a single feed URL and return its entries.

    Raises RSSFetchError on network/HTTP errors, or when the document is malformed
    (bozo) and yielded no entries at all.
    """
    try:
        resp = await client.get(url, headers={"Accept": FEED_ACCEPT}, follow_redirects=True)
        resp.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise RSSFetchError(f"HTTP {e.response.status_code} fetching feed: {url}") from e
    except httpx.HTTPError as e:
        raise RSSFetchError(f"Failed to fetch feed: {url} ({e})") from e

    feed = feedparser.parse(
        resp.content,
        response_headers={"content-type": resp.headers.get("content-type", "")},
    )
    entries = getattr(feed, "entries", None)

    if getattr(feed, "bozo", 0) and not entries:
        exc = getattr(feed, "bozo_exception", None)
        msg = f"Invalid RSS/Atom feed: {url}"
        if exc:
            msg += f" ({exc})"
        raise RSSFetchError(msg)

    if not isinstance(entries, list):
        raise RSSFetchError(f"Feed has no entries: {url}")

    meta = feed_metadata(feed)
    logger.debug(f"Fetched {len(entries)} entries from {url} ({meta['title'] or 'untitled'})")
    return entries


async def fetch_source(
    client: httpx.AsyncClient, url: str, source_names: Mapping[str, str]
) -> Optional[List[RawFeedItem]]:
    """Fetch one feed and tag its items with the publisher name; failure yields None."""
    try:
        entries = await fetch_feed_entries(client, url)
    except RSSFetchError as e:
        logger.warning(f"Error fetching feed from {url}: {e}")
        return None
    source = resolve_source_name(url, source_names)
    return [parse_entry(e, source=source) for e in entries]


async def fetch_many(
    client: httpx.AsyncClient, urls: Sequence[str], source_names: Mapping[str, str]
) -> List[Optional[List[RawFeedItem]]]:
    """
    Fetch all sources concurrently and wait for every one to settle.

    The result is aligned with `urls`; a failed feed contributes None so callers
    can tell "empty feed" apart from "feed unavailable".
    """
    return list(await asyncio.gather(*(fetch_source(client, u, source_names) for u in urls)))
