"""
lajme

Aggregates Albanian news from several RSS/Atom feeds into one deduplicated,
categorized and sanitized feed.

Core ideas:
- Input: a fixed list of feed URLs (see `lajme.config`)
- Process: fetch → tag source → exclude non-news categories → deduplicate
  → normalize (image, content, optional page enrichment) → classify → sort (newest first)
- Output: NewsFeed with a List[CanonicalArticle]

Example
-------
import asyncio
from lajme import NewsAggregator, load_config

feed = asyncio.run(NewsAggregator(load_config()).aggregate())

for item in feed.items:
    print(item.pub_date, item.source, item.topic, item.title)
"""
from .config import CategoryRule, PipelineConfig, load_config
from .core import NewsAggregator, fetch_news
from .exceptions import ImageProxyError, NoFeedsAvailableError, RSSFetchError
from .models import CanonicalArticle, NewsFeed, RawFeedItem

__all__ = [
    "CanonicalArticle",
    "CategoryRule",
    "ImageProxyError",
    "NewsAggregator",
    "NewsFeed",
    "NoFeedsAvailableError",
    "PipelineConfig",
    "RSSFetchError",
    "RawFeedItem",
    "fetch_news",
    "load_config",
]
