from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from typing import List, Optional

import httpx

from .classifier import classify, is_excluded_category, is_social_post
from .config import PipelineConfig, load_config
from .dedup import deduplicate
from .exceptions import NoFeedsAvailableError
from .fetcher import fetch_many
from .models import CanonicalArticle, NewsFeed, RawFeedItem
from .normalizer import to_article
from .parser import parse_timestamp

logger = logging.getLogger(__name__)


class NewsAggregator:
    """
    High-level API: fetch the configured feeds and return one ordered NewsFeed.

    Pipeline: fetch (concurrent) → tag source → exclude categories → deduplicate
    → normalize (concurrent, per article) → drop social posts → classify → sort (newest first)
    """

    def __init__(
        self,
        config: Optional[PipelineConfig] = None,
        *,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.config = config or load_config()
        self._client = client

    async def aggregate(self) -> NewsFeed:
        """
        Run the whole pipeline once. Nothing is cached between calls.

        Raises NoFeedsAvailableError when every feed failed.
        """
        if self._client is not None:
            return await self._aggregate(self._client)
        async with httpx.AsyncClient(
            timeout=self.config.http_timeout,
            headers={"User-Agent": self.config.user_agent},
        ) as client:
            return await self._aggregate(client)

    async def _aggregate(self, client: httpx.AsyncClient) -> NewsFeed:
        cfg = self.config
        feeds = await fetch_many(client, cfg.feeds, cfg.source_names)

        valid = [f for f in feeds if f is not None]
        if not valid:
            logger.error("No feeds could be fetched")
            raise NoFeedsAvailableError("No feeds could be fetched")

        items: List[RawFeedItem] = [it for feed in valid for it in feed]
        total = len(items)

        # Filter out non-news categories
        items = [it for it in items if not is_excluded_category(it, cfg.excluded_categories)]
        excluded = total - len(items)

        if cfg.deduplicate:
            items = deduplicate(items)

        articles = await self._normalize_all(client, items)

        if cfg.filter_social_posts:
            articles = [a for a in articles if not is_social_post(a, cfg.social_post_phrases)]

        articles = [replace(a, topic=classify(a, cfg.category_rules)) for a in articles]
        articles.sort(key=lambda a: parse_timestamp(a.pub_date), reverse=True)

        logger.info(
            f"Aggregated {len(articles)} articles from {len(valid)}/{len(feeds)} feeds "
            f"({total} entries, {excluded} excluded by category)"
        )
        return NewsFeed(
            title=cfg.feed_title,
            link=cfg.feed_link,
            description=cfg.feed_description,
            items=articles,
        )

    async def _normalize_all(
        self, client: httpx.AsyncClient, items: List[RawFeedItem]
    ) -> List[CanonicalArticle]:
        results = await asyncio.gather(
            *(to_article(it, self.config, client) for it in items),
            return_exceptions=True,
        )
        articles: List[CanonicalArticle] = []
        for it, res in zip(items, results):
            if isinstance(res, Exception):
                # Skip malformed rows
                logger.warning(f"Skipping item from {it.source}: {res}")
                continue
            if isinstance(res, BaseException):
                raise res
            articles.append(res)
        return articles


async def fetch_news(config: Optional[PipelineConfig] = None) -> NewsFeed:
    """Convenience wrapper: one aggregation run with a fresh HTTP client."""
    return await NewsAggregator(config).aggregate()
