from __future__ import annotations

from typing import Optional

import httpx

from .config import UNKNOWN_SOURCE, PipelineConfig
from .enrichment import enrich_content, needs_enrichment
from .fields import category_labels, normalize_field
from .images import resolve_image
from .models import CanonicalArticle, RawFeedItem
from .sanitizer import (
    build_preview,
    finalize_html,
    inject_image,
    sanitize_html,
    select_raw_content,
)

DEFAULT_TITLE = "No title"
DEFAULT_CREATOR = "Unknown"


async def to_article(
    item: RawFeedItem,
    config: PipelineConfig,
    client: Optional[httpx.AsyncClient] = None,
) -> CanonicalArticle:
    """
    Convert a RawFeedItem into a CanonicalArticle.

    Resolves the image, sanitizes the richest body field and, for enrichment sources
    with a truncated body, replaces it with the article page's own content (requires
    `client`). The returned article carries the default topic; classification is the
    aggregator's job.
    """
    title = normalize_field(item.title).strip() or DEFAULT_TITLE
    link = normalize_field(item.link).strip()
    image_url = resolve_image(item, config)

    content = sanitize_html(select_raw_content(item))
    if (
        client is not None
        and item.source in config.enrichment_sources
        and needs_enrichment(content, config.enrich_min_length)
    ):
        enriched = await enrich_content(client, link, content, user_agent=config.user_agent)
        if enriched != content:
            content = sanitize_html(enriched)
    content = finalize_html(content)

    return CanonicalArticle(
        title=title,
        link=link,
        description=build_preview(content),
        full_content=inject_image(content, image_url, title),
        pub_date=normalize_field(item.pub_date).strip(),
        creator=normalize_field(item.creator).strip() or DEFAULT_CREATOR,
        categories=tuple(category_labels(item.categories)),
        image_url=image_url,
        guid=normalize_field(item.guid).strip() or link,
        source=item.source or UNKNOWN_SOURCE,
    )
