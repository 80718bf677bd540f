"""
Remote enrichment: when a feed only carries a teaser, fetch the article page and
pull the main body out of it.

Failures never propagate; the caller always gets back usable content (the original
one if nothing better could be extracted).
"""
from __future__ import annotations

import logging
from typing import Optional

import httpx
from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

TRUNCATION_MARKER = "......"
MIN_BLOCK_LENGTH = 500
MIN_PARAGRAPHS = 2
FALLBACK_MIN_PARAGRAPH_LENGTH = 40
FALLBACK_MAX_PARAGRAPHS = 20

# Tried in order; later selectors only win with a strictly longer block
CONTENT_SELECTORS = (
    ".article-body",
    ".article-content",
    ".article__body",
    ".entry-content",
    ".post-content",
    ".single-content",
    ".content-article",
    ".td-post-content",
    "article",
    "main",
    "#article-body",
    "#content",
    "#main-content",
)
_NOISE_TAGS = ("script", "style", "noscript", "nav", "aside", "form", "footer", "header")


def needs_enrichment(content: str, min_length: int = MIN_BLOCK_LENGTH) -> bool:
    return len(content) < min_length or TRUNCATION_MARKER in content


def extract_main_content(page_html: str) -> Optional[str]:
    """
    Return the inner HTML of the page's main article block.

    Each selector match is scored by its text length, but only if it holds at least
    two <p> tags. When nothing clears MIN_BLOCK_LENGTH, fall back to the page's
    substantial paragraphs (at most FALLBACK_MAX_PARAGRAPHS of them).
    """
    soup = BeautifulSoup(page_html, "html.parser")
    for tag in soup(_NOISE_TAGS):
        tag.decompose()

    best = None
    best_score = 0
    for selector in CONTENT_SELECTORS:
        for el in soup.select(selector):
            if len(el.find_all("p")) < MIN_PARAGRAPHS:
                continue
            score = len(el.get_text(" ", strip=True))
            if score > best_score:
                best, best_score = el, score

    if best is not None and best_score > MIN_BLOCK_LENGTH:
        return best.decode_contents().strip()

    paragraphs = [
        p for p in soup.find_all("p")
        if len(p.get_text(strip=True)) >= FALLBACK_MIN_PARAGRAPH_LENGTH
    ]
    if not paragraphs:
        return None
    return "\n".join(str(p) for p in paragraphs[:FALLBACK_MAX_PARAGRAPHS])


async def enrich_content(
    client: httpx.AsyncClient,
    link: str,
    content: str,
    *,
    user_agent: Optional[str] = None,
) -> str:
    """
    Fetch `link` and return its extracted body if it beats `content`, else `content`.
    """
    if not link:
        return content

    headers = {"Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"}
    if user_agent:
        headers["User-Agent"] = user_agent

    try:
        resp = await client.get(link, headers=headers, follow_redirects=True)
        resp.raise_for_status()
        extracted = extract_main_content(resp.text)
    except httpx.TimeoutException:
        logger.warning(f"Timeout fetching article content: {link}")
        return content
    except httpx.HTTPStatusError as e:
        logger.warning(f"HTTP {e.response.status_code} fetching article: {link}")
        return content
    except Exception as e:
        logger.warning(f"Unexpected error fetching article content for {link}: {e}")
        return content

    if extracted and len(extracted) > len(content):
        logger.debug(f"Enriched {link} ({len(content)} -> {len(extracted)} chars)")
        return extracted
    return content
