"""
HTTP surface: the aggregation endpoint and the image relay.

Run with `uvicorn lajme.api:app`.
"""
from __future__ import annotations

import logging
from typing import Optional

import httpx
from fastapi import FastAPI, Query
from fastapi.responses import JSONResponse, Response

from .config import PipelineConfig, load_config
from .core import NewsAggregator
from .exceptions import ImageProxyError, NoFeedsAvailableError
from .proxy import relay_image

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("lajme")

NEWS_ERROR = "Failed to fetch news feed"


def create_app(
    config: Optional[PipelineConfig] = None,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """Build the app; `transport` lets tests route outbound HTTP to a mock."""
    cfg = config or load_config()
    app = FastAPI(title="Lajme-AI News Aggregator")

    def http_client() -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=cfg.http_timeout,
            headers={"User-Agent": cfg.user_agent},
            transport=transport,
        )

    @app.get("/api/news")
    async def get_news():
        """Fetch, filter, normalize and classify all configured feeds."""
        try:
            async with http_client() as client:
                feed = await NewsAggregator(cfg, client=client).aggregate()
        except NoFeedsAvailableError as e:
            logger.error(f"Error fetching RSS feed: {e}")
            return JSONResponse({"error": NEWS_ERROR}, status_code=500)
        except Exception as e:
            logger.exception(f"Unexpected error aggregating news: {e}")
            return JSONResponse({"error": NEWS_ERROR}, status_code=500)
        return feed.to_dict()

    @app.get(cfg.proxy_path)
    async def image_proxy(
        url: Optional[str] = Query(None, description="Image URL to relay"),
        referer: Optional[str] = Query(None, description="Article URL sent as Referer"),
    ):
        try:
            async with http_client() as client:
                image = await relay_image(
                    client,
                    url,
                    referer,
                    allowed_hosts=cfg.hotlink_hosts,
                    user_agent=cfg.user_agent,
                )
        except ImageProxyError as e:
            return JSONResponse(e.payload, status_code=e.status_code)
        return Response(content=image.content, media_type=image.content_type, headers=image.headers)

    @app.get("/health")
    def health_check():
        return {"status": "ok"}

    return app


app = create_app()
