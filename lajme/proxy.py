"""
Image relay for publishers that block hotlinked images.

The relay only serves images from allow-listed hosts and re-requests them with a
browser-like signature (user agent, referer, origin).
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Optional, Sequence
from urllib.parse import urlparse

import httpx

from .config import DEFAULT_USER_AGENT, host_matches
from .exceptions import ImageProxyError

logger = logging.getLogger(__name__)

CACHE_CONTROL = "public, max-age=3600, s-maxage=3600"
DEFAULT_CONTENT_TYPE = "image/jpeg"
IMAGE_ACCEPT = "image/avif,image/webp,image/apng,image/svg+xml,image/*,*/*;q=0.8"


@dataclass(frozen=True)
class ProxiedImage:
    content: bytes
    content_type: str
    headers: Dict[str, str] = field(default_factory=dict)


def validate_target(url: Optional[str], allowed_hosts: Sequence[str]) -> str:
    """Return the target URL if it may be relayed, else raise ImageProxyError (400/403)."""
    if not url or not url.strip():
        raise ImageProxyError(400, {"error": "Image URL is required"})
    target = url.strip()
    parsed = urlparse(target)
    host = parsed.hostname or ""
    if parsed.scheme not in ("http", "https") or not any(host_matches(host, h) for h in allowed_hosts):
        raise ImageProxyError(403, {"error": "Invalid image source"})
    return target


def build_headers(target: str, referer: Optional[str], user_agent: str = DEFAULT_USER_AGENT) -> Dict[str, str]:
    parsed = urlparse(target)
    origin = f"{parsed.scheme}://{parsed.netloc}"
    return {
        "User-Agent": user_agent,
        "Referer": referer or f"{origin}/",
        "Origin": origin,
        "Accept": IMAGE_ACCEPT,
        "Accept-Language": "en-US,en;q=0.9,sq;q=0.8",
    }


async def relay_image(
    client: httpx.AsyncClient,
    url: Optional[str],
    referer: Optional[str] = None,
    *,
    allowed_hosts: Sequence[str],
    user_agent: str = DEFAULT_USER_AGENT,
) -> ProxiedImage:
    """
    Fetch an allow-listed image on behalf of the browser.

    Rejected requests never reach the network. Upstream errors are raised as
    ImageProxyError with the upstream status and a diagnostic payload.
    """
    target = validate_target(url, allowed_hosts)
    headers = build_headers(target, referer, user_agent)

    try:
        resp = await client.get(target, headers=headers, follow_redirects=True)
    except httpx.HTTPError as e:
        logger.error(f"Error proxying image {target}: {e}")
        raise ImageProxyError(502, {"error": "Failed to proxy image", "details": str(e)}) from e

    if resp.status_code >= 400:
        logger.error(
            f"Failed to fetch image: {target} (status {resp.status_code}, referer {headers['Referer']})"
        )
        raise ImageProxyError(
            resp.status_code,
            {
                "error": f"Failed to fetch image: {resp.status_code} {resp.reason_phrase}".strip(),
                "url": target,
                "referer": headers["Referer"],
            },
        )

    return ProxiedImage(
        content=resp.content,
        content_type=resp.headers.get("content-type", DEFAULT_CONTENT_TYPE),
        headers={
            "Cache-Control": CACHE_CONTROL,
            "Access-Control-Allow-Origin": "*",
        },
    )
