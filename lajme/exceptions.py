from __future__ import annotations

from typing import Any, Dict, Optional


class RSSFetchError(Exception):
    """Raised when an RSS/Atom feed cannot be fetched or parsed."""


class NoFeedsAvailableError(Exception):
    """Raised when every configured feed failed, leaving nothing to aggregate."""


class ImageProxyError(Exception):
    """
    Raised by the image relay when a request is rejected or the upstream fetch fails.

    Carries the HTTP status to answer with and the JSON payload describing the failure.
    """

    def __init__(self, status_code: int, payload: Optional[Dict[str, Any]] = None) -> None:
        self.status_code = status_code
        self.payload = payload or {"error": "Failed to proxy image"}
        super().__init__(f"{status_code}: {self.payload.get('error')}")
