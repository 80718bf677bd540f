from typing import Callable, Dict, List, Union

import httpx
import pytest

RSS_HEADER = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0"
     xmlns:content="http://purl.org/rss/1.0/modules/content/"
     xmlns:dc="http://purl.org/dc/elements/1.1/"
     xmlns:media="http://search.yahoo.com/mrss/">
<channel>
<title>{title}</title>
<link>{link}</link>
<description>Test feed</description>
"""
RSS_FOOTER = "</channel>\n</rss>\n"

Route = Union[httpx.Response, Exception, Callable[[httpx.Request], httpx.Response]]


def build_rss(items: List[str], title: str = "Test", link: str = "https://example.com/") -> bytes:
    return (RSS_HEADER.format(title=title, link=link) + "\n".join(items) + RSS_FOOTER).encode("utf-8")


def build_item(
    title: str,
    link: str,
    pub_date: str = "Mon, 01 Jan 2024 12:00:00 GMT",
    description: str = "",
    content: str = "",
    categories: List[str] = (),
    extra: str = "",
) -> str:
    parts = [
        "<item>",
        f"<title>{title}</title>",
        f"<link>{link}</link>",
        f"<guid>{link}</guid>",
        f"<pubDate>{pub_date}</pubDate>",
        "<dc:creator>Redaksia</dc:creator>",
    ]
    parts.extend(f"<category>{c}</category>" for c in categories)
    if description:
        parts.append(f"<description><![CDATA[{description}]]></description>")
    if content:
        parts.append(f"<content:encoded><![CDATA[{content}]]></content:encoded>")
    if extra:
        parts.append(extra)
    parts.append("</item>")
    return "\n".join(parts)


class RecordingTransport(httpx.MockTransport):
    """MockTransport that serves canned responses per URL and remembers every request."""

    def __init__(self, routes: Dict[str, Route]):
        self.routes = routes
        self.requests: List[httpx.Request] = []
        super().__init__(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(str(request.url))
        if route is None:
            return httpx.Response(404, text="not found")
        if isinstance(route, Exception):
            raise route
        if callable(route):
            return route(request)
        return route

    @property
    def urls(self) -> List[str]:
        return [str(r.url) for r in self.requests]


@pytest.fixture
def rss():
    return build_rss


@pytest.fixture
def rss_item():
    return build_item


@pytest.fixture
def transport_factory():
    return RecordingTransport
