import httpx
import pytest
from fastapi.testclient import TestClient

from lajme.api import NEWS_ERROR, create_app
from lajme.config import PipelineConfig
from lajme.proxy import CACHE_CONTROL

TELEGRAFI = "https://telegrafi.com/feeds/feed.rss"
IMAGE_URL = "https://telegrafi.com/img/foto.jpg"


@pytest.fixture
def make_client(transport_factory):
    def make(routes, **config):
        transport = transport_factory(routes)
        app = create_app(PipelineConfig(feeds=(TELEGRAFI,), **config), transport=transport)
        return TestClient(app), transport

    return make


def test_health_check(make_client):
    client, _ = make_client({})
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_get_news(make_client, rss, rss_item):
    feed = rss([rss_item("Qeveria miraton buxhetin e ri", "https://telegrafi.com/buxheti/")])
    client, _ = make_client({
        TELEGRAFI: httpx.Response(200, content=feed, headers={"content-type": "application/rss+xml"}),
    })

    response = client.get("/api/news")

    assert response.status_code == 200
    data = response.json()
    assert data["title"] == "Lajme-AI - News Aggregator"
    (item,) = data["items"]
    assert item["title"] == "Qeveria miraton buxhetin e ri"
    assert item["source"] == "Telegrafi"
    assert item["detectedCategory"] == "politike"
    assert item["imageUrl"] is None


def test_get_news_all_feeds_down(make_client):
    client, _ = make_client({TELEGRAFI: httpx.ConnectError("down")})
    response = client.get("/api/news")
    assert response.status_code == 500
    assert response.json() == {"error": NEWS_ERROR}


def test_image_proxy_requires_url(make_client):
    client, transport = make_client({})
    response = client.get("/image-proxy")
    assert response.status_code == 400
    assert response.json() == {"error": "Image URL is required"}
    assert transport.requests == []


def test_image_proxy_rejects_foreign_host(make_client):
    client, transport = make_client({})
    response = client.get("/image-proxy", params={"url": "https://evil.example.com/a.jpg"})
    assert response.status_code == 403
    assert response.json() == {"error": "Invalid image source"}
    assert transport.requests == []


def test_image_proxy_relays_image(make_client):
    client, transport = make_client({
        IMAGE_URL: httpx.Response(200, content=b"JPEGDATA", headers={"content-type": "image/jpeg"}),
    })
    response = client.get(
        "/image-proxy",
        params={"url": IMAGE_URL, "referer": "https://telegrafi.com/lajm/1/"},
    )

    assert response.status_code == 200
    assert response.content == b"JPEGDATA"
    assert response.headers["content-type"] == "image/jpeg"
    assert response.headers["cache-control"] == CACHE_CONTROL
    assert transport.requests[0].headers["Referer"] == "https://telegrafi.com/lajm/1/"


def test_image_proxy_forwards_upstream_status(make_client):
    client, _ = make_client({IMAGE_URL: httpx.Response(403)})
    response = client.get("/image-proxy", params={"url": IMAGE_URL})
    assert response.status_code == 403
    assert response.json()["error"] == "Failed to fetch image: 403 Forbidden"


def test_custom_proxy_path(make_client):
    client, _ = make_client({}, proxy_path="/api/image")
    assert client.get("/api/image").status_code == 400
