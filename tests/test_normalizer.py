import httpx
import pytest

from lajme.config import UNCATEGORIZED, PipelineConfig
from lajme.models import RawFeedItem
from lajme.normalizer import DEFAULT_CREATOR, DEFAULT_TITLE, to_article

GAZETA_LINK = "https://www.gazetaexpress.com/lajm/7/"
LONG_PARAGRAPH = "Deputetët e Kuvendit diskutuan gjatë seancës së sotme për projektligjin e ri. " * 4


@pytest.mark.asyncio
async def test_to_article_fills_defaults():
    article = await to_article(RawFeedItem(), PipelineConfig())

    assert article.title == DEFAULT_TITLE
    assert article.creator == DEFAULT_CREATOR
    assert article.link == ""
    assert article.description == ""
    assert article.full_content == ""
    assert article.categories == ()
    assert article.image_url is None
    assert article.source == "Unknown"
    assert article.topic == UNCATEGORIZED


@pytest.mark.asyncio
async def test_to_article_normalizes_node_fields():
    item = RawFeedItem(
        title={"_": "Titulli"},
        link=["https://insajderi.org/1"],
        description="<p>Hyrja &amp; vazhdimi</p>",
        creator={"#text": "Autori"},
        categories=["Lajme", {"term": "Politikë"}, {"bogus": 1}],
        pub_date="Mon, 01 Jan 2024 12:00:00 GMT",
        source="Insajderi",
    )
    article = await to_article(item, PipelineConfig())

    assert article.title == "Titulli"
    assert article.link == "https://insajderi.org/1"
    assert article.guid == "https://insajderi.org/1"
    assert article.creator == "Autori"
    assert article.categories == ("Lajme", "Politikë")
    assert article.description == "Hyrja & vazhdimi"
    assert article.full_content == "<p>Hyrja & vazhdimi</p>"


@pytest.mark.asyncio
async def test_to_article_injects_proxied_image():
    item = RawFeedItem(
        title="Foto",
        link="https://telegrafi.com/foto/",
        content_encoded='<p>Tekst</p>',
        enclosures=[{"url": "https://telegrafi.com/img/a.jpg", "type": "image/jpeg"}],
        source="Telegrafi",
    )
    article = await to_article(item, PipelineConfig())

    assert article.image_url.startswith("/image-proxy?url=https%3A%2F%2Ftelegrafi.com")
    assert article.full_content.startswith('<img src="/image-proxy?url=')
    assert article.full_content.endswith("<p>Tekst</p>")


@pytest.mark.asyncio
async def test_to_article_enriches_truncated_body(transport_factory):
    page = f'<html><body><div class="article-content"><p>{LONG_PARAGRAPH}</p><p>{LONG_PARAGRAPH}</p></div></body></html>'
    transport = transport_factory({GAZETA_LINK: httpx.Response(200, text=page)})
    item = RawFeedItem(
        title="Seanca",
        link=GAZETA_LINK,
        description="<p>Deputetët diskutuan......</p>",
        source="Gazeta Express",
    )
    async with httpx.AsyncClient(transport=transport) as client:
        article = await to_article(item, PipelineConfig(), client)

    assert LONG_PARAGRAPH.strip() in article.full_content
    assert article.description.endswith(" ...")


@pytest.mark.asyncio
async def test_to_article_only_enriches_configured_sources(transport_factory):
    transport = transport_factory({})
    item = RawFeedItem(title="t", link="https://telegrafi.com/1", description="<p>short</p>", source="Telegrafi")
    async with httpx.AsyncClient(transport=transport) as client:
        article = await to_article(item, PipelineConfig(), client)

    assert transport.requests == []
    assert article.full_content == "<p>short</p>"
