"""Tests for feed, video and docs page sources."""

import json
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from content_dashboard.adapters.sources import (
    DocsPagesSource,
    RSSFeedSource,
    YouTubeSource,
    parse_feed,
)
from content_dashboard.adapters.sources.rss_source import clean_text
from content_dashboard.core import ContentSource, UpstreamError

RSS_FEED = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:dc="http://purl.org/dc/elements/1.1/">
  <channel>
    <title>Sentry Blog</title>
    <item>
      <title>Hello</title>
      <link>https://blog.sentry.io/hello</link>
      <pubDate>Mon, 01 Jan 2024 00:00:00 GMT</pubDate>
      <description><![CDATA[<p>Tips &amp; <b>tricks</b></p>]]></description>
      <dc:creator>Jane Doe</dc:creator>
    </item>
    <item>
      <title>Older post</title>
      <link>https://blog.sentry.io/older</link>
      <pubDate>Fri, 01 Dec 2023 12:00:00 GMT</pubDate>
    </item>
    <item>
      <title>No link here</title>
      <pubDate>Mon, 01 Jan 2024 00:00:00 GMT</pubDate>
    </item>
    <item>
      <link>https://blog.sentry.io/no-title</link>
    </item>
  </channel>
</rss>
"""

ATOM_FEED = """<?xml version="1.0" encoding="UTF-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>Changelog</title>
  <entry>
    <title>New alerts UI</title>
    <link rel="alternate" href="https://sentry.io/changelog/alerts"/>
    <updated>2024-02-01T10:00:00Z</updated>
    <summary>Alerts got a redesign.</summary>
    <author><name>Sentry</name></author>
  </entry>
</feed>
"""


def _mock_http(mock_client_class: MagicMock, status_code: int = 200, text: str = "", payload=None) -> AsyncMock:
    response = MagicMock()
    response.status_code = status_code
    response.text = text
    response.json.return_value = payload

    mock_client = AsyncMock()
    mock_client.__aenter__.return_value = mock_client
    mock_client.get.return_value = response
    mock_client_class.return_value = mock_client
    return mock_client


def test_parse_rss_item() -> None:
    items = parse_feed(RSS_FEED, ContentSource.BLOG)

    assert [i.title for i in items] == ["Hello", "Older post"]
    first = items[0]
    assert first.url == "https://blog.sentry.io/hello"
    assert first.published_at == "2024-01-01T00:00:00.000Z"
    assert first.description == "Tips & tricks"
    assert first.author == "Jane Doe"
    assert first.source == ContentSource.BLOG
    assert first.id.startswith("blog-")


def test_parse_atom_entry() -> None:
    items = parse_feed(ATOM_FEED, ContentSource.CHANGELOG)

    assert len(items) == 1
    entry = items[0]
    assert entry.url == "https://sentry.io/changelog/alerts"
    assert entry.published_at == "2024-02-01T10:00:00.000Z"
    assert entry.description == "Alerts got a redesign."
    assert entry.author == "Sentry"


def test_item_ids_are_stable() -> None:
    first = parse_feed(RSS_FEED, ContentSource.BLOG)
    second = parse_feed(RSS_FEED, ContentSource.BLOG)

    assert [i.id for i in first] == [i.id for i in second]


@pytest.mark.parametrize("xml_text", ["", "   ", "<rss><channel><item>", "not xml at all"])
def test_malformed_feed_yields_empty_list(xml_text: str) -> None:
    assert parse_feed(xml_text, ContentSource.BLOG) == []


def test_html_entities_do_not_drop_the_feed() -> None:
    xml_text = (
        "<rss><channel>"
        "<item><title>A&nbsp;post about caf&eacute;s</title><link>https://x/a</link>"
        "<description>Fish &amp; chips&hellip;</description></item>"
        "<item><title>Example</title><link>https://x/example</link>"
        "<pubDate>Mon, 01 Jan 2024 00:00:00 GMT</pubDate></item>"
        "</channel></rss>"
    )

    items = parse_feed(xml_text, ContentSource.BLOG)

    assert [i.title for i in items] == ["A\u00a0post about cafés", "Example"]
    assert items[0].description == "Fish & chips…"
    assert items[1].published_at == "2024-01-01T00:00:00.000Z"


def test_missing_date_defaults_to_now() -> None:
    xml_text = "<rss><channel><item><title>T</title><link>https://x/t</link></item></channel></rss>"
    before = datetime.now(timezone.utc).replace(microsecond=0)

    items = parse_feed(xml_text, ContentSource.BLOG)

    published = datetime.fromisoformat(items[0].published_at.replace("Z", "+00:00"))
    assert published >= before


def test_clean_text() -> None:
    assert clean_text("<![CDATA[Hi <em>there</em>]]>") == "Hi there"
    assert clean_text("  &lt;tag&gt; &quot;q&quot;  ") == '<tag> "q"'
    assert clean_text(None) == ""


@pytest.mark.asyncio
async def test_rss_source_filters_by_since() -> None:
    source = RSSFeedSource("https://blog.sentry.io/feed.xml", ContentSource.BLOG)

    with patch("httpx.AsyncClient") as mock_client_class:
        _mock_http(mock_client_class, text=RSS_FEED)

        items = await source.fetch_items(since=datetime(2023, 12, 15, tzinfo=timezone.utc))

    assert [i.title for i in items] == ["Hello"]


@pytest.mark.asyncio
async def test_rss_source_http_error() -> None:
    source = RSSFeedSource("https://blog.sentry.io/feed.xml", ContentSource.BLOG)

    with patch("httpx.AsyncClient") as mock_client_class:
        _mock_http(mock_client_class, status_code=502)

        with pytest.raises(UpstreamError) as exc_info:
            await source.fetch_items()

    assert exc_info.value.status_code == 502


@pytest.mark.asyncio
async def test_youtube_source_builds_items() -> None:
    payload = {
        "items": [
            {
                "id": {"videoId": "abc123"},
                "snippet": {
                    "title": "Debugging tutorial",
                    "description": "How to debug",
                    "publishedAt": "2024-01-05T08:00:00Z",
                    "thumbnails": {"medium": {"url": "https://i.ytimg.com/vi/abc123/mqdefault.jpg"}},
                },
            },
            {"id": {"channelId": "not-a-video"}, "snippet": {"title": "Channel"}},
        ]
    }
    source = YouTubeSource("key", "channel")

    with patch("httpx.AsyncClient") as mock_client_class:
        mock_client = _mock_http(mock_client_class, payload=payload)

        items = await source.fetch_items()

    assert len(items) == 1
    video = items[0]
    assert video.id == "abc123"
    assert video.url == "https://www.youtube.com/watch?v=abc123"
    assert video.published_at == "2024-01-05T08:00:00.000Z"
    assert video.thumbnail == "https://i.ytimg.com/vi/abc123/mqdefault.jpg"
    params = mock_client.get.call_args.kwargs["params"]
    assert params["channelId"] == "channel"
    assert params["order"] == "date"


@pytest.mark.asyncio
async def test_youtube_result_without_date_is_kept() -> None:
    payload = {"items": [{"id": {"videoId": "nodate"}, "snippet": {"title": "Launch week recap"}}]}
    before = datetime.now(timezone.utc).replace(microsecond=0)

    with patch("httpx.AsyncClient") as mock_client_class:
        _mock_http(mock_client_class, payload=payload)

        items = await YouTubeSource("key", "channel").fetch_items(since=datetime(2024, 1, 1, tzinfo=timezone.utc))

    assert [i.id for i in items] == ["nodate"]
    published = datetime.fromisoformat(items[0].published_at.replace("Z", "+00:00"))
    assert published >= before


@pytest.mark.asyncio
async def test_youtube_source_requires_key() -> None:
    with pytest.raises(UpstreamError, match="not configured"):
        await YouTubeSource(None, "channel").fetch_items()


@pytest.mark.asyncio
async def test_docs_pages_sorted_by_last_modified() -> None:
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "docs-pages.json"
        path.write_text(json.dumps({
            "knownPages": [
                {"title": "Old", "url": "https://docs.sentry.io/old", "lastModified": "2023-01-01T00:00:00.000Z"},
                {"title": "New", "url": "https://docs.sentry.io/new", "lastModified": "2024-01-01T00:00:00.000Z"},
                {"title": "", "url": "https://docs.sentry.io/untitled"},
            ]
        }))

        pages = await DocsPagesSource(path).fetch_items()

    assert [p.title for p in pages] == ["New", "Old"]
    assert pages[0].last_modified == "2024-01-01T00:00:00.000Z"
    assert pages[0].source == ContentSource.DOCS


@pytest.mark.asyncio
async def test_docs_pages_missing_file() -> None:
    with tempfile.TemporaryDirectory() as tmpdir:
        assert await DocsPagesSource(Path(tmpdir) / "missing.json").fetch_items() == []
