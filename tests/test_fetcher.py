"""Tests for feed fetching and parsing."""

from datetime import datetime, timezone

import httpx
import pytest

from feed_relay.errors import FeedFetchError
from feed_relay.fetch.fetcher import fetch_feed, find_image, html_to_text, parse_feed

RSS = b"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:media="http://search.yahoo.com/mrss/">
  <channel>
    <title>Example News</title>
    <link>https://example.com</link>
    <item>
      <title>First &amp; foremost</title>
      <link>https://example.com/a?utm_source=rss</link>
      <guid>a-1</guid>
      <description>&lt;p&gt;Hello &lt;b&gt;world&lt;/b&gt;&lt;/p&gt;&lt;img src="https://img.example.com/a.jpg"&gt;</description>
      <category>Klima</category>
      <pubDate>Mon, 06 Jan 2025 10:00:00 GMT</pubDate>
    </item>
    <item>
      <title>Second</title>
      <link>https://example.com/b</link>
      <media:content url="https://img.example.com/b.jpg" medium="image" />
    </item>
  </channel>
</rss>
"""


def test_parse_feed_maps_entries():
    feed = parse_feed("https://example.com/rss", RSS)

    assert feed.title == "Example News"
    assert len(feed.entries) == 2
    first, second = feed.entries
    assert first.id == "a-1"
    assert first.title == "First & foremost"
    assert first.link == "https://example.com/a?utm_source=rss"
    assert first.content_snippet == "Hello world"
    assert first.categories == ("Klima",)
    assert first.published_at == datetime(2025, 1, 6, 10, 0, tzinfo=timezone.utc)
    assert first.image_url == "https://img.example.com/a.jpg"
    assert second.image_url == "https://img.example.com/b.jpg"
    assert second.published_at is None


def test_parse_feed_rejects_non_feed():
    with pytest.raises(FeedFetchError, match="Invalid RSS/Atom feed"):
        parse_feed("https://example.com/rss", b"this is not a feed <<<&&&")


def test_fetch_feed_with_mock_transport():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, content=RSS)

    feed = fetch_feed("https://example.com/rss", user_agent="test-agent", transport=httpx.MockTransport(handler))

    assert len(feed.entries) == 2
    assert seen[0].headers["User-Agent"] == "test-agent"


def test_fetch_feed_http_error_raises():
    def handler(request):
        return httpx.Response(503)

    with pytest.raises(FeedFetchError, match="HTTP 503"):
        fetch_feed("https://example.com/rss", transport=httpx.MockTransport(handler))


def test_fetch_feed_network_error_raises():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(FeedFetchError, match="ConnectError"):
        fetch_feed("https://example.com/rss", retries=0, transport=httpx.MockTransport(handler))


def test_find_image_prefers_enclosure_over_body():
    raw = {"enclosures": [{"href": "https://x.com/e.png", "type": "image/png"}]}

    assert find_image(raw, '<img src="https://x.com/body.jpg">') == "https://x.com/e.png"


def test_find_image_ignores_non_image_and_relative():
    raw = {"enclosures": [{"href": "https://x.com/a.mp3", "type": "audio/mpeg"}]}

    assert find_image(raw, '<img src="/relative.jpg">') is None
    assert find_image({}, None) is None


def test_html_to_text_drops_scripts_and_collapses_space():
    assert html_to_text("<p>a</p>\n<script>x()</script>  <b>b</b>") == "a b"
    assert html_to_text(None) == ""
