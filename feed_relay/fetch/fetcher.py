"""
RSS/Atom fetching and parsing.

Feeds are downloaded with httpx (bounded timeout, retries with backoff) and
parsed with feedparser. Each raw feedparser entry is mapped to an immutable
Entry with a plain-text snippet and a representative image when one exists.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import datetime, timezone
import re
import time
from typing import Any

from bs4 import BeautifulSoup
import feedparser
import httpx

from ..core.types import Entry, ParsedFeed
from ..errors import FeedFetchError

_WS_RE = re.compile(r"\s+")


@dataclass
class FetchResult:
    """Result of an HTTP fetch operation.

    Either content will be populated (success) or error will be populated
    (failure), but never both. status_code may be None for network-level
    failures.
    """

    url: str
    status_code: int | None
    content: bytes | None
    error: str | None


def fetch_url(
    url: str,
    timeout: float,
    retries: int,
    user_agent: str,
    transport: httpx.BaseTransport | None = None,
) -> FetchResult:
    """Fetch a URL with retry logic.

    Network errors are retried with linear backoff; HTTP error statuses are
    returned as-is without retrying.
    """
    headers = {
        "User-Agent": user_agent,
        "Accept": "application/rss+xml, application/atom+xml, application/xml;q=0.9, */*;q=0.8",
    }
    last_error: str | None = None

    for attempt in range(retries + 1):
        try:
            with httpx.Client(
                timeout=timeout,
                headers=headers,
                follow_redirects=True,
                transport=transport,
            ) as client:
                resp = client.get(url)
                if resp.status_code >= 400:
                    return FetchResult(
                        url=url,
                        status_code=resp.status_code,
                        content=None,
                        error=f"HTTP {resp.status_code}",
                    )
                return FetchResult(url=url, status_code=resp.status_code, content=resp.content, error=None)
        except httpx.HTTPError as exc:
            last_error = f"{type(exc).__name__}: {exc}"
            if attempt < retries:
                time.sleep(0.5 * (attempt + 1))

    return FetchResult(url=url, status_code=None, content=None, error=last_error)


def fetch_feed(
    url: str,
    timeout: float = 20.0,
    user_agent: str = "feed-relay",
    retries: int = 1,
    transport: httpx.BaseTransport | None = None,
) -> ParsedFeed:
    """Fetch and parse a single feed.

    Raises:
        FeedFetchError: On network/HTTP errors or when the document is not a feed
    """
    result = fetch_url(url, timeout=timeout, retries=retries, user_agent=user_agent, transport=transport)
    if result.error or result.content is None:
        raise FeedFetchError(f"Failed to fetch feed: {url} ({result.error})")
    return parse_feed(url, result.content)


def parse_feed(url: str, content: bytes | str) -> ParsedFeed:
    """Parse feed content into a ParsedFeed.

    feedparser flags many real-world feeds as "bozo" for minor issues, so a
    bozo feed is only rejected when it yields no entries at all.

    Raises:
        FeedFetchError: When the content cannot be parsed into a feed
    """
    parsed = feedparser.parse(content)
    raw_entries = getattr(parsed, "entries", None) or []
    if getattr(parsed, "bozo", 0) and not raw_entries:
        exc = getattr(parsed, "bozo_exception", None)
        msg = f"Invalid RSS/Atom feed: {url}"
        if exc:
            msg += f" ({exc})"
        raise FeedFetchError(msg)

    feed_meta = getattr(parsed, "feed", {}) or {}
    title = (feed_meta.get("title") or "").strip() or url
    return ParsedFeed(url=url, title=title, entries=[entry_from_raw(e) for e in raw_entries])


def entry_from_raw(raw: dict[str, Any]) -> Entry:
    """Map a raw feedparser entry to an Entry."""
    summary = _first_text(raw, "summary", "description")
    html_body = summary or _content_value(raw)
    categories = tuple(
        tag.get("term").strip()
        for tag in raw.get("tags") or []
        if isinstance(tag, dict) and isinstance(tag.get("term"), str) and tag.get("term").strip()
    )
    return Entry(
        id=_first_text(raw, "id"),
        guid=_first_text(raw, "guid"),
        link=_first_text(raw, "link", "feedburner_origlink"),
        title=_first_text(raw, "title"),
        summary=summary,
        content_snippet=html_to_text(html_body) or None,
        categories=categories,
        published=_first_text(raw, "published", "updated", "created"),
        published_at=_to_datetime(raw),
        image_url=find_image(raw, html_body),
    )


def html_to_text(html: str | None) -> str:
    """Plain text from an HTML fragment, whitespace collapsed."""
    if not html:
        return ""
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(["script", "style", "noscript"]):
        tag.decompose()
    return _WS_RE.sub(" ", soup.get_text(separator=" ")).strip()


def find_image(raw: dict[str, Any], html_body: str | None = None) -> str | None:
    """Detect a representative image for an entry.

    Priority: media:content (image) -> media:thumbnail -> image enclosure ->
    first <img> in the HTML body.
    """
    for media in raw.get("media_content") or []:
        url = media.get("url") if isinstance(media, dict) else None
        medium = (media.get("medium") or media.get("type") or "image") if isinstance(media, dict) else ""
        if url and str(medium).startswith("image"):
            return url

    for thumb in raw.get("media_thumbnail") or []:
        if isinstance(thumb, dict) and thumb.get("url"):
            return thumb["url"]

    candidates = list(raw.get("enclosures") or [])
    candidates += [link for link in raw.get("links") or [] if isinstance(link, dict) and link.get("rel") == "enclosure"]
    for enclosure in candidates:
        if not isinstance(enclosure, dict):
            continue
        href = enclosure.get("href") or enclosure.get("url")
        if href and str(enclosure.get("type") or "").startswith("image/"):
            return href

    if html_body and "<img" in html_body:
        soup = BeautifulSoup(html_body, "html.parser")
        img = soup.find("img", src=True)
        if img is not None:
            src = str(img["src"]).strip()
            if src.startswith(("http://", "https://")):
                return src
    return None


def _first_text(raw: dict[str, Any], *keys: str) -> str | None:
    for key in keys:
        value = raw.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def _content_value(raw: dict[str, Any]) -> str | None:
    content = raw.get("content")
    if isinstance(content, list) and content:
        first = content[0]
        if isinstance(first, dict) and isinstance(first.get("value"), str):
            return first["value"]
    return None


def _to_datetime(raw: dict[str, Any]) -> datetime | None:
    """Timezone-aware UTC datetime from feedparser's *_parsed fields."""
    for key in ("published_parsed", "updated_parsed", "created_parsed"):
        val = raw.get(key)
        if isinstance(val, time.struct_time):
            try:
                return datetime.fromtimestamp(calendar.timegm(val), tz=timezone.utc)
            except (OverflowError, ValueError):
                continue
    return None
