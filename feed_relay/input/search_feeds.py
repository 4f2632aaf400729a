"""Google News search feeds built from the include keyword list."""

from __future__ import annotations

from urllib.parse import urlencode, urlsplit

from ..config import SearchConfig

GOOGLE_NEWS_HOST = "news.google.com"
GOOGLE_NEWS_SEARCH_PATH = "/rss/search"


def build_search_query(keyword: str, cfg: SearchConfig) -> str:
    """Quoted keyword plus optional recency window and extra terms."""
    parts = [f'"{keyword.strip()}"']
    if cfg.when:
        parts.append(f"when:{cfg.when.strip()}")
    if cfg.extra_terms:
        parts.append(cfg.extra_terms.strip())
    return " ".join(parts)


def build_search_feed_url(keyword: str, cfg: SearchConfig) -> str:
    params = {
        "q": build_search_query(keyword, cfg),
        "hl": cfg.hl,
        "gl": cfg.gl,
        "ceid": cfg.ceid,
    }
    return f"{cfg.base_url}?{urlencode(params)}"


def is_search_feed_url(url: str) -> bool:
    try:
        parts = urlsplit(url.strip())
    except ValueError:
        return False
    host = (parts.hostname or "").lower()
    return host == GOOGLE_NEWS_HOST and parts.path.rstrip("/") == GOOGLE_NEWS_SEARCH_PATH


def build_feed_sources(
    keywords: list[str],
    static_feeds: list[str],
    cfg: SearchConfig,
) -> list[str]:
    """Merge generated search feeds (first) with the static feed list.

    When generation is enabled, static entries that are already Google News
    search URLs are dropped so they are not fetched twice. Raw (not
    normalized) keywords are used so queries keep their accents.
    """
    if not cfg.enabled:
        return list(static_feeds)

    generated: list[str] = []
    for keyword in keywords:
        if not keyword.strip():
            continue
        url = build_search_feed_url(keyword, cfg)
        if url not in generated:
            generated.append(url)

    static = [url for url in static_feeds if not is_search_feed_url(url)]
    return generated + static
