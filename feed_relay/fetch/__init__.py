"""
Feed fetching and parsing.

This package downloads RSS/Atom feeds over httpx and converts feedparser
entries into Entry objects.
"""

from .fetcher import FetchResult, entry_from_raw, fetch_feed, fetch_url, find_image, html_to_text, parse_feed

__all__ = [
    "FetchResult",
    "entry_from_raw",
    "fetch_feed",
    "fetch_url",
    "find_image",
    "html_to_text",
    "parse_feed",
]
