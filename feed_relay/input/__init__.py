"""
Input sources.

This package reads the keyword and feed list files and builds the
Google News search feeds derived from keywords.
"""

from .lists import load_terms, parse_feed_list, read_feed_list, read_list_file
from .search_feeds import build_feed_sources, build_search_feed_url, is_search_feed_url

__all__ = [
    "build_feed_sources",
    "build_search_feed_url",
    "is_search_feed_url",
    "load_terms",
    "parse_feed_list",
    "read_feed_list",
    "read_list_file",
]
