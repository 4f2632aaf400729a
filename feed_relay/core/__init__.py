"""
Core domain models and matching logic.

This package contains the pure parts of the relay: data types, text/URL
normalization, fingerprinting and keyword matching. Nothing here performs I/O.
"""

from .fingerprint import content_id, fingerprint, title_signature
from .keywords import build_rules, match_entry
from .normalize import host_from_url, normalize_for_match, normalize_url, to_hashtag
from .types import (
    Entry,
    Fingerprint,
    KeywordRules,
    MatchResult,
    ParsedFeed,
    RunStats,
    SeenState,
)

__all__ = [
    "Entry",
    "Fingerprint",
    "KeywordRules",
    "MatchResult",
    "ParsedFeed",
    "RunStats",
    "SeenState",
    "build_rules",
    "content_id",
    "fingerprint",
    "host_from_url",
    "match_entry",
    "normalize_for_match",
    "normalize_url",
    "title_signature",
    "to_hashtag",
]
