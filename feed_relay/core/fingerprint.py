"""
Entry fingerprinting for cross-run deduplication.

Three independent keys are computed per entry:
1. content_id: SHA-256 over the feed-provided id (or link|title|date)
2. normalized_link: canonical article URL
3. title_signature: SHA-256 over a sorted bag of significant title tokens

An entry is a duplicate if ANY key was seen before; see SeenState.is_duplicate.
"""

from __future__ import annotations

import hashlib
import re

from .normalize import normalize_for_match, normalize_url
from .types import Entry, Fingerprint

MAX_SIGNATURE_TOKENS = 12

# English + Hungarian, stored in normalize_for_match() form.
# Tokens of two characters or fewer are dropped before this check.
STOP_WORDS = frozenset(
    {
        # English
        "the", "and", "for", "with", "from", "that", "this", "these", "those",
        "are", "was", "were", "has", "have", "had", "will", "would", "can",
        "its", "into", "over", "after", "before", "about", "than", "then",
        "not", "but", "you", "your", "our", "out", "who", "what", "when",
        "where", "why", "how", "all", "any", "new", "more", "most", "says",
        "said", "via", "per", "amid", "also", "just", "been", "being",
        # Hungarian
        "egy", "hogy", "nem", "meg", "van", "volt", "lesz",
        "mar", "mint", "csak", "vagy", "ami", "aki", "ahol", "amely",
        "amikor", "utan", "elott", "kozott", "szerint", "miatt", "alatt",
        "felett", "ezt", "azt", "ezek", "azok", "ebben", "abban", "itt",
        "ott", "mert", "sem", "lett", "lehet", "kell", "fel", "majd",
        "igen", "mely", "ugy", "sok", "nagy", "ujabb",
        "mindig", "soha", "nincs", "vannak", "voltak", "lesznek",
    }
)

_NON_ALNUM_RE = re.compile(r"[\W_]+")


def sha256_hex(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def content_id(entry: Entry) -> str:
    """Stable id for an entry across runs and re-fetches.

    Prefers the feed's id/guid; otherwise hashes ``link|title|date``.
    """
    key = entry.id or entry.guid
    if not key:
        key = f"{entry.link or ''}|{entry.title or ''}|{entry.published or ''}"
    return sha256_hex(key)


def title_tokens(title: str | None) -> list[str]:
    """Significant title tokens in title order (before sorting)."""
    cleaned = _NON_ALNUM_RE.sub(" ", normalize_for_match(title))
    tokens = [
        token
        for token in cleaned.split()
        if len(token) > 2 and token not in STOP_WORDS
    ]
    return tokens[:MAX_SIGNATURE_TOKENS]


def title_signature(title: str | None) -> str:
    """Order-independent hash of a title's significant tokens.

    "Big Storm Hits City" and "City Hits Big Storm" share a signature.
    Titles with no significant token return "" and must not be used as a
    dedup key.
    """
    tokens = title_tokens(title)
    if not tokens:
        return ""
    return sha256_hex(" ".join(sorted(tokens)))


def fingerprint(entry: Entry) -> Fingerprint:
    return Fingerprint(
        content_id=content_id(entry),
        normalized_link=normalize_url(entry.link),
        title_signature=title_signature(entry.title),
    )
