"""
Pure text and URL transforms used for matching and deduplication.

Nothing in this module raises on bad input: malformed URLs normalize to an
empty string, which callers treat as "no signal".
"""

from __future__ import annotations

import re
import unicodedata
from urllib.parse import parse_qsl, urlencode, urlsplit

TRACKING_PARAMS = frozenset(
    {
        "utm_source",
        "utm_medium",
        "utm_campaign",
        "utm_term",
        "utm_content",
        "utm_id",
        "gclid",
        "fbclid",
        "mc_cid",
        "mc_eid",
        "ref",
    }
)

_NON_ALNUM_RE = re.compile(r"[\W_]+")
_TRAILING_PATH_RE = re.compile(r"[\s/]+$")


def normalize_for_match(text: str | None) -> str:
    """Lowercase and strip diacritics ("Árvíztűrő" -> "arvizturo").

    Uses Unicode canonical decomposition only, so the result does not depend
    on the platform locale.
    """
    if not text:
        return ""
    decomposed = unicodedata.normalize("NFD", text.lower())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize_url(url: str | None) -> str:
    """Canonicalize a URL for link-based deduplication.

    Drops the fragment and known tracking parameters, lowercases the host and
    trims trailing slashes and whitespace from the path. Remaining query parameters keep
    their original relative order.

    Returns:
        The canonical URL, or "" if the URL is absent or cannot be parsed
    """
    if not url or not url.strip():
        return ""
    try:
        parts = urlsplit(url.strip())
        host = parts.hostname or ""
        port = parts.port
    except ValueError:
        return ""
    if not parts.scheme or not host:
        return ""

    if ":" in host:
        host = f"[{host}]"
    if port is not None:
        host = f"{host}:{port}"

    path = _TRAILING_PATH_RE.sub("", parts.path)
    kept = [
        (name, value)
        for name, value in parse_qsl(parts.query, keep_blank_values=True)
        if name.lower() not in TRACKING_PARAMS
    ]
    query = urlencode(kept)

    result = f"{parts.scheme.lower()}://{host}{path}"
    if query:
        result = f"{result}?{query}"
    return result


def host_from_url(url: str | None) -> str:
    """Return the hostname without a leading "www.", or "" on failure."""
    if not url:
        return ""
    try:
        host = urlsplit(url.strip()).hostname or ""
    except ValueError:
        return ""
    if host.startswith("www."):
        host = host[4:]
    return host


def to_hashtag(term: str | None) -> str:
    """Derive a Telegram hashtag from a keyword ("Klíma válság" -> "#klimavalsag")."""
    tag = _NON_ALNUM_RE.sub("", normalize_for_match(term))
    return f"#{tag}" if tag else ""
