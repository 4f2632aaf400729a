"""
Telegram message rendering.

Messages use Telegram's HTML parse mode and are rendered from
``templates/message.html`` with Jinja2 autoescaping, so titles and
snippets never break the markup.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
import re

from jinja2 import Environment, FileSystemLoader, select_autoescape

from ..core.normalize import to_hashtag
from ..core.types import Entry

SNIPPET_MAX_CHARS = 300
ENRICHMENT_MAX_CHARS = 1500
DEFAULT_TITLE = "New entry"

_WS_RE = re.compile(r"\s+")


@lru_cache(maxsize=1)
def _environment() -> Environment:
    return Environment(
        loader=FileSystemLoader(str(Path(__file__).parent / "templates")),
        autoescape=select_autoescape(["html"]),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=False,
    )


def shorten(text: str, limit: int) -> str:
    """Collapse whitespace and cut to limit characters with a "..." tail."""
    cleaned = _WS_RE.sub(" ", text or "").strip()
    if len(cleaned) > limit:
        return cleaned[: limit - 3] + "..."
    return cleaned


def hashtags_for(terms: tuple[str, ...] | list[str]) -> list[str]:
    tags: list[str] = []
    for term in terms:
        tag = to_hashtag(term)
        if tag and tag not in tags:
            tags.append(tag)
    return tags


def render_message(
    feed_title: str,
    entry: Entry,
    matched_terms: tuple[str, ...] | list[str] = (),
    enrichment: str = "",
) -> str:
    """Render the Telegram HTML message for one entry."""
    template = _environment().get_template("message.html")
    text = template.render(
        title=entry.title or DEFAULT_TITLE,
        feed_title=feed_title,
        snippet=shorten(entry.snippet, SNIPPET_MAX_CHARS),
        enrichment=shorten(enrichment, ENRICHMENT_MAX_CHARS),
        link=entry.link or "",
        hashtags=hashtags_for(matched_terms),
    )
    return text.strip()


def fits_caption(text: str, limit: int = 1024) -> bool:
    return len(text) <= limit
