"""Readers for the plain-text keyword and feed list files."""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def read_list_file(path: str | Path) -> list[str]:
    """Read one term per line, ignoring blank lines.

    A missing file is not an error: it yields an empty list so the caller can
    fall back to environment configuration.
    """
    file_path = Path(path)
    if not file_path.is_file():
        logger.debug(f"List file not found: {file_path}")
        return []
    text = file_path.read_text(encoding="utf-8")
    return [line.strip() for line in text.splitlines() if line.strip()]


def load_terms(path: str | Path, fallback: list[str]) -> list[str]:
    """Terms from the file, or the fallback list when the file gives none."""
    terms = read_list_file(path)
    return terms if terms else list(fallback)


def parse_feed_list(text: str) -> list[str]:
    """Parse a feed list: one URL per line, "#" comments and blank lines ignored.

    Comments may be full-line or trailing ("https://a.example/rss  # news").
    A "#" directly inside a URL (fragment) is kept.
    """
    feeds: list[str] = []
    for line in text.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        url = stripped.split(" #", 1)[0].split("\t#", 1)[0].strip()
        if url:
            feeds.append(url)
    return feeds


def read_feed_list(path: str | Path) -> list[str]:
    """Read the feed list file; a missing file yields no feeds."""
    file_path = Path(path)
    if not file_path.is_file():
        logger.warning(f"Feed list not found: {file_path}")
        return []
    return parse_feed_list(file_path.read_text(encoding="utf-8"))
