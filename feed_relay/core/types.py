"""
Core data types for the feed relay.

This module defines the data structures shared across the pipeline:
- Entry: one item read from a parsed feed
- ParsedFeed: a fetched feed with its entries
- Fingerprint: the three dedup keys derived from an entry
- SeenState: previously delivered fingerprints, persisted between runs
- KeywordRules / MatchResult: keyword filter input and verdict
- RunStats: per-run counters reported at the end of a run
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class Entry:
    """Represents one item from a parsed RSS/Atom feed.

    All fields are optional because feeds routinely omit them. The entry is
    never mutated after it is read.

    Attributes:
        id: Entry id as reported by the feed parser
        guid: RSS guid when it differs from id
        link: Article URL
        title: Headline
        summary: Raw summary/description (may contain HTML)
        content_snippet: Plain-text snippet derived from the summary
        categories: Category/tag terms in feed order
        published: Raw date string used for identity fallback
        published_at: Parsed publication time (UTC) if available
        image_url: Representative image detected in the entry
    """

    id: str | None = None
    guid: str | None = None
    link: str | None = None
    title: str | None = None
    summary: str | None = None
    content_snippet: str | None = None
    categories: tuple[str, ...] = ()
    published: str | None = None
    published_at: datetime | None = None
    image_url: str | None = None

    @property
    def snippet(self) -> str:
        return self.content_snippet or self.summary or ""


@dataclass
class ParsedFeed:
    """A fetched feed.

    Attributes:
        url: The feed URL that was fetched
        title: Feed title, falls back to the URL
        entries: Entries in document order (usually newest first)
    """

    url: str
    title: str
    entries: list[Entry] = field(default_factory=list)


@dataclass(frozen=True)
class Fingerprint:
    """Three independent identity signals for an entry.

    Empty normalized_link or title_signature means "no signal" and is never
    matched or stored.
    """

    content_id: str
    normalized_link: str
    title_signature: str


@dataclass
class SeenState:
    """Fingerprints of entries that were already delivered.

    The sets only ever grow. Serialization sorts them so the stored blob
    diffs cleanly between runs.
    """

    ids: set[str] = field(default_factory=set)
    links: set[str] = field(default_factory=set)
    titles: set[str] = field(default_factory=set)

    def is_duplicate(self, fp: Fingerprint) -> bool:
        if fp.content_id in self.ids:
            return True
        if fp.normalized_link and fp.normalized_link in self.links:
            return True
        if fp.title_signature and fp.title_signature in self.titles:
            return True
        return False

    def remember(self, fp: Fingerprint) -> None:
        self.ids.add(fp.content_id)
        if fp.normalized_link:
            self.links.add(fp.normalized_link)
        if fp.title_signature:
            self.titles.add(fp.title_signature)

    def to_payload(self) -> dict[str, list[str]]:
        return {
            "seen": sorted(self.ids),
            "seen_links": sorted(self.links),
            "seen_titles": sorted(self.titles),
        }

    @classmethod
    def from_payload(cls, data: dict[str, Any] | None) -> "SeenState":
        """Rebuild state from a stored JSON object.

        Missing arrays load as empty sets so state written before link/title
        tracking existed (only ``seen``) still works.
        """
        data = data or {}
        return cls(
            ids=_string_set(data.get("seen")),
            links=_string_set(data.get("seen_links")),
            titles=_string_set(data.get("seen_titles")),
        )

    @property
    def size(self) -> int:
        """Number of remembered content ids."""
        return len(self.ids)


def _string_set(value: Any) -> set[str]:
    if not isinstance(value, list):
        return set()
    return {item for item in value if isinstance(item, str) and item}


@dataclass(frozen=True)
class KeywordRules:
    """Include/exclude terms in normalized form.

    Attributes:
        include: (normalized, original) pairs; original is used for display
        exclude: Normalized exclude terms
        mode: "substring" (plain containment) or "word" (bounded matches)
    """

    include: tuple[tuple[str, str], ...] = ()
    exclude: tuple[str, ...] = ()
    mode: str = "substring"


@dataclass(frozen=True)
class MatchResult:
    """Keyword verdict for one entry.

    Attributes:
        excluded_by: The exclude term that hit, or None
        matched_terms: Include terms that matched, in their original form
        include_required: Whether the rule set had include terms at all
    """

    excluded_by: str | None = None
    matched_terms: tuple[str, ...] = ()
    include_required: bool = False

    @property
    def excluded(self) -> bool:
        return self.excluded_by is not None

    @property
    def accepted(self) -> bool:
        if self.excluded:
            return False
        if self.include_required:
            return bool(self.matched_terms)
        return True


@dataclass
class RunStats:
    """Counters collected during one relay run.

    Duplicates are skipped silently and have no counter.

    Attributes:
        sent: Messages delivered
        excluded: Entries rejected by an exclude term
        filtered: Entries that matched no include term
        failed: Deliveries that failed (left unmarked for the next run)
        feed_errors: Feeds that could not be fetched or parsed
        enriched: Entries that received an AI summary
    """

    sent: int = 0
    excluded: int = 0
    filtered: int = 0
    failed: int = 0
    feed_errors: int = 0
    enriched: int = 0
