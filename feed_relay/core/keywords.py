"""
Keyword include/exclude filtering on diacritic-insensitive text.

Matching runs on normalize_for_match() output of the entry's title, snippet,
categories and link joined together. Exclude terms are checked first and
always win over include terms.

In the default "substring" mode a term matches anywhere, including inside a
longer word ("art" matches "party"). This over-match is accepted; the
"word" mode requires the term to be bounded by non-alphanumeric characters.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Iterable

from .normalize import normalize_for_match
from .types import Entry, KeywordRules, MatchResult

MATCH_MODES = ("substring", "word")


def build_rules(
    include: Iterable[str],
    exclude: Iterable[str],
    mode: str = "substring",
) -> KeywordRules:
    """Normalize raw keyword lists into a KeywordRules value.

    Include terms keep their first original spelling for display. Terms that
    normalize to nothing are dropped, as are duplicates.

    Raises:
        ValueError: If mode is not a supported match mode
    """
    if mode not in MATCH_MODES:
        raise ValueError(f"Unsupported keyword match mode: {mode}. Use one of: {', '.join(MATCH_MODES)}")

    include_pairs: dict[str, str] = {}
    for term in include:
        original = term.strip()
        key = normalize_for_match(original)
        if key and key not in include_pairs:
            include_pairs[key] = original

    exclude_terms: list[str] = []
    for term in exclude:
        key = normalize_for_match(term.strip())
        if key and key not in exclude_terms:
            exclude_terms.append(key)

    return KeywordRules(
        include=tuple(include_pairs.items()),
        exclude=tuple(exclude_terms),
        mode=mode,
    )


def entry_haystack(entry: Entry) -> str:
    parts = [
        entry.title or "",
        entry.snippet,
        " ".join(entry.categories),
        entry.link or "",
    ]
    return normalize_for_match(" ".join(parts))


def match_entry(entry: Entry, rules: KeywordRules) -> MatchResult:
    """Evaluate keyword rules against one entry."""
    return match_text(entry_haystack(entry), rules)


def match_text(haystack: str, rules: KeywordRules) -> MatchResult:
    """Evaluate keyword rules against already-normalized text."""
    for term in rules.exclude:
        if _contains(haystack, term, rules.mode):
            return MatchResult(excluded_by=term, include_required=bool(rules.include))

    matched = tuple(
        original
        for normalized, original in rules.include
        if _contains(haystack, normalized, rules.mode)
    )
    return MatchResult(matched_terms=matched, include_required=bool(rules.include))


def _contains(haystack: str, term: str, mode: str) -> bool:
    if mode == "word":
        return _word_pattern(term).search(haystack) is not None
    return term in haystack


@lru_cache(maxsize=512)
def _word_pattern(term: str) -> re.Pattern[str]:
    return re.compile(rf"(?<!\w){re.escape(term)}(?!\w)")
