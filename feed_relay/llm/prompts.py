"""Prompt builders for the summary providers."""

from __future__ import annotations

from ..core.types import Entry

SYSTEM_PROMPT = (
    "You are a concise news summarizer. Return a single short paragraph "
    "(at most two sentences). No preface, no title, no bullets, no opinions."
)


def build_summary_prompt(entry: Entry, language: str, max_chars: int) -> str:
    snippet = (entry.snippet or "")[:max_chars]
    return (
        f"Summarize the following news item in {language}.\n"
        f"Title: {entry.title or ''}\n"
        f"Categories: {', '.join(entry.categories)}\n"
        f"Text: {snippet}\n"
        f"Link: {entry.link or ''}"
    )
