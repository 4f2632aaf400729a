"""Abstract interface for AI summary providers."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ...core.types import Entry


class SummaryProvider(ABC):
    """Provider interface for short per-entry summaries."""

    @abstractmethod
    def summarize(self, entry: Entry, language: str) -> str:
        """Return a short summary of the entry.

        Raises:
            EnrichmentError: If the provider call fails
        """
        raise NotImplementedError
