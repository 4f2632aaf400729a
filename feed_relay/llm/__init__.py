"""Optional AI enrichment (short summaries) for relayed entries."""

from .prompts import build_summary_prompt
from .providers import (
    GeminiProvider,
    OpenAICompatibleProvider,
    SummaryProvider,
    available_providers,
    create_provider,
)

__all__ = [
    "SummaryProvider",
    "GeminiProvider",
    "OpenAICompatibleProvider",
    "available_providers",
    "build_summary_prompt",
    "create_provider",
]
