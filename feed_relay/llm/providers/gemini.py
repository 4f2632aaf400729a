"""Google Gemini provider for entry summaries."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ...config import EnrichConfig, ProviderConfig
from ...core.types import Entry
from ...errors import EnrichmentError
from ...utils.logging import log_event, truncate_text
from ..prompts import SYSTEM_PROMPT, build_summary_prompt
from .base import SummaryProvider

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com"


class GeminiProvider(SummaryProvider):
    """Gemini-backed provider using the generateContent REST endpoint."""

    def __init__(
        self,
        cfg: ProviderConfig,
        enrich_cfg: EnrichConfig,
        api_key: str | None,
        logger: logging.Logger | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        if not api_key:
            raise ValueError("Missing Google API key")
        self.cfg = cfg
        self.enrich_cfg = enrich_cfg
        self.api_key = api_key
        self.logger = logger
        self._transport = transport

    def summarize(self, entry: Entry, language: str) -> str:
        prompt = build_summary_prompt(entry, language, self.enrich_cfg.max_chars)
        payload = {
            "systemInstruction": {"parts": [{"text": SYSTEM_PROMPT}]},
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {"temperature": 0.2, "maxOutputTokens": 256},
        }
        try:
            data = self._post(payload)
        except (httpx.HTTPError, ValueError) as exc:
            log_event(self.logger, "LLM response", event="llm_summary", status="provider_error", error=type(exc).__name__)
            raise EnrichmentError(f"Gemini request failed: {type(exc).__name__}") from exc

        content = _extract_text(data)
        log_event(
            self.logger,
            "LLM response",
            event="llm_summary",
            status="ok" if content else "empty",
            model=self.cfg.model,
            raw_response=truncate_text(content, 2000),
        )
        if not content:
            raise EnrichmentError("Gemini response contained no text")
        return content.strip()

    def _post(self, payload: dict[str, Any]) -> dict[str, Any]:
        base_url = (self.cfg.base_url or DEFAULT_BASE_URL).rstrip("/")
        url = f"{base_url}/v1beta/models/{self.cfg.model}:generateContent"
        params = {"key": self.api_key}
        with httpx.Client(
            timeout=self.cfg.timeout_seconds,
            trust_env=self.cfg.trust_env,
            transport=self._transport,
        ) as client:
            resp = client.post(url, params=params, json=payload)
            resp.raise_for_status()
            return resp.json()


def _extract_text(data: dict[str, Any]) -> str:
    """Join the text parts of the first candidate, skipping thought parts.

    Falls back to all text parts when the model only returned thoughts.
    """
    try:
        parts = data["candidates"][0]["content"]["parts"]
    except (KeyError, IndexError, TypeError):
        return ""
    texts = [p.get("text", "") for p in parts if isinstance(p, dict) and not p.get("thought")]
    if not any(texts):
        texts = [p.get("text", "") for p in parts if isinstance(p, dict)]
    return "".join(texts)
