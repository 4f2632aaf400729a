"""OpenAI-compatible Chat Completions provider for entry summaries."""

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

DEFAULT_BASE_URL = "https://api.openai.com/v1"


class OpenAICompatibleProvider(SummaryProvider):
    """Summaries through any endpoint speaking the /chat/completions API."""

    def __init__(
        self,
        cfg: ProviderConfig,
        enrich_cfg: EnrichConfig,
        api_key: str | None,
        logger: logging.Logger | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        if not api_key:
            raise ValueError("Missing OpenAI API key")
        self.cfg = cfg
        self.enrich_cfg = enrich_cfg
        self.api_key = api_key
        self.logger = logger
        self._transport = transport

    def summarize(self, entry: Entry, language: str) -> str:
        prompt = build_summary_prompt(entry, language, self.enrich_cfg.max_chars)
        payload = {
            "model": self.cfg.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            "temperature": 0.2,
        }
        try:
            data = self._post(payload)
        except (httpx.HTTPError, ValueError) as exc:
            log_event(self.logger, "LLM response", event="llm_summary", status="provider_error", error=type(exc).__name__)
            raise EnrichmentError(f"OpenAI-compatible request failed: {type(exc).__name__}") from exc

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
            raise EnrichmentError("OpenAI-compatible response contained no text")
        return content.strip()

    def _post(self, payload: dict[str, Any]) -> dict[str, Any]:
        base_url = (self.cfg.base_url or DEFAULT_BASE_URL).rstrip("/")
        headers = {"Authorization": f"Bearer {self.api_key}"}
        with httpx.Client(
            timeout=self.cfg.timeout_seconds,
            trust_env=self.cfg.trust_env,
            transport=self._transport,
        ) as client:
            resp = client.post(f"{base_url}/chat/completions", headers=headers, json=payload)
            resp.raise_for_status()
            return resp.json()


def _extract_text(data: dict[str, Any]) -> str:
    try:
        return data["choices"][0]["message"]["content"] or ""
    except (KeyError, IndexError, TypeError):
        return ""
