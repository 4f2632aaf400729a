"""
SeenState persistence in a GitHub Gist.

The gist holds a single JSON file (``state.json`` by default) with three
sorted arrays: ``seen``, ``seen_links`` and ``seen_titles``. State is read
once at the start of a run and written once at the end.

Without a gist id the store runs in ephemeral mode: load() returns empty
state and save() creates a new private gist whose id must be configured by
the operator for later runs.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from ..config import StateConfig
from ..core.types import SeenState
from ..errors import StateStoreError

logger = logging.getLogger(__name__)


class GistStateStore:
    """Load and save SeenState through the GitHub Gist REST API."""

    def __init__(self, cfg: StateConfig, transport: httpx.BaseTransport | None = None):
        if not cfg.token:
            raise StateStoreError("Missing GitHub token for the gist state store")
        self.cfg = cfg
        self.gist_id = (cfg.gist_id or "").strip() or None
        self.created = False
        self._transport = transport

    def load(self) -> SeenState:
        """Fetch state from the gist.

        Returns empty state when no gist is configured or the gist has no
        state file yet.

        Raises:
            StateStoreError: On transport failure, non-success status or invalid JSON
        """
        if not self.gist_id:
            logger.info("No gist id configured; starting with empty state")
            return SeenState()

        data = self._request("GET", f"/gists/{self.gist_id}")
        file_info = (data.get("files") or {}).get(self.cfg.filename)
        if not file_info:
            logger.info(f"Gist {self.gist_id} has no {self.cfg.filename}; starting with empty state")
            return SeenState()

        content = file_info.get("content")
        if file_info.get("truncated") and file_info.get("raw_url"):
            content = self._fetch_raw(file_info["raw_url"])
        if not content:
            return SeenState()

        try:
            payload = json.loads(content)
        except json.JSONDecodeError as exc:
            raise StateStoreError(f"State file {self.cfg.filename} is not valid JSON: {exc}") from exc
        if not isinstance(payload, dict):
            raise StateStoreError(f"State file {self.cfg.filename} must contain a JSON object")
        return SeenState.from_payload(payload)

    def save(self, state: SeenState) -> str:
        """Write state to the gist, creating the gist if none is configured.

        Returns:
            The gist id that now holds the state

        Raises:
            StateStoreError: On transport failure or non-success status
        """
        files = {self.cfg.filename: {"content": serialize_state(state)}}
        if self.gist_id:
            self._request("PATCH", f"/gists/{self.gist_id}", {"files": files})
            return self.gist_id

        created = self._request(
            "POST",
            "/gists",
            {"files": files, "description": self.cfg.description, "public": False},
        )
        gist_id = created.get("id")
        if not gist_id:
            raise StateStoreError("Gist creation response did not include an id")
        self.gist_id = str(gist_id)
        self.created = True
        logger.info(f"Created gist with id: {self.gist_id}")
        return self.gist_id

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"token {self.cfg.token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }

    def _client(self) -> httpx.Client:
        return httpx.Client(
            base_url=self.cfg.api_base,
            timeout=self.cfg.timeout_seconds,
            headers=self._headers(),
            transport=self._transport,
        )

    def _request(self, method: str, path: str, body: dict[str, Any] | None = None) -> dict[str, Any]:
        try:
            with self._client() as client:
                resp = client.request(method, path, json=body)
        except httpx.HTTPError as exc:
            raise StateStoreError(f"Gist {method} failed: {type(exc).__name__}: {exc}") from exc
        if not resp.is_success:
            raise StateStoreError(f"Gist {method} failed: {resp.status_code} {resp.reason_phrase}")
        try:
            data = resp.json()
        except ValueError as exc:
            raise StateStoreError(f"Gist {method} returned a non-JSON body") from exc
        return data if isinstance(data, dict) else {}

    def _fetch_raw(self, raw_url: str) -> str:
        try:
            with self._client() as client:
                resp = client.get(raw_url)
        except httpx.HTTPError as exc:
            raise StateStoreError(f"Gist raw GET failed: {type(exc).__name__}: {exc}") from exc
        if not resp.is_success:
            raise StateStoreError(f"Gist raw GET failed: {resp.status_code} {resp.reason_phrase}")
        return resp.text


def serialize_state(state: SeenState) -> str:
    """Deterministic JSON for the state file (sorted arrays, 2-space indent)."""
    return json.dumps(state.to_payload(), indent=2, ensure_ascii=False)
