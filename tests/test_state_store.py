"""Tests for the GitHub Gist state store using httpx.MockTransport."""

import json

import httpx
import pytest

from feed_relay.config import StateConfig
from feed_relay.core.types import SeenState
from feed_relay.errors import StateStoreError
from feed_relay.state.gist import GistStateStore, serialize_state


def _store(handler, gist_id="abc123") -> GistStateStore:
    cfg = StateConfig(token="gh-token", gist_id=gist_id)
    return GistStateStore(cfg, transport=httpx.MockTransport(handler))


def _gist_response(content: str | None, **extra) -> dict:
    files = {}
    if content is not None:
        files["state.json"] = {"content": content, **extra}
    return {"id": "abc123", "files": files}


def test_missing_token_is_rejected():
    with pytest.raises(StateStoreError, match="Missing GitHub token"):
        GistStateStore(StateConfig(token=None))


def test_load_without_gist_id_starts_empty():
    def handler(request):
        raise AssertionError("no request expected")

    state = _store(handler, gist_id=None).load()

    assert state.size == 0


def test_load_reads_state_file():
    requests = []

    def handler(request):
        requests.append(request)
        payload = {"seen": ["id1"], "seen_links": ["https://x.com/a"], "seen_titles": ["sig"]}
        return httpx.Response(200, json=_gist_response(json.dumps(payload)))

    state = _store(handler).load()

    assert state.ids == {"id1"}
    assert state.links == {"https://x.com/a"}
    assert state.titles == {"sig"}
    assert requests[0].method == "GET"
    assert requests[0].url.path == "/gists/abc123"
    assert requests[0].headers["Authorization"] == "token gh-token"
    assert requests[0].headers["X-GitHub-Api-Version"] == "2022-11-28"


def test_load_accepts_legacy_state_with_only_ids():
    def handler(request):
        return httpx.Response(200, json=_gist_response(json.dumps({"seen": ["old"]})))

    state = _store(handler).load()

    assert state.ids == {"old"}
    assert state.links == set()


def test_load_missing_file_starts_empty():
    def handler(request):
        return httpx.Response(200, json=_gist_response(None))

    assert _store(handler).load().size == 0


def test_load_follows_raw_url_when_truncated():
    raw_url = "https://gist.githubusercontent.com/u/abc123/raw/state.json"

    def handler(request):
        if str(request.url) == raw_url:
            return httpx.Response(200, text=json.dumps({"seen": ["full"]}))
        return httpx.Response(200, json=_gist_response("{\"seen\": [", truncated=True, raw_url=raw_url))

    assert _store(handler).load().ids == {"full"}


def test_load_http_error_raises():
    def handler(request):
        return httpx.Response(404, json={"message": "Not Found"})

    with pytest.raises(StateStoreError, match="404"):
        _store(handler).load()


def test_load_transport_error_raises():
    def handler(request):
        raise httpx.ConnectError("boom", request=request)

    with pytest.raises(StateStoreError, match="ConnectError"):
        _store(handler).load()


def test_load_invalid_json_raises():
    def handler(request):
        return httpx.Response(200, json=_gist_response("not json"))

    with pytest.raises(StateStoreError, match="not valid JSON"):
        _store(handler).load()


def test_save_patches_existing_gist():
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(200, json={"id": "abc123"})

    store = _store(handler)
    state = SeenState(ids={"b", "a"})

    assert store.save(state) == "abc123"
    assert not store.created
    assert requests[0].method == "PATCH"
    assert requests[0].url.path == "/gists/abc123"
    body = json.loads(requests[0].content)
    assert body["files"]["state.json"]["content"] == serialize_state(state)


def test_save_creates_private_gist_without_id():
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(201, json={"id": "new456"})

    store = _store(handler, gist_id=None)

    assert store.save(SeenState()) == "new456"
    assert store.created
    assert store.gist_id == "new456"
    assert requests[0].method == "POST"
    assert requests[0].url.path == "/gists"
    body = json.loads(requests[0].content)
    assert body["public"] is False
    assert body["description"] == "Telegram RSS bot state"


def test_serialize_state_is_deterministic():
    text = serialize_state(SeenState(ids={"b", "a"}))

    assert json.loads(text) == {"seen": ["a", "b"], "seen_links": [], "seen_titles": []}
    assert text == serialize_state(SeenState(ids={"a", "b"}))
