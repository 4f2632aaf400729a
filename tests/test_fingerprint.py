"""Tests for entry fingerprints used in cross-run deduplication."""

from feed_relay.core.fingerprint import (
    MAX_SIGNATURE_TOKENS,
    content_id,
    fingerprint,
    sha256_hex,
    title_signature,
    title_tokens,
)
from feed_relay.core.types import Entry


def test_title_signature_ignores_token_order():
    assert title_signature("Big Storm Hits City") == title_signature("City Hits Big Storm")
    assert title_signature("Big Storm Hits City") != title_signature("Big Storm Hits Town")


def test_title_signature_ignores_case_diacritics_and_punctuation():
    assert title_signature("Árvíz: Budapesten!") == title_signature("arviz budapesten")


def test_title_signature_empty_without_significant_tokens():
    assert title_signature(None) == ""
    assert title_signature("A") == ""
    assert title_signature("The and for: is it?") == ""


def test_title_tokens_drop_short_and_stop_words():
    assert title_tokens("The storm is over the city") == ["storm", "city"]


def test_title_signature_uses_first_significant_tokens_only():
    words = [f"word{i:02d}" for i in range(MAX_SIGNATURE_TOKENS)]
    base = " ".join(words)

    assert title_signature(base + " tail1 tail2") == title_signature(base + " other1")


def test_content_id_prefers_feed_id():
    assert content_id(Entry(id="abc", guid="g", link="https://x.com")) == sha256_hex("abc")
    assert content_id(Entry(guid="g", link="https://x.com")) == sha256_hex("g")


def test_content_id_falls_back_to_link_title_date():
    entry = Entry(link="https://x.com/a", title="Title", published="Mon, 06 Jan 2025")

    assert content_id(entry) == sha256_hex("https://x.com/a|Title|Mon, 06 Jan 2025")
    assert content_id(Entry()) == sha256_hex("||")


def test_fingerprint_combines_all_signals():
    fp = fingerprint(Entry(id="1", link="https://X.com/a/?utm_source=t", title="Big Storm Hits City"))

    assert fp.content_id == sha256_hex("1")
    assert fp.normalized_link == "https://x.com/a"
    assert fp.title_signature == title_signature("City Hits Big Storm")
