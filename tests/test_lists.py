"""Tests for keyword and feed list files."""

from pathlib import Path

from feed_relay.input.lists import load_terms, parse_feed_list, read_feed_list, read_list_file


def test_parse_feed_list_skips_comments_and_blanks():
    text = "# news\n\nhttps://a.example/rss  # trailing\n   https://b.example/feed\n#https://c.example/rss\n"

    assert parse_feed_list(text) == ["https://a.example/rss", "https://b.example/feed"]


def test_parse_feed_list_keeps_url_fragment():
    assert parse_feed_list("https://a.example/rss#section") == ["https://a.example/rss#section"]


def test_read_feed_list_missing_file(tmp_path: Path):
    assert read_feed_list(tmp_path / "feeds.txt") == []


def test_read_list_file(tmp_path: Path):
    path = tmp_path / "keywords.txt"
    path.write_text("Klíma\n\n  árvíz  \n", encoding="utf-8")

    assert read_list_file(path) == ["Klíma", "árvíz"]


def test_load_terms_prefers_file_over_fallback(tmp_path: Path):
    path = tmp_path / "keywords.txt"
    path.write_text("storm\n", encoding="utf-8")

    assert load_terms(path, ["env"]) == ["storm"]
    assert load_terms(tmp_path / "missing.txt", ["env"]) == ["env"]
