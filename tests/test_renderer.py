"""Tests for Telegram message rendering."""

from feed_relay.core.types import Entry
from feed_relay.output.renderer import (
    DEFAULT_TITLE,
    SNIPPET_MAX_CHARS,
    fits_caption,
    hashtags_for,
    render_message,
    shorten,
)


def test_render_message_layout():
    entry = Entry(title="T", summary="S", link="https://x.com/a")

    text = render_message("F", entry, ("X",))

    assert text == "📰 <b>T</b>\n<i>F</i>\n\nS\n\nhttps://x.com/a\n\n#x"


def test_render_message_escapes_html():
    entry = Entry(title="A & B <script>", link="https://x.com/?a=1&b=2")

    text = render_message("Feed <One>", entry)

    assert "<b>A &amp; B &lt;script&gt;</b>" in text
    assert "<i>Feed &lt;One&gt;</i>" in text
    assert "https://x.com/?a=1&amp;b=2" in text
    assert "<script>" not in text


def test_render_message_with_enrichment_and_fallback_title():
    text = render_message("F", Entry(link="https://x.com/a"), (), enrichment="Short summary.")

    assert text.startswith(f"📰 <b>{DEFAULT_TITLE}</b>")
    assert "🤖 Short summary." in text
    assert "#" not in text


def test_snippet_is_truncated():
    text = render_message("F", Entry(title="T", content_snippet="a" * 1000))

    assert ("a" * (SNIPPET_MAX_CHARS - 3)) + "..." in text
    assert "a" * (SNIPPET_MAX_CHARS - 2) not in text


def test_shorten_collapses_whitespace():
    assert shorten("  a \n\n b  ", 10) == "a b"
    assert shorten("abcdefghij", 6) == "abc..."


def test_hashtags_dedupe_after_normalization():
    assert hashtags_for(("Klíma", "klima", "Árvíz")) == ["#klima", "#arviz"]


def test_fits_caption():
    assert fits_caption("x" * 1024)
    assert not fits_caption("x" * 1025)
