"""Tests for logging setup and structured file output."""

import json
import logging
from pathlib import Path

from feed_relay.config import LoggingConfig
from feed_relay.utils.logging import JsonlFormatter, log_event, setup_logging, truncate_text


def test_setup_logging_writes_jsonl(tmp_path: Path):
    log_path = tmp_path / "logs" / "relay.jsonl"
    cfg = LoggingConfig(console=False, file=True, filename=str(log_path))
    logger = setup_logging(cfg)
    try:
        log_event(logger, "Sent: hello", event="delivered", link="https://x.com/a")
        log_event(logger, "hidden", logging.DEBUG, event="entry_duplicate")
    finally:
        for handler in logger.handlers:
            handler.close()

    lines = log_path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 1
    record = json.loads(lines[0])
    assert record["message"] == "Sent: hello"
    assert record["event"] == "delivered"
    assert record["link"] == "https://x.com/a"
    assert record["level"] == "INFO"


def test_debug_flag_forces_debug_level():
    logger = setup_logging(LoggingConfig(level="WARNING", debug=True, console=False))

    assert logger.level == logging.DEBUG


def test_jsonl_formatter_skips_reserved_fields():
    record = logging.LogRecord("feed_relay", logging.INFO, __file__, 1, "msg", None, None)
    record.feed = "https://x.com/rss"

    payload = json.loads(JsonlFormatter().format(record))

    assert payload["feed"] == "https://x.com/rss"
    assert "lineno" not in payload


def test_log_event_without_logger_is_noop():
    log_event(None, "ignored", event="x")


def test_truncate_text():
    assert truncate_text("abc", 5) == "abc"
    assert truncate_text("abcdef", 3) == "abc...(truncated)"
