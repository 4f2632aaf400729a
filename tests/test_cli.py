"""Tests for the Typer command-line interface."""

from typer.testing import CliRunner

from feed_relay import cli
from feed_relay.core.types import RunStats
from feed_relay.runner import RunResult

runner = CliRunner()

_ENV_NAMES = ("TELEGRAM_BOT_TOKEN", "TELEGRAM_CHANNEL_ID", "GIST_TOKEN", "GIST_ID")


def test_missing_credentials_exit_with_error(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for name in _ENV_NAMES:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(cli, "load_dotenv", lambda: False)

    result = runner.invoke(cli.app, ["run"])

    assert result.exit_code == 1
    assert "TELEGRAM_BOT_TOKEN" in result.output


def test_successful_run_prints_summary_and_new_gist_id(monkeypatch, tmp_path):
    captured = {}

    def fake_run_relay(cfg):
        captured["cfg"] = cfg
        return RunResult(stats=RunStats(sent=2, excluded=1, filtered=3), gist_id="g-new", gist_created=True)

    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(cli, "load_dotenv", lambda: False)
    monkeypatch.setattr(cli, "run_relay", fake_run_relay)

    result = runner.invoke(cli.app, ["run", "--max-items", "3", "--send-delay-ms", "0", "--debug"])

    assert result.exit_code == 0
    assert "Done. sent=2 excluded=1 filtered=3" in result.output
    assert "GIST_ID=g-new" in result.output
    cfg = captured["cfg"]
    assert cfg.feeds.max_items_per_feed == 3
    assert cfg.feeds.send_delay_ms == 0
    assert cfg.logging.debug is True


def test_existing_gist_id_is_not_printed(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(cli, "load_dotenv", lambda: False)
    monkeypatch.setattr(cli, "run_relay", lambda cfg: RunResult(gist_id="g-old", gist_created=False))

    result = runner.invoke(cli.app, ["run"])

    assert result.exit_code == 0
    assert "GIST_ID" not in result.output
