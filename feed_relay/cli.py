"""
Command-line interface for the feed relay.

Uses Typer to provide a CLI that runs one relay pass. Configuration comes
from an optional YAML file and environment variables; a .env file in the
working directory is loaded first.
"""

from __future__ import annotations

from pathlib import Path

from dotenv import load_dotenv
import typer
from rich.console import Console

from .config import load_config
from .errors import ConfigError, StateStoreError
from .runner import run_relay

app = typer.Typer(add_completion=False)
console = Console()


@app.callback()
def main():
    """Keyword-filtered RSS/Atom to Telegram relay."""


@app.command()
def run(
    config: Path | None = typer.Option(
        None, "--config", "-c", exists=True, readable=True, help="Optional YAML config file."
    ),
    feeds_file: Path | None = typer.Option(None, "--feeds-file", "-f", help="Feed list file."),
    max_items: int | None = typer.Option(
        None, "--max-items", min=1, help="Most recent items considered per feed."
    ),
    send_delay_ms: int | None = typer.Option(
        None, "--send-delay-ms", min=0, help="Pause after each delivered message."
    ),
    debug: bool = typer.Option(False, "--debug", help="Log per-entry decisions."),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
    log_file: bool | None = typer.Option(
        None, "--log-file/--no-log-file", help="Enable or disable file logging."
    ),
):
    """Relay new matching feed entries to the Telegram channel.

    Args:
        config: Optional path to YAML config file
        feeds_file: Override the feed list path
        max_items: Override MAX_ITEMS_PER_FEED
        send_delay_ms: Override SEND_DELAY_MS
        debug: Enable verbose per-entry logging
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Enable/disable file logging
    """
    load_dotenv()

    try:
        cfg = load_config(str(config) if config else None)

        if feeds_file is not None:
            cfg.feeds.feeds_file = str(feeds_file)
        if max_items is not None:
            cfg.feeds.max_items_per_feed = max_items
        if send_delay_ms is not None:
            cfg.feeds.send_delay_ms = send_delay_ms
        if debug:
            cfg.logging.debug = True
        if log_level:
            cfg.logging.level = log_level
        if log_file is not None:
            cfg.logging.file = log_file

        result = run_relay(cfg)
    except (ConfigError, StateStoreError) as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(code=1)

    stats = result.stats
    console.print(f"Done. sent={stats.sent} excluded={stats.excluded} filtered={stats.filtered}")
    if result.gist_created and result.gist_id:
        # Printed so the id can be copied into GIST_ID for later runs.
        console.print(f"GIST_ID={result.gist_id}")


if __name__ == "__main__":
    app()
