"""
Feed Relay - keyword-filtered RSS/Atom to Telegram relay.

This package fetches configured feeds, keeps entries that match include
keywords (and none of the exclude keywords), suppresses entries already
delivered in earlier runs, optionally adds a short AI summary and posts
each entry to a Telegram channel. Delivered fingerprints are persisted in
a private GitHub Gist between runs.

Main entry point is the CLI via `feed-relay` command.

Example:
    $ feed-relay run --feeds-file feeds.txt
"""

__all__ = ["__version__", "RelayPipeline", "run_relay", "load_config"]
__version__ = "0.1.0"

from .config import load_config
from .runner import RelayPipeline, run_relay
