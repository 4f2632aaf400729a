"""
Main pipeline orchestration for the feed relay.

This module coordinates one run:
1. Load SeenState from the state store
2. For each feed (search feeds first, then static feeds):
   fetch -> take the most recent items -> process oldest-first
3. Per entry: fingerprint -> dedup -> keyword filter -> optional AI summary
   -> render -> deliver -> remember fingerprint
4. Save SeenState once

Everything runs sequentially with a fixed pause after each delivery.
Delivery is at-least-once: a fingerprint is remembered only after the
message was accepted, and state is persisted only at the end of the run,
so a crash between the two re-sends the entry on the next run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import partial
import logging
import time
from typing import Callable, Iterable, Protocol

from .config import AppConfig, validate_config
from .core.fingerprint import fingerprint
from .core.keywords import build_rules, match_entry
from .core.types import Entry, KeywordRules, ParsedFeed, RunStats, SeenState
from .delivery.telegram import TelegramSender
from .errors import ConfigError, DeliveryError, EnrichmentError, FeedFetchError
from .fetch.fetcher import fetch_feed
from .input.lists import load_terms, read_feed_list
from .input.search_feeds import build_feed_sources
from .llm.providers import SummaryProvider, create_provider
from .output.renderer import render_message
from .state.gist import GistStateStore
from .utils.logging import log_event, setup_logging


class Sender(Protocol):
    def send(self, text: str, image_url: str | None = None) -> object: ...


class StateStore(Protocol):
    def load(self) -> SeenState: ...

    def save(self, state: SeenState) -> str | None: ...


FeedFetcher = Callable[[str], ParsedFeed]


@dataclass
class RunResult:
    """Outcome of a full run.

    Attributes:
        stats: Per-run counters
        state: SeenState after the run (as persisted)
        gist_id: Id of the gist holding the state, if any
        gist_created: True when the gist was created during this run
    """

    stats: RunStats = field(default_factory=RunStats)
    state: SeenState = field(default_factory=SeenState)
    gist_id: str | None = None
    gist_created: bool = False


def select_recent(entries: list[Entry], limit: int) -> list[Entry]:
    """Take the `limit` most recent entries and return them oldest-first.

    Entries are ordered by publication time when every entry has one;
    otherwise document order is trusted (feeds list newest first).
    """
    ordered = list(entries)
    if ordered and all(e.published_at is not None for e in ordered):
        ordered.sort(key=lambda e: e.published_at, reverse=True)
    return list(reversed(ordered[: max(0, limit)]))


class RelayPipeline:
    """Sequential feed -> filter -> deliver loop with per-run counters."""

    def __init__(
        self,
        rules: KeywordRules,
        fetch: FeedFetcher,
        sender: Sender,
        enricher: SummaryProvider | None = None,
        *,
        max_items_per_feed: int = 10,
        send_delay_ms: int = 500,
        enrich_cap: int = 0,
        enrich_language: str = "hu",
        sleep: Callable[[float], None] = time.sleep,
        logger: logging.Logger | None = None,
    ) -> None:
        self.rules = rules
        self.fetch = fetch
        self.sender = sender
        self.enricher = enricher
        self.max_items_per_feed = max_items_per_feed
        self.send_delay_ms = send_delay_ms
        self.enrich_cap = enrich_cap
        self.enrich_language = enrich_language
        self.sleep = sleep
        self.logger = logger or logging.getLogger("feed_relay.runner")
        self.stats = RunStats()
        self.enrich_calls = 0

    def run(self, feed_urls: Iterable[str], store: StateStore) -> RunResult:
        """Load state, process all feeds, then persist state once.

        State store errors propagate; entries already delivered stay sent.
        """
        state = store.load()
        log_event(self.logger, "State loaded", event="state_loaded", seen=state.size)
        self.process_feeds(feed_urls, state)
        gist_id = store.save(state)
        log_event(self.logger, "State saved", event="state_saved", seen=state.size)
        return RunResult(
            stats=self.stats,
            state=state,
            gist_id=gist_id,
            gist_created=bool(getattr(store, "created", False)),
        )

    def process_feeds(self, feed_urls: Iterable[str], state: SeenState) -> RunStats:
        for url in feed_urls:
            self.process_feed(url, state)
        return self.stats

    def process_feed(self, url: str, state: SeenState) -> None:
        try:
            feed = self.fetch(url)
        except FeedFetchError as exc:
            self.stats.feed_errors += 1
            log_event(self.logger, f"Feed error: {url}", logging.WARNING, event="feed_failed", feed=url, error=str(exc))
            return

        items = select_recent(feed.entries, self.max_items_per_feed)
        log_event(
            self.logger,
            f"Feed fetched: {feed.title}",
            logging.DEBUG,
            event="feed_fetched",
            feed=url,
            entries=len(feed.entries),
            considered=len(items),
        )
        for entry in items:
            self.process_entry(feed.title, entry, state)

    def process_entry(self, feed_title: str, entry: Entry, state: SeenState) -> bool:
        """Run one entry through dedup, filtering and delivery.

        Returns:
            True if a message was delivered
        """
        fp = fingerprint(entry)
        if state.is_duplicate(fp):
            log_event(self.logger, "Duplicate skipped", logging.DEBUG, event="entry_duplicate", link=entry.link, title=entry.title)
            return False

        match = match_entry(entry, self.rules)
        if match.excluded:
            self.stats.excluded += 1
            log_event(
                self.logger,
                "Excluded by keyword",
                logging.DEBUG,
                event="entry_excluded",
                link=entry.link,
                title=entry.title,
                term=match.excluded_by,
            )
            return False
        if not match.accepted:
            self.stats.filtered += 1
            log_event(self.logger, "No keyword match", logging.DEBUG, event="entry_filtered", link=entry.link, title=entry.title)
            return False

        enrichment = self._enrich(entry)
        text = render_message(feed_title, entry, match.matched_terms, enrichment)

        try:
            self.sender.send(text, entry.image_url)
        except DeliveryError as exc:
            self.stats.failed += 1
            log_event(self.logger, f"Delivery failed: {exc}", logging.ERROR, event="delivery_failed", link=entry.link, title=entry.title)
            return False

        state.remember(fp)
        self.stats.sent += 1
        log_event(self.logger, f"Sent: {entry.title or entry.link}", event="delivered", link=entry.link, terms=list(match.matched_terms))
        if self.send_delay_ms > 0:
            self.sleep(self.send_delay_ms / 1000)
        return True

    def _enrich(self, entry: Entry) -> str:
        if self.enricher is None or self.enrich_calls >= self.enrich_cap:
            return ""
        self.enrich_calls += 1
        try:
            text = self.enricher.summarize(entry, self.enrich_language)
        except EnrichmentError as exc:
            log_event(self.logger, f"Enrichment failed: {exc}", logging.WARNING, event="enrichment_failed", link=entry.link)
            return ""
        if text:
            self.stats.enriched += 1
        return text


def run_relay(cfg: AppConfig, logger: logging.Logger | None = None) -> RunResult:
    """Build all collaborators from config and execute one run.

    Raises:
        ConfigError: If required credentials are missing or options are invalid
        StateStoreError: If the gist cannot be read or written
    """
    validate_config(cfg)
    logger = logger or setup_logging(cfg.logging)

    include = load_terms(cfg.keywords.keywords_file, cfg.keywords.include)
    exclude = load_terms(cfg.keywords.exclude_file, cfg.keywords.exclude)
    try:
        rules = build_rules(include, exclude, cfg.keywords.match_mode)
    except ValueError as exc:
        raise ConfigError(str(exc)) from exc

    static_feeds = read_feed_list(cfg.feeds.feeds_file)
    feed_urls = build_feed_sources(include, static_feeds, cfg.search)
    log_event(
        logger,
        "Run start",
        event="run_start",
        feeds=len(feed_urls),
        include_terms=len(rules.include),
        exclude_terms=len(rules.exclude),
    )
    if not feed_urls:
        log_event(logger, "No feeds configured", logging.WARNING, event="no_feeds")

    pipeline = RelayPipeline(
        rules,
        partial(fetch_feed, timeout=cfg.feeds.timeout_seconds, user_agent=cfg.feeds.user_agent),
        TelegramSender(cfg.telegram),
        _build_enricher(cfg, logger),
        max_items_per_feed=cfg.feeds.max_items_per_feed,
        send_delay_ms=cfg.feeds.send_delay_ms,
        enrich_cap=cfg.enrich.max_per_run,
        enrich_language=cfg.enrich.language,
        logger=logger,
    )
    result = pipeline.run(feed_urls, GistStateStore(cfg.state))
    log_event(
        logger,
        "Run complete",
        event="run_complete",
        sent=result.stats.sent,
        excluded=result.stats.excluded,
        filtered=result.stats.filtered,
        failed=result.stats.failed,
        feed_errors=result.stats.feed_errors,
    )
    return result


def _build_enricher(cfg: AppConfig, logger: logging.Logger) -> SummaryProvider | None:
    """Summary provider when enrichment is enabled, else None.

    A misconfigured provider disables enrichment for the run instead of
    aborting it.
    """
    if not cfg.enrich.enabled or cfg.enrich.max_per_run <= 0:
        return None
    try:
        return create_provider(cfg.provider, cfg.enrich, logger)
    except ValueError as exc:
        log_event(logger, f"AI summary disabled: {exc}", logging.WARNING, event="enrichment_disabled")
        return None
