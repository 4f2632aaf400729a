"""
Configuration management using YAML files, environment variables and dataclasses.

Values are resolved in three layers: dataclass defaults, an optional YAML
file, then environment variables (a .env file is loaded by the CLI first).
Configuration sections:
- TelegramConfig: delivery channel credentials and limits
- StateConfig: GitHub Gist state store settings
- FeedsConfig: feed list file and per-feed fetching settings
- KeywordsConfig: include/exclude keyword sources
- SearchConfig: Google News search feed generation
- EnrichConfig: AI summary toggle and per-run cap
- ProviderConfig: LLM provider settings
- LoggingConfig: Logging behavior
- AppConfig: Root configuration container
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
import os
from typing import Any, Mapping

import yaml

from .errors import ConfigError


@dataclass
class TelegramConfig:
    """Configuration for Telegram Bot API delivery.

    Attributes:
        bot_token: Bot token (required)
        channel_id: Target chat, e.g. "@mychannel" or "-1001234567890" (required)
        api_base: Bot API base URL
        timeout_seconds: HTTP timeout for each send call
        caption_limit: Maximum photo caption length accepted by Telegram
        disable_preview: Disable link previews on text messages
    """

    bot_token: str | None = None
    channel_id: str | None = None
    api_base: str = "https://api.telegram.org"
    timeout_seconds: float = 20.0
    caption_limit: int = 1024
    disable_preview: bool = False


@dataclass
class StateConfig:
    """Configuration for the GitHub Gist state store.

    Attributes:
        token: GitHub token with gist scope (required)
        gist_id: Existing gist id; when empty a new gist is created on save
        filename: Name of the state file inside the gist
        api_base: GitHub REST API base URL
        description: Description used when creating a new gist
        timeout_seconds: HTTP timeout for gist calls
    """

    token: str | None = None
    gist_id: str | None = None
    filename: str = "state.json"
    api_base: str = "https://api.github.com"
    description: str = "Telegram RSS bot state"
    timeout_seconds: float = 20.0


@dataclass
class FeedsConfig:
    """Configuration for feed fetching.

    Attributes:
        feeds_file: Path to the feed list (one URL per line, # comments)
        max_items_per_feed: Most recent items considered per feed
        send_delay_ms: Pause after each successful delivery
        timeout_seconds: HTTP timeout for each feed fetch
        user_agent: HTTP User-Agent header string
    """

    feeds_file: str = "feeds.txt"
    max_items_per_feed: int = 10
    send_delay_ms: int = 500
    timeout_seconds: float = 20.0
    user_agent: str = (
        "Mozilla/5.0 (compatible; feed-relay/0.1; +https://github.com/)"
    )


@dataclass
class KeywordsConfig:
    """Configuration for keyword filtering.

    Attributes:
        keywords_file: Include terms file (one per line)
        exclude_file: Exclude terms file (one per line)
        include: Fallback include terms when the file is missing or empty
        exclude: Fallback exclude terms when the file is missing or empty
        match_mode: "substring" or "word"
    """

    keywords_file: str = "keywords.txt"
    exclude_file: str = "exclude.txt"
    include: list[str] = field(default_factory=list)
    exclude: list[str] = field(default_factory=list)
    match_mode: str = "substring"


@dataclass
class SearchConfig:
    """Configuration for Google News search feeds built from keywords.

    Attributes:
        enabled: Generate one search feed per include keyword
        base_url: Google News RSS search endpoint
        hl: Interface language (e.g. "hu")
        gl: Region (e.g. "HU")
        ceid: Edition id (e.g. "HU:hu")
        when: Optional recency window (e.g. "1d", "7d")
        extra_terms: Optional terms appended to every query (e.g. "-site:example.com")
    """

    enabled: bool = False
    base_url: str = "https://news.google.com/rss/search"
    hl: str = "hu"
    gl: str = "HU"
    ceid: str = "HU:hu"
    when: str | None = None
    extra_terms: str | None = None


@dataclass
class EnrichConfig:
    """Configuration for the optional AI summary.

    Attributes:
        enabled: Whether to request summaries at all
        max_per_run: Summary calls allowed per run
        language: Output language hint for the summary
        max_chars: Maximum characters of entry text sent to the provider
    """

    enabled: bool = False
    max_per_run: int = 5
    language: str = "hu"
    max_chars: int = 4000


@dataclass
class ProviderConfig:
    """Configuration for pluggable LLM providers.

    base_url falls back to the provider default when unset.
    """

    name: str = "openai"
    model: str = "gpt-4o-mini"
    api_key_env: str | None = None
    base_url: str | None = None
    api_key: str | None = None
    timeout_seconds: float = 30.0
    trust_env: bool = True


@dataclass
class LoggingConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR")
        debug: Verbose per-entry diagnostics (forces DEBUG level)
        console: Whether to log to console
        file: Whether to log to file
        format: Log file format ("jsonl" or "plain")
        filename: Path of the log file
    """

    level: str = "INFO"
    debug: bool = False
    console: bool = True
    file: bool = False
    format: str = "jsonl"
    filename: str = "feed-relay.jsonl"


@dataclass
class AppConfig:
    """Root configuration container aggregating all config sections."""

    telegram: TelegramConfig = field(default_factory=TelegramConfig)
    state: StateConfig = field(default_factory=StateConfig)
    feeds: FeedsConfig = field(default_factory=FeedsConfig)
    keywords: KeywordsConfig = field(default_factory=KeywordsConfig)
    search: SearchConfig = field(default_factory=SearchConfig)
    enrich: EnrichConfig = field(default_factory=EnrichConfig)
    provider: ProviderConfig = field(default_factory=ProviderConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


_SECTIONS: dict[str, type] = {
    "telegram": TelegramConfig,
    "state": StateConfig,
    "feeds": FeedsConfig,
    "keywords": KeywordsConfig,
    "search": SearchConfig,
    "enrich": EnrichConfig,
    "provider": ProviderConfig,
    "logging": LoggingConfig,
}

# env var -> (section, field, kind)
ENV_OVERRIDES: dict[str, tuple[str, str, str]] = {
    "TELEGRAM_BOT_TOKEN": ("telegram", "bot_token", "str"),
    "TELEGRAM_CHANNEL_ID": ("telegram", "channel_id", "str"),
    "GIST_TOKEN": ("state", "token", "str"),
    "GIST_ID": ("state", "gist_id", "str"),
    "FEEDS_FILE": ("feeds", "feeds_file", "str"),
    "MAX_ITEMS_PER_FEED": ("feeds", "max_items_per_feed", "int"),
    "SEND_DELAY_MS": ("feeds", "send_delay_ms", "int"),
    "KEYWORDS": ("keywords", "include", "list"),
    "EXCLUDE_KEYWORDS": ("keywords", "exclude", "list"),
    "KEYWORD_MATCH_MODE": ("keywords", "match_mode", "str"),
    "GOOGLE_NEWS_FROM_KEYWORDS": ("search", "enabled", "bool"),
    "GOOGLE_NEWS_HL": ("search", "hl", "str"),
    "GOOGLE_NEWS_GL": ("search", "gl", "str"),
    "GOOGLE_NEWS_CEID": ("search", "ceid", "str"),
    "GOOGLE_NEWS_WHEN": ("search", "when", "str"),
    "GOOGLE_NEWS_EXTRA": ("search", "extra_terms", "str"),
    "AI_SUMMARY": ("enrich", "enabled", "bool"),
    "AI_MAX_PER_RUN": ("enrich", "max_per_run", "int"),
    "AI_LANGUAGE": ("enrich", "language", "str"),
    "AI_PROVIDER": ("provider", "name", "str"),
    "AI_MODEL": ("provider", "model", "str"),
    "AI_BASE_URL": ("provider", "base_url", "str"),
    "DEBUG": ("logging", "debug", "bool"),
    "LOG_LEVEL": ("logging", "level", "str"),
}

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


def load_config(path: str | None, environ: Mapping[str, str] | None = None) -> AppConfig:
    """Load configuration from an optional YAML file, then apply env overrides."""
    raw: dict[str, Any] = {}
    if path:
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    cfg = _merge_config(AppConfig(), raw)
    return apply_env(cfg, os.environ if environ is None else environ)


def _merge_config(base: AppConfig, raw: dict[str, Any]) -> AppConfig:
    """Merge raw YAML config into base AppConfig."""
    data = asdict(base)
    for key, value in raw.items():
        if key not in data:
            continue
        if isinstance(value, dict) and isinstance(data[key], dict):
            data[key].update(value)
        else:
            data[key] = value
    return _fromdict(data)


def _fromdict(data: dict[str, Any]) -> AppConfig:
    """Reconstruct AppConfig from nested dictionary, ignoring unknown keys."""
    sections = {}
    for name, section_cls in _SECTIONS.items():
        values = data.get(name) or {}
        known = section_cls.__dataclass_fields__
        sections[name] = section_cls(**{k: v for k, v in values.items() if k in known})
    return AppConfig(**sections)


def apply_env(cfg: AppConfig, environ: Mapping[str, str]) -> AppConfig:
    """Override config fields from environment variables.

    Empty values are ignored except for booleans, where an empty string
    means false.

    Raises:
        ConfigError: If a numeric or boolean variable cannot be parsed
    """
    for env_name, (section, attr, kind) in ENV_OVERRIDES.items():
        if env_name not in environ:
            continue
        raw = environ[env_name].strip()
        if kind != "bool" and not raw:
            continue
        setattr(getattr(cfg, section), attr, _coerce(env_name, raw, kind))
    return cfg


def _coerce(name: str, raw: str, kind: str) -> Any:
    if kind == "int":
        try:
            return int(raw)
        except ValueError as exc:
            raise ConfigError(f"{name} must be an integer, got {raw!r}") from exc
    if kind == "bool":
        lowered = raw.lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
        raise ConfigError(f"{name} must be a boolean (true/false), got {raw!r}")
    if kind == "list":
        return split_list(raw)
    return raw


def split_list(raw: str) -> list[str]:
    """Split a comma/newline separated value, dropping blanks."""
    return [item.strip() for item in raw.replace("\r", "").replace("\n", ",").split(",") if item.strip()]


def validate_config(cfg: AppConfig) -> None:
    """Fail fast on missing credentials.

    Raises:
        ConfigError: If delivery or state store credentials are missing
    """
    missing = []
    if not cfg.telegram.bot_token:
        missing.append("TELEGRAM_BOT_TOKEN")
    if not cfg.telegram.channel_id:
        missing.append("TELEGRAM_CHANNEL_ID")
    if not cfg.state.token:
        missing.append("GIST_TOKEN")
    if missing:
        raise ConfigError(f"Missing required configuration: {', '.join(missing)}")
    if cfg.feeds.max_items_per_feed < 1:
        raise ConfigError("MAX_ITEMS_PER_FEED must be at least 1")
    if cfg.feeds.send_delay_ms < 0:
        raise ConfigError("SEND_DELAY_MS must not be negative")


def get_api_key(cfg: ProviderConfig) -> str | None:
    """Get API key from inline config or environment variable."""
    if cfg.api_key:
        return cfg.api_key
    if cfg.api_key_env:
        return os.getenv(cfg.api_key_env)
    defaults = {
        "gemini": "GOOGLE_API_KEY",
        "openai": "OPENAI_API_KEY",
        "openai_compatible": "OPENAI_API_KEY",
        "openai-compatible": "OPENAI_API_KEY",
    }
    env_name = defaults.get(cfg.name.lower(), "OPENAI_API_KEY")
    return os.getenv(env_name)
