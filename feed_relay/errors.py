"""Exception hierarchy for the relay.

Fatal errors (abort the run):
- ConfigError: missing or malformed required configuration
- StateStoreError: the gist state could not be read or written

Recoverable errors (caught by the pipeline at the smallest scope):
- FeedFetchError: one feed could not be fetched or parsed
- DeliveryError: one message could not be delivered
- EnrichmentError: the AI summary call failed for one entry
"""

from __future__ import annotations


class RelayError(Exception):
    """Base class for all relay errors."""


class ConfigError(RelayError):
    """Raised when required configuration is missing or invalid."""


class StateStoreError(RelayError):
    """Raised when the external state store returns a non-success response."""


class FeedFetchError(RelayError):
    """Raised when an RSS/Atom feed cannot be fetched or parsed."""


class DeliveryError(RelayError):
    """Raised when the chat channel rejects or fails to receive a message."""


class EnrichmentError(RelayError):
    """Raised when the summary provider fails to return text."""
