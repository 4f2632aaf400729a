"""External persistence for SeenState."""

from .gist import GistStateStore, serialize_state

__all__ = ["GistStateStore", "serialize_state"]
