"""Key-value stores backing the voter registry."""

from .backend import (
    JSONFileStore,
    KeyValueStore,
    MemoryStore,
    StorageStats,
    open_store,
)

__all__ = [
    "JSONFileStore",
    "KeyValueStore",
    "MemoryStore",
    "StorageStats",
    "open_store",
]
