"""Key-value store abstraction for registry state.

The registry only needs a durable mapping from string keys to
JSON-compatible values. Backends:
- Memory (for testing and embedding in a host process)
- Local JSON file (durable across process restarts)

Writes made inside ``transaction()`` are buffered and applied all at
once when the block exits cleanly; any exception discards them. Until
then only the thread that opened the transaction sees them.
"""

from __future__ import annotations

import copy
import json
import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Generator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ..core.config import RepvoteSettings, get_config
from ..core.exceptions import ConfigException, StorageException

logger = logging.getLogger(__name__)

_DELETED = object()


@dataclass
class StorageStats:
    """Statistics for a store."""

    backend_type: str
    total_keys: int = 0
    location: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "backend_type": self.backend_type,
            "total_keys": self.total_keys,
            "location": self.location,
        }


class KeyValueStore(ABC):
    """Abstract base class for key-value stores.

    Values are JSON-compatible. ``None`` is never stored; a missing key
    reads as ``None``. Values are copied on the way in and out so callers
    cannot mutate stored state by accident.
    """

    def __init__(self) -> None:
        self._pending: dict[str, Any] | None = None
        self._pending_owner: int | None = None
        self._transaction_lock = threading.Lock()

    @property
    @abstractmethod
    def backend_type(self) -> str:
        """Type of backend (e.g., 'memory', 'file')."""
        pass

    @abstractmethod
    def _load(self, key: str) -> Any:
        """Return the committed value for ``key`` or None."""
        pass

    @abstractmethod
    def _committed_keys(self) -> list[str]:
        """Return all committed keys."""
        pass

    @abstractmethod
    def _commit(self, changes: dict[str, Any]) -> None:
        """Apply a batch of writes atomically.

        Args:
            changes: Mapping of key to new value, or to the deletion marker.

        Raises:
            StorageException: If the batch could not be applied. Nothing
                from the batch may be visible afterwards.
        """
        pass

    def _own_pending(self) -> dict[str, Any] | None:
        """The write buffer, if the calling thread opened the transaction."""
        if self._pending_owner == threading.get_ident():
            return self._pending
        return None

    @property
    def in_transaction(self) -> bool:
        return self._own_pending() is not None

    def get(self, key: str, default: Any = None) -> Any:
        pending = self._own_pending()
        if pending is not None and key in pending:
            value = pending[key]
            return default if value is _DELETED else copy.deepcopy(value)
        value = self._load(key)
        return default if value is None else copy.deepcopy(value)

    def put(self, key: str, value: Any) -> None:
        if value is None:
            raise StorageException("Cannot store None; use delete()", self.backend_type)
        value = copy.deepcopy(value)
        pending = self._own_pending()
        if pending is not None:
            pending[key] = value
        else:
            self._commit({key: value})

    def delete(self, key: str) -> bool:
        """Delete ``key``. Returns True if it existed."""
        existed = self.contains(key)
        pending = self._own_pending()
        if pending is not None:
            pending[key] = _DELETED
        elif existed:
            self._commit({key: _DELETED})
        return existed

    def contains(self, key: str) -> bool:
        return self.get(key) is not None

    def keys(self, prefix: str = "") -> list[str]:
        """List keys visible to the caller, optionally filtered by prefix."""
        keys = set(self._committed_keys())
        pending = self._own_pending()
        if pending is not None:
            for key, value in pending.items():
                if value is _DELETED:
                    keys.discard(key)
                else:
                    keys.add(key)
        return sorted(k for k in keys if k.startswith(prefix))

    @contextmanager
    def transaction(self) -> Generator[KeyValueStore, None, None]:
        """Buffer writes and apply them all-or-nothing.

        Buffered writes are visible only to the thread that opened the
        transaction; other threads keep reading committed state. A second
        thread opening a transaction blocks until the first one ends.

        Usage:
            with store.transaction():
                store.put("a", 1)
                store.put("b", 2)
        """
        if self.in_transaction:
            raise StorageException("Nested transactions are not supported", self.backend_type)
        with self._transaction_lock:
            self._pending = {}
            self._pending_owner = threading.get_ident()
            try:
                yield self
                changes = self._pending
            finally:
                self._pending = None
                self._pending_owner = None
            if changes:
                self._commit(changes)

    def get_stats(self) -> StorageStats:
        return StorageStats(backend_type=self.backend_type, total_keys=len(self.keys()))


class MemoryStore(KeyValueStore):
    """In-memory store. Not persistent."""

    def __init__(self, initial: dict[str, Any] | None = None):
        super().__init__()
        self._data: dict[str, Any] = copy.deepcopy(initial) if initial else {}

    @property
    def backend_type(self) -> str:
        return "memory"

    def _load(self, key: str) -> Any:
        return self._data.get(key)

    def _committed_keys(self) -> list[str]:
        return list(self._data.keys())

    def _commit(self, changes: dict[str, Any]) -> None:
        # Swap in a new dict so readers never see part of a batch
        updated = dict(self._data)
        for key, value in changes.items():
            if value is _DELETED:
                updated.pop(key, None)
            else:
                updated[key] = value
        self._data = updated

    def clear(self) -> None:
        """Clear all stored keys."""
        self._data.clear()


class JSONFileStore(KeyValueStore):
    """Store persisted as a single JSON document on the local file system.

    Every commit rewrites the document through a temporary file and a
    rename, so a crash mid-write leaves the previous state intact.
    """

    def __init__(self, path: str | Path):
        super().__init__()
        self._path = Path(path)
        self._data: dict[str, Any] = self._read_file()

    @property
    def backend_type(self) -> str:
        return "file"

    @property
    def path(self) -> Path:
        return self._path

    def _read_file(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise StorageException(f"Failed to read store file {self._path}: {e}", self.backend_type) from e
        if not isinstance(data, dict):
            raise StorageException(f"Store file {self._path} does not contain a JSON object", self.backend_type)
        return data

    def _load(self, key: str) -> Any:
        return self._data.get(key)

    def _committed_keys(self) -> list[str]:
        return list(self._data.keys())

    def _commit(self, changes: dict[str, Any]) -> None:
        updated = dict(self._data)
        for key, value in changes.items():
            if value is _DELETED:
                updated.pop(key, None)
            else:
                updated[key] = value

        temp_path = self._path.with_name(self._path.name + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            temp_path.write_text(json.dumps(updated, indent=2, sort_keys=True), encoding="utf-8")
            temp_path.replace(self._path)
        except OSError as e:
            temp_path.unlink(missing_ok=True)
            raise StorageException(f"Failed to write store file {self._path}: {e}", self.backend_type) from e

        self._data = updated
        logger.debug("Committed %d change(s) to %s", len(changes), self._path)

    def get_stats(self) -> StorageStats:
        stats = super().get_stats()
        stats.location = str(self._path)
        return stats


def open_store(config: RepvoteSettings | None = None) -> KeyValueStore:
    """Build the store selected by configuration.

    Args:
        config: Settings to use (defaults to the global config)

    Raises:
        ConfigException: If the file backend is selected without a path.
    """
    config = config or get_config()
    if config.store_backend == "file":
        if not config.store_path:
            raise ConfigException(
                "REPVOTE_STORE_PATH is required for the file store backend",
                missing_vars=["REPVOTE_STORE_PATH"],
            )
        return JSONFileStore(config.store_path)
    return MemoryStore()
