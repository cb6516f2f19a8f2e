"""Tests for key-value store backends.

Tests cover:
- Basic get/put/delete/keys on memory and file stores
- Copy-on-read/write isolation
- All-or-nothing transactions
- File persistence and corrupt file handling
- open_store() backend selection
"""

from __future__ import annotations

import json
import threading

import pytest

from repvote.core.config import RepvoteSettings
from repvote.core.exceptions import ConfigException, StorageException
from repvote.storage.backend import JSONFileStore, MemoryStore, open_store


@pytest.fixture(params=["memory", "file"])
def kv(request, tmp_path):
    if request.param == "memory":
        return MemoryStore()
    return JSONFileStore(tmp_path / "state.json")


# =============================================================================
# Basic operations
# =============================================================================


class TestBasicOperations:
    def test_missing_key_reads_none(self, kv):
        assert kv.get("missing") is None
        assert kv.get("missing", []) == []
        assert not kv.contains("missing")

    def test_put_and_get(self, kv):
        kv.put("owner", "did:key:owner")
        assert kv.get("owner") == "did:key:owner"
        assert kv.contains("owner")

    def test_delete(self, kv):
        kv.put("a", 1)
        assert kv.delete("a") is True
        assert kv.delete("a") is False
        assert kv.get("a") is None

    def test_keys_with_prefix(self, kv):
        kv.put("voter:b", {"x": 1})
        kv.put("voter:a", {"x": 2})
        kv.put("owner", "o")

        assert kv.keys("voter:") == ["voter:a", "voter:b"]
        assert kv.keys() == ["owner", "voter:a", "voter:b"]

    def test_returned_values_are_copies(self, kv):
        kv.put("voters", ["a"])
        kv.get("voters").append("b")
        assert kv.get("voters") == ["a"]

    def test_none_rejected(self, kv):
        with pytest.raises(StorageException):
            kv.put("a", None)

    def test_big_integers_survive(self, kv):
        kv.put("n", {"reputation": -(2**127), "available_votes": 2**128 - 1})
        assert kv.get("n") == {"reputation": -(2**127), "available_votes": 2**128 - 1}

    def test_stats(self, kv):
        kv.put("a", 1)
        stats = kv.get_stats()
        assert stats.total_keys == 1
        assert stats.backend_type == kv.backend_type


# =============================================================================
# Transactions
# =============================================================================


class TestTransactions:
    def test_commit_on_clean_exit(self, kv):
        with kv.transaction():
            kv.put("a", 1)
            kv.put("b", 2)
            assert kv.in_transaction
            assert kv.get("a") == 1

        assert not kv.in_transaction
        assert kv.get("a") == 1
        assert kv.get("b") == 2

    def test_rollback_on_error(self, kv):
        kv.put("a", 1)

        with pytest.raises(RuntimeError):
            with kv.transaction():
                kv.put("a", 99)
                kv.delete("a")
                kv.put("b", 2)
                raise RuntimeError("boom")

        assert not kv.in_transaction
        assert kv.get("a") == 1
        assert kv.get("b") is None

    def test_pending_deletes_hidden_from_keys(self, kv):
        kv.put("voter:a", 1)
        kv.put("voter:b", 2)

        with kv.transaction():
            kv.delete("voter:a")
            kv.put("voter:c", 3)
            assert kv.keys("voter:") == ["voter:b", "voter:c"]

    def test_nested_transaction_rejected(self, kv):
        with kv.transaction():
            with pytest.raises(StorageException):
                with kv.transaction():
                    pass

    def test_other_threads_read_committed_state(self, kv):
        kv.put("a", 1)
        kv.put("gone", 1)
        seen = {}

        def reader():
            seen["a"] = kv.get("a")
            seen["b"] = kv.get("b")
            seen["gone"] = kv.get("gone")
            seen["keys"] = kv.keys()
            seen["in_transaction"] = kv.in_transaction

        with kv.transaction():
            kv.put("a", 2)
            kv.put("b", 3)
            kv.delete("gone")
            thread = threading.Thread(target=reader)
            thread.start()
            thread.join(timeout=5)

        assert seen == {"a": 1, "b": None, "gone": 1, "keys": ["a", "gone"], "in_transaction": False}
        assert kv.get("a") == 2
        assert kv.get("gone") is None

    def test_second_thread_transaction_waits(self, kv):
        def writer():
            with kv.transaction():
                kv.put("b", kv.get("a") + 1)

        with kv.transaction():
            kv.put("a", 1)
            thread = threading.Thread(target=writer)
            thread.start()
            thread.join(timeout=0.2)
            assert thread.is_alive()

        thread.join(timeout=5)
        assert not thread.is_alive()
        assert kv.get("b") == 2


# =============================================================================
# File persistence
# =============================================================================


class TestJSONFileStore:
    def test_persists_across_instances(self, tmp_path):
        path = tmp_path / "state.json"
        JSONFileStore(path).put("owner", "did:key:owner")

        reopened = JSONFileStore(path)
        assert reopened.get("owner") == "did:key:owner"
        assert reopened.get_stats().location == str(path)

    def test_rolled_back_transaction_not_written(self, tmp_path):
        path = tmp_path / "state.json"
        store = JSONFileStore(path)
        store.put("a", 1)

        with pytest.raises(RuntimeError):
            with store.transaction():
                store.put("a", 2)
                raise RuntimeError("boom")

        assert json.loads(path.read_text()) == {"a": 1}

    def test_creates_parent_directory(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "state.json"
        JSONFileStore(path).put("a", 1)
        assert path.exists()

    def test_corrupt_file_raises(self, tmp_path):
        path = tmp_path / "state.json"
        path.write_text("{not json")

        with pytest.raises(StorageException) as exc_info:
            JSONFileStore(path)
        assert exc_info.value.backend == "file"

    def test_non_object_file_raises(self, tmp_path):
        path = tmp_path / "state.json"
        path.write_text("[1, 2]")

        with pytest.raises(StorageException):
            JSONFileStore(path)


# =============================================================================
# open_store
# =============================================================================


class TestOpenStore:
    def test_memory_default(self, clean_env):
        assert isinstance(open_store(), MemoryStore)

    def test_file_backend(self, tmp_path, clean_env):
        config = RepvoteSettings(REPVOTE_STORE_BACKEND="file", REPVOTE_STORE_PATH=str(tmp_path / "s.json"))
        store = open_store(config)
        assert isinstance(store, JSONFileStore)

    def test_file_backend_requires_path(self, clean_env):
        config = RepvoteSettings(REPVOTE_STORE_BACKEND="file")
        with pytest.raises(ConfigException) as exc_info:
            open_store(config)
        assert exc_info.value.missing_vars == ["REPVOTE_STORE_PATH"]

    def test_from_environment(self, monkeypatch, tmp_path, clean_env):
        monkeypatch.setenv("REPVOTE_STORE_BACKEND", "file")
        monkeypatch.setenv("REPVOTE_STORE_PATH", str(tmp_path / "env.json"))

        assert isinstance(open_store(), JSONFileStore)
