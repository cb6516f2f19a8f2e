"""Global test fixtures for the repvote test suite."""

from __future__ import annotations

import os

import pytest

from repvote.core.config import clear_config_cache
from repvote.storage import MemoryStore
from repvote.voting import VoterRegistry, VotingContract, VotingEngine

OWNER = "did:key:owner"


@pytest.fixture(autouse=True)
def reset_config():
    """Each test sees a freshly loaded config."""
    clear_config_cache()
    yield
    clear_config_cache()


@pytest.fixture
def clean_env(monkeypatch):
    """Remove all REPVOTE_ environment variables."""
    for key in list(os.environ.keys()):
        if key.startswith("REPVOTE_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def registry(store, clean_env):
    return VoterRegistry(store, owner=OWNER)


@pytest.fixture
def legacy_registry(store, clean_env):
    """Registry reproducing stale enumeration entries after removal."""
    return VoterRegistry(store, owner=OWNER, prune_on_remove=False)


@pytest.fixture
def engine(registry):
    return VotingEngine(registry)


@pytest.fixture
def contract(store, clean_env):
    return VotingContract.deploy(store, creator=OWNER)
