"""VotingContract: the registry and engine behind one call surface.

Mirrors the deployed contract's messages. Construction records the
creator as owner; each call takes the caller identity supplied by the
host plus its explicit arguments.

Usage:
    store = MemoryStore()
    contract = VotingContract.deploy(store, creator="alice")
    contract.add_voter("alice", "bob", 100)
    contract.add_voter("alice", "carol", 50)
    contract.vote("bob", "carol", 30)
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any, TypeVar

from ..core.exceptions import RepvoteException, VotingError
from ..core.logging import CallLogger, call_logger, correlation_context, get_correlation_id
from ..core.models import Voter
from ..storage.backend import KeyValueStore
from .engine import VotingEngine
from .registry import VoterRegistry

T = TypeVar("T")


class VotingContract:
    """Owner-administered reputation voting over a key-value store."""

    def __init__(self, registry: VoterRegistry, logger: CallLogger | None = None) -> None:
        self._registry = registry
        self._engine = VotingEngine(registry)
        self._calls = logger or call_logger

    @classmethod
    def deploy(cls, store: KeyValueStore, creator: str, **policy: Any) -> VotingContract:
        """Initialise an empty store with ``creator`` as owner.

        Keyword arguments are passed to VoterRegistry (``prune_on_remove``,
        ``allow_reregistration``).
        """
        return cls(VoterRegistry(store, owner=creator, **policy))

    @classmethod
    def open(cls, store: KeyValueStore, **policy: Any) -> VotingContract:
        """Attach to a store initialised by an earlier ``deploy``."""
        return cls(VoterRegistry(store, **policy))

    @property
    def owner(self) -> str:
        return self._registry.owner

    @property
    def registry(self) -> VoterRegistry:
        return self._registry

    @property
    def engine(self) -> VotingEngine:
        return self._engine

    def _call(self, operation: str, caller: str | None, arguments: dict[str, Any], fn: Callable[[], T]) -> T:
        with correlation_context(get_correlation_id()):
            self._calls.log_call(operation, caller, arguments)
            start = time.perf_counter()
            try:
                result = fn()
            except RepvoteException as e:
                error = e.kind.value if isinstance(e, VotingError) else type(e).__name__
                self._calls.log_result(operation, False, (time.perf_counter() - start) * 1000, error=error)
                raise
            self._calls.log_result(operation, True, (time.perf_counter() - start) * 1000)
            return result

    def add_voter(self, caller: str, voter: str, available_votes: int) -> Voter:
        return self._call(
            "add_voter",
            caller,
            {"voter": voter, "available_votes": available_votes},
            lambda: self._registry.register(caller, voter, available_votes),
        )

    def remove_voter(self, caller: str, voter: str) -> None:
        self._call(
            "remove_voter",
            caller,
            {"voter": voter},
            lambda: self._registry.remove(caller, voter),
        )

    def vote(self, caller: str, candidate: str, votes: int) -> None:
        self._call(
            "vote",
            caller,
            {"candidate": candidate, "votes": votes},
            lambda: self._engine.vote(caller, candidate, votes),
        )

    def get_voters(self) -> list[Voter]:
        return self._call("get_voters", None, {}, self._registry.get_all)

    def get_voter(self, identity: str) -> Voter | None:
        return self._registry.get(identity)
