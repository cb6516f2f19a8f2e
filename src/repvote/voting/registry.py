"""Voter registry: the authoritative store of registered voters.

Persisted layout in the key-value store:
- ``owner``: identity of the creator, written once
- ``voter:<identity>``: one Voter record per registered identity
- ``voters``: identities in registration order, used for enumeration

Only the owner may register or remove voters. Two enumeration policies
are supported (see ``prune_on_remove``):

- pruning (default): removal drops the identity from ``voters`` and
  re-registration does not duplicate it, so listing always succeeds
- legacy: every registration appends and removal leaves a stale entry,
  so listing fails with UnregisteredVoter once anyone has been removed
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Generator
from contextlib import contextmanager

from ..core.config import get_config
from ..core.exceptions import (
    ConfigException,
    OwnerOnlyError,
    UnregisteredVoterError,
    VoterAlreadyRegisteredError,
)
from ..core.models import Voter, validate_budget, validate_identity
from ..storage.backend import KeyValueStore

logger = logging.getLogger(__name__)

OWNER_KEY = "owner"
INDEX_KEY = "voters"
VOTER_PREFIX = "voter:"


class VoterRegistry:
    """Registered voters and the owner gate.

    Args:
        store: Key-value store holding registry state.
        owner: Identity of the creator. Required when ``store`` is empty;
            when the store is already initialised it must match the stored
            owner or be omitted.
        prune_on_remove: Enumeration policy (defaults to config).
        allow_reregistration: Whether registering an existing identity
            overwrites it (True) or is rejected (defaults to config).
    """

    def __init__(
        self,
        store: KeyValueStore,
        owner: str | None = None,
        *,
        prune_on_remove: bool | None = None,
        allow_reregistration: bool | None = None,
    ) -> None:
        config = get_config()
        self._store = store
        self._lock = threading.RLock()
        self._prune_on_remove = config.prune_on_remove if prune_on_remove is None else prune_on_remove
        self._allow_reregistration = (
            config.allow_reregistration if allow_reregistration is None else allow_reregistration
        )

        stored_owner = store.get(OWNER_KEY)
        if stored_owner is None:
            if owner is None:
                raise ConfigException("An owner identity is required to initialise an empty store")
            validate_identity(owner, "owner")
            with store.transaction():
                store.put(OWNER_KEY, owner)
                store.put(INDEX_KEY, [])
            logger.info("Initialised voter registry owned by %s", owner)
            stored_owner = owner
        elif owner is not None and owner != stored_owner:
            raise ConfigException(f"Store is already owned by {stored_owner}; the owner cannot be reassigned")

        self._owner: str = stored_owner

    @property
    def owner(self) -> str:
        return self._owner

    @property
    def store(self) -> KeyValueStore:
        return self._store

    @property
    def prune_on_remove(self) -> bool:
        return self._prune_on_remove

    @property
    def allow_reregistration(self) -> bool:
        return self._allow_reregistration

    def __len__(self) -> int:
        with self._lock:
            return len(self._store.keys(VOTER_PREFIX))

    @contextmanager
    def transaction(self) -> Generator[VoterRegistry, None, None]:
        """Hold the registry lock and buffer store writes until exit."""
        with self._lock, self._store.transaction():
            yield self

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------
    # Reads take the lock too, so they wait for an in-flight mutation
    # to commit instead of interleaving with it.

    def get(self, identity: str) -> Voter | None:
        with self._lock:
            data = self._store.get(VOTER_PREFIX + identity)
        return Voter.from_dict(data) if data is not None else None

    def require(self, identity: str) -> Voter:
        """Return the voter for ``identity`` or raise UnregisteredVoterError."""
        voter = self.get(identity)
        if voter is None:
            raise UnregisteredVoterError(identity)
        return voter

    def is_registered(self, identity: str) -> bool:
        with self._lock:
            return self._store.contains(VOTER_PREFIX + identity)

    def identities(self) -> list[str]:
        """Raw enumeration sequence, stale or duplicate entries included."""
        with self._lock:
            return list(self._store.get(INDEX_KEY, []))

    def get_all(self) -> list[Voter]:
        """Resolve every enumerated identity, in registration order.

        Raises:
            UnregisteredVoterError: On the first entry whose record is gone.
        """
        with self._lock:
            return [self.require(identity) for identity in self.identities()]

    def save(self, *voters: Voter) -> None:
        """Write voter records back. Use inside ``transaction()``."""
        for voter in voters:
            self._store.put(VOTER_PREFIX + voter.identity, voter.to_dict())

    # ------------------------------------------------------------------
    # Owner-only mutations
    # ------------------------------------------------------------------

    def _require_owner(self, caller: str, operation: str) -> None:
        if caller != self._owner:
            logger.warning("Rejected %s from non-owner %s", operation, caller)
            raise OwnerOnlyError(caller, operation)

    def register(self, caller: str, new_identity: str, initial_votes: int) -> Voter:
        """Register ``new_identity`` with a vote budget and zero reputation.

        Raises:
            OwnerOnlyError: If ``caller`` is not the owner.
            VoterAlreadyRegisteredError: If the identity exists and
                re-registration is disabled.
        """
        validate_identity(caller, "caller")
        self._require_owner(caller, "register")
        validate_identity(new_identity, "identity")
        validate_budget(initial_votes, "initial_votes")

        voter = Voter(identity=new_identity, reputation=0, available_votes=initial_votes)
        with self.transaction():
            existed = self.is_registered(new_identity)
            if existed and not self._allow_reregistration:
                raise VoterAlreadyRegisteredError(new_identity)

            index = self.identities()
            if not (self._prune_on_remove and new_identity in index):
                index.append(new_identity)
                self._store.put(INDEX_KEY, index)
            self.save(voter)

        if existed:
            logger.warning("Re-registered voter %s; reputation reset to 0", new_identity)
        else:
            logger.info("Registered voter %s with %d votes", new_identity, initial_votes)
        return voter

    def remove(self, caller: str, target_identity: str) -> None:
        """Delete the record for ``target_identity``.

        Raises:
            OwnerOnlyError: If ``caller`` is not the owner.
            UnregisteredVoterError: If the target is not registered.
        """
        validate_identity(caller, "caller")
        self._require_owner(caller, "remove")
        validate_identity(target_identity, "identity")

        with self.transaction():
            self.require(target_identity)
            self._store.delete(VOTER_PREFIX + target_identity)
            if self._prune_on_remove:
                index = [i for i in self.identities() if i != target_identity]
                self._store.put(INDEX_KEY, index)

        logger.info("Removed voter %s", target_identity)
