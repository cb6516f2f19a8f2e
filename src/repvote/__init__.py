# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""repvote - reputation-weighted delegated voting registry.

An owner registers voters, each with a fixed vote budget. Registered
voters cast signed, weighted votes onto each other's reputation; every
vote costs the caller its magnitude from their budget.

Architecture:
  VoterRegistry (owner gate, voter records, enumeration)
    → VotingEngine (validate, then settle both records atomically)
    → VotingContract (deploy/open plus the four contract messages)

State lives in an injected key-value store (memory or JSON file).
"""

__version__ = "0.1.0"

from .core import (
    ErrorKind,
    InsufficientVotesError,
    OwnerOnlyError,
    RepvoteException,
    SelfVoteError,
    UnregisteredVoterError,
    Voter,
    VoterAlreadyRegisteredError,
    VotingError,
)
from .storage import JSONFileStore, KeyValueStore, MemoryStore, open_store
from .voting import VoterRegistry, VotingContract, VotingEngine

__all__ = [
    "ErrorKind",
    "InsufficientVotesError",
    "JSONFileStore",
    "KeyValueStore",
    "MemoryStore",
    "OwnerOnlyError",
    "RepvoteException",
    "SelfVoteError",
    "UnregisteredVoterError",
    "Voter",
    "VoterAlreadyRegisteredError",
    "VoterRegistry",
    "VotingContract",
    "VotingEngine",
    "VotingError",
    "open_store",
]
