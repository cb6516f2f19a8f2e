# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Custom exception hierarchy for repvote.

Provides specific exception types for the voting error taxonomy and for
the surrounding configuration, validation and storage layers.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class ErrorKind(StrEnum):
    """Tags reported with every voting error."""

    ONLY_OWNER_FUNCTION = "OnlyOwnerFunction"
    UNREGISTERED_VOTER = "UnregisteredVoter"
    VOTER_ALREADY_VOTED = "VoterAlreadyVoted"  # budget exhausted
    VOTER_EQUAL_TO_CANDIDATE = "VoterEqualToCandidate"
    VOTER_ALREADY_REGISTERED = "VoterAlreadyRegistered"


class RepvoteException(Exception):  # noqa: N818 - matches the rest of the hierarchy
    """Base exception for all repvote errors.

    All repvote-specific exceptions should inherit from this class.
    """

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class VotingError(RepvoteException):
    """A caller-recoverable rejection of a registry or vote operation.

    Every subclass carries the ``kind`` tag clients match on. State is
    unchanged whenever one of these is raised.
    """

    kind: ErrorKind

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["code"] = self.kind.value
        return data


class OwnerOnlyError(VotingError):
    """A non-owner attempted an owner-gated operation."""

    kind = ErrorKind.ONLY_OWNER_FUNCTION

    def __init__(self, caller: str, operation: str):
        super().__init__(
            f"Only the owner may call {operation}",
            {"caller": caller, "operation": operation},
        )
        self.caller = caller
        self.operation = operation


class UnregisteredVoterError(VotingError):
    """The referenced identity has no voter record."""

    kind = ErrorKind.UNREGISTERED_VOTER

    def __init__(self, identity: str):
        super().__init__(f"Voter not registered: {identity}", {"identity": identity})
        self.identity = identity


class InsufficientVotesError(VotingError):
    """The caller's remaining vote budget is smaller than the vote magnitude.

    Tagged ``VoterAlreadyVoted`` for compatibility with existing clients;
    the condition checked is budget exhaustion, not repeat voting.
    """

    kind = ErrorKind.VOTER_ALREADY_VOTED

    def __init__(self, identity: str, available: int, requested: int):
        super().__init__(
            f"Voter {identity} has {available} votes available, {requested} requested",
            {"identity": identity, "available": str(available), "requested": str(requested)},
        )
        self.identity = identity
        self.available = available
        self.requested = requested


class SelfVoteError(VotingError):
    """A voter attempted to vote on their own reputation."""

    kind = ErrorKind.VOTER_EQUAL_TO_CANDIDATE

    def __init__(self, identity: str):
        super().__init__(f"Voter cannot vote for themselves: {identity}", {"identity": identity})
        self.identity = identity


class VoterAlreadyRegisteredError(VotingError):
    """Registration of an existing identity while re-registration is disabled."""

    kind = ErrorKind.VOTER_ALREADY_REGISTERED

    def __init__(self, identity: str):
        super().__init__(f"Voter already registered: {identity}", {"identity": identity})
        self.identity = identity


# Original error names, kept for clients that match on them.
OnlyOwnerFunction = OwnerOnlyError
UnregisteredVoter = UnregisteredVoterError
VoterAlreadyVoted = InsufficientVotesError
VoterEqualToCandidate = SelfVoteError


class ValidationException(RepvoteException):
    """Exception for validation errors.

    Raised when:
    - An identity is empty or not a string
    - A vote budget or amount is not an integer
    - A value falls outside its 128-bit range
    - A vote would overflow the candidate's reputation
    """

    def __init__(self, message: str, field: str | None = None, value: Any = None):
        details = {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = str(value)
        super().__init__(message, details)
        self.field = field
        self.value = value


class ConfigException(RepvoteException):
    """Exception for configuration errors.

    Raised when:
    - Required settings are missing
    - The configured store backend is unknown
    - A store is re-opened with a conflicting owner
    """

    def __init__(self, message: str, missing_vars: list[str] | None = None):
        details = {}
        if missing_vars:
            details["missing_vars"] = missing_vars
        super().__init__(message, details)
        self.missing_vars = missing_vars or []


class StorageException(RepvoteException):
    """Exception for store errors.

    Raised when:
    - A persisted store file cannot be read or parsed
    - Writing the store fails
    - Transactions are nested
    """

    def __init__(self, message: str, backend: str | None = None):
        details = {}
        if backend:
            details["backend"] = backend
        super().__init__(message, details)
        self.backend = backend
