"""Vote settlement.

A vote moves ``signed_amount`` onto the candidate's reputation and costs
the caller ``abs(signed_amount)`` from their budget, so up- and
down-votes of the same size cost the same. Every check runs before the
first write, and both records are written in one store transaction.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from ..core.exceptions import InsufficientVotesError, SelfVoteError, ValidationException, VotingError
from ..core.models import I128_MAX, I128_MIN, Voter, validate_amount, validate_identity
from .registry import VoterRegistry

logger = logging.getLogger(__name__)


class VotingEngine:
    """Validates and applies votes against a VoterRegistry."""

    def __init__(self, registry: VoterRegistry) -> None:
        self._registry = registry

    @property
    def registry(self) -> VoterRegistry:
        return self._registry

    def preview(self, caller: str, candidate_identity: str, signed_amount: int) -> tuple[Voter, Voter]:
        """Run every vote check and return the records as they would be after.

        Nothing is written.

        Returns:
            Tuple of (caller_after, candidate_after).

        Raises:
            UnregisteredVoterError: If the caller or candidate is not registered.
            InsufficientVotesError: If the caller's budget is below ``abs(signed_amount)``.
            SelfVoteError: If the caller votes for themselves.
            ValidationException: On malformed input or reputation overflow.
        """
        validate_identity(caller, "caller")
        validate_identity(candidate_identity, "candidate")
        validate_amount(signed_amount)

        voter = self._registry.require(caller)

        magnitude = abs(signed_amount)
        if voter.available_votes < magnitude:
            raise InsufficientVotesError(voter.identity, voter.available_votes, magnitude)

        if candidate_identity == voter.identity:
            raise SelfVoteError(voter.identity)

        candidate = self._registry.require(candidate_identity)

        reputation = candidate.reputation + signed_amount
        if reputation < I128_MIN or reputation > I128_MAX:
            raise ValidationException(
                "Vote would overflow the candidate's reputation",
                field="votes",
                value=signed_amount,
            )

        return (
            replace(voter, available_votes=voter.available_votes - magnitude),
            replace(candidate, reputation=reputation),
        )

    def vote(self, caller: str, candidate_identity: str, signed_amount: int) -> None:
        """Cast ``signed_amount`` votes from ``caller`` onto ``candidate_identity``.

        Raises the same errors as ``preview``; state is unchanged on error.
        """
        try:
            with self._registry.transaction():
                voter, candidate = self.preview(caller, candidate_identity, signed_amount)
                self._registry.save(candidate, voter)
        except VotingError as e:
            logger.warning("Vote from %s rejected: %s", caller, e.message)
            raise

        logger.info(
            "Voter %s cast %d on %s (reputation now %d, %d votes left)",
            caller,
            signed_amount,
            candidate_identity,
            candidate.reputation,
            voter.available_votes,
        )
