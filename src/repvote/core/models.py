"""Voter record, 128-bit bounds and input validators.

Reputation is a signed 128-bit quantity and vote budgets are unsigned
128-bit quantities. Python ints are unbounded, so the ranges are enforced
explicitly at the edges.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .exceptions import ValidationException

I128_MIN = -(2**127)
I128_MAX = 2**127 - 1
U128_MAX = 2**128 - 1


@dataclass
class Voter:
    """A registered participant."""

    identity: str
    reputation: int = 0
    available_votes: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "identity": self.identity,
            "reputation": self.reputation,
            "available_votes": self.available_votes,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Voter:
        return cls(
            identity=data["identity"],
            reputation=int(data.get("reputation", 0)),
            available_votes=int(data.get("available_votes", 0)),
        )


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_identity(identity: Any, field: str = "identity") -> str:
    """Return ``identity`` if it is a non-empty string."""
    if not isinstance(identity, str) or not identity:
        raise ValidationException("Identity must be a non-empty string", field=field, value=identity)
    return identity


def validate_budget(votes: Any, field: str = "available_votes") -> int:
    """Return ``votes`` if it fits an unsigned 128-bit integer."""
    if not _is_int(votes):
        raise ValidationException("Vote budget must be an integer", field=field, value=votes)
    if votes < 0 or votes > U128_MAX:
        raise ValidationException("Vote budget outside unsigned 128-bit range", field=field, value=votes)
    return votes


def validate_amount(amount: Any, field: str = "votes") -> int:
    """Return ``amount`` if it fits a signed 128-bit integer."""
    if not _is_int(amount):
        raise ValidationException("Vote amount must be an integer", field=field, value=amount)
    if amount < I128_MIN or amount > I128_MAX:
        raise ValidationException("Vote amount outside signed 128-bit range", field=field, value=amount)
    return amount
