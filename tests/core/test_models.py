"""Tests for repvote.core.models."""

from __future__ import annotations

import pytest

from repvote.core.exceptions import ValidationException
from repvote.core.models import (
    I128_MAX,
    I128_MIN,
    U128_MAX,
    Voter,
    validate_amount,
    validate_budget,
    validate_identity,
)


class TestVoter:
    def test_defaults(self):
        voter = Voter(identity="did:key:a")
        assert voter.reputation == 0
        assert voter.available_votes == 0

    def test_dict_round_trip_keeps_128_bit_values(self):
        voter = Voter(identity="did:key:a", reputation=I128_MIN, available_votes=U128_MAX)
        assert Voter.from_dict(voter.to_dict()) == voter

    def test_from_dict_missing_fields(self):
        assert Voter.from_dict({"identity": "did:key:a"}) == Voter(identity="did:key:a")


class TestValidateIdentity:
    def test_accepts_string(self):
        assert validate_identity("5GrwvaEF") == "5GrwvaEF"

    @pytest.mark.parametrize("value", ["", None, 42, b"bytes"])
    def test_rejects(self, value):
        with pytest.raises(ValidationException) as exc_info:
            validate_identity(value, "caller")
        assert exc_info.value.field == "caller"


class TestValidateBudget:
    @pytest.mark.parametrize("value", [0, 1, U128_MAX])
    def test_accepts_u128(self, value):
        assert validate_budget(value) == value

    @pytest.mark.parametrize("value", [-1, U128_MAX + 1, 1.5, "10", True])
    def test_rejects(self, value):
        with pytest.raises(ValidationException):
            validate_budget(value)


class TestValidateAmount:
    @pytest.mark.parametrize("value", [I128_MIN, -1, 0, 1, I128_MAX])
    def test_accepts_i128(self, value):
        assert validate_amount(value) == value

    @pytest.mark.parametrize("value", [I128_MIN - 1, I128_MAX + 1, 2.0, None, False])
    def test_rejects(self, value):
        with pytest.raises(ValidationException):
            validate_amount(value)
