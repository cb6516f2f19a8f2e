"""Voter registry, vote settlement and the contract facade."""

from .contract import VotingContract
from .engine import VotingEngine
from .registry import VoterRegistry

__all__ = [
    "VoterRegistry",
    "VotingContract",
    "VotingEngine",
]
