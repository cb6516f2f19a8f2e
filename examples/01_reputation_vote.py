#!/usr/bin/env python3
"""Example 01: Reputation vote - deploy, register and vote.

This example demonstrates the core repvote workflow:
1. Deploying a contract over a store chosen by configuration
2. Registering voters with vote budgets
3. Casting up- and down-votes and handling a rejected vote
4. Removing a voter and listing the rest

Requirements:
    - `pip install repvote` or run from source
    - Optional: REPVOTE_STORE_BACKEND=file and REPVOTE_STORE_PATH to persist state

Usage:
    python examples/01_reputation_vote.py
"""

from __future__ import annotations

import sys
from pathlib import Path

# Add src to path when running from source
src_path = Path(__file__).parent.parent / "src"
if src_path.exists():
    sys.path.insert(0, str(src_path))

from repvote import VotingContract, VotingError, open_store
from repvote.core import configure_logging

OWNER = "did:key:owner"
X = "did:key:x"
Y = "did:key:y"


def show(contract: VotingContract) -> None:
    for voter in contract.get_voters():
        print(f"  {voter.identity:<16} reputation={voter.reputation:<6} votes={voter.available_votes}")
    print()


def main() -> None:
    """Run the reputation vote example."""
    configure_logging(json_format=False)

    print("=" * 60)
    print("  repvote Example 01: Reputation vote")
    print("=" * 60)
    print()

    store = open_store()
    if store.contains("owner"):
        contract = VotingContract.open(store)
    else:
        contract = VotingContract.deploy(store, creator=OWNER)

    print("Step 1: register X (100 votes) and Y (50 votes)")
    contract.add_voter(OWNER, X, 100)
    contract.add_voter(OWNER, Y, 50)
    show(contract)

    print("Step 2: X votes +30 on Y")
    contract.vote(X, Y, 30)
    show(contract)

    print("Step 3: X tries -80 on Y with 70 votes left")
    try:
        contract.vote(X, Y, -80)
    except VotingError as e:
        print(f"  rejected: {e.kind.value} ({e.message})")
    show(contract)

    print("Step 4: owner removes Y")
    contract.remove_voter(OWNER, Y)
    show(contract)


if __name__ == "__main__":
    main()
