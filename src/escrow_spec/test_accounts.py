"""Deterministic named identities for specs and fixtures."""

from __future__ import annotations

from blake3 import blake3


def named_address(name: str) -> bytes:
    return blake3(b"escrow-spec/account/" + name.encode()).digest()


# Parties
ALICE = named_address("alice")  # initializer
BOB = named_address("bob")  # taker
CAROL = named_address("carol")

# Mints
MINT_A = named_address("mint-a")
MINT_B = named_address("mint-b")

# Token accounts
ALICE_HOLDING = named_address("alice-holding-a")
ALICE_RECEIVE = named_address("alice-receive-b")
BOB_SEND = named_address("bob-send-b")
BOB_RECEIVE = named_address("bob-receive-a")
CAROL_RECEIVE = named_address("carol-receive-b")

# Escrow record
ESCROW = named_address("escrow-record")
