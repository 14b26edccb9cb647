"""Canonical ledger state digest (v1)."""
from __future__ import annotations

from blake3 import blake3

from .types import LedgerState


def _u64_be(value: int) -> bytes:
    if value < 0:
        raise ValueError("u64 must be non-negative")
    return int(value).to_bytes(8, "big", signed=False)


def compute_state_digest(state: LedgerState) -> str:
    """Compute state digest v1.

    Accounts are encoded in address order and hashed with BLAKE3-256.
    """
    buf = bytearray()
    for address in sorted(state.accounts):
        acc = state.accounts[address]
        if len(address) != 32:
            raise ValueError(f"address must be 32 bytes, got {len(address)}")
        buf += address
        buf += acc.owner
        buf += _u64_be(acc.lamports)
        buf += b"\x01" if acc.executable else b"\x00"
        buf += _u64_be(len(acc.data))
        buf += acc.data
    return blake3(buf).hexdigest()
