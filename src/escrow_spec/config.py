"""Escrow program configuration constants.

Layout sizes and rent defaults here are part of the persisted format; changing
any of them invalidates existing ledger fixtures.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

# Numeric range
U64_MAX = (1 << 64) - 1

# Escrow program
ESCROW_SEED = b"escrow"
ESCROW_RECORD_LEN = 1 + 32 + 32 + 32 + 8  # 105 bytes
INSTRUCTION_LEN = 1 + 8

# Program-derived addresses
PUBKEY_LEN = 32
MAX_SEEDS = 16
MAX_SEED_LEN = 32
PDA_MARKER = b"ProgramDerivedAddress"

# Token ledger account layout: mint + owner + amount + state
TOKEN_ACCOUNT_LEN = 32 + 32 + 8 + 1  # 73 bytes

# Rent
ACCOUNT_STORAGE_OVERHEAD = 128
DEFAULT_LAMPORTS_PER_BYTE_YEAR = 3480
DEFAULT_EXEMPTION_THRESHOLD = 2.0
DEFAULT_BURN_PERCENT = 50
RENT_SYSVAR_LEN = 8 + 8 + 1


def _well_known_id(name: bytes) -> bytes:
    return name.ljust(PUBKEY_LEN, b"\x00")


# Well-known identities
SYSTEM_PROGRAM_ID = bytes(PUBKEY_LEN)
TOKEN_PROGRAM_ID = _well_known_id(b"TokenLedger1111")
RENT_SYSVAR_ID = _well_known_id(b"SysvarRent111111")
ESCROW_PROGRAM_ID = _well_known_id(b"EscrowProgram111")


@dataclass
class HostConfig:
    """Runtime settings for the CLI and fixture tools."""

    program_id: bytes = ESCROW_PROGRAM_ID
    fixture_dir: str = "fixtures"
    verbose: bool = False

    @classmethod
    def from_env(cls) -> "HostConfig":
        """Load configuration from environment variables."""
        config = cls()

        program_hex = os.environ.get("ESCROW_PROGRAM_ID")
        if program_hex:
            program_id = bytes.fromhex(program_hex)
            if len(program_id) != PUBKEY_LEN:
                raise ValueError(f"ESCROW_PROGRAM_ID must be {PUBKEY_LEN} bytes")
            config.program_id = program_id

        config.fixture_dir = os.environ.get("ESCROW_FIXTURE_DIR", config.fixture_dir)
        config.verbose = os.environ.get("VERBOSE", "").lower() in ("true", "1", "yes")
        return config
