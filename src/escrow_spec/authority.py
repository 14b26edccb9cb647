"""Program-derived authority.

A program-derived address is a deterministic, key-less identity controlled by
the owning program: anyone can recompute it from the seeds and the program
identity, but because it is not a valid curve point nobody holds a private key
for it. The program "signs" for it by presenting the seeds (plus bump) that
produce it.
"""

from __future__ import annotations

from typing import Sequence

from blake3 import blake3

from .config import ESCROW_SEED, MAX_SEED_LEN, MAX_SEEDS, PDA_MARKER, PUBKEY_LEN
from .crypto.ed25519 import is_on_curve
from .errors import ErrorCode, SpecError


def _check_seeds(seeds: Sequence[bytes], program_id: bytes) -> None:
    if len(program_id) != PUBKEY_LEN:
        raise SpecError(ErrorCode.INVALID_ARGUMENT, f"program id must be {PUBKEY_LEN} bytes")
    if len(seeds) > MAX_SEEDS:
        raise SpecError(ErrorCode.INVALID_SEEDS, f"at most {MAX_SEEDS} seeds allowed")
    for seed in seeds:
        if len(seed) > MAX_SEED_LEN:
            raise SpecError(ErrorCode.INVALID_SEEDS, f"seed longer than {MAX_SEED_LEN} bytes")


def _hash_seeds(seeds: Sequence[bytes], program_id: bytes) -> bytes:
    hasher = blake3()
    for seed in seeds:
        hasher.update(seed)
    hasher.update(program_id)
    hasher.update(PDA_MARKER)
    return hasher.digest()


def create_program_address(seeds: Sequence[bytes], program_id: bytes) -> bytes:
    _check_seeds(seeds, program_id)
    address = _hash_seeds(seeds, program_id)
    if is_on_curve(address):
        raise SpecError(ErrorCode.INVALID_SEEDS, "derived address lies on the curve")
    return address


def find_program_address(seeds: Sequence[bytes], program_id: bytes) -> tuple[bytes, int]:
    """Return the first off-curve address, trying bump seeds 255 down to 0."""
    _check_seeds([*seeds, b"\xff"], program_id)
    for bump in range(255, -1, -1):
        address = _hash_seeds([*seeds, bytes([bump])], program_id)
        if not is_on_curve(address):
            return address, bump
    raise SpecError(ErrorCode.INVALID_SEEDS, "unable to find a viable bump seed")


def derive_escrow_authority(program_id: bytes) -> tuple[bytes, int]:
    """Authority that takes custody of holding accounts for `program_id`."""
    return find_program_address([ESCROW_SEED], program_id)


def escrow_signer_seeds(bump: int) -> list[bytes]:
    return [ESCROW_SEED, bytes([bump])]
