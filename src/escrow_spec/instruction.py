"""Escrow instruction wire format.

    [0]     tag     (1 byte: 0 = InitEscrow, 1 = Exchange)
    [1..9]  amount  (u64, little-endian)

Trailing bytes after the amount are ignored.
"""

from __future__ import annotations

from .config import INSTRUCTION_LEN, U64_MAX
from .errors import ErrorCode, SpecError
from .types import EscrowInstructionKind, Exchange, InitEscrow, Instruction


def _read_u64_le(data: bytes, offset: int) -> int:
    return int.from_bytes(data[offset : offset + 8], "little", signed=False)


def decode(data: bytes) -> Instruction:
    if len(data) < INSTRUCTION_LEN:
        raise SpecError(ErrorCode.INVALID_INSTRUCTION, "instruction data too short")

    tag = data[0]
    amount = _read_u64_le(data, 1)
    if tag == EscrowInstructionKind.INIT_ESCROW:
        return InitEscrow(amount=amount)
    if tag == EscrowInstructionKind.EXCHANGE:
        return Exchange(amount=amount)
    raise SpecError(ErrorCode.INVALID_INSTRUCTION, f"unknown instruction tag {tag}")


def encode(ix: Instruction) -> bytes:
    if ix.amount < 0 or ix.amount > U64_MAX:
        raise SpecError(ErrorCode.INVALID_AMOUNT, "amount out of u64 range")
    buf = bytearray()
    buf.append(int(ix.kind))
    buf += int(ix.amount).to_bytes(8, "little", signed=False)
    return bytes(buf)
