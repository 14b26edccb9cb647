"""Persisted escrow record (105 bytes, packed, no padding).

    [0]        is_initialized               (1 byte)
    [1..33]    initializer                  (32 bytes)
    [33..65]   holding_account              (32 bytes)
    [65..97]   initializer_receive_account  (32 bytes)
    [97..105]  expected_amount              (u64, little-endian)
"""

from __future__ import annotations

from dataclasses import dataclass

from .config import ESCROW_RECORD_LEN, PUBKEY_LEN, U64_MAX
from .errors import ErrorCode, SpecError

_OFF_INITIALIZER = 1
_OFF_HOLDING = _OFF_INITIALIZER + PUBKEY_LEN
_OFF_RECEIVE = _OFF_HOLDING + PUBKEY_LEN
_OFF_AMOUNT = _OFF_RECEIVE + PUBKEY_LEN


@dataclass
class EscrowRecord:
    is_initialized: bool = False
    initializer: bytes = bytes(PUBKEY_LEN)
    holding_account: bytes = bytes(PUBKEY_LEN)
    initializer_receive_account: bytes = bytes(PUBKEY_LEN)
    expected_amount: int = 0

    @classmethod
    def unpack_unchecked(cls, data: bytes) -> "EscrowRecord":
        """Decode a record buffer without requiring it to be initialized."""
        if len(data) != ESCROW_RECORD_LEN:
            raise SpecError(
                ErrorCode.INVALID_ACCOUNT_DATA,
                f"escrow record must be {ESCROW_RECORD_LEN} bytes, got {len(data)}",
            )
        flag = data[0]
        if flag not in (0, 1):
            raise SpecError(ErrorCode.INVALID_ACCOUNT_DATA, "invalid is_initialized flag")
        return cls(
            is_initialized=flag == 1,
            initializer=bytes(data[_OFF_INITIALIZER:_OFF_HOLDING]),
            holding_account=bytes(data[_OFF_HOLDING:_OFF_RECEIVE]),
            initializer_receive_account=bytes(data[_OFF_RECEIVE:_OFF_AMOUNT]),
            expected_amount=int.from_bytes(data[_OFF_AMOUNT:], "little", signed=False),
        )

    @classmethod
    def unpack(cls, data: bytes) -> "EscrowRecord":
        record = cls.unpack_unchecked(data)
        if not record.is_initialized:
            raise SpecError(ErrorCode.UNINITIALIZED_ACCOUNT, "escrow record not initialized")
        return record

    def pack(self) -> bytes:
        for name in ("initializer", "holding_account", "initializer_receive_account"):
            if len(getattr(self, name)) != PUBKEY_LEN:
                raise SpecError(ErrorCode.INVALID_ACCOUNT_DATA, f"{name} must be {PUBKEY_LEN} bytes")
        if self.expected_amount < 0 or self.expected_amount > U64_MAX:
            raise SpecError(ErrorCode.INVALID_AMOUNT, "expected_amount out of u64 range")

        buf = bytearray()
        buf.append(1 if self.is_initialized else 0)
        buf += self.initializer
        buf += self.holding_account
        buf += self.initializer_receive_account
        buf += int(self.expected_amount).to_bytes(8, "little", signed=False)
        return bytes(buf)
