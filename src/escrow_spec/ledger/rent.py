"""Rent-exemption oracle and the rent sysvar account layout."""

from __future__ import annotations

import struct
from dataclasses import dataclass

from ..config import (
    ACCOUNT_STORAGE_OVERHEAD,
    DEFAULT_BURN_PERCENT,
    DEFAULT_EXEMPTION_THRESHOLD,
    DEFAULT_LAMPORTS_PER_BYTE_YEAR,
    RENT_SYSVAR_ID,
    RENT_SYSVAR_LEN,
)
from ..errors import ErrorCode, SpecError
from ..types import Account

_LAYOUT = struct.Struct("<QdB")


@dataclass(frozen=True)
class Rent:
    lamports_per_byte_year: int = DEFAULT_LAMPORTS_PER_BYTE_YEAR
    exemption_threshold: float = DEFAULT_EXEMPTION_THRESHOLD
    burn_percent: int = DEFAULT_BURN_PERCENT

    def minimum_balance(self, data_len: int) -> int:
        bytes_stored = ACCOUNT_STORAGE_OVERHEAD + data_len
        return int(bytes_stored * self.lamports_per_byte_year * self.exemption_threshold)

    def is_exempt(self, balance: int, data_len: int) -> bool:
        return balance >= self.minimum_balance(data_len)

    def pack(self) -> bytes:
        return _LAYOUT.pack(self.lamports_per_byte_year, self.exemption_threshold, self.burn_percent)

    @classmethod
    def unpack(cls, data: bytes) -> "Rent":
        if len(data) != RENT_SYSVAR_LEN:
            raise SpecError(ErrorCode.INVALID_ACCOUNT_DATA, "malformed rent sysvar")
        lamports, threshold, burn = _LAYOUT.unpack(data)
        return cls(lamports_per_byte_year=lamports, exemption_threshold=threshold, burn_percent=burn)

    @classmethod
    def from_account(cls, account: Account) -> "Rent":
        if account.address != RENT_SYSVAR_ID:
            raise SpecError(ErrorCode.INVALID_ARGUMENT, "account is not the rent sysvar")
        return cls.unpack(account.data)


def rent_sysvar_account(rent: Rent | None = None) -> Account:
    """Build the sysvar account a ledger exposes for `rent`."""
    rent = rent or Rent()
    return Account(address=RENT_SYSVAR_ID, lamports=1, data=rent.pack())
