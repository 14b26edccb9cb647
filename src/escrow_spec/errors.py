"""Escrow program error codes and exceptions."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class ErrorCode(IntEnum):
    # Validation
    INVALID_INSTRUCTION = 0x0100
    INVALID_AMOUNT = 0x0101
    INVALID_ARGUMENT = 0x0102
    INVALID_ACCOUNT_DATA = 0x0103
    NOT_ENOUGH_ACCOUNT_KEYS = 0x0104
    INVALID_SEEDS = 0x0105
    EXPECTED_AMOUNT_MISMATCH = 0x0106

    # Authorization
    MISSING_SIGNATURE = 0x0200
    INCORRECT_PROGRAM_ID = 0x0201
    OWNER_MISMATCH = 0x0202

    # Resource
    NOT_RENT_EXEMPT = 0x0300
    INSUFFICIENT_FUNDS = 0x0301
    AMOUNT_OVERFLOW = 0x0302
    OVERFLOW = 0x0303
    NON_ZERO_BALANCE = 0x0304

    # State
    ACCOUNT_NOT_FOUND = 0x0400
    ACCOUNT_ALREADY_INITIALIZED = 0x0401
    UNINITIALIZED_ACCOUNT = 0x0402
    MINT_MISMATCH = 0x0403
    ACCOUNT_FROZEN = 0x0404


@dataclass(frozen=True)
class SpecError(Exception):
    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.name}({self.code:#06x}): {self.message}"


# Allow Python's Exception machinery to set __traceback__/__context__/__cause__
# while keeping dataclass fields frozen (Python 3.13 contextlib compat).
_EXCEPTION_ATTRS = frozenset(("__traceback__", "__context__", "__cause__"))
_frozen_setattr = SpecError.__setattr__


def _spec_error_setattr(self: SpecError, name: str, value: object) -> None:
    if name in _EXCEPTION_ATTRS:
        object.__setattr__(self, name, value)
    else:
        _frozen_setattr(self, name, value)


SpecError.__setattr__ = _spec_error_setattr  # type: ignore[method-assign]


# Escrow-domain errors cross the program boundary as Custom(index), in the
# declaration order of the on-ledger error set.
CUSTOM_ERROR_INDEX = {
    ErrorCode.AMOUNT_OVERFLOW: 0,
    ErrorCode.EXPECTED_AMOUNT_MISMATCH: 1,
    ErrorCode.INVALID_AMOUNT: 2,
    ErrorCode.INVALID_INSTRUCTION: 3,
    ErrorCode.NOT_RENT_EXEMPT: 4,
}


def program_error(code: ErrorCode) -> str:
    """Serialize an error code the way the ledger reports program errors."""
    index = CUSTOM_ERROR_INDEX.get(code)
    if index is not None:
        return f"Custom({index})"
    return "".join(part.capitalize() for part in code.name.split("_"))
