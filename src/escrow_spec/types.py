"""Core types for the escrow program specs.

The ledger side (accounts, handles, calls) is modelled only as far as the
escrow program observes it: an account has an owning program, a native
balance used for rent, and an opaque data buffer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Union

from .config import SYSTEM_PROGRAM_ID
from .errors import ErrorCode, SpecError


class EscrowInstructionKind(IntEnum):
    INIT_ESCROW = 0
    EXCHANGE = 1


@dataclass(frozen=True)
class InitEscrow:
    amount: int

    kind = EscrowInstructionKind.INIT_ESCROW


@dataclass(frozen=True)
class Exchange:
    amount: int

    kind = EscrowInstructionKind.EXCHANGE


Instruction = Union[InitEscrow, Exchange]


@dataclass
class Account:
    address: bytes
    owner: bytes = SYSTEM_PROGRAM_ID
    lamports: int = 0
    data: bytes = b""
    executable: bool = False


@dataclass(frozen=True)
class AccountMeta:
    address: bytes
    is_signer: bool = False
    is_writable: bool = False


@dataclass
class InstructionCall:
    program_id: bytes
    accounts: List[AccountMeta]
    data: bytes


@dataclass
class Transaction:
    instructions: List[InstructionCall] = field(default_factory=list)


@dataclass
class LedgerState:
    accounts: dict[bytes, Account] = field(default_factory=dict)

    def put(self, account: Account) -> Account:
        self.accounts[account.address] = account
        return account

    def require(self, address: bytes) -> Account:
        account = self.accounts.get(address)
        if account is None:
            raise SpecError(ErrorCode.ACCOUNT_NOT_FOUND, f"account {address.hex()} not found")
        return account
