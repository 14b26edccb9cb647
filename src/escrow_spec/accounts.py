"""Typed account requests for each escrow instruction.

Callers supply a flat, ordered list of account handles. Each instruction
declares the role and required capability of every position once, and the
list is validated against that declaration before any handler logic runs.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import ClassVar, Sequence, TypeVar

from .errors import ErrorCode, SpecError
from .types import AccountMeta

_R = TypeVar("_R", bound="AccountsRequest")


@dataclass(frozen=True)
class Requirement:
    signer: bool = False
    writable: bool = False


SIGNER = Requirement(signer=True)
WRITABLE = Requirement(writable=True)
READONLY = Requirement()


@dataclass(frozen=True)
class AccountsRequest:
    REQUIREMENTS: ClassVar[dict[str, Requirement]] = {}

    @classmethod
    def from_metas(cls: type[_R], metas: Sequence[AccountMeta]) -> _R:
        names = [f.name for f in fields(cls)]
        if len(metas) < len(names):
            raise SpecError(
                ErrorCode.NOT_ENOUGH_ACCOUNT_KEYS,
                f"expected {len(names)} accounts, got {len(metas)}",
            )
        for name, meta in zip(names, metas):
            req = cls.REQUIREMENTS[name]
            if req.signer and not meta.is_signer:
                raise SpecError(ErrorCode.MISSING_SIGNATURE, f"{name} must sign")
            if req.writable and not meta.is_writable:
                raise SpecError(ErrorCode.INVALID_ARGUMENT, f"{name} must be writable")
        return cls(*(meta.address for meta in metas[: len(names)]))

    def to_metas(self) -> list[AccountMeta]:
        metas = []
        for f in fields(self):
            req = self.REQUIREMENTS[f.name]
            metas.append(AccountMeta(getattr(self, f.name), req.signer, req.writable))
        return metas

    def signers(self) -> frozenset[bytes]:
        return frozenset(
            getattr(self, f.name) for f in fields(self) if self.REQUIREMENTS[f.name].signer
        )


@dataclass(frozen=True)
class InitEscrowAccounts(AccountsRequest):
    initializer: bytes
    holding: bytes
    initializer_receive: bytes
    escrow: bytes
    rent_sysvar: bytes
    token_program: bytes

    REQUIREMENTS: ClassVar[dict[str, Requirement]] = {
        "initializer": SIGNER,
        "holding": WRITABLE,
        "initializer_receive": READONLY,
        "escrow": WRITABLE,
        "rent_sysvar": READONLY,
        "token_program": READONLY,
    }


@dataclass(frozen=True)
class ExchangeAccounts(AccountsRequest):
    taker: bytes
    taker_send: bytes
    taker_receive: bytes
    holding: bytes
    initializer: bytes
    initializer_receive: bytes
    escrow: bytes
    token_program: bytes
    authority: bytes

    REQUIREMENTS: ClassVar[dict[str, Requirement]] = {
        "taker": SIGNER,
        "taker_send": WRITABLE,
        "taker_receive": WRITABLE,
        "holding": WRITABLE,
        "initializer": WRITABLE,
        "initializer_receive": WRITABLE,
        "escrow": WRITABLE,
        "token_program": READONLY,
        "authority": READONLY,
    }
