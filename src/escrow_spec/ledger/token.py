"""Token ledger collaborator (in-memory reference).

The escrow program treats the token ledger as a black box; this module is the
reference behaviour the specs and fixtures run against. Every operation takes
the set of identities that signed for the enclosing call, which includes any
program-derived address the caller signed for with seeds.

Token account layout (73 bytes):

    [0..32]   mint    (32 bytes)
    [32..64]  owner   (32 bytes, the authority allowed to move funds)
    [64..72]  amount  (u64, little-endian)
    [72]      state   (1 byte: 0 uninitialized, 1 initialized, 2 frozen)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import AbstractSet

from ..config import SYSTEM_PROGRAM_ID, TOKEN_ACCOUNT_LEN, TOKEN_PROGRAM_ID, U64_MAX
from ..errors import ErrorCode, SpecError
from ..types import Account, LedgerState

logger = logging.getLogger(__name__)


class TokenAccountState(IntEnum):
    UNINITIALIZED = 0
    INITIALIZED = 1
    FROZEN = 2


class AuthorityType(IntEnum):
    MINT_TOKENS = 0
    FREEZE_ACCOUNT = 1
    ACCOUNT_OWNER = 2
    CLOSE_ACCOUNT = 3


@dataclass
class TokenAccount:
    mint: bytes
    owner: bytes
    amount: int = 0
    state: TokenAccountState = TokenAccountState.INITIALIZED

    def pack(self) -> bytes:
        buf = bytearray()
        buf += self.mint
        buf += self.owner
        buf += int(self.amount).to_bytes(8, "little", signed=False)
        buf.append(int(self.state))
        return bytes(buf)

    @classmethod
    def unpack(cls, data: bytes) -> "TokenAccount":
        if len(data) != TOKEN_ACCOUNT_LEN:
            raise SpecError(ErrorCode.INVALID_ACCOUNT_DATA, "malformed token account")
        try:
            state = TokenAccountState(data[72])
        except ValueError:
            raise SpecError(ErrorCode.INVALID_ACCOUNT_DATA, "invalid token account state") from None
        return cls(
            mint=bytes(data[0:32]),
            owner=bytes(data[32:64]),
            amount=int.from_bytes(data[64:72], "little", signed=False),
            state=state,
        )


def token_account(address: bytes, mint: bytes, owner: bytes, amount: int, lamports: int) -> Account:
    """Build a ledger account holding an initialized token balance."""
    data = TokenAccount(mint=mint, owner=owner, amount=amount).pack()
    return Account(address=address, owner=TOKEN_PROGRAM_ID, lamports=lamports, data=data)


def load_token_account(state: LedgerState, address: bytes) -> TokenAccount:
    account = state.require(address)
    if account.owner != TOKEN_PROGRAM_ID:
        raise SpecError(ErrorCode.INCORRECT_PROGRAM_ID, "account not owned by the token ledger")
    token = TokenAccount.unpack(account.data)
    if token.state == TokenAccountState.UNINITIALIZED:
        raise SpecError(ErrorCode.UNINITIALIZED_ACCOUNT, "token account not initialized")
    return token


def _store(state: LedgerState, address: bytes, token: TokenAccount) -> None:
    state.accounts[address].data = token.pack()


def _check_authority(token: TokenAccount, authority: bytes, signers: AbstractSet[bytes]) -> None:
    if token.owner != authority:
        raise SpecError(ErrorCode.OWNER_MISMATCH, "authority does not own the token account")
    if authority not in signers:
        raise SpecError(ErrorCode.MISSING_SIGNATURE, "token account authority did not sign")


def transfer(
    state: LedgerState,
    source: bytes,
    destination: bytes,
    authority: bytes,
    amount: int,
    signers: AbstractSet[bytes],
) -> None:
    src = load_token_account(state, source)
    dst = load_token_account(state, destination)
    if src.state == TokenAccountState.FROZEN or dst.state == TokenAccountState.FROZEN:
        raise SpecError(ErrorCode.ACCOUNT_FROZEN, "token account is frozen")
    if src.mint != dst.mint:
        raise SpecError(ErrorCode.MINT_MISMATCH, "source and destination mints differ")
    _check_authority(src, authority, signers)
    if amount < 0 or amount > U64_MAX:
        raise SpecError(ErrorCode.INVALID_AMOUNT, "transfer amount out of u64 range")
    if src.amount < amount:
        raise SpecError(ErrorCode.INSUFFICIENT_FUNDS, "insufficient token balance")

    logger.info("token transfer %d from %s to %s", amount, source.hex()[:8], destination.hex()[:8])
    if source == destination:
        return

    if dst.amount + amount > U64_MAX:
        raise SpecError(ErrorCode.OVERFLOW, "destination token balance overflow")
    src.amount -= amount
    dst.amount += amount
    _store(state, source, src)
    _store(state, destination, dst)


def set_authority(
    state: LedgerState,
    account: bytes,
    new_authority: bytes,
    authority_type: AuthorityType,
    current_authority: bytes,
    signers: AbstractSet[bytes],
) -> None:
    if authority_type != AuthorityType.ACCOUNT_OWNER:
        raise SpecError(ErrorCode.INVALID_ARGUMENT, f"unsupported authority type {authority_type.name}")
    token = load_token_account(state, account)
    if token.state == TokenAccountState.FROZEN:
        raise SpecError(ErrorCode.ACCOUNT_FROZEN, "token account is frozen")
    _check_authority(token, current_authority, signers)

    logger.info("token set_authority %s -> %s", account.hex()[:8], new_authority.hex()[:8])
    token.owner = new_authority
    _store(state, account, token)


def close_account(
    state: LedgerState,
    account: bytes,
    destination: bytes,
    authority: bytes,
    signers: AbstractSet[bytes],
) -> None:
    token = load_token_account(state, account)
    _check_authority(token, authority, signers)
    if token.amount != 0:
        raise SpecError(ErrorCode.NON_ZERO_BALANCE, "cannot close a token account holding funds")

    closing = state.accounts[account]
    receiver = state.require(destination)
    if receiver.lamports + closing.lamports > U64_MAX:
        raise SpecError(ErrorCode.OVERFLOW, "destination lamports overflow")

    logger.info("token close_account %s refund to %s", account.hex()[:8], destination.hex()[:8])
    receiver.lamports += closing.lamports
    closing.lamports = 0
    closing.data = b""
    closing.owner = SYSTEM_PROGRAM_ID
