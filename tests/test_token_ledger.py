"""Token ledger collaborator specs (reference behaviour the handlers run against)."""

from __future__ import annotations

import pytest

from escrow_spec.config import (
    ESCROW_RECORD_LEN,
    RENT_SYSVAR_ID,
    SYSTEM_PROGRAM_ID,
    TOKEN_ACCOUNT_LEN,
    TOKEN_PROGRAM_ID,
    U64_MAX,
)
from escrow_spec.errors import ErrorCode, SpecError
from escrow_spec.ledger import token
from escrow_spec.ledger.rent import Rent, rent_sysvar_account
from escrow_spec.ledger.token import AuthorityType, TokenAccount, TokenAccountState
from escrow_spec.test_accounts import (
    ALICE,
    ALICE_HOLDING,
    ALICE_RECEIVE,
    BOB,
    BOB_RECEIVE,
    BOB_SEND,
    MINT_A,
    MINT_B,
)
from escrow_spec.types import Account, LedgerState

TOKEN_RENT = 1_398_960


def _state() -> LedgerState:
    state = LedgerState()
    state.put(Account(address=ALICE, lamports=5_000_000))
    state.put(token.token_account(ALICE_HOLDING, MINT_A, ALICE, 100, TOKEN_RENT))
    state.put(token.token_account(BOB_RECEIVE, MINT_A, BOB, 0, TOKEN_RENT))
    state.put(token.token_account(ALICE_RECEIVE, MINT_B, ALICE, 0, TOKEN_RENT))
    return state


def _amount(state: LedgerState, address: bytes) -> int:
    return TokenAccount.unpack(state.accounts[address].data).amount


def _code(exc_info) -> ErrorCode:
    return exc_info.value.code


def test_token_account_layout() -> None:
    data = TokenAccount(mint=MINT_A, owner=ALICE, amount=7).pack()
    assert len(data) == 73
    assert data[64:72] == (7).to_bytes(8, "little")
    assert data[72] == TokenAccountState.INITIALIZED


def test_transfer_moves_balance() -> None:
    state = _state()
    token.transfer(state, ALICE_HOLDING, BOB_RECEIVE, ALICE, 40, signers={ALICE})
    assert _amount(state, ALICE_HOLDING) == 60
    assert _amount(state, BOB_RECEIVE) == 40


def test_transfer_requires_signature() -> None:
    with pytest.raises(SpecError) as exc_info:
        token.transfer(_state(), ALICE_HOLDING, BOB_RECEIVE, ALICE, 1, signers=set())
    assert _code(exc_info) == ErrorCode.MISSING_SIGNATURE


def test_transfer_requires_owner() -> None:
    with pytest.raises(SpecError) as exc_info:
        token.transfer(_state(), ALICE_HOLDING, BOB_RECEIVE, BOB, 1, signers={BOB})
    assert _code(exc_info) == ErrorCode.OWNER_MISMATCH


def test_transfer_insufficient_funds() -> None:
    with pytest.raises(SpecError) as exc_info:
        token.transfer(_state(), ALICE_HOLDING, BOB_RECEIVE, ALICE, 101, signers={ALICE})
    assert _code(exc_info) == ErrorCode.INSUFFICIENT_FUNDS


def test_transfer_mint_mismatch() -> None:
    with pytest.raises(SpecError) as exc_info:
        token.transfer(_state(), ALICE_HOLDING, ALICE_RECEIVE, ALICE, 1, signers={ALICE})
    assert _code(exc_info) == ErrorCode.MINT_MISMATCH


def test_transfer_destination_overflow() -> None:
    state = _state()
    state.put(token.token_account(BOB_RECEIVE, MINT_A, BOB, U64_MAX, TOKEN_RENT))
    with pytest.raises(SpecError) as exc_info:
        token.transfer(state, ALICE_HOLDING, BOB_RECEIVE, ALICE, 1, signers={ALICE})
    assert _code(exc_info) == ErrorCode.OVERFLOW


def test_transfer_frozen_account() -> None:
    state = _state()
    frozen = TokenAccount(mint=MINT_A, owner=BOB, amount=0, state=TokenAccountState.FROZEN)
    state.accounts[BOB_RECEIVE].data = frozen.pack()
    with pytest.raises(SpecError) as exc_info:
        token.transfer(state, ALICE_HOLDING, BOB_RECEIVE, ALICE, 1, signers={ALICE})
    assert _code(exc_info) == ErrorCode.ACCOUNT_FROZEN


def test_non_token_account_rejected() -> None:
    state = _state()
    state.put(Account(address=BOB_SEND, owner=SYSTEM_PROGRAM_ID, lamports=1))
    with pytest.raises(SpecError) as exc_info:
        token.transfer(state, BOB_SEND, BOB_RECEIVE, BOB, 0, signers={BOB})
    assert _code(exc_info) == ErrorCode.INCORRECT_PROGRAM_ID


def test_missing_account() -> None:
    with pytest.raises(SpecError) as exc_info:
        token.transfer(_state(), BOB_SEND, BOB_RECEIVE, BOB, 0, signers={BOB})
    assert _code(exc_info) == ErrorCode.ACCOUNT_NOT_FOUND


def test_set_authority_changes_owner() -> None:
    state = _state()
    token.set_authority(state, ALICE_HOLDING, BOB, AuthorityType.ACCOUNT_OWNER, ALICE, signers={ALICE})
    assert TokenAccount.unpack(state.accounts[ALICE_HOLDING].data).owner == BOB


def test_set_authority_unsupported_type() -> None:
    with pytest.raises(SpecError) as exc_info:
        token.set_authority(_state(), ALICE_HOLDING, BOB, AuthorityType.CLOSE_ACCOUNT, ALICE, signers={ALICE})
    assert _code(exc_info) == ErrorCode.INVALID_ARGUMENT


def test_close_account_refunds_lamports() -> None:
    state = _state()
    token.close_account(state, BOB_RECEIVE, ALICE, BOB, signers={BOB})
    closed = state.accounts[BOB_RECEIVE]
    assert closed.lamports == 0
    assert closed.data == b""
    assert closed.owner == SYSTEM_PROGRAM_ID
    assert state.accounts[ALICE].lamports == 5_000_000 + TOKEN_RENT


def test_close_account_with_balance() -> None:
    with pytest.raises(SpecError) as exc_info:
        token.close_account(_state(), ALICE_HOLDING, ALICE, ALICE, signers={ALICE})
    assert _code(exc_info) == ErrorCode.NON_ZERO_BALANCE


def test_close_account_refund_overflow() -> None:
    state = _state()
    state.accounts[ALICE].lamports = U64_MAX
    with pytest.raises(SpecError) as exc_info:
        token.close_account(state, BOB_RECEIVE, ALICE, BOB, signers={BOB})
    assert _code(exc_info) == ErrorCode.OVERFLOW


def test_token_program_id_owns_built_accounts() -> None:
    assert _state().accounts[ALICE_HOLDING].owner == TOKEN_PROGRAM_ID


# --- rent oracle ---

def test_rent_minimum_balance_for_layouts() -> None:
    rent = Rent()
    assert rent.minimum_balance(ESCROW_RECORD_LEN) == 1_621_680
    assert rent.minimum_balance(TOKEN_ACCOUNT_LEN) == TOKEN_RENT
    assert rent.is_exempt(1_621_680, ESCROW_RECORD_LEN)
    assert not rent.is_exempt(1_621_679, ESCROW_RECORD_LEN)


def test_rent_sysvar_account_round_trips() -> None:
    custom = Rent(lamports_per_byte_year=1, exemption_threshold=1.0, burn_percent=0)
    assert Rent.from_account(rent_sysvar_account(custom)) == custom


def test_rent_from_wrong_account_rejected() -> None:
    with pytest.raises(SpecError) as exc_info:
        Rent.from_account(Account(address=ALICE, data=Rent().pack()))
    assert _code(exc_info) == ErrorCode.INVALID_ARGUMENT


def test_rent_malformed_sysvar_rejected() -> None:
    account = Account(address=RENT_SYSVAR_ID, lamports=1, data=b"\x00" * 3)
    with pytest.raises(SpecError) as exc_info:
        Rent.from_account(account)
    assert _code(exc_info) == ErrorCode.INVALID_ACCOUNT_DATA
