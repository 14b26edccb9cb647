"""Escrow instruction specs (InitEscrow / Exchange).

State machine of one escrow record:

    Uninitialized --InitEscrow--> Initialized --Exchange--> Closed

There is no cancel or timeout transition. A closed record is zeroed, so any
later Exchange fails the initialized-record check instead of moving funds.
`verify` performs every check that does not mutate state; `apply` works on a
copy and may still fail inside a token ledger call, in which case the caller
discards the copy.
"""

from __future__ import annotations

import logging
from copy import deepcopy

from ..accounts import ExchangeAccounts, InitEscrowAccounts
from ..authority import create_program_address, derive_escrow_authority, escrow_signer_seeds
from ..config import TOKEN_PROGRAM_ID, U64_MAX
from ..errors import ErrorCode, SpecError
from ..ledger import token
from ..ledger.rent import Rent
from ..record import EscrowRecord
from ..types import Account, Exchange, InitEscrow, LedgerState

logger = logging.getLogger(__name__)


def _require_token_program(address: bytes) -> None:
    if address != TOKEN_PROGRAM_ID:
        raise SpecError(ErrorCode.INCORRECT_PROGRAM_ID, "token program account mismatch")


def _load_escrow_account(state: LedgerState, address: bytes, program_id: bytes) -> Account:
    account = state.require(address)
    if account.owner != program_id:
        raise SpecError(ErrorCode.INCORRECT_PROGRAM_ID, "escrow account not owned by the program")
    return account


# --- INIT_ESCROW ---

def verify_init(
    state: LedgerState, program_id: bytes, ix: InitEscrow, accts: InitEscrowAccounts
) -> None:
    _require_token_program(accts.token_program)

    # The holding account is not checked here: handing its custody to the
    # program authority fails inside the token ledger unless it owns it.
    receive = state.require(accts.initializer_receive)
    if receive.owner != TOKEN_PROGRAM_ID:
        raise SpecError(ErrorCode.INCORRECT_PROGRAM_ID, "receive account not owned by the token ledger")

    escrow = _load_escrow_account(state, accts.escrow, program_id)
    rent = Rent.from_account(state.require(accts.rent_sysvar))
    if not rent.is_exempt(escrow.lamports, len(escrow.data)):
        raise SpecError(ErrorCode.NOT_RENT_EXEMPT, "escrow account is not rent exempt")

    record = EscrowRecord.unpack_unchecked(escrow.data)
    if record.is_initialized:
        raise SpecError(ErrorCode.ACCOUNT_ALREADY_INITIALIZED, "escrow already initialized")


def apply_init(
    state: LedgerState, program_id: bytes, ix: InitEscrow, accts: InitEscrowAccounts
) -> LedgerState:
    ns = deepcopy(state)

    record = EscrowRecord(
        is_initialized=True,
        initializer=accts.initializer,
        holding_account=accts.holding,
        initializer_receive_account=accts.initializer_receive,
        expected_amount=ix.amount,
    )
    ns.accounts[accts.escrow].data = record.pack()

    authority, _bump = derive_escrow_authority(program_id)

    logger.info("Calling the token ledger to transfer holding account ownership")
    token.set_authority(
        ns,
        accts.holding,
        authority,
        token.AuthorityType.ACCOUNT_OWNER,
        accts.initializer,
        signers=accts.signers(),
    )
    return ns


# --- EXCHANGE ---

def verify_exchange(
    state: LedgerState, program_id: bytes, ix: Exchange, accts: ExchangeAccounts
) -> None:
    _require_token_program(accts.token_program)

    escrow = _load_escrow_account(state, accts.escrow, program_id)
    record = EscrowRecord.unpack(escrow.data)

    # Identities first, so a substituted holding handle is never loaded.
    if record.holding_account != accts.holding:
        raise SpecError(ErrorCode.INVALID_ACCOUNT_DATA, "holding account mismatch")
    if record.initializer != accts.initializer:
        raise SpecError(ErrorCode.INVALID_ACCOUNT_DATA, "initializer mismatch")
    if record.initializer_receive_account != accts.initializer_receive:
        raise SpecError(ErrorCode.INVALID_ACCOUNT_DATA, "initializer receive account mismatch")

    holding = token.load_token_account(state, accts.holding)
    if ix.amount != holding.amount:
        raise SpecError(ErrorCode.EXPECTED_AMOUNT_MISMATCH, "amount does not match escrowed balance")

    authority, _bump = derive_escrow_authority(program_id)
    if accts.authority != authority:
        raise SpecError(ErrorCode.INVALID_SEEDS, "authority is not the program-derived address")


def apply_exchange(
    state: LedgerState, program_id: bytes, ix: Exchange, accts: ExchangeAccounts
) -> LedgerState:
    ns = deepcopy(state)
    record = EscrowRecord.unpack(ns.accounts[accts.escrow].data)

    _authority, bump = derive_escrow_authority(program_id)
    program_signer = create_program_address(escrow_signer_seeds(bump), program_id)
    signers = accts.signers()
    signers_with_program = signers | {program_signer}

    logger.info("Calling the token ledger to pay the initializer")
    token.transfer(
        ns,
        accts.taker_send,
        accts.initializer_receive,
        accts.taker,
        record.expected_amount,
        signers=signers,
    )

    escrowed = token.load_token_account(ns, accts.holding).amount
    logger.info("Calling the token ledger to release escrowed funds to the taker")
    token.transfer(
        ns,
        accts.holding,
        accts.taker_receive,
        program_signer,
        escrowed,
        signers=signers_with_program,
    )

    logger.info("Calling the token ledger to close the holding account")
    token.close_account(
        ns,
        accts.holding,
        accts.initializer,
        program_signer,
        signers=signers_with_program,
    )

    initializer = ns.require(accts.initializer)
    escrow = ns.accounts[accts.escrow]
    refunded = initializer.lamports + escrow.lamports
    if refunded > U64_MAX:
        raise SpecError(ErrorCode.AMOUNT_OVERFLOW, "initializer lamports overflow")

    logger.info("Closing the escrow record")
    initializer.lamports = refunded
    escrow.lamports = 0
    escrow.data = bytes(len(escrow.data))
    return ns
