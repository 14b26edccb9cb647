"""Escrow program entrypoint: decode, dispatch by tag, run the handler."""

from __future__ import annotations

import logging

from .accounts import ExchangeAccounts, InitEscrowAccounts
from .instruction import decode
from .tx import escrow as tx_escrow
from .types import EscrowInstructionKind, InstructionCall, LedgerState

logger = logging.getLogger(__name__)

# tag -> (log name, account request type, verify, apply)
_HANDLERS = {
    EscrowInstructionKind.INIT_ESCROW: (
        "InitEscrow",
        InitEscrowAccounts,
        tx_escrow.verify_init,
        tx_escrow.apply_init,
    ),
    EscrowInstructionKind.EXCHANGE: (
        "Exchange",
        ExchangeAccounts,
        tx_escrow.verify_exchange,
        tx_escrow.apply_exchange,
    ),
}


def _prepare(state: LedgerState, call: InstructionCall):
    """Decode `call`, build its account request and run the checks."""
    ix = decode(call.data)
    name, accounts_type, verify, apply = _HANDLERS[ix.kind]
    accts = accounts_type.from_metas(call.accounts)
    verify(state, call.program_id, ix, accts)
    return name, ix, accts, apply


def verify_call(state: LedgerState, call: InstructionCall) -> None:
    """Run decoding and every pre-mutation check for `call`."""
    _prepare(state, call)


def process_instruction(state: LedgerState, call: InstructionCall) -> LedgerState:
    """Verify and apply `call`, returning the next state.

    Never mutates `state`. Raises SpecError on any failure, including failures
    reported by the token ledger part way through.
    """
    name, ix, accts, apply = _prepare(state, call)
    logger.info("Instruction: %s", name)
    return apply(state, call.program_id, ix, accts)
