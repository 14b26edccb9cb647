"""State transition entrypoints for the escrow program specs.

This module is the atomic commit boundary the handlers rely on. A handler may
fail after staging writes (a record write before a token ledger call, or two
transfers before a failing close); such failures are discarded here by
returning the caller's state untouched.
"""

from __future__ import annotations

import logging
from typing import Optional

from .config import ESCROW_PROGRAM_ID
from .errors import ErrorCode, SpecError
from .processor import process_instruction, verify_call
from .types import InstructionCall, LedgerState, Transaction

logger = logging.getLogger(__name__)


class TransitionResult:
    """Thin wrapper for verify/apply results."""

    def __init__(self, ok: bool, error: Optional[SpecError] = None):
        self.ok = ok
        self.error = error

    @classmethod
    def success(cls) -> "TransitionResult":
        return cls(True, None)

    @classmethod
    def failure(cls, error: SpecError) -> "TransitionResult":
        return cls(False, error)

    def __repr__(self) -> str:
        if self.ok:
            return "TransitionResult(ok)"
        return f"TransitionResult({self.error})"


def _check_program(call: InstructionCall, program_id: bytes) -> None:
    if call.program_id != program_id:
        raise SpecError(ErrorCode.INCORRECT_PROGRAM_ID, "instruction not addressed to the escrow program")


def verify_instruction(
    state: LedgerState, call: InstructionCall, program_id: bytes = ESCROW_PROGRAM_ID
) -> TransitionResult:
    """Stateless + stateful verification for a single instruction."""
    try:
        _check_program(call, program_id)
        verify_call(state, call)
        return TransitionResult.success()
    except SpecError as exc:
        return TransitionResult.failure(exc)


def apply_instruction(
    state: LedgerState, call: InstructionCall, program_id: bytes = ESCROW_PROGRAM_ID
) -> tuple[LedgerState, TransitionResult]:
    """Apply one instruction; on failure the input state is returned unchanged."""
    try:
        _check_program(call, program_id)
        next_state = process_instruction(state, call)
    except SpecError as exc:
        logger.debug("instruction rejected: %s", exc)
        return state, TransitionResult.failure(exc)
    return next_state, TransitionResult.success()


def apply_transaction(
    state: LedgerState, tx: Transaction, program_id: bytes = ESCROW_PROGRAM_ID
) -> tuple[LedgerState, TransitionResult]:
    """Apply every instruction in order (transaction-atomic semantics).

    If any instruction fails, the whole transaction is rejected and the state
    is unchanged.
    """
    if not tx.instructions:
        return state, TransitionResult.failure(
            SpecError(ErrorCode.INVALID_ARGUMENT, "transaction has no instructions")
        )

    working = state
    for index, call in enumerate(tx.instructions):
        working, result = apply_instruction(working, call, program_id)
        if not result.ok:
            logger.info("transaction rejected at instruction %d: %s", index, result.error)
            return state, result
    return working, TransitionResult.success()
