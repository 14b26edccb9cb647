"""Serializing ledger host.

Holds the committed ledger state and admits one transaction at a time, so two
transitions against the same escrow record can never interleave. Combined with
the all-or-nothing result of `apply_transaction`, this yields exactly-once
initialization and exactly-one exchange per record.
"""

from __future__ import annotations

import logging
import threading
from copy import deepcopy

from .config import ESCROW_PROGRAM_ID
from .state_transition import TransitionResult, apply_transaction
from .types import LedgerState, Transaction

logger = logging.getLogger(__name__)


class LedgerHost:
    def __init__(self, state: LedgerState, program_id: bytes = ESCROW_PROGRAM_ID):
        self.program_id = program_id
        self._state = state
        self._lock = threading.Lock()
        self._committed = 0

    @property
    def committed(self) -> int:
        return self._committed

    def snapshot(self) -> LedgerState:
        with self._lock:
            return deepcopy(self._state)

    def submit(self, tx: Transaction) -> TransitionResult:
        with self._lock:
            next_state, result = apply_transaction(self._state, tx, self.program_id)
            if result.ok:
                self._state = next_state
                self._committed += 1
                logger.debug("committed transaction #%d", self._committed)
            else:
                logger.info("rejected transaction: %s", result.error)
            return result
