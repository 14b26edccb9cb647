"""Helpers to serialize/deserialize fixtures for the escrow specs."""

from __future__ import annotations

from typing import Any, Optional

from .errors import program_error
from .state_digest import compute_state_digest
from .state_transition import TransitionResult
from .types import Account, AccountMeta, InstructionCall, LedgerState, Transaction


def _hex_to_bytes(v: str) -> bytes:
    v = v[2:] if v.startswith(("0x", "0X")) else v
    return bytes.fromhex(v)


def _bytes_to_hex(v: bytes) -> str:
    return v.hex()


def state_to_json(state: LedgerState) -> dict[str, Any]:
    return {
        "accounts": [
            {
                "address": _bytes_to_hex(a.address),
                "owner": _bytes_to_hex(a.owner),
                "lamports": a.lamports,
                "data": _bytes_to_hex(a.data),
                "executable": a.executable,
            }
            for _, a in sorted(state.accounts.items())
        ]
    }


def state_from_json(data: dict[str, Any]) -> LedgerState:
    state = LedgerState()
    for a in data.get("accounts", []):
        state.put(
            Account(
                address=_hex_to_bytes(a["address"]),
                owner=_hex_to_bytes(a.get("owner", "00" * 32)),
                lamports=a.get("lamports", 0),
                data=_hex_to_bytes(a["data"]) if a.get("data") else b"",
                executable=a.get("executable", False),
            )
        )
    return state


def tx_to_json(tx: Transaction) -> dict[str, Any]:
    return {
        "instructions": [
            {
                "program_id": _bytes_to_hex(call.program_id),
                "accounts": [
                    {
                        "address": _bytes_to_hex(m.address),
                        "is_signer": m.is_signer,
                        "is_writable": m.is_writable,
                    }
                    for m in call.accounts
                ],
                "data": _bytes_to_hex(call.data),
            }
            for call in tx.instructions
        ]
    }


def tx_from_json(data: dict[str, Any]) -> Transaction:
    instructions = []
    for ix in data.get("instructions", []):
        metas = [
            AccountMeta(
                address=_hex_to_bytes(m["address"]),
                is_signer=m.get("is_signer", False),
                is_writable=m.get("is_writable", False),
            )
            for m in ix.get("accounts", [])
        ]
        instructions.append(
            InstructionCall(
                program_id=_hex_to_bytes(ix["program_id"]),
                accounts=metas,
                data=_hex_to_bytes(ix.get("data", "")),
            )
        )
    return Transaction(instructions=instructions)


def result_to_json(post_state: LedgerState, result: TransitionResult) -> dict[str, Any]:
    error: Optional[str] = None
    wire_error: Optional[str] = None
    if result.error is not None:
        error = result.error.code.name
        wire_error = program_error(result.error.code)
    return {
        "ok": result.ok,
        "error": error,
        "program_error": wire_error,
        "post_state": state_to_json(post_state),
        "state_digest": compute_state_digest(post_state),
    }
