"""Command line entry point for the escrow specs."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

import click
import yaml

from .authority import derive_escrow_authority
from .config import HostConfig
from .errors import SpecError, program_error
from .fixtures_io import result_to_json, state_from_json, tx_from_json
from .instruction import decode, encode
from .state_transition import apply_transaction
from .types import Exchange, InitEscrow

logger = logging.getLogger(__name__)


def _load_fixture(path: Path) -> dict[str, Any]:
    text = path.read_text()
    if path.suffix in (".yaml", ".yml"):
        return yaml.safe_load(text)
    return json.loads(text)


def replay_cases(cases: list[dict[str, Any]], program_id: bytes) -> list[str]:
    """Re-execute fixture cases and return the names of mismatching ones."""
    failures: list[str] = []
    for case in cases:
        pre_state = state_from_json(case["pre_state"])
        tx = tx_from_json(case["tx"])
        post_state, result = apply_transaction(pre_state, tx, program_id)
        actual = result_to_json(post_state, result)
        expected = case["expected"]

        if actual["ok"] != expected["ok"]:
            failures.append(f"{case['name']}: ok_mismatch")
        elif actual["error"] != expected.get("error"):
            failures.append(f"{case['name']}: error_mismatch")
        elif "state_digest" in expected and actual["state_digest"] != expected["state_digest"]:
            failures.append(f"{case['name']}: state_digest_mismatch")
        else:
            logger.debug("case %s passed", case["name"])
    return failures


@click.group()
@click.option("--verbose", is_flag=True, help="Enable verbose output")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """Escrow program specs."""
    config = HostConfig.from_env()
    if verbose:
        config.verbose = True

    logging.basicConfig(
        level=logging.DEBUG if config.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )
    ctx.obj = config


@main.command("decode")
@click.argument("data_hex")
def decode_cmd(data_hex: str) -> None:
    """Decode an instruction payload given as hex."""
    try:
        ix = decode(bytes.fromhex(data_hex))
    except ValueError:
        raise click.BadParameter("payload must be hex", param_hint="DATA_HEX") from None
    except SpecError as exc:
        click.echo(f"error: {exc} [{program_error(exc.code)}]", err=True)
        sys.exit(1)
    click.echo(json.dumps({"instruction": type(ix).__name__, "amount": ix.amount}))


@main.command("encode")
@click.argument("kind", type=click.Choice(["init", "exchange"]))
@click.argument("amount", type=int)
def encode_cmd(kind: str, amount: int) -> None:
    """Encode an instruction payload as hex."""
    ix = InitEscrow(amount) if kind == "init" else Exchange(amount)
    try:
        click.echo(encode(ix).hex())
    except SpecError as exc:
        click.echo(f"error: {exc}", err=True)
        sys.exit(1)


@main.command("derive-authority")
@click.option("--program-id", default=None, help="Program identity as hex (default: configured)")
@click.pass_obj
def derive_authority_cmd(config: HostConfig, program_id: Optional[str]) -> None:
    """Print the program-derived escrow authority and its bump."""
    pid = bytes.fromhex(program_id) if program_id else config.program_id
    address, bump = derive_escrow_authority(pid)
    click.echo(json.dumps({"program_id": pid.hex(), "authority": address.hex(), "bump": bump}))


@main.command("replay")
@click.argument("fixture", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_obj
def replay_cmd(config: HostConfig, fixture: Path) -> None:
    """Re-execute a JSON or YAML fixture file and compare outcomes."""
    data = _load_fixture(fixture)
    cases = data.get("cases", [])
    failures = replay_cases(cases, config.program_id)
    for failure in failures:
        click.echo(f"FAIL {failure}")
    if failures:
        sys.exit(1)
    click.echo(f"{len(cases)} cases passed")


if __name__ == "__main__":
    main()
