"""Consume fixtures and validate against the Python specs."""

from __future__ import annotations

import json
from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT / "src"))

from escrow_spec.cli import replay_cases  # noqa: E402
from escrow_spec.config import HostConfig  # noqa: E402


def main() -> None:
    config = HostConfig.from_env()
    fixtures = ROOT / config.fixture_dir

    failures: list[str] = []
    checked = 0
    for path in sorted(fixtures.rglob("*.json")):
        data = json.loads(path.read_text())
        cases = data.get("cases", [])
        if not cases:
            continue
        checked += len(cases)
        failures.extend(f"{path.name}: {f}" for f in replay_cases(cases, config.program_id))

    if failures:
        for f in failures:
            print("FAIL", f)
        raise SystemExit(1)

    print(f"All {checked} fixture cases passed")


if __name__ == "__main__":
    main()
