"""Regenerate escrow fixtures by running the test suite with `--output`.

Every `state_test_group` / `vector_test_group` case collected during the run
is written under the configured fixture directory (`ESCROW_FIXTURE_DIR`,
default `fixtures/`), ready for `tools/consume.py` or `escrow-spec replay`.
"""

from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT / "src"))

from escrow_spec.config import HostConfig  # noqa: E402


def main() -> int:
    config = HostConfig.from_env()
    out = Path(config.fixture_dir)
    if not out.is_absolute():
        out = ROOT / out

    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join([str(ROOT / "src"), str(ROOT)])

    cmd = [sys.executable, "-m", "pytest", str(ROOT / "tests"), "-q", "--output", str(out)]
    print("Filling escrow fixtures into", out)
    return subprocess.call(cmd, env=env, cwd=str(ROOT))


if __name__ == "__main__":
    raise SystemExit(main())
