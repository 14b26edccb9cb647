"""Write YAML copies of generated JSON fixtures."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import yaml

ROOT = Path(__file__).resolve().parent.parent


class PlainDumper(yaml.SafeDumper):
    pass


def _str_representer(dumper: yaml.SafeDumper, data: str) -> yaml.ScalarNode:
    return dumper.represent_scalar("tag:yaml.org,2002:str", data, style=None)


PlainDumper.add_representer(str, _str_representer)


def dump_yaml(data: dict) -> str:
    return yaml.dump(data, Dumper=PlainDumper, sort_keys=False, width=4096)


def write_yaml(path: Path, data: dict) -> None:
    path.write_text(dump_yaml(data))


def main() -> int:
    fixtures = Path(sys.argv[1]) if len(sys.argv) > 1 else ROOT / "fixtures"
    count = 0
    for path in sorted(fixtures.rglob("*.json")):
        write_yaml(path.with_suffix(".yaml"), json.loads(path.read_text()))
        count += 1
    print(f"Wrote {count} YAML fixtures")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
