#!/usr/bin/env python3
"""List bundled substances and target presets."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))
from scripts import ensure_repo_root_on_path

ROOT = ensure_repo_root_on_path()

import yaml

from solution_engine.catalog import CATALOG


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="List bundled substances and presets")
    parser.add_argument("--presets", action="store_true", help="List target presets instead")
    parser.add_argument("--yaml", action="store_true", dest="as_yaml")
    args = parser.parse_args(argv)

    if args.presets:
        payload = {name: CATALOG.get_preset(name).as_dict() for name in CATALOG.list_presets()}
    else:
        payload = {sid: CATALOG.get_substance(sid).as_dict() for sid in CATALOG.list_substances()}

    if args.as_yaml:
        print(yaml.safe_dump(payload, sort_keys=False, allow_unicode=True))
    else:
        print(json.dumps(payload, indent=2, ensure_ascii=False))


if __name__ == "__main__":  # pragma: no cover
    main()
