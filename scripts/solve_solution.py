#!/usr/bin/env python3
"""Solve fertilizer weights for a nutrient solution request file.

The request is a JSON or YAML document::

    substances:
      - potassium_nitrate          # catalog id
      - id: custom_calmag          # or an inline substance
        elements:
          - {symbol: Ca, percentage: 15}
          - {symbol: Mg, percentage: 5}
    targets: {NO3_N: 150, K: 200, Ca: 150}
    volume: 10
    unit: L
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Mapping

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))
from scripts import ensure_repo_root_on_path

ROOT = ensure_repo_root_on_path()

import voluptuous as vol
import yaml

from solution_engine import InvalidInputError, SolutionSolver, SolutionVolume, SolverSettings
from solution_engine.catalog import get_substance, get_target_preset
from solution_engine.models import Substance
from solution_engine.optimizer import default_random_source
from solution_engine.utils import load_data
from solution_engine.validators import validate_request, validate_substance, validate_targets


def _substance(entry: str | Mapping[str, Any]) -> Substance:
    if isinstance(entry, str):
        return get_substance(entry)
    return validate_substance(entry)


def build_payload(
    request: Mapping[str, Any],
    *,
    volume: float | None = None,
    unit: str | None = None,
    preset: str | None = None,
    seed: int | None = None,
    trials: int | None = None,
    include_ec: bool = True,
) -> dict:
    """Return the solved result for ``request`` as a serializable mapping."""

    doc = validate_request(request)
    substances = [_substance(entry) for entry in doc["substances"]]
    preset = preset or (None if "targets" in doc else doc.get("preset"))
    targets = get_target_preset(preset) if preset else validate_targets(doc["targets"])

    value = volume if volume is not None else doc.get("volume")
    if value is None:
        raise InvalidInputError("a solution volume is required")
    solution_volume = SolutionVolume(value, unit or doc["unit"])

    settings = SolverSettings(trials=trials) if trials is not None else SolverSettings()
    solver = SolutionSolver(settings, default_random_source(seed), include_ec=include_ec)
    result = solver.solve(substances, targets, solution_volume)

    return {
        "volume": {
            "value": solution_volume.value,
            "unit": solution_volume.unit,
            "milliliters": solution_volume.milliliters,
        },
        "targets": targets.as_dict(),
        **result.as_dict(),
    }


def main(argv: list[str] | None = None) -> None:
    """Entry point for the ``solve_solution.py`` script."""

    parser = argparse.ArgumentParser(description="Solve fertilizer weights for nutrient targets")
    parser.add_argument("request", type=Path, help="JSON or YAML request file")
    parser.add_argument("--volume", type=float, help="Solution volume (overrides the file)")
    parser.add_argument("--unit", help="Volume unit: mL, L or gal")
    parser.add_argument("--preset", help="Use a bundled target preset")
    parser.add_argument("--seed", type=int, help="Seed for reproducible weights")
    parser.add_argument("--trials", type=int, help="Random search trials")
    parser.add_argument("--no-ec", action="store_true", help="Skip the EC estimate")
    parser.add_argument("--output", type=Path, help="Optional path to write the result")
    parser.add_argument("--yaml", action="store_true", dest="as_yaml")
    parser.add_argument("--verbose", action="store_true", help="Log solver progress")
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    try:
        payload = build_payload(
            load_data(args.request),
            volume=args.volume,
            unit=args.unit,
            preset=args.preset,
            seed=args.seed,
            trials=args.trials,
            include_ec=not args.no_ec,
        )
    except (InvalidInputError, vol.Invalid, KeyError, FileNotFoundError, ValueError) as exc:
        parser.error(str(exc))

    if args.as_yaml:
        text = yaml.safe_dump(payload, sort_keys=False)
    else:
        text = json.dumps(payload, indent=2)
    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(text)
    else:
        print(text)


if __name__ == "__main__":  # pragma: no cover
    main()
