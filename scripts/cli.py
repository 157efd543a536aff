"""Command line entry point for the solution engine.

Usage::

    python -m scripts <command> [args]

Each command forwards its remaining arguments to the ``main`` function of
the matching script module.
"""

from __future__ import annotations

import argparse
import importlib
from typing import Dict, NamedTuple


class Command(NamedTuple):
    module: str
    help: str


COMMANDS: Dict[str, Command] = {
    "solve-solution": Command(
        "scripts.solve_solution", "solve fertilizer weights for a request file"
    ),
    "list-substances": Command(
        "scripts.list_substances", "print the bundled substances or target presets"
    ),
}


def build_parser() -> argparse.ArgumentParser:
    epilog = "commands:\n" + "\n".join(
        f"  {name:<18}{cmd.help}" for name, cmd in COMMANDS.items()
    )
    parser = argparse.ArgumentParser(
        prog="python -m scripts",
        description="Nutrient solution solver utilities",
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("command", metavar="command", choices=sorted(COMMANDS))
    parser.add_argument("args", nargs=argparse.REMAINDER, help="arguments for the command")
    return parser


def main(argv: list[str] | None = None) -> None:
    """Run ``command`` with the remaining arguments."""
    ns = build_parser().parse_args(argv)
    module = importlib.import_module(COMMANDS[ns.command].module)
    module.main(ns.args)


if __name__ == "__main__":  # pragma: no cover - manual execution
    main()
