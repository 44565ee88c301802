"""Command-line front end: solve one field, or run a batch for statistics."""

import argparse
import sys
from typing import List, Optional

from .analysis import format_batch_summary, new_minefield, run_solver_many_tests
from .config import PRESETS, configure_logging
from .errors import SolverError
from .field import Minefield
from .scripted import ScriptedFieldBuilder
from .solver import MinefieldSolver


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="minesolver",
        description="Solve minefields by deduction and relaxation-guided guessing.",
    )
    parser.add_argument(
        "mode",
        choices=sorted(PRESETS),
        help="Field preset to solve",
    )
    parser.add_argument(
        "-i",
        "--iterations",
        type=int,
        help="Solve this many fresh fields and print aggregate statistics",
    )
    parser.add_argument(
        "-n",
        "--native",
        action="store_true",
        help="Generate fields natively instead of through the field script",
    )
    parser.add_argument(
        "--script",
        help="Path to a field script (defaults to the bundled one)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Seed for reproducible mine placement",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Print the board without ANSI colors",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (-v info, -vv debug)",
    )
    return parser


def _script_builder(args: argparse.Namespace) -> Optional[ScriptedFieldBuilder]:
    """Builder for --script; None means the bundled script (or a native run)."""
    if args.native or not args.script:
        return None
    return ScriptedFieldBuilder.from_source(args.script)


def _single_field(args: argparse.Namespace) -> Minefield:
    if args.native:
        return new_minefield(args.mode, native=True, seed=args.seed)
    return new_minefield(args.mode, native=False, builder=_script_builder(args), seed=args.seed)


def run(args: argparse.Namespace) -> int:
    if args.iterations is not None:
        results = run_solver_many_tests(
            args.mode,
            args.iterations,
            native=args.native,
            seed=args.seed,
            builder=_script_builder(args),
        )
        print(format_batch_summary(args.mode, results))
        return 0

    solver = MinefieldSolver(_single_field(args))
    solved, luck = solver.solve()
    print(solver.show(color=not args.no_color))
    print()
    print(f"Solved: {solved}, luck: {luck}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.iterations is not None and args.iterations <= 0:
        parser.error("--iterations must be positive")

    configure_logging(args.verbose)

    try:
        return run(args)
    except SolverError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
