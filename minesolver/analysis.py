"""Batch statistics and plots for the minefield solver."""

import logging
import math
import random
from typing import Dict, List, Optional, Sequence

import matplotlib.pyplot as plt
import numpy as np

from .config import preset_dimensions
from .field import Minefield, NativeMinefield
from .scripted import ScriptedFieldBuilder
from .solver import MinefieldSolver

logger = logging.getLogger(__name__)


def new_minefield(
    preset: str,
    *,
    native: bool = True,
    rng: Optional[random.Random] = None,
    builder: Optional[ScriptedFieldBuilder] = None,
    seed: Optional[int] = None,
) -> Minefield:
    """
    Create a fresh, unswept minefield for a preset.

    Args:
        preset: Preset name ("beginner", "intermediate", "expert").
        native: Use the in-process generator; otherwise the scripted field.
        rng: Random generator for the native backend.
        builder: Scripted field builder; the bundled script when omitted.
        seed: Seed for the scripted backend, or for the native backend when
            no rng is given.
    """
    if native:
        dims = preset_dimensions(preset)
        if rng is None and seed is not None:
            rng = random.Random(seed)
        return NativeMinefield(dims["width"], dims["height"], dims["mine_count"], rng=rng)

    if builder is None:
        builder = ScriptedFieldBuilder.bundled()
    return builder.build(preset, seed=seed)


def run_solver_single_test(
    preset: str,
    *,
    native: bool = True,
    seed: Optional[int] = None,
    show_board: bool = False,
    record_steps: bool = False,
) -> Dict[str, object]:
    """
    Run one end-to-end solve on a fresh field.

    Args:
        preset: Preset name.
        native: Use the native backend instead of the scripted one.
        seed: Optional seed for reproducible mine placement.
        show_board: If True, print the solver's final board.
        record_steps: Record per-move snapshots in the payload.

    Returns:
        The solver's metrics payload (see MinefieldSolver.stats).
    """
    field = new_minefield(preset, native=native, seed=seed)
    solver = MinefieldSolver(field, record_steps=record_steps)
    solved, luck = solver.solve()

    if show_board:
        print(solver.show())
        print()
        print(f"Solved: {solved}, luck: {luck}")

    return solver.stats()


def run_solver_many_tests(
    preset: str,
    runs: int,
    *,
    native: bool = True,
    seed: Optional[int] = None,
    builder: Optional[ScriptedFieldBuilder] = None,
) -> Dict[str, float]:
    """
    Run many independent solves and aggregate their outcomes.

    Args:
        preset: Preset name.
        runs: Number of fresh fields to solve; must be positive.
        native: Use the native backend instead of the scripted one.
        seed: Seeds the native generator, or the first scripted field
            (incremented per run).
        builder: Scripted field builder; the bundled script when omitted.
            Ignored for the native backend.

    Returns:
        Dict with:
        - runs, wins, win_rate
        - avg_luck: mean luck over successful runs only (NaN if none)
        - avg_guesses, avg_reveal_moves, avg_relaxation_iterations: per run
    """
    if runs <= 0:
        raise ValueError("runs must be positive.")

    rng = random.Random(seed)
    if not native and builder is None:
        builder = ScriptedFieldBuilder.bundled()

    lucks: List[float] = []
    guesses: List[int] = []
    reveals: List[int] = []
    iterations: List[int] = []

    for i in range(runs):
        if native:
            field = new_minefield(preset, native=True, rng=rng)
        else:
            run_seed = None if seed is None else seed + i
            field = new_minefield(preset, native=False, builder=builder, seed=run_seed)

        solver = MinefieldSolver(field)
        solved, luck = solver.solve()
        if solved:
            lucks.append(luck)

        guesses.append(solver.guesses_count)
        reveals.append(solver.reveal_moves_count)
        iterations.append(solver.relaxation_iterations)

    wins = len(lucks)
    out: Dict[str, float] = {
        "runs": float(runs),
        "wins": float(wins),
        "win_rate": wins / runs,
        "avg_luck": float(np.mean(lucks)) if lucks else math.nan,
        "avg_guesses": float(np.mean(guesses)),
        "avg_reveal_moves": float(np.mean(reveals)),
        "avg_relaxation_iterations": float(np.mean(iterations)),
    }
    logger.info(format_batch_summary(preset, out))
    return out


def format_batch_summary(preset: str, results: Dict[str, float]) -> str:
    """One-line summary of a batch run."""
    runs = int(results["runs"])
    wins = int(results["wins"])
    return (
        f"Solved {wins}/{runs} successful ({results['win_rate']}), "
        f"{preset.capitalize()}, avg luck {results['avg_luck']}"
    )


def run_preset_analysis(
    runs: int,
    *,
    native: bool = True,
    presets: Sequence[str] = ("beginner", "intermediate", "expert"),
    seed: Optional[int] = None,
) -> Dict[str, Dict[str, float]]:
    """
    Run batch statistics for each preset and plot win rate and mean luck.

    Returns:
        Mapping from preset name to the statistics of run_solver_many_tests().
    """
    results: Dict[str, Dict[str, float]] = {}
    for preset in presets:
        results[preset] = run_solver_many_tests(preset, runs, native=native, seed=seed)

    names = list(presets)
    x = np.arange(len(names))

    # 1) Win rate by preset
    win_rates = [results[n]["win_rate"] for n in names]

    plt.figure()  # type: ignore[misc]
    plt.bar(x, win_rates)  # type: ignore[misc]
    plt.xticks(x, names)  # type: ignore[misc]
    plt.ylabel("Win rate")  # type: ignore[misc]
    plt.ylim(0.0, 1.0)  # type: ignore[misc]
    plt.title("Win rate by preset")  # type: ignore[misc]
    plt.tight_layout()
    plt.show()  # type: ignore[misc]

    # 2) Mean luck of successful runs, next to mean guesses per run
    avg_luck = np.nan_to_num([results[n]["avg_luck"] for n in names], nan=0.0)
    avg_guesses = [results[n]["avg_guesses"] for n in names]

    bar_w = 0.35
    fig, ax_luck = plt.subplots()  # type: ignore[misc]
    ax_luck.bar(x - bar_w / 2, avg_luck, width=bar_w, label="avg luck")
    ax_luck.set_ylabel("Mean luck (successful runs)")
    ax_luck.set_ylim(0.0, 1.0)
    ax_guess = ax_luck.twinx()
    ax_guess.bar(x + bar_w / 2, avg_guesses, width=bar_w, color="tab:orange", label="avg guesses")
    ax_guess.set_ylabel("Mean guesses per run")
    ax_luck.set_xticks(x)
    ax_luck.set_xticklabels(names)
    ax_luck.set_title("Reliance on guessing by preset")
    fig.legend(loc="upper left")
    fig.tight_layout()
    plt.show()  # type: ignore[misc]

    return results
