"""
Quickstart example for the Minefield Solver.

This script demonstrates basic usage of the solver.
"""

import random

from minesolver import (
    MinefieldSolver,
    NativeMinefield,
    ScriptedFieldBuilder,
    run_solver_many_tests,
)


def main():
    print("=" * 60)
    print("Minefield Solver - Quickstart Example")
    print("=" * 60)

    # Example 1: Solve a single field
    print("\n1. Solving a single Intermediate field (16x16, 40 mines)...")
    print("-" * 60)

    field = NativeMinefield(width=16, height=16, mine_count=40, rng=random.Random(2024))
    solver = MinefieldSolver(field)
    solved, luck = solver.solve()

    stats = solver.stats()
    print(f"Result: {'WON' if solved else 'LOST'}")
    print(f"Luck: {luck:.4f}")
    print(f"Reveal moves: {stats['reveal_moves_count']}")
    print(f"Flags placed: {stats['flags_placed']}")
    print(f"Guesses: {stats['guesses_count']}")
    print(f"Relaxation iterations: {stats['relaxation_iterations']}")

    # Example 2: Show final board state
    print("\n2. Final board state:")
    print("-" * 60)
    print(solver.show())

    # Example 3: Solve a field served by the bundled script
    print("\n3. Solving an Expert field from the bundled script...")
    print("-" * 60)

    builder = ScriptedFieldBuilder.bundled()
    solved, luck = MinefieldSolver(builder.build("expert", seed=7)).solve()
    print(f"Solved: {solved}, luck: {luck}")

    # Example 4: Compare presets
    print("\n4. Win rates by preset (20 fields each)...")
    print("-" * 60)

    for preset in ("beginner", "intermediate", "expert"):
        results = run_solver_many_tests(preset, 20, seed=0)
        print(
            f"{preset.capitalize():15s}: {results['win_rate']*100:5.1f}% win rate, "
            f"avg luck {results['avg_luck']:.3f}, "
            f"{results['avg_guesses']:.1f} guesses per field"
        )

    print("\n" + "=" * 60)
    print("Done! See README.md for command-line usage.")
    print("=" * 60)


if __name__ == "__main__":
    main()
