"""
Iterative mine-probability estimation for when deduction stalls.

Each active numbered cell constrains the probabilities of its unknown
neighbors to sum to its remaining mine count; the whole frontier is further
constrained to hold no more than the remaining mine budget. The engine sweeps
these constraints Gauss-Seidel style, nudging every constraint's cells by an
equal share of its residual, until the largest nudge drops below a tolerance
or the iteration cap is hit. This is a cheap local approximation, not exact
inference.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from .board import Board, CellState, Position
from .config import CONVERGENCE_TOLERANCE, MAX_RELAXATION_ITERATIONS

logger = logging.getLogger(__name__)


@dataclass
class ProbabilityMap:
    """Estimated mine probabilities for frontier cells after one relaxation."""

    probabilities: Dict[Position, float]
    remaining_mines: int
    unknown_remaining: int
    iterations: int = 0

    @property
    def frontier_mass(self) -> float:
        return sum(self.probabilities.values())

    @property
    def isolated_count(self) -> int:
        """Unknown cells with no numbered neighbor in the active set."""
        return self.unknown_remaining - len(self.probabilities)

    @property
    def isolated_probability(self) -> Optional[float]:
        """Uniform share of the leftover mine budget per isolated cell."""
        if self.isolated_count <= 0:
            return None
        p_other = (self.remaining_mines - self.frontier_mass) / self.isolated_count
        return _clamp(p_other)

    def best_frontier_cell(self) -> Optional[Tuple[Position, float]]:
        """Lowest-probability frontier cell; earliest discovered wins ties."""
        if not self.probabilities:
            return None
        return min(self.probabilities.items(), key=lambda kv: kv[1])


def _clamp(p: float) -> float:
    return min(1.0, max(0.0, p))


def _constraints(
    board: Board, active: Iterable[Position]
) -> List[Tuple[int, List[Position]]]:
    """(remaining mines, unknown neighbors) for each active numbered cell."""
    constraints: List[Tuple[int, List[Position]]] = []
    for pos in active:
        cell = board.get(pos)
        if cell.state is not CellState.REVEALED:
            continue

        flags = 0
        unknowns: List[Position] = []
        for npos, ncell in board.neighbors(pos):
            if ncell.state is CellState.FLAGGED:
                flags += 1
            elif ncell.state is CellState.UNKNOWN:
                unknowns.append(npos)

        if unknowns:
            constraints.append((cell.count - flags, unknowns))
    return constraints


def _enforce_budget(probs: Dict[Position, float], remaining_mines: int) -> float:
    """
    Pull the frontier's total mass down to the remaining mine budget.

    The excess is subtracted evenly from every frontier cell. Cells clamped at
    zero absorb less than their share, so whatever they could not take is
    spread again over the cells still above zero. Each extra pass either
    clears the excess or pins another cell at zero.

    Returns:
        The even per-cell share of the first pass (0.0 if within budget).
    """
    excess = sum(probs.values()) - remaining_mines
    if excess <= 0:
        return 0.0

    share = excess / len(probs)
    targets = list(probs)
    for _ in range(len(probs)):
        step = excess / len(targets)
        for pos in targets:
            probs[pos] = _clamp(probs[pos] - step)

        excess = sum(probs.values()) - remaining_mines
        targets = [pos for pos, p in probs.items() if p > 0.0]
        if excess <= 0 or not targets:
            break
    return share


def relax_probabilities(
    board: Board,
    active: Iterable[Position],
    remaining_mines: int,
    max_iterations: int = MAX_RELAXATION_ITERATIONS,
    tolerance: float = CONVERGENCE_TOLERANCE,
) -> ProbabilityMap:
    """
    Estimate a mine probability for every frontier cell.

    Args:
        board: Current solver board.
        active: Numbered cells whose neighborhoods are still unresolved.
        remaining_mines: mine_count minus flags placed; must be positive.
        max_iterations: Upper bound on relaxation sweeps.
        tolerance: Stop once no correction in a sweep exceeds this magnitude.

    Returns:
        A ProbabilityMap over the frontier, in discovery order.
    """
    if board.unknown_remaining <= 0:
        raise ValueError("No unknown cells left to estimate.")

    constraints = _constraints(board, active)
    naive = remaining_mines / board.unknown_remaining

    probs: Dict[Position, float] = {}
    for _, unknowns in constraints:
        for pos in unknowns:
            probs.setdefault(pos, naive)

    iterations = 0
    while probs and iterations < max_iterations:
        iterations += 1
        max_correction = 0.0

        for expected, unknowns in constraints:
            current = sum(probs[pos] for pos in unknowns)
            correction = (expected - current) / len(unknowns)
            max_correction = max(max_correction, abs(correction))
            for pos in unknowns:
                probs[pos] = _clamp(probs[pos] + correction)

        max_correction = max(max_correction, _enforce_budget(probs, remaining_mines))

        if max_correction < tolerance:
            break

    result = ProbabilityMap(
        probabilities=probs,
        remaining_mines=remaining_mines,
        unknown_remaining=board.unknown_remaining,
        iterations=iterations,
    )
    logger.debug(
        "relaxation: %d frontier cells, %d isolated, %d iterations, mass %.4f/%d",
        len(probs), result.isolated_count, iterations, result.frontier_mass, remaining_mines,
    )
    return result
