"""Pick the next probe when deduction stalls."""

import logging
from typing import AbstractSet, Tuple

from .board import Board, CellState, Position
from .errors import InvariantViolation
from .relaxation import ProbabilityMap

logger = logging.getLogger(__name__)


def find_isolated_cell(board: Board, frontier: AbstractSet[Position]) -> Position:
    """
    Return the first UNKNOWN cell, in row-major order, outside the frontier.

    Raises:
        InvariantViolation: If every unknown cell is on the frontier.
    """
    for pos in board.positions():
        if board.get(pos).state is CellState.UNKNOWN and pos not in frontier:
            return pos
    raise InvariantViolation(
        "Expected an isolated unknown cell, but every unknown cell is on the frontier."
    )


def select_guess(board: Board, estimate: ProbabilityMap) -> Tuple[Position, float]:
    """
    Choose the cell least likely to hold a mine.

    The lowest-probability frontier cell is the default; an isolated cell is
    preferred when their shared probability is strictly lower, or when there
    is no frontier at all.

    Returns:
        (position, estimated mine probability) of the chosen cell.
    """
    best = estimate.best_frontier_cell()
    p_other = estimate.isolated_probability

    if best is None:
        if p_other is None:
            raise InvariantViolation("No unknown cells to guess from.")
        choice = (find_isolated_cell(board, estimate.probabilities.keys()), p_other)
    elif p_other is not None and p_other < best[1]:
        choice = (find_isolated_cell(board, estimate.probabilities.keys()), p_other)
    else:
        choice = best

    logger.debug(
        "guess %s with mine probability %.4f (frontier best %s, isolated %s)",
        choice[0], choice[1], best, p_other,
    )
    return choice
