"""Minefield solver: deterministic propagation plus relaxation-guided guessing."""

import logging
from enum import Enum
from typing import Any, Dict, List, Tuple

from .board import Board, CellState, Position
from .config import CONVERGENCE_TOLERANCE, FIRST_PROBE, MAX_RELAXATION_ITERATIONS
from .field import Minefield, Outcome
from .guess import select_guess
from .relaxation import relax_probabilities

logger = logging.getLogger(__name__)


class SolveState(Enum):
    PROPAGATING = "propagating"
    GUESSING = "guessing"
    SOLVED = "solved"
    EXPLODED = "exploded"


class MinefieldSolver:
    """
    Solver that clears a minefield by deduction, guessing only when stuck.

    Propagation works through a worklist of active numbered cells in rounds:
    a cell whose flags already account for its count reveals the rest of its
    neighbors (rule A), a cell whose unknowns are exactly its missing mines
    flags them (rule B). When a full round makes no progress, mine
    probabilities are estimated by relaxation and the safest-looking cell is
    probed; ``luck`` accumulates the estimated survival chance of every such
    guess.
    """

    def __init__(
        self,
        field: Minefield,
        record_steps: bool = False,
        max_iterations: int = MAX_RELAXATION_ITERATIONS,
        tolerance: float = CONVERGENCE_TOLERANCE,
    ) -> None:
        """
        Initialize a solver bound to one minefield.

        Args:
            field: The minefield to probe; must not have been swept yet.
            record_steps: If True, record a board snapshot for every move
                (used by the demo's replay mode).
            max_iterations: Iteration cap for each probability relaxation.
            tolerance: Convergence threshold for each probability relaxation.
        """
        self.field = field
        self.board = Board(field.width, field.height)
        self.mine_count: int = field.mine_count
        self.record_steps = record_steps
        self.max_iterations = max_iterations
        self.tolerance = tolerance

        self.state = SolveState.PROPAGATING
        self.luck: float = 1.0

        # Worklist: cells examined this round, and cells queued for the next
        self.active: List[Position] = []
        self.pending: List[Position] = [FIRST_PROBE]

        # Metrics / counters (for analysis)
        self.reveal_moves_count: int = 0
        self.guesses_count: int = 0
        self.rounds_count: int = 0
        self.relaxation_runs: int = 0
        self.relaxation_iterations: int = 0

        self.steps_history: List[Dict[str, Any]] = []
        self._current_method: str = "first_move"

    @property
    def remaining_mines(self) -> int:
        return self.mine_count - self.board.flags_placed

    # -------------------------------------------------------------------------
    # Core functionality methods
    # -------------------------------------------------------------------------

    def _record_step(self, action: str, pos: Position) -> None:
        if not self.record_steps:
            return
        self.steps_history.append({
            "action": action,  # "reveal" or "flag"
            "cell": pos,
            "method": self._current_method,
            "step_number": len(self.steps_history),
            "knowledge_snapshot": self.board.snapshot(),
        })

    def uncover(self, pos: Position) -> Outcome:
        """
        Sweep an UNKNOWN cell and record the answer on the board.

        Raises:
            BadIndex: If pos is outside the board.
            InvariantViolation: If the cell was already resolved.
            CapabilityFault: If the minefield fails.
        """
        self.board.check_unknown(pos)

        col, row = pos
        outcome = self.field.sweep(col, row)
        self.reveal_moves_count += 1
        self.board.uncover(pos, outcome)
        self._record_step("reveal", pos)

        if outcome.detonated:
            self.state = SolveState.EXPLODED
            logger.debug("detonated at %s after %d reveals", pos, self.reveal_moves_count)
        return outcome

    def plant_flag(self, pos: Position) -> None:
        self.board.plant_flag(pos)
        self._record_step("flag", pos)

    def propagate_round(self) -> bool:
        """
        Run one propagation round over the worklist.

        Returns:
            True if any cell was swept or flagged. Check ``state`` afterwards:
            the round stops early with EXPLODED on a detonation.
        """
        self.active, self.pending = self.pending, []
        self.rounds_count += 1
        productive = False

        for pos in self.active:
            cell = self.board.get(pos)

            if cell.state is CellState.UNKNOWN:
                if self.uncover(pos).detonated:
                    return productive
                self.pending.append(pos)
                productive = True

            elif cell.state is CellState.REVEALED:
                neighbors = self.board.neighbors(pos)
                flags = sum(1 for _, c in neighbors if c.state is CellState.FLAGGED)
                unknowns = [p for p, c in neighbors if c.state is CellState.UNKNOWN]

                if not unknowns:
                    continue

                if cell.count == flags:
                    self._current_method = "rule_a"
                    for p in unknowns:
                        if self.uncover(p).detonated:
                            return True
                        self.pending.append(p)
                    productive = True
                elif len(unknowns) + flags == cell.count:
                    self._current_method = "rule_b"
                    for p in unknowns:
                        self.plant_flag(p)
                    productive = True
                else:
                    self.pending.append(pos)

            elif cell.state is CellState.MINE:
                self.state = SolveState.EXPLODED
                return productive

        return productive

    def reveal_remaining(self) -> bool:
        """
        Sweep every UNKNOWN cell; only valid once all mines are flagged.

        Returns:
            False if a sweep detonated (the flags were wrong).
        """
        self._current_method = "all_flagged"
        for pos in self.board.unknown_positions():
            if self.uncover(pos).detonated:
                return False
        return True

    def guess(self) -> bool:
        """
        Estimate probabilities, probe the safest-looking cell, and queue it.

        Returns:
            False if the probed cell held a mine.
        """
        self.state = SolveState.GUESSING
        self._current_method = "guess"

        estimate = relax_probabilities(
            self.board,
            self.pending,
            self.remaining_mines,
            max_iterations=self.max_iterations,
            tolerance=self.tolerance,
        )
        self.relaxation_runs += 1
        self.relaxation_iterations += estimate.iterations

        pos, probability = select_guess(self.board, estimate)
        self.luck *= 1.0 - probability
        self.guesses_count += 1
        logger.debug(
            "guess #%d at %s, p(mine)=%.4f, luck now %.4f",
            self.guesses_count, pos, probability, self.luck,
        )

        if self.uncover(pos).detonated:
            return False

        self.pending.append(pos)
        self.state = SolveState.PROPAGATING
        return True

    # -------------------------------------------------------------------------
    # Main solving loop
    # -------------------------------------------------------------------------

    def solve(self) -> Tuple[bool, float]:
        """
        Solve the field end-to-end.

        Returns:
            (solved, luck): whether the board was cleared, and the product of
            the survival estimates of every guess taken (1.0 with no guesses).
        """
        self._current_method = "first_move"

        while True:
            productive = self.propagate_round()
            if self.state is SolveState.EXPLODED:
                return False, self.luck

            if self.board.unknown_remaining == 0:
                break

            if self.remaining_mines == 0:
                if not self.reveal_remaining():
                    return False, self.luck
                break

            if productive:
                continue

            if not self.guess():
                return False, self.luck

        solved = self.solved()
        if solved:
            self.state = SolveState.SOLVED
        logger.debug(
            "finished: solved=%s luck=%.4f guesses=%d rounds=%d",
            solved, self.luck, self.guesses_count, self.rounds_count,
        )
        return solved, self.luck

    def solved(self) -> bool:
        """True iff no unknowns remain, no mine was hit and every mine is flagged."""
        board = self.board
        return (
            board.count_state(CellState.UNKNOWN) == 0
            and board.count_state(CellState.MINE) == 0
            and board.count_state(CellState.FLAGGED) == self.mine_count
        )

    def stats(self) -> Dict[str, Any]:
        """Terminal metrics payload for analysis and display."""
        return {
            "solved": self.solved(),
            "luck": self.luck,
            "reveal_moves_count": self.reveal_moves_count,
            "flags_placed": self.board.flags_placed,
            "guesses_count": self.guesses_count,
            "rounds_count": self.rounds_count,
            "relaxation_runs": self.relaxation_runs,
            "relaxation_iterations": self.relaxation_iterations,
            "steps_history": self.steps_history,
        }

    def show(self, color: bool = True) -> str:
        """Diagnostic dump of the solver's board."""
        return self.board.format_board(color=color)
