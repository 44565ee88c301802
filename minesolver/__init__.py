"""
Minefield Solver

Clears covert-mine grid puzzles against a sweep oracle:
- Propagation: two local rules over a worklist of numbered cells
- Relaxation: iterative mine-probability estimates when deduction stalls
- Guessing: lowest-risk probe, with cumulative survival "luck"
"""

from .board import Board, Cell, CellState
from .errors import BadIndex, CapabilityFault, InvariantViolation, SolverError
from .field import DETONATED, Minefield, NativeMinefield, Outcome
from .guess import select_guess
from .relaxation import ProbabilityMap, relax_probabilities
from .scripted import ScriptedFieldBuilder, ScriptedMinefield
from .solver import MinefieldSolver, SolveState
from .analysis import (
    format_batch_summary,
    new_minefield,
    run_preset_analysis,
    run_solver_many_tests,
    run_solver_single_test,
)

__version__ = "1.0.0"

__all__ = [
    # Core classes
    "Board",
    "Cell",
    "CellState",
    "MinefieldSolver",
    "SolveState",
    "ProbabilityMap",
    # Minefields
    "Minefield",
    "NativeMinefield",
    "ScriptedMinefield",
    "ScriptedFieldBuilder",
    "Outcome",
    "DETONATED",
    # Errors
    "SolverError",
    "BadIndex",
    "CapabilityFault",
    "InvariantViolation",
    # Algorithms
    "relax_probabilities",
    "select_guess",
    # Analysis functions
    "new_minefield",
    "run_solver_single_test",
    "run_solver_many_tests",
    "run_preset_analysis",
    "format_batch_summary",
]
