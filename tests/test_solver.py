import random

import pytest

import minesolver.solver as solver_module
from minesolver.board import CellState
from minesolver.errors import CapabilityFault
from minesolver.field import NativeMinefield
from minesolver.scripted import ScriptedMinefield
from minesolver.solver import MinefieldSolver, SolveState


def assert_board_consistent(solver: MinefieldSolver) -> None:
    board = solver.board
    assert board.flags_placed == board.count_state(CellState.FLAGGED)
    assert board.unknown_remaining == board.count_state(CellState.UNKNOWN)
    assert board.revealed_count == board.count_state(CellState.REVEALED)
    assert (
        board.flags_placed + board.revealed_count + board.mines_revealed + board.unknown_remaining
        == board.width * board.height
    )


def assert_fully_solved(solver: MinefieldSolver) -> None:
    board = solver.board
    assert solver.solved()
    assert board.unknown_remaining == 0
    assert board.mines_revealed == 0
    assert board.flags_placed == solver.mine_count


def test_four_by_four_field_is_solved(four_by_four_field):
    solver = MinefieldSolver(four_by_four_field)

    solved, luck = solver.solve()

    assert solved
    assert_fully_solved(solver)
    assert_board_consistent(solver)
    assert solver.state is SolveState.SOLVED
    assert {
        pos for pos in solver.board.positions()
        if solver.board.get(pos).state is CellState.FLAGGED
    } == four_by_four_field.mines
    # Deduction alone stalls on this field, so it has to guess
    assert solver.guesses_count >= 1
    assert solver.relaxation_runs == solver.guesses_count
    assert 0.0 < luck <= 1.0


def test_all_flagged_reveals_the_rest_without_relaxation(monkeypatch):
    def fail(*args, **kwargs):
        raise AssertionError("probability engine must not run")

    monkeypatch.setattr(solver_module, "relax_probabilities", fail)
    # (3..4, 0..1) are never reached by deduction; once both mines are
    # flagged they are revealed directly
    field = NativeMinefield.from_mines(5, 2, [(2, 0), (2, 1)])
    solver = MinefieldSolver(field, record_steps=True)

    solved, luck = solver.solve()

    assert solved
    assert luck == 1.0
    assert solver.guesses_count == 0
    assert_fully_solved(solver)
    bulk = [step for step in solver.steps_history if step["method"] == "all_flagged"]
    assert [step["cell"] for step in bulk] == [(3, 0), (4, 0), (3, 1), (4, 1)]
    assert all(step["action"] == "reveal" for step in bulk)


def test_pure_deduction_keeps_luck_at_one():
    field = NativeMinefield.from_mines(3, 1, [(2, 0)])
    solver = MinefieldSolver(field)

    assert solver.solve() == (True, 1.0)
    assert solver.guesses_count == 0


def test_mine_on_first_probe_explodes_with_initial_luck():
    field = NativeMinefield.from_mines(2, 2, [(0, 0)])
    solver = MinefieldSolver(field)

    assert solver.solve() == (False, 1.0)
    assert solver.state is SolveState.EXPLODED
    assert not solver.solved()
    assert solver.board.mines_revealed == 1


def test_losing_guess_returns_accumulated_luck():
    # (0,0) shows 1 with three unknown neighbors; equal odds everywhere, so
    # the earliest discovered cell is tried each time
    field = NativeMinefield.from_mines(2, 2, [(1, 0)])
    solver = MinefieldSolver(field)

    solved, luck = solver.solve()

    assert not solved
    assert luck == pytest.approx((2 / 3) * (1 / 2))
    assert solver.guesses_count == 2
    assert solver.state is SolveState.EXPLODED
    assert solver.board.get((1, 0)).state is CellState.MINE
    assert_board_consistent(solver)


def test_luck_is_product_of_guess_survival_chances(monkeypatch):
    taken = []
    real_select = solver_module.select_guess

    def recording_select(board, estimate):
        choice = real_select(board, estimate)
        taken.append(choice[1])
        return choice

    monkeypatch.setattr(solver_module, "select_guess", recording_select)
    field = NativeMinefield(16, 16, 40, rng=random.Random(11))
    solver = MinefieldSolver(field)

    _, luck = solver.solve()

    expected = 1.0
    for p in taken:
        assert 0.0 <= p <= 1.0
        expected *= 1.0 - p
    assert luck == pytest.approx(expected)
    assert len(taken) == solver.guesses_count


def test_propagation_is_idempotent_once_stable(four_by_four_field):
    solver = MinefieldSolver(four_by_four_field)
    while solver.propagate_round():
        pass

    cells = list(solver.board.cells)
    pending = list(solver.pending)
    reveals = solver.reveal_moves_count

    assert solver.propagate_round() is False
    assert solver.board.cells == cells
    assert solver.pending == pending
    assert solver.reveal_moves_count == reveals
    assert solver.state is SolveState.PROPAGATING


@pytest.mark.parametrize("seed", range(5))
def test_random_expert_fields_end_consistently(seed):
    field = NativeMinefield(30, 16, 99, rng=random.Random(seed))
    solver = MinefieldSolver(field)

    solved, luck = solver.solve()

    assert_board_consistent(solver)
    assert 0.0 <= luck <= 1.0
    if solved:
        assert_fully_solved(solver)
        assert solver.state is SolveState.SOLVED
    else:
        assert solver.board.mines_revealed == 1
        assert solver.state is SolveState.EXPLODED
    # Every flag sits on a real mine
    for pos in solver.board.positions():
        if solver.board.get(pos).state is CellState.FLAGGED:
            assert pos in field.mines


def test_capability_fault_aborts_solve():
    class BrokenScript:
        def sweep_cell(self, column, row):
            raise OSError("interpreter gone")

    solver = MinefieldSolver(ScriptedMinefield(BrokenScript(), 3, 3, 1))

    with pytest.raises(CapabilityFault):
        solver.solve()


def test_uncovering_resolved_cell_fails_before_sweeping(four_by_four_field):
    solver = MinefieldSolver(four_by_four_field)
    solver.solve()
    reveals = solver.reveal_moves_count

    with pytest.raises(AssertionError):
        solver.uncover((0, 0))
    assert solver.reveal_moves_count == reveals


def test_stats_and_step_history():
    field = NativeMinefield.from_mines(3, 1, [(2, 0)])
    solver = MinefieldSolver(field, record_steps=True)
    solver.solve()

    stats = solver.stats()

    assert stats["solved"] is True
    assert stats["luck"] == 1.0
    assert stats["flags_placed"] == 1
    assert stats["reveal_moves_count"] == 2
    methods = [(s["action"], s["method"], s["cell"]) for s in stats["steps_history"]]
    assert methods == [
        ("reveal", "first_move", (0, 0)),
        ("reveal", "rule_a", (1, 0)),
        ("flag", "rule_b", (2, 0)),
    ]
    assert stats["steps_history"][-1]["knowledge_snapshot"] == [["0", "1", "F"]]


def test_show_renders_board():
    field = NativeMinefield.from_mines(3, 1, [(2, 0)])
    solver = MinefieldSolver(field)
    solver.solve()

    assert solver.show(color=False) == "  1 F"
