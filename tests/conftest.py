from typing import Dict, Iterable, Optional, Tuple

import matplotlib

matplotlib.use("Agg")

import pytest

from minesolver.board import Board
from minesolver.field import NativeMinefield, Outcome

# Mines at flattened indices 6, 12 and 15 of a 4x4 field
FOUR_BY_FOUR_MINES = [(2, 1), (0, 3), (3, 3)]


def make_board(
    width: int,
    height: int,
    revealed: Optional[Dict[Tuple[int, int], int]] = None,
    flags: Iterable[Tuple[int, int]] = (),
) -> Board:
    """Board with the given cells revealed (pos -> count) and flagged."""
    board = Board(width, height)
    for pos, count in (revealed or {}).items():
        board.uncover(pos, Outcome.cleared(count))
    for pos in flags:
        board.plant_flag(pos)
    return board


@pytest.fixture
def four_by_four_field() -> NativeMinefield:
    return NativeMinefield.from_mines(4, 4, FOUR_BY_FOUR_MINES)
