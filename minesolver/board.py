"""Solver-owned grid of per-cell knowledge."""

from enum import Enum
from typing import Iterator, List, NamedTuple, Tuple

from .errors import BadIndex, InvariantViolation
from .field import Outcome
from .utils import get_neighborhoods

Position = Tuple[int, int]


class CellState(Enum):
    UNKNOWN = "unknown"
    FLAGGED = "flagged"
    REVEALED = "revealed"
    MINE = "mine"


class Cell(NamedTuple):
    """Knowledge about one cell; ``count`` is meaningful only when REVEALED."""

    state: CellState
    count: int = 0

    @property
    def symbol(self) -> str:
        if self.state is CellState.UNKNOWN:
            return "."
        if self.state is CellState.FLAGGED:
            return "F"
        if self.state is CellState.MINE:
            return "X"
        return str(self.count)


UNKNOWN = Cell(CellState.UNKNOWN)
FLAGGED = Cell(CellState.FLAGGED)
MINE = Cell(CellState.MINE)


class Board:
    """
    Fixed-size grid of Cell values with incrementally maintained counters.

    Every cell starts UNKNOWN and leaves that state exactly once, through
    ``uncover`` or ``plant_flag``. The counters always match a full scan.
    """

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("Width and height must be positive.")

        self.width: int = width
        self.height: int = height
        self.cells: List[Cell] = [UNKNOWN] * (width * height)
        self._neighborhoods = get_neighborhoods(width, height)

        self.flags_placed: int = 0
        self.unknown_remaining: int = width * height
        self.revealed_count: int = 0
        self.mines_revealed: int = 0

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def index(self, pos: Position) -> int:
        """
        Flatten a position into an index into ``cells``.

        Raises:
            BadIndex: If pos is outside the board.
        """
        col, row = pos
        if not (0 <= col < self.width and 0 <= row < self.height):
            raise BadIndex(col, row, self.width, self.height)
        return col + row * self.width

    def get(self, pos: Position) -> Cell:
        return self.cells[self.index(pos)]

    def neighbors(self, pos: Position) -> List[Tuple[Position, Cell]]:
        """Return (position, cell) for every in-bounds 8-neighbor of pos."""
        self.index(pos)
        width = self.width
        return [
            ((nc, nr), self.cells[nc + nr * width])
            for nc, nr in self._neighborhoods[pos]
        ]

    def positions(self) -> Iterator[Position]:
        """Yield every position in row-major order (column varies fastest)."""
        for row in range(self.height):
            for col in range(self.width):
                yield (col, row)

    def unknown_positions(self) -> List[Position]:
        return [pos for pos in self.positions() if self.get(pos).state is CellState.UNKNOWN]

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def check_unknown(self, pos: Position) -> int:
        """
        Return the index of pos, insisting the cell is still UNKNOWN.

        Raises:
            BadIndex: If pos is outside the board.
            InvariantViolation: If the cell was already resolved.
        """
        i = self.index(pos)
        if self.cells[i].state is not CellState.UNKNOWN:
            raise InvariantViolation(
                f"Cell {pos} is already {self.cells[i].state.value}; "
                "a resolved cell cannot change again."
            )
        return i

    def uncover(self, pos: Position, outcome: Outcome) -> Cell:
        """
        Record the result of sweeping an UNKNOWN cell.

        Raises:
            BadIndex: If pos is outside the board.
            InvariantViolation: If the cell is not UNKNOWN.
        """
        i = self.check_unknown(pos)
        if outcome.detonated:
            cell = MINE
            self.mines_revealed += 1
        else:
            cell = Cell(CellState.REVEALED, outcome.count)
            self.revealed_count += 1
        self.cells[i] = cell
        self.unknown_remaining -= 1
        return cell

    def plant_flag(self, pos: Position) -> None:
        """
        Mark an UNKNOWN cell as a deduced mine.

        Raises:
            BadIndex: If pos is outside the board.
            InvariantViolation: If the cell is not UNKNOWN.
        """
        i = self.check_unknown(pos)
        self.cells[i] = FLAGGED
        self.flags_placed += 1
        self.unknown_remaining -= 1

    # -------------------------------------------------------------------------
    # Scans & display
    # -------------------------------------------------------------------------

    def count_state(self, state: CellState) -> int:
        return sum(1 for cell in self.cells if cell.state is state)

    def snapshot(self) -> List[List[str]]:
        """Return the board as rows of display symbols (for step replay)."""
        return [
            [self.cells[col + row * self.width].symbol for col in range(self.width)]
            for row in range(self.height)
        ]

    _ANSI_RESET = "\033[0m"
    _ANSI_FLAG = "\033[1;96m"
    _ANSI_MINE = "\033[1;91m"

    def format_board(self, color: bool = True) -> str:
        """
        Render the board as a multi-line string for terminal display.

        Unknown cells are '.', flags 'F', revealed mines 'X', zero counts blank.
        """

        def cell_str(cell: Cell) -> str:
            if cell.state is CellState.REVEALED:
                return str(cell.count) if cell.count else " "
            if not color or cell.state is CellState.UNKNOWN:
                return cell.symbol
            ansi = self._ANSI_FLAG if cell.state is CellState.FLAGGED else self._ANSI_MINE
            return f"{ansi}{cell.symbol}{self._ANSI_RESET}"

        lines = []
        for row in range(self.height):
            lines.append(
                " ".join(
                    cell_str(self.cells[col + row * self.width])
                    for col in range(self.width)
                )
            )
        return "\n".join(lines)
