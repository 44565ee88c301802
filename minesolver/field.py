"""Minefield capability and the natively generated minefield backend."""

import logging
import random
from typing import Iterable, List, NamedTuple, Optional, Protocol, Set, Tuple

from .errors import BadIndex
from .utils import get_neighborhoods, in_bounds

logger = logging.getLogger(__name__)


class Outcome(NamedTuple):
    """Result of sweeping one cell: a neighbor-mine count, or a detonation."""

    detonated: bool
    count: int = 0

    @classmethod
    def cleared(cls, count: int) -> "Outcome":
        if not 0 <= count <= 8:
            raise ValueError(f"Neighbor mine count must be 0..8, got {count}.")
        return cls(False, count)


DETONATED = Outcome(True)


class Minefield(Protocol):
    """
    Oracle the solver probes.

    ``sweep`` must be called at most once per in-bounds position; calling it
    otherwise is a caller bug, not a game event.
    """

    @property
    def width(self) -> int: ...

    @property
    def height(self) -> int: ...

    @property
    def mine_count(self) -> int: ...

    def sweep(self, col: int, row: int) -> Outcome: ...


class NativeMinefield:
    """Minefield generated in-process, with first-sweep safety."""

    def __init__(
        self,
        width: int,
        height: int,
        mine_count: int,
        rng: Optional[random.Random] = None,
    ) -> None:
        """
        Initialize an unplaced minefield.

        Args:
            width: Field width (number of columns), must be > 0.
            height: Field height (number of rows), must be > 0.
            mine_count: Total number of mines, 0 <= mine_count < width * height.
            rng: Random generator used for placement; a fresh unseeded
                ``random.Random`` when omitted.

        Raises:
            ValueError: If dimensions or the mine count are invalid.
        """
        if width <= 0 or height <= 0:
            raise ValueError("Width and height must be positive.")
        if mine_count < 0:
            raise ValueError("mine_count must be non-negative.")
        if mine_count > width * height - 1:
            raise ValueError(
                "Cannot keep the first swept cell safe with that many mines."
            )

        self._width = width
        self._height = height
        self._mine_count = mine_count
        self._rng = rng if rng is not None else random.Random()
        self._neighborhoods = get_neighborhoods(width, height)

        # None until the first sweep places the mines (Unplaced -> Placed)
        self._grid: Optional[List[List[bool]]] = None

    @classmethod
    def from_mines(
        cls, width: int, height: int, mines: Iterable[Tuple[int, int]]
    ) -> "NativeMinefield":
        """Build an already-placed field with mines at the given (col, row) positions."""
        mine_set: Set[Tuple[int, int]] = set(mines)
        for col, row in mine_set:
            if not in_bounds(col, row, width, height):
                raise BadIndex(col, row, width, height)

        field = cls(width, height, len(mine_set))
        field._grid = [
            [(col, row) in mine_set for col in range(width)] for row in range(height)
        ]
        return field

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def mine_count(self) -> int:
        return self._mine_count

    @property
    def is_placed(self) -> bool:
        return self._grid is not None

    @property
    def mines(self) -> Set[Tuple[int, int]]:
        """Positions of all mines; empty while the field is still unplaced."""
        if self._grid is None:
            return set()
        return {
            (col, row)
            for row in range(self._height)
            for col in range(self._width)
            if self._grid[row][col]
        }

    def _place_mines(self, first_col: int, first_row: int) -> List[List[bool]]:
        """Place every mine uniformly at random, never on the first swept cell."""
        eligible: List[Tuple[int, int]] = [
            (col, row)
            for row in range(self._height)
            for col in range(self._width)
            if (col, row) != (first_col, first_row)
        ]

        mines = set(self._rng.sample(eligible, self._mine_count))
        grid = [
            [(col, row) in mines for col in range(self._width)]
            for row in range(self._height)
        ]
        logger.debug(
            "placed %d mines on %dx%d field, first sweep at (%d, %d)",
            self._mine_count, self._width, self._height, first_col, first_row,
        )
        return grid

    def sweep(self, col: int, row: int) -> Outcome:
        """
        Probe one cell.

        Returns:
            ``DETONATED`` if the cell holds a mine, else the count of
            neighboring mines.

        Raises:
            BadIndex: If (col, row) is outside the field.
        """
        if not in_bounds(col, row, self._width, self._height):
            raise BadIndex(col, row, self._width, self._height)

        if self._grid is None:
            self._grid = self._place_mines(col, row)

        grid = self._grid
        if grid[row][col]:
            return DETONATED

        count = sum(1 for nc, nr in self._neighborhoods[(col, row)] if grid[nr][nc])
        return Outcome.cleared(count)
