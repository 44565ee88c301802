"""Exception types raised by the solver and its minefield backends."""


class SolverError(Exception):
    """Base class for unrecoverable solver faults."""


class BadIndex(SolverError, IndexError):
    """A position argument fell outside the board."""

    def __init__(self, col: int, row: int, width: int, height: int) -> None:
        super().__init__(
            f"Position ({col}, {row}) is outside the {width}x{height} board."
        )
        self.position = (col, row)


class CapabilityFault(SolverError):
    """The minefield oracle failed for a reason other than a detonation."""


class InvariantViolation(SolverError, AssertionError):
    """Internal bookkeeping reached a state deduction should make impossible."""
