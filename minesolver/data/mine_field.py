"""
Reference minefield script loaded by ScriptedFieldBuilder.

A scripted field exposes ``MineField(width, height, number_of_mines)`` with a
``sweep_cell(column, row)`` method that returns the neighboring mine count,
or raises ``ExplosionException`` when the swept cell holds a mine. Mines are
placed on the first sweep, never on the swept cell.
"""

import random

BEGINNER_FIELD = {
    "width": 10,
    "height": 10,
    "number_of_mines": 10,
}

INTERMEDIATE_FIELD = {
    "width": 16,
    "height": 16,
    "number_of_mines": 40,
}

EXPERT_FIELD = {
    "width": 30,
    "height": 16,
    "number_of_mines": 99,
}


class ExplosionException(Exception):
    pass


class MineField:
    def __init__(self, width, height, number_of_mines, seed=None):
        if width <= 0 or height <= 0:
            raise ValueError("width and height must be positive")
        if number_of_mines >= width * height:
            raise ValueError("too many mines for the field")

        self.width = width
        self.height = height
        self.number_of_mines = number_of_mines
        self._random = random.Random(seed)
        self._mines = None

    def _place_mines(self, column, row):
        cells = [
            (c, r)
            for r in range(self.height)
            for c in range(self.width)
            if (c, r) != (column, row)
        ]
        self._mines = set(self._random.sample(cells, self.number_of_mines))

    def sweep_cell(self, column, row):
        if not (0 <= column < self.width and 0 <= row < self.height):
            raise IndexError("cell (%d, %d) is outside the field" % (column, row))

        if self._mines is None:
            self._place_mines(column, row)

        if (column, row) in self._mines:
            raise ExplosionException()

        return sum(
            1
            for dc in (-1, 0, 1)
            for dr in (-1, 0, 1)
            if (dc or dr) and (column + dc, row + dr) in self._mines
        )
