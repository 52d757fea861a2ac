"""Board representation for the playfield."""

from __future__ import annotations

from typing import List

import numpy as np
from numpy.typing import NDArray

from .tetromino import Piece


# Dimensions of the standard playfield.
WIDTH = 10
HEIGHT = 20

Grid = NDArray[np.uint8]

EMPTY = 0


class PlacementError(RuntimeError):
    """Raised when a piece is locked over occupied or missing cells.

    Callers validate placements through :mod:`ttrys.collision` first, so this
    signals a defect rather than a game condition.
    """


def create_empty_grid(width: int = WIDTH, height: int = HEIGHT) -> Grid:
    """Return a new empty grid filled with zeros."""

    return np.zeros((height, width), dtype=np.uint8)


class Board:
    """Grid of locked blocks.

    Coordinates are ``(x, y)`` with ``y`` growing downward.  Visible rows span
    ``0 <= y < height``; ``buffer_rows`` hidden rows above them use negative
    ``y`` so pieces may poke above the well without leaving the board.
    """

    def __init__(self, width: int = WIDTH, height: int = HEIGHT, buffer_rows: int = 0) -> None:
        if width <= 0 or height <= 0 or buffer_rows < 0:
            raise ValueError("Invalid board dimensions")
        self.width = width
        self.height = height
        self.buffer_rows = buffer_rows
        self.grid: Grid = create_empty_grid(width, height + buffer_rows)

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and -self.buffer_rows <= y < self.height

    def get_cell(self, x: int, y: int) -> int:
        """Safely return the value at ``(x, y)``.

        Raises:
            IndexError: If the coordinates are outside the board.
        """
        if self.in_bounds(x, y):
            return int(self.grid[y + self.buffer_rows, x])
        raise IndexError("Cell out of bounds")

    def set_cell(self, x: int, y: int, value: int) -> None:
        """Safely set the value at ``(x, y)``.

        Raises:
            IndexError: If the coordinates are outside the board.
        """
        if self.in_bounds(x, y):
            self.grid[y + self.buffer_rows, x] = np.uint8(value)
        else:
            raise IndexError("Cell out of bounds")

    def is_cell_free(self, x: int, y: int) -> bool:
        """Return ``True`` if ``(x, y)`` is on the board and empty.

        Any coordinates outside the board are treated as occupied, so
        off-board positions are rejected by collision checks automatically.
        """

        if self.in_bounds(x, y):
            return bool(self.grid[y + self.buffer_rows, x] == EMPTY)
        return False

    def lock_piece(self, piece: Piece) -> None:
        """Write the piece's blocks into the grid.

        Raises:
            PlacementError: If any target cell is off the board or occupied.
        """

        cells = piece.cells()
        for x, y in cells:
            if not self.is_cell_free(x, y):
                raise PlacementError(f"Cannot lock {piece.shape.value} at ({x}, {y})")

        coordinates = np.asarray(cells, dtype=np.int16)
        cols, rows = coordinates.T
        self.grid[rows + self.buffer_rows, cols] = np.uint8(piece.color)

    def full_rows(self) -> List[int]:
        """Return the ``y`` of every full row, top to bottom."""

        full = np.all(self.grid != EMPTY, axis=1)
        return [int(i) - self.buffer_rows for i in np.flatnonzero(full)]

    def clear_full_rows(self) -> int:
        """Clear completed rows and return how many were removed.

        All full rows go at once; the rows above them drop as whole units,
        keeping their order, and empty rows are inserted at the top.
        """

        full = np.all(self.grid != EMPTY, axis=1)
        cleared = int(np.count_nonzero(full))
        if cleared:
            remaining = self.grid[~full]
            new_rows = np.zeros((cleared, self.width), dtype=self.grid.dtype)
            self.grid = np.vstack((new_rows, remaining))
        return cleared

    def occupied_count(self) -> int:
        return int(np.count_nonzero(self.grid))

    def visible(self) -> Grid:
        """Return a read-only view of the visible rows."""

        view = self.grid[self.buffer_rows:]
        view.flags.writeable = False
        return view

    def copy(self) -> "Board":
        clone = Board(self.width, self.height, self.buffer_rows)
        clone.grid = self.grid.copy()
        return clone
