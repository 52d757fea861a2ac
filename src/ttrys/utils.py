"""Utility helpers for the game engine."""

from __future__ import annotations

from typing import List, Optional

from .board import Board
from .tetromino import Piece


MAX_GRAVITY_MS = 600.0
MIN_GRAVITY_MS = 150.0
TOP_LEVEL = 10
GRAVITY_EXPONENT = 0.7


def gravity_interval_ms(level: int) -> float:
    """Return the fall interval in milliseconds for ``level``.

    The interval follows a power curve from 600 ms at level 0 down to 150 ms
    at level 10, then stays constant.
    """

    if level <= 0:
        return MAX_GRAVITY_MS
    if level >= TOP_LEVEL:
        return MIN_GRAVITY_MS
    span = MAX_GRAVITY_MS - MIN_GRAVITY_MS
    return MAX_GRAVITY_MS - span * (level / TOP_LEVEL) ** GRAVITY_EXPONENT


def gravity_ticks(level: int, tick_rate: int) -> int:
    """Return the number of game ticks between gravity steps at ``level``."""

    return max(1, round(gravity_interval_ms(level) * tick_rate / 1000))


def render_grid(board: Board, active: Optional[Piece] = None) -> List[List[int]]:
    """Return a copy of the visible rows with the active piece overlaid.

    Renderers draw this without touching the board (the piece is not locked).
    Cells of the active piece above the visible area are dropped.
    """

    grid = [[int(v) for v in row] for row in board.visible()]
    if active is not None:
        for x, y in active.cells():
            if 0 <= y < board.height and 0 <= x < board.width:
                grid[y][x] = active.color
    return grid
