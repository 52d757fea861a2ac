"""Placement checks for pieces on a board.

All functions are pure: they never mutate the board or the piece and report a
rejected move by returning ``None``.
"""

from __future__ import annotations

from typing import Optional

from .board import Board
from .tetromino import Piece, rotate


def can_place(board: Board, piece: Piece) -> bool:
    """Return ``True`` if every cell of ``piece`` is on the board and free."""

    return all(board.is_cell_free(x, y) for x, y in piece.cells())


def try_move(board: Board, piece: Piece, dx: int, dy: int) -> Optional[Piece]:
    """Return ``piece`` translated by ``(dx, dy)`` or ``None`` if blocked."""

    candidate = piece.moved(dx, dy)
    return candidate if can_place(board, candidate) else None


def try_rotate(board: Board, piece: Piece, direction: int = 1) -> Optional[Piece]:
    """Return ``piece`` rotated one step or ``None`` if blocked.

    No alternate positions are tried when the rotated piece collides.
    """

    candidate = rotate(piece, direction)
    return candidate if can_place(board, candidate) else None


def is_grounded(board: Board, piece: Piece) -> bool:
    """Return ``True`` if ``piece`` cannot move one row down."""

    return not can_place(board, piece.moved(0, 1))


def hard_drop_target(board: Board, piece: Piece) -> Piece:
    """Return ``piece`` moved as far down as it can go.

    The loop is bounded by the board height since every step moves one row.
    """

    while True:
        lower = try_move(board, piece, 0, 1)
        if lower is None:
            return piece
        piece = lower
