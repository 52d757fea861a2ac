"""Tetromino shapes, the rotation table and the immutable piece value.

Every shape has four rotation states listed clockwise, state ``0`` being the
spawn orientation.  A state is a tuple of four ``(dx, dy)`` offsets inside a
4x4 box, ``dy`` growing downward.  Rotation is basic: the anchor never moves
and no alternate offsets (wall kicks) are tried.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, List, Tuple

Offset = Tuple[int, int]
RotationState = Tuple[Offset, Offset, Offset, Offset]

NUM_ROTATIONS = 4


class Shape(str, Enum):
    """Enumeration of the seven standard tetromino shapes."""

    I = "I"
    J = "J"
    L = "L"
    O = "O"
    S = "S"
    T = "T"
    Z = "Z"


ROTATION_TABLE: Dict[Shape, Tuple[RotationState, ...]] = {
    Shape.I: (
        ((0, 1), (1, 1), (2, 1), (3, 1)),
        ((2, 0), (2, 1), (2, 2), (2, 3)),
        ((0, 2), (1, 2), (2, 2), (3, 2)),
        ((1, 0), (1, 1), (1, 2), (1, 3)),
    ),
    Shape.J: (
        ((0, 0), (0, 1), (1, 1), (2, 1)),
        ((1, 0), (2, 0), (1, 1), (1, 2)),
        ((0, 1), (1, 1), (2, 1), (2, 2)),
        ((1, 0), (1, 1), (0, 2), (1, 2)),
    ),
    Shape.L: (
        ((2, 0), (0, 1), (1, 1), (2, 1)),
        ((1, 0), (1, 1), (1, 2), (2, 2)),
        ((0, 1), (1, 1), (2, 1), (0, 2)),
        ((0, 0), (1, 0), (1, 1), (1, 2)),
    ),
    Shape.O: (((1, 0), (2, 0), (1, 1), (2, 1)),) * NUM_ROTATIONS,
    Shape.S: (
        ((1, 0), (2, 0), (0, 1), (1, 1)),
        ((1, 0), (1, 1), (2, 1), (2, 2)),
        ((1, 1), (2, 1), (0, 2), (1, 2)),
        ((0, 0), (0, 1), (1, 1), (1, 2)),
    ),
    Shape.T: (
        ((1, 0), (0, 1), (1, 1), (2, 1)),
        ((1, 0), (1, 1), (2, 1), (1, 2)),
        ((0, 1), (1, 1), (2, 1), (1, 2)),
        ((1, 0), (0, 1), (1, 1), (1, 2)),
    ),
    Shape.Z: (
        ((0, 0), (1, 0), (1, 1), (2, 1)),
        ((2, 0), (1, 1), (2, 1), (1, 2)),
        ((0, 1), (1, 1), (1, 2), (2, 2)),
        ((1, 0), (0, 1), (1, 1), (0, 2)),
    ),
}

# Value stored in the grid for a locked block of each shape.  ``0`` is empty.
SHAPE_COLORS: Dict[Shape, int] = {shape: i + 1 for i, shape in enumerate(Shape)}


def shape_offsets(shape: Shape, rotation: int) -> RotationState:
    """Return the block offsets for ``shape`` at ``rotation``.

    Values of ``rotation`` are wrapped so any integer is accepted.
    """

    return ROTATION_TABLE[shape][rotation % NUM_ROTATIONS]


@dataclass(frozen=True)
class Piece:
    """A tetromino at a given rotation and anchor position."""

    shape: Shape
    rotation: int = 0
    x: int = 0
    y: int = 0

    @property
    def color(self) -> int:
        return SHAPE_COLORS[self.shape]

    def moved(self, dx: int, dy: int) -> "Piece":
        """Return a copy translated by ``dx`` columns and ``dy`` rows."""

        return replace(self, x=self.x + dx, y=self.y + dy)

    def rotated(self, direction: int = 1) -> "Piece":
        """Return a copy rotated by one step.

        Positive ``direction`` rotates clockwise, negative counter-clockwise.
        Only the sign matters.  The anchor is unchanged.
        """

        step = 1 if direction > 0 else -1
        return replace(self, rotation=(self.rotation + step) % NUM_ROTATIONS)

    def cells(self) -> List[Tuple[int, int]]:
        """Return the absolute ``(x, y)`` cells covered by this piece."""

        return [(self.x + dx, self.y + dy) for dx, dy in shape_offsets(self.shape, self.rotation)]


def occupied_cells(piece: Piece) -> List[Tuple[int, int]]:
    return piece.cells()


def rotate(piece: Piece, direction: int = 1) -> Piece:
    """Return the candidate rotation of ``piece``; callers validate it."""

    return piece.rotated(direction)


def spawn_piece(shape: Shape, width: int) -> Piece:
    """Return ``shape`` in its spawn orientation at the top centre.

    The anchor is chosen so the topmost block of state ``0`` sits on visible
    row ``0``.
    """

    top = min(dy for _, dy in shape_offsets(shape, 0))
    return Piece(shape, 0, (width - 4) // 2, -top)
