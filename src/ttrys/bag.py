"""Shuffled bag randomizer for the spawn order."""

from __future__ import annotations

import random
from typing import List, Optional

from .tetromino import Shape


class Bag:
    """Produce shapes by drawing from shuffled bags.

    Each refill shuffles the seven shapes and keeps the first ``size`` of
    them, so with the default size every refill yields each shape exactly
    once.  Smaller sizes give a less predictable sequence.
    """

    def __init__(self, size: int = 7, rng: Optional[random.Random] = None) -> None:
        if not 1 <= size <= len(Shape):
            raise ValueError(f"Bag size must be between 1 and {len(Shape)}")
        self.size = size
        self._rng = rng or random.Random()
        self._queue: List[Shape] = []

    def _refill(self) -> None:
        shapes = list(Shape)
        self._rng.shuffle(shapes)
        self._queue.extend(shapes[: self.size])

    def peek(self) -> Shape:
        """Return the next shape without consuming it."""

        if not self._queue:
            self._refill()
        return self._queue[0]

    def pop(self) -> Shape:
        if not self._queue:
            self._refill()
        return self._queue.pop(0)

    def reset(self) -> None:
        self._queue.clear()
