"""Tunable game settings."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Callable, List, Optional

from .board import HEIGHT, WIDTH, Board

# Called after rows are cleared with the board and the cleared row indices.
PostClearHook = Callable[[Board, List[int]], None]


@dataclass(frozen=True)
class GameConfig:
    """Settings for one game session.

    ``max_lock_resets`` caps how many times moving or rotating a landed piece
    restarts its lock delay; ``None`` allows unlimited resets.
    """

    width: int = WIDTH
    height: int = HEIGHT
    buffer_rows: int = 2
    tick_rate: int = 60
    lock_delay_ms: int = 500
    max_lock_resets: Optional[int] = 15
    bag_size: int = 7
    start_level: int = 0
    seed: Optional[int] = None
    post_clear_hook: Optional[PostClearHook] = None

    def __post_init__(self) -> None:
        if self.width < 4 or self.height < 4:
            raise ValueError("Board must be at least 4x4")
        if self.buffer_rows < 0:
            raise ValueError("buffer_rows must not be negative")
        if self.tick_rate <= 0:
            raise ValueError("tick_rate must be positive")
        if self.lock_delay_ms < 0:
            raise ValueError("lock_delay_ms must not be negative")
        if self.max_lock_resets is not None and self.max_lock_resets < 0:
            raise ValueError("max_lock_resets must not be negative")
        if not 1 <= self.bag_size <= 7:
            raise ValueError("bag_size must be between 1 and 7")
        if self.start_level < 0:
            raise ValueError("start_level must not be negative")

    @property
    def tick_seconds(self) -> float:
        return 1.0 / self.tick_rate

    @property
    def lock_delay_ticks(self) -> int:
        """Lock delay expressed in game ticks (at least one)."""

        return max(1, round(self.lock_delay_ms * self.tick_rate / 1000))

    def replace(self, **changes) -> "GameConfig":
        """Return a copy with ``changes`` applied, skipping ``None`` values.

        ``max_lock_resets`` and ``seed`` are optional settings, so pass them
        through :func:`dataclasses.replace` directly to clear them.
        """

        return dataclasses.replace(self, **{k: v for k, v in changes.items() if v is not None})
