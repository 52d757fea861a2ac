"""Game session and its phase state machine.

A :class:`GameSession` owns everything mutable about one game: the board, the
bag, the falling piece and the score counters.  Sessions share nothing, so
several can run side by side (tests rely on this).

The cycle is ``SPAWNING -> FALLING -> LOCKING -> LINE_CLEARING -> SPAWNING``.
``SPAWNING`` and ``LINE_CLEARING`` are passed through synchronously when a
piece locks; callers only ever observe them through ``on_transition``.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Tuple

from .bag import Bag
from .board import Board
from .collision import can_place, hard_drop_target, is_grounded, try_move, try_rotate
from .config import GameConfig
from .tetromino import Piece, Shape, spawn_piece
from .utils import gravity_ticks, render_grid


LOGGER = logging.getLogger(__name__)

# Points for a streak of 1, 2, 3 and 4 consecutive cleared rows.
CLEAR_REWARDS = (100, 250, 500, 1000)
POINTS_PER_LEVEL = 1000


class Phase(str, Enum):
    SPAWNING = "spawning"
    FALLING = "falling"
    LOCKING = "locking"
    LINE_CLEARING = "line_clearing"
    GAME_OVER = "game_over"
    PAUSED = "paused"


ACTIVE_PHASES = (Phase.FALLING, Phase.LOCKING)


@dataclass
class ActivePiece:
    """The falling piece and its timers, counted in game ticks."""

    piece: Piece
    fall_ticks: int = 0
    lock_ticks: int = 0
    lock_resets: int = 0


@dataclass(frozen=True)
class Snapshot:
    """Read-only view of a session handed to renderers."""

    width: int
    height: int
    cells: Tuple[Tuple[int, ...], ...]
    active_cells: Tuple[Tuple[int, int], ...]
    active_color: int
    score: int
    level: int
    lines: int
    next_shape: Optional[Shape]
    paused: bool
    game_over: bool


def clear_streaks(rows: List[int]) -> List[int]:
    """Group sorted row indices into runs of consecutive rows.

    >>> clear_streaks([15, 17, 18])
    [1, 2]
    """

    streaks: List[int] = []
    previous = None
    for row in rows:
        if previous is not None and row == previous + 1:
            streaks[-1] += 1
        else:
            streaks.append(1)
        previous = row
    return streaks


def clear_reward(streak: int) -> int:
    return CLEAR_REWARDS[min(max(streak, 1), len(CLEAR_REWARDS)) - 1]


@dataclass
class GameSession:
    """Mutable state for one game plus the commands that drive it."""

    config: GameConfig = field(default_factory=GameConfig)
    rng: Optional[random.Random] = None
    on_transition: Optional[Callable[[Phase, Phase], None]] = None

    def __post_init__(self) -> None:
        if self.rng is None:
            self.rng = random.Random(self.config.seed)
        self.board = self._new_board()
        self.bag = Bag(self.config.bag_size, self.rng)
        self.active: Optional[ActivePiece] = None
        self.phase = Phase.SPAWNING
        self.resume_phase: Optional[Phase] = None
        self.running = True
        self.score = 0
        self.lines = 0
        self.level = self.config.start_level
        self.pieces = 0
        self.reset()

    def _new_board(self) -> Board:
        return Board(self.config.width, self.config.height, self.config.buffer_rows)

    # Internal helpers -------------------------------------------------
    def _set_phase(self, phase: Phase) -> None:
        old = self.phase
        if old is phase:
            return
        self.phase = phase
        LOGGER.debug("Phase %s -> %s", old.value, phase.value)
        if self.on_transition is not None:
            self.on_transition(old, phase)

    def _spawn(self) -> None:
        self._set_phase(Phase.SPAWNING)
        piece = spawn_piece(self.bag.pop(), self.board.width)
        if not can_place(self.board, piece):
            self.active = None
            self._set_phase(Phase.GAME_OVER)
            LOGGER.info("Game over: score=%d lines=%d level=%d", self.score, self.lines, self.level)
            return
        self.active = ActivePiece(piece)
        self._set_phase(Phase.FALLING)

    def _lock(self) -> None:
        assert self.active is not None
        self._set_phase(Phase.LINE_CLEARING)
        self.board.lock_piece(self.active.piece)
        self.active = None
        self.pieces += 1

        rows = self.board.full_rows()
        cleared = self.board.clear_full_rows()
        if cleared:
            if self.config.post_clear_hook is not None:
                self.config.post_clear_hook(self.board, rows)
            self._score_clear(rows)
        self._spawn()

    def _score_clear(self, rows: List[int]) -> None:
        points = sum(clear_reward(streak) for streak in clear_streaks(rows))
        self.score += points
        self.lines += len(rows)
        self.level = max(self.config.start_level, self.score // POINTS_PER_LEVEL)
        LOGGER.info(
            "Cleared %d row(s) for %d points. Score: %d, level: %d",
            len(rows),
            points,
            self.score,
            self.level,
        )

    def _commit_move(self, candidate: Optional[Piece]) -> bool:
        """Apply a successful lateral move or rotation."""

        if self.active is None or candidate is None:
            return False
        active = self.active
        active.piece = candidate
        if self.phase is Phase.LOCKING:
            cap = self.config.max_lock_resets
            if cap is None or active.lock_resets < cap:
                active.lock_resets += 1
                active.lock_ticks = 0
                self._set_phase(Phase.FALLING)
            elif not is_grounded(self.board, candidate):
                self._set_phase(Phase.FALLING)
        return True

    def _accepts_commands(self) -> bool:
        return self.running and self.phase in ACTIVE_PHASES and self.active is not None

    # Public API -------------------------------------------------------
    @property
    def gravity_ticks(self) -> int:
        return gravity_ticks(self.level, self.config.tick_rate)

    @property
    def next_shape(self) -> Shape:
        return self.bag.peek()

    @property
    def game_over(self) -> bool:
        return self.phase is Phase.GAME_OVER

    @property
    def paused(self) -> bool:
        return self.phase is Phase.PAUSED

    def reset(self) -> None:
        """Reset the entire session for a new game and spawn the first piece."""

        self.board = self._new_board()
        self.bag.reset()
        self.active = None
        self.resume_phase = None
        self.running = True
        self.score = 0
        self.lines = 0
        self.level = self.config.start_level
        self.pieces = 0
        LOGGER.info("New game (level %d)", self.level)
        self._spawn()

    def tick(self) -> None:
        """Advance the session by one game tick."""

        if not self.running or self.active is None:
            return
        active = self.active
        if self.phase is Phase.FALLING:
            active.fall_ticks += 1
            if active.fall_ticks < self.gravity_ticks:
                return
            active.fall_ticks = 0
            lower = try_move(self.board, active.piece, 0, 1)
            if lower is not None:
                active.piece = lower
                active.lock_ticks = 0
            else:
                active.lock_ticks = 0
                self._set_phase(Phase.LOCKING)
        elif self.phase is Phase.LOCKING:
            if not is_grounded(self.board, active.piece):
                self._set_phase(Phase.FALLING)
                return
            active.lock_ticks += 1
            if active.lock_ticks >= self.config.lock_delay_ticks:
                self._lock()

    def move_left(self) -> bool:
        if not self._accepts_commands():
            return False
        return self._commit_move(try_move(self.board, self.active.piece, -1, 0))

    def move_right(self) -> bool:
        if not self._accepts_commands():
            return False
        return self._commit_move(try_move(self.board, self.active.piece, 1, 0))

    def rotate_cw(self) -> bool:
        if not self._accepts_commands():
            return False
        return self._commit_move(try_rotate(self.board, self.active.piece, 1))

    def rotate_ccw(self) -> bool:
        if not self._accepts_commands():
            return False
        return self._commit_move(try_rotate(self.board, self.active.piece, -1))

    def soft_drop(self) -> bool:
        """Move the piece one row down, entering the lock delay if it landed."""

        if not self._accepts_commands():
            return False
        active = self.active
        lower = try_move(self.board, active.piece, 0, 1)
        if lower is None:
            if self.phase is Phase.FALLING:
                active.lock_ticks = 0
                self._set_phase(Phase.LOCKING)
            return False
        active.piece = lower
        active.fall_ticks = 0
        active.lock_ticks = 0
        return True

    def hard_drop(self) -> bool:
        """Drop the piece to its lowest position and lock it at once."""

        if not self._accepts_commands():
            return False
        self.active.piece = hard_drop_target(self.board, self.active.piece)
        self._set_phase(Phase.LOCKING)
        self._lock()
        return True

    def toggle_pause(self) -> bool:
        """Pause an active game or resume a paused one."""

        if not self.running:
            return False
        if self.phase is Phase.PAUSED:
            resume = self.resume_phase or Phase.FALLING
            self.resume_phase = None
            self._set_phase(resume)
            return True
        if self.phase in ACTIVE_PHASES:
            self.resume_phase = self.phase
            self._set_phase(Phase.PAUSED)
            return True
        return False

    def quit(self) -> bool:
        self.running = False
        return True

    def restart(self) -> bool:
        """Start a new game; only honoured once the current one is over."""

        if not self.game_over:
            return False
        self.reset()
        return True

    def snapshot(self) -> Snapshot:
        """Return an immutable copy of the state renderers need."""

        piece = self.active.piece if self.active is not None else None
        grid = render_grid(self.board, piece)
        return Snapshot(
            width=self.board.width,
            height=self.board.height,
            cells=tuple(tuple(row) for row in grid),
            active_cells=tuple(piece.cells()) if piece is not None else (),
            active_color=piece.color if piece is not None else 0,
            score=self.score,
            level=self.level,
            lines=self.lines,
            next_shape=None if self.game_over else self.bag.peek(),
            paused=self.paused,
            game_over=self.game_over,
        )
