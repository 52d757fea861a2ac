"""Fixed-tick cooperative game loop.

One loop owns the session.  Each iteration polls for input with a timeout
that ends at the next tick boundary, so the poll doubles as the clock: it
applies at most one command, runs every game tick that came due and renders
one frame.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional, Protocol

from .controls import Command, CommandQueue, dispatch, key_to_command
from .game_state import GameSession, Snapshot


LOGGER = logging.getLogger(__name__)

# Most game ticks run in one iteration before a frame is drawn.
MAX_CATCH_UP_TICKS = 5


class InputSource(Protocol):
    def poll(self, timeout: float) -> Optional[Command]:
        """Wait up to ``timeout`` seconds for one command."""


class Renderer(Protocol):
    def draw(self, snapshot: Snapshot) -> None:
        ...


class CursesInput:
    """Read commands from a curses window without blocking for long."""

    def __init__(self, stdscr) -> None:
        self.stdscr = stdscr
        self.stdscr.keypad(True)

    def poll(self, timeout: float) -> Optional[Command]:
        self.stdscr.timeout(max(0, int(timeout * 1000)))
        key = self.stdscr.getch()
        if key == -1:
            return None
        return key_to_command(key)


class GameLoop:
    """Drive a :class:`GameSession` from an input source to a renderer."""

    def __init__(
        self,
        session: GameSession,
        source: InputSource,
        renderer: Renderer,
        *,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        self.session = session
        self.source = source
        self.renderer = renderer
        self.queue = CommandQueue()
        self._clock = clock or time.monotonic
        self._next_tick: Optional[float] = None
        self.frames = 0

    def step(self) -> None:
        """Run one loop iteration."""

        session = self.session
        tick = session.config.tick_seconds
        now = self._clock()
        if self._next_tick is None:
            self._next_tick = now + tick

        command = self.source.poll(max(0.0, self._next_tick - now))
        if command is not None:
            self.queue.push(command)

        pending = self.queue.pop()
        if pending is not None:
            applied = dispatch(session, pending)
            LOGGER.debug("Command %s %s", pending.value, "applied" if applied else "rejected")

        now = self._clock()
        ticks = 0
        while self._next_tick <= now and session.running:
            if ticks == MAX_CATCH_UP_TICKS:
                # Backlog from a stall is dropped.
                LOGGER.debug("Skipping %.3fs of missed ticks", now - self._next_tick)
                self._next_tick = now + tick
                break
            session.tick()
            self._next_tick += tick
            ticks += 1

        if session.running:
            self.renderer.draw(session.snapshot())
            self.frames += 1

    def run(self) -> GameSession:
        """Loop until the player quits and return the finished session."""

        self.renderer.draw(self.session.snapshot())
        while self.session.running:
            self.step()
        LOGGER.info("Quit after %d frames, score %d", self.frames, self.session.score)
        return self.session
