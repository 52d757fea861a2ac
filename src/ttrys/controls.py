"""Player commands, the fixed key map and the command queue."""

from __future__ import annotations

import curses
from collections import deque
from enum import Enum
from typing import Callable, Deque, Dict, Optional

from .game_state import GameSession


class Command(str, Enum):
    MOVE_LEFT = "move_left"
    MOVE_RIGHT = "move_right"
    ROTATE_CW = "rotate_cw"
    ROTATE_CCW = "rotate_ccw"
    SOFT_DROP = "soft_drop"
    HARD_DROP = "hard_drop"
    PAUSE = "pause"
    QUIT = "quit"
    RESTART = "restart"


ESCAPE = 27

DEFAULT_KEYS: Dict[int, Command] = {
    curses.KEY_LEFT: Command.MOVE_LEFT,
    curses.KEY_RIGHT: Command.MOVE_RIGHT,
    curses.KEY_UP: Command.ROTATE_CW,
    ord("x"): Command.ROTATE_CW,
    ord("z"): Command.ROTATE_CCW,
    curses.KEY_DOWN: Command.SOFT_DROP,
    ord(" "): Command.HARD_DROP,
    ord("p"): Command.PAUSE,
    ord("q"): Command.QUIT,
    ESCAPE: Command.QUIT,
    ord("r"): Command.RESTART,
}


def key_to_command(key: int) -> Optional[Command]:
    """Return the command bound to ``key``; letters are case-insensitive."""

    if 0 <= key < 256:
        key = ord(chr(key).lower())
    return DEFAULT_KEYS.get(key)


_HANDLERS: Dict[Command, Callable[[GameSession], bool]] = {
    Command.MOVE_LEFT: GameSession.move_left,
    Command.MOVE_RIGHT: GameSession.move_right,
    Command.ROTATE_CW: GameSession.rotate_cw,
    Command.ROTATE_CCW: GameSession.rotate_ccw,
    Command.SOFT_DROP: GameSession.soft_drop,
    Command.HARD_DROP: GameSession.hard_drop,
    Command.PAUSE: GameSession.toggle_pause,
    Command.QUIT: GameSession.quit,
    Command.RESTART: GameSession.restart,
}


def dispatch(session: GameSession, command: Command) -> bool:
    """Apply ``command`` to ``session``; ``False`` means it was rejected."""

    return _HANDLERS[command](session)


class CommandQueue:
    """FIFO of pending commands drained by the game loop only."""

    def __init__(self) -> None:
        self._items: Deque[Command] = deque()

    def push(self, command: Command) -> None:
        self._items.append(command)

    def pop(self) -> Optional[Command]:
        return self._items.popleft() if self._items else None

    def __len__(self) -> int:
        return len(self._items)
