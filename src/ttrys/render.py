"""Terminal front-end drawing.

:func:`frame_lines` turns a :class:`~ttrys.game_state.Snapshot` into plain
text; :class:`CursesRenderer` writes that text to a curses window and paints
the blocks with one colour pair per shape.  Neither touches game state.
"""

from __future__ import annotations

import curses
from typing import List, Optional

from .game_state import Snapshot
from .tetromino import SHAPE_COLORS, Shape, shape_offsets

BLOCK = "[]"
EMPTY_CELL = "  "
PANEL_GAP = "  "

# Orange for L needs a 256 colour terminal; white is the fallback.
ORANGE_256 = 214

SHAPE_CURSES_COLORS = {
    Shape.I: curses.COLOR_CYAN,
    Shape.J: curses.COLOR_BLUE,
    Shape.L: curses.COLOR_WHITE,
    Shape.O: curses.COLOR_YELLOW,
    Shape.S: curses.COLOR_GREEN,
    Shape.T: curses.COLOR_MAGENTA,
    Shape.Z: curses.COLOR_RED,
}

CONTROLS_HINT = "arrows move/rotate, z/x rotate, space drop, p pause, q quit"


def preview_lines(shape: Optional[Shape]) -> List[str]:
    """Return two text rows showing ``shape`` in its spawn orientation."""

    rows = [[EMPTY_CELL] * 4 for _ in range(2)]
    if shape is not None:
        offsets = shape_offsets(shape, 0)
        top = min(dy for _, dy in offsets)
        for dx, dy in offsets:
            rows[dy - top][dx] = BLOCK
    return ["".join(row) for row in rows]


def banner_text(snapshot: Snapshot) -> Optional[str]:
    if snapshot.game_over:
        return "GAME OVER"
    if snapshot.paused:
        return "PAUSED"
    return None


def banner_row(snapshot: Snapshot) -> int:
    """Frame row the banner is drawn on (row 0 is the top border)."""

    return 1 + snapshot.height // 2


def panel_lines(snapshot: Snapshot) -> List[str]:
    lines = ["Next:"]
    lines.extend(preview_lines(snapshot.next_shape))
    lines.extend(
        [
            "",
            f"Level: {snapshot.level}",
            f"Score: {snapshot.score}",
            f"Lines: {snapshot.lines}",
        ]
    )
    if snapshot.game_over:
        lines.extend(["", "r restart, q quit"])
    return lines


def frame_lines(snapshot: Snapshot) -> List[str]:
    """Return the full frame for ``snapshot`` as a list of text rows."""

    inner = snapshot.width * len(BLOCK)
    lines = ["╔" + "═" * inner + "╗"]
    for row in snapshot.cells:
        lines.append("║" + "".join(BLOCK if value else EMPTY_CELL for value in row) + "║")
    lines.append("╚" + "═" * inner + "╝")

    banner = banner_text(snapshot)
    if banner is not None:
        lines[banner_row(snapshot)] = "║" + banner.center(inner)[:inner] + "║"

    for i, text in enumerate(panel_lines(snapshot)):
        row = i + 1
        if row >= len(lines):
            break
        if text:
            lines[row] += PANEL_GAP + text
    lines.append(CONTROLS_HINT)
    return lines


class CursesRenderer:
    """Draw snapshots onto a curses window."""

    def __init__(self, stdscr) -> None:
        self.stdscr = stdscr
        self.colors = False
        self._init_colors()

    def _init_colors(self) -> None:
        if not curses.has_colors():
            return
        curses.start_color()
        curses.use_default_colors()
        for shape, pair in SHAPE_COLORS.items():
            color = SHAPE_CURSES_COLORS[shape]
            if shape is Shape.L and curses.COLORS >= 256:
                color = ORANGE_256
            curses.init_pair(pair, color, -1)
        self.colors = True

    def _put(self, row: int, col: int, text: str, attr: int = 0) -> None:
        try:
            self.stdscr.addstr(row, col, text, attr)
        except curses.error:
            # Writes past the edge of a small terminal are clipped.
            pass

    def _block_attr(self, color: int) -> int:
        if self.colors:
            return curses.color_pair(color) | curses.A_BOLD
        return curses.A_BOLD

    def draw(self, snapshot: Snapshot) -> None:
        self.stdscr.erase()
        for row, text in enumerate(frame_lines(snapshot)):
            self._put(row, 0, text)

        skip = banner_row(snapshot) if banner_text(snapshot) else None
        for y, cells in enumerate(snapshot.cells):
            if y + 1 == skip:
                continue
            for x, value in enumerate(cells):
                if value:
                    self._put(y + 1, 1 + x * len(BLOCK), BLOCK, self._block_attr(value))

        if snapshot.next_shape is not None:
            color = SHAPE_COLORS[snapshot.next_shape]
            col = 2 + snapshot.width * len(BLOCK) + len(PANEL_GAP)
            for i, text in enumerate(preview_lines(snapshot.next_shape)):
                for j in range(0, len(text), len(BLOCK)):
                    if text[j:j + len(BLOCK)] == BLOCK:
                        self._put(2 + i, col + j, BLOCK, self._block_attr(color))
        self.stdscr.refresh()
