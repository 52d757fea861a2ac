"""Command line entry point: play in the current terminal.

Run with ``ttrys`` or ``python -m ttrys``.  No arguments are required.
"""

from __future__ import annotations

import argparse
import curses
import dataclasses
import logging
import sys
from typing import List, Optional

from .config import GameConfig
from .game_state import GameSession
from .loop import CursesInput, GameLoop
from .render import CursesRenderer


LOGGER = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="ttrys", description="Falling-block puzzle game for the terminal.")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the piece sequence.")
    parser.add_argument("--level", type=int, default=None, help="Starting level.")
    parser.add_argument(
        "--lock-delay",
        type=int,
        default=None,
        metavar="MS",
        help="Grace period in milliseconds before a landed piece locks.",
    )
    parser.add_argument(
        "--max-lock-resets",
        type=int,
        default=None,
        help="How often moving a landed piece restarts its lock delay (negative for unlimited).",
    )
    parser.add_argument("--bag-size", type=int, default=None, help="Shapes drawn per bag refill (1-7).")
    parser.add_argument("--log-file", default=None, help="Write log records to this file.")
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (e.g. DEBUG, INFO, WARNING).",
    )
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> GameConfig:
    """Return the default config with the command line overrides applied."""

    config = GameConfig().replace(
        seed=args.seed,
        start_level=args.level,
        lock_delay_ms=args.lock_delay,
        bag_size=args.bag_size,
    )
    if args.max_lock_resets is not None:
        resets = args.max_lock_resets if args.max_lock_resets >= 0 else None
        config = dataclasses.replace(config, max_lock_resets=resets)
    return config


def configure_logging(log_file: Optional[str], level: str) -> None:
    """Send log records to ``log_file``; without one they are discarded.

    The terminal belongs to curses while the game runs, so nothing is ever
    logged to the screen.
    """

    if log_file is None:
        logging.getLogger().addHandler(logging.NullHandler())
        return
    logging.basicConfig(
        filename=log_file,
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )


def play(stdscr, config: GameConfig) -> GameSession:
    curses.curs_set(0)
    loop = GameLoop(GameSession(config), CursesInput(stdscr), CursesRenderer(stdscr))
    return loop.run()


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(args.log_file, args.log_level)
    try:
        config = build_config(args)
    except ValueError as exc:
        print(f"ttrys: {exc}", file=sys.stderr)
        return 2

    try:
        session = curses.wrapper(play, config)
    except KeyboardInterrupt:
        return 0
    except (curses.error, OSError) as exc:
        LOGGER.exception("Terminal failure")
        print(f"ttrys: terminal error: {exc}", file=sys.stderr)
        return 1

    print(f"Game over! {session.score} pts, {session.lines} lines, level {session.level}")
    return 0


if __name__ == "__main__":  # pragma: no cover - manual execution only
    sys.exit(main())
