from __future__ import annotations

import dataclasses
import random

import pytest

from ttrys.board import Board
from ttrys.collision import hard_drop_target
from ttrys.config import GameConfig
from ttrys.game_state import (
    ActivePiece,
    GameSession,
    Phase,
    clear_reward,
    clear_streaks,
)
from ttrys.tetromino import Piece, Shape, spawn_piece


def make_session(**overrides) -> GameSession:
    config = dataclasses.replace(GameConfig(seed=0), **overrides)
    return GameSession(config)


def place(session: GameSession, piece: Piece) -> None:
    session.active = ActivePiece(piece)
    session.phase = Phase.FALLING


def land(session: GameSession) -> None:
    """Put the active piece on the stack and let gravity notice it."""

    session.active.piece = hard_drop_target(session.board, session.active.piece)
    for _ in range(session.gravity_ticks):
        session.tick()
    assert session.phase is Phase.LOCKING


def fill_row(board: Board, y: int, skip: tuple[int, ...] = ()) -> None:
    for x in range(board.width):
        if x not in skip:
            board.set_cell(x, y, 1)


def block_spawn(session: GameSession) -> None:
    """Park the active piece at the left and wall off the spawn area."""

    place(session, Piece(Shape.O, 0, -1, 10))
    for x in range(3, 7):
        for y in (0, 1):
            session.board.set_cell(x, y, 1)


def test_new_session_is_falling_with_spawned_piece() -> None:
    session = make_session()
    assert session.phase is Phase.FALLING
    assert session.active is not None
    piece = session.active.piece
    assert piece == spawn_piece(piece.shape, session.board.width)
    assert session.next_shape is session.bag.peek()
    assert (session.score, session.lines, session.level) == (0, 0, 0)


def test_gravity_moves_piece_on_interval() -> None:
    session = make_session()
    start = session.active.piece
    for _ in range(session.gravity_ticks - 1):
        session.tick()
    assert session.active.piece == start
    session.tick()
    assert session.active.piece == start.moved(0, 1)
    assert session.active.fall_ticks == 0


def test_landed_piece_locks_after_delay() -> None:
    session = make_session()
    land(session)
    locked = session.active.piece
    for _ in range(session.config.lock_delay_ticks - 1):
        session.tick()
    assert session.phase is Phase.LOCKING
    assert session.pieces == 0
    session.tick()
    assert session.pieces == 1
    assert session.phase is Phase.FALLING
    for x, y in locked.cells():
        assert not session.board.is_cell_free(x, y)


def test_blocked_spawn_ends_game_without_active_piece() -> None:
    transitions = []
    session = make_session()
    session.on_transition = lambda old, new: transitions.append(new)
    block_spawn(session)
    assert session.hard_drop()

    assert session.phase is Phase.GAME_OVER
    assert session.game_over
    assert session.active is None
    assert transitions[-3:] == [Phase.LINE_CLEARING, Phase.SPAWNING, Phase.GAME_OVER]
    # nothing moves any more
    assert not session.move_left()
    assert not session.hard_drop()
    assert not session.toggle_pause()
    session.tick()
    assert session.game_over


def test_successful_move_while_locking_resets_lock_delay() -> None:
    session = make_session()
    land(session)
    session.active.lock_ticks = session.config.lock_delay_ticks - 1

    assert session.move_left()
    assert session.phase is Phase.FALLING
    assert session.active.lock_ticks == 0
    assert session.active.lock_resets == 1

    session.tick()
    assert session.pieces == 0
    assert session.active is not None


def test_rejected_move_while_locking_changes_nothing() -> None:
    session = make_session()
    place(session, Piece(Shape.O, 0, -1, 0))
    land(session)
    session.active.lock_ticks = 5
    before = session.active.piece
    assert not session.move_left()
    assert session.active.piece == before
    assert session.active.lock_ticks == 5
    assert session.phase is Phase.LOCKING


def test_lock_resets_are_capped() -> None:
    session = make_session(max_lock_resets=2)
    land(session)
    assert session.move_left()
    assert not session.soft_drop()
    assert session.phase is Phase.LOCKING
    assert session.move_right()
    assert not session.soft_drop()
    assert session.active.lock_resets == 2

    for _ in range(5):
        session.tick()
    assert session.move_left()
    assert session.phase is Phase.LOCKING
    assert session.active.lock_ticks == 5

    for _ in range(session.config.lock_delay_ticks - 5):
        session.tick()
    assert session.pieces == 1


def test_unlimited_lock_resets() -> None:
    session = make_session(max_lock_resets=None)
    land(session)
    for i in range(50):
        assert session.move_left() if i % 2 == 0 else session.move_right()
        assert not session.soft_drop()
    assert session.active.lock_resets == 50
    assert session.pieces == 0


def test_capped_move_off_a_ledge_falls_again() -> None:
    session = make_session(max_lock_resets=0)
    board = session.board
    board.set_cell(5, 19, 1)
    board.set_cell(6, 19, 1)
    place(session, Piece(Shape.O, 0, 4, 17))  # resting on the two blocks
    assert not session.soft_drop()
    assert session.phase is Phase.LOCKING
    assert session.move_left()
    assert session.move_left()
    assert session.phase is Phase.FALLING


def test_soft_drop_moves_down_and_resets_fall_timer() -> None:
    session = make_session()
    start = session.active.piece
    session.tick()
    assert session.soft_drop()
    assert session.active.piece == start.moved(0, 1)
    assert session.active.fall_ticks == 0


def test_hard_drop_clears_a_line_and_scores() -> None:
    session = make_session()
    fill_row(session.board, 19, skip=(3, 4, 5, 6))
    place(session, Piece(Shape.I, 0, 3, -1))
    assert session.hard_drop()
    assert session.lines == 1
    assert session.score == 100
    assert session.pieces == 1
    assert session.board.occupied_count() == 0
    assert session.phase is Phase.FALLING


def test_split_clear_scores_each_streak() -> None:
    session = make_session()
    board = session.board
    for y in (16, 18, 19):
        fill_row(board, y, skip=(0,))
    fill_row(board, 17, skip=(0, 5))
    place(session, Piece(Shape.I, 1, -2, 0))  # vertical in column 0
    session.hard_drop()
    assert session.lines == 3
    assert session.score == 100 + 250
    # the partial row dropped to the floor
    assert [board.get_cell(x, 19) != 0 for x in range(board.width)] == [
        True, True, True, True, True, False, True, True, True, True
    ]


def test_level_follows_score() -> None:
    session = make_session()
    session.score = 900
    fill_row(session.board, 19, skip=(3, 4, 5, 6))
    place(session, Piece(Shape.I, 0, 3, -1))
    session.hard_drop()
    assert session.score == 1000
    assert session.level == 1
    assert session.gravity_ticks < make_session().gravity_ticks


def test_start_level_is_a_floor() -> None:
    session = make_session(start_level=3)
    assert session.level == 3
    fill_row(session.board, 19, skip=(3, 4, 5, 6))
    place(session, Piece(Shape.I, 0, 3, -1))
    session.hard_drop()
    assert session.level == 3


def test_post_clear_hook_receives_cleared_rows() -> None:
    calls = []
    session = make_session(post_clear_hook=lambda board, rows: calls.append(list(rows)))
    fill_row(session.board, 19, skip=(3, 4, 5, 6))
    place(session, Piece(Shape.I, 0, 3, -1))
    session.hard_drop()
    assert calls == [[19]]


def test_lock_runs_through_clearing_and_spawning() -> None:
    session = make_session()
    transitions = []
    session.on_transition = lambda old, new: transitions.append((old, new))
    session.hard_drop()
    assert transitions == [
        (Phase.FALLING, Phase.LOCKING),
        (Phase.LOCKING, Phase.LINE_CLEARING),
        (Phase.LINE_CLEARING, Phase.SPAWNING),
        (Phase.SPAWNING, Phase.FALLING),
    ]


def test_pause_freezes_the_game() -> None:
    session = make_session()
    start = session.active.piece
    assert session.toggle_pause()
    assert session.phase is Phase.PAUSED
    for _ in range(session.gravity_ticks * 3):
        session.tick()
    assert not session.move_left()
    assert not session.hard_drop()
    assert session.active.piece == start
    assert session.toggle_pause()
    assert session.phase is Phase.FALLING


def test_pause_returns_to_locking() -> None:
    session = make_session()
    land(session)
    session.toggle_pause()
    session.toggle_pause()
    assert session.phase is Phase.LOCKING


@pytest.mark.parametrize("paused", [False, True])
def test_quit_is_accepted_in_every_phase(paused: bool) -> None:
    session = make_session()
    if paused:
        session.toggle_pause()
    assert session.quit()
    assert not session.running
    start = session.active.piece
    session.tick()
    assert not session.move_left()
    assert session.active.piece == start


def test_quit_after_game_over() -> None:
    session = make_session()
    block_spawn(session)
    session.hard_drop()
    assert session.quit()
    assert not session.running


def test_restart_only_after_game_over() -> None:
    session = make_session()
    assert not session.restart()
    block_spawn(session)
    session.hard_drop()
    session.score = 123
    assert session.restart()
    assert session.phase is Phase.FALLING
    assert session.score == 0
    assert session.board.occupied_count() == 0


def test_sessions_are_independent() -> None:
    first = GameSession(GameConfig(), rng=random.Random(5))
    second = GameSession(GameConfig(), rng=random.Random(5))
    first.hard_drop()
    assert first.pieces == 1
    assert second.pieces == 0
    assert second.board.occupied_count() == 0
    assert first.board is not second.board


def test_snapshot_is_a_copy() -> None:
    session = make_session()
    snap = session.snapshot()
    piece = session.active.piece
    for x, y in piece.cells():
        assert snap.cells[y][x] == piece.color
    assert snap.active_cells == tuple(piece.cells())
    assert snap.next_shape is session.next_shape
    assert not snap.paused and not snap.game_over
    with pytest.raises(dataclasses.FrozenInstanceError):
        snap.score = 5
    session.hard_drop()
    assert snap.score == 0
    assert len(snap.cells) == session.board.height


def test_clear_streaks_and_rewards() -> None:
    assert clear_streaks([]) == []
    assert clear_streaks([19]) == [1]
    assert clear_streaks([15, 17, 18]) == [1, 2]
    assert clear_streaks([16, 17, 18, 19]) == [4]
    assert [clear_reward(n) for n in (1, 2, 3, 4)] == [100, 250, 500, 1000]
