"""Terminal falling-block puzzle game."""

from .board import Board, PlacementError
from .tetromino import Piece, Shape, occupied_cells, rotate, shape_offsets, spawn_piece
from .collision import can_place, hard_drop_target, is_grounded, try_move, try_rotate
from .bag import Bag
from .config import GameConfig
from .game_state import ActivePiece, GameSession, Phase, Snapshot
from .controls import Command, CommandQueue, dispatch
from .utils import gravity_interval_ms, render_grid

__all__ = [
    "ActivePiece",
    "Bag",
    "Board",
    "Command",
    "CommandQueue",
    "GameConfig",
    "GameSession",
    "Phase",
    "Piece",
    "PlacementError",
    "Shape",
    "Snapshot",
    "can_place",
    "dispatch",
    "gravity_interval_ms",
    "hard_drop_target",
    "is_grounded",
    "occupied_cells",
    "render_grid",
    "rotate",
    "shape_offsets",
    "spawn_piece",
    "try_move",
    "try_rotate",
]
