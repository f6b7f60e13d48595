"""Terminal 2048: sliding-tile engine, move animation and render loop."""

import logging

from .board import Board, Tile, SIZE, TARGET
from .moves import (
    Direction,
    EventKind,
    MoveResult,
    TileEvent,
    apply_move,
    merge_line,
    new_board,
    slide,
    spawn_tile,
)
from .game_state import GameState, GameStatus, detect_terminal_state
from .animation import AnimationController, AnimationFrame, TileSprite, sample_events
from .utils import can_move, render_grid
from .perf import PerfStat, TickProfiler
from .settings import InputPolicy, Settings

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "Board",
    "Tile",
    "SIZE",
    "TARGET",
    "Direction",
    "EventKind",
    "MoveResult",
    "TileEvent",
    "apply_move",
    "merge_line",
    "new_board",
    "slide",
    "spawn_tile",
    "GameState",
    "GameStatus",
    "detect_terminal_state",
    "AnimationController",
    "AnimationFrame",
    "TileSprite",
    "sample_events",
    "can_move",
    "render_grid",
    "PerfStat",
    "TickProfiler",
    "InputPolicy",
    "Settings",
]
