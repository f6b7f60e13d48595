"""Utility helpers for the 2048 engine."""

from __future__ import annotations

from typing import List

from .board import Board
from .moves import Direction, slide


def can_move(board: Board, direction: Direction) -> bool:
    """Return ``True`` if sliding ``board`` towards ``direction`` changes it.

    The check runs the deterministic part of a move on a copy, so the board
    itself is never modified and no tile is spawned.
    """

    _, result = slide(board, direction)
    return result.changed


def any_move_available(board: Board) -> bool:
    """Return ``True`` if at least one of the four directions is not a no-op."""

    if not board.is_full():
        return True
    return any(can_move(board, direction) for direction in Direction)


def lerp(start: float, end: float, t: float) -> float:
    """Linearly interpolate between ``start`` and ``end`` at ``t``."""

    return start + (end - start) * t


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def render_grid(board: Board) -> List[str]:
    """Return the board as plain text rows, one cell per five characters.

    Used for log messages and the non-interactive ``--print`` mode where no
    terminal drawing is available.
    """

    return [
        "".join(f"{value:>5}" if value else "    ." for value in row)
        for row in board.rows()
    ]
