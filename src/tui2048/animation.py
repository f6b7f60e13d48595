"""Time based interpolation of the tile events produced by a move.

The engine only knows the board before and after a move.  This module turns
the :class:`~tui2048.moves.TileEvent` list of a move into what the screen
should show ``elapsed`` milliseconds into the animation window: tiles glide
from their origin to their destination, a merged tile pulses once it lands
and a spawned tile fades in.  Sampling is a pure function of the events and
the elapsed time, so the render loop can redraw at any rate without touching
game state.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from .board import Board
from .moves import EventKind, MoveResult, TileEvent
from .utils import clamp, lerp


DEFAULT_DURATION_MS = 160.0
# Fraction of the window, counted back from its end, in which merges pulse.
PULSE_WINDOW = 0.25
PULSE_SCALE = 0.2


@dataclass(frozen=True)
class TileSprite:
    """Visual state of one tile within a frame.

    ``row`` and ``col`` are fractional grid coordinates.
    """

    tile_id: int
    value: int
    row: float
    col: float
    scale: float = 1.0
    opacity: float = 1.0


@dataclass
class AnimationFrame:
    sprites: List[TileSprite] = field(default_factory=list)
    elapsed: float = 0.0
    duration: float = 0.0

    @property
    def progress(self) -> float:
        if self.duration <= 0:
            return 1.0
        return clamp(self.elapsed / self.duration)

    @classmethod
    def from_board(cls, board: Board) -> "AnimationFrame":
        """Return the resting frame for ``board``."""

        sprites = [
            TileSprite(tile.id, tile.value, float(tile.row), float(tile.col))
            for tile in board.tiles()
        ]
        return cls(sprites=sprites)

    def layout(self) -> dict[tuple[float, float], int]:
        """Map each visible sprite's position to its displayed value."""

        return {(s.row, s.col): s.value for s in self.sprites if s.opacity > 0}


def _pulse(progress: float) -> float:
    start = 1.0 - PULSE_WINDOW
    if progress <= start or progress >= 1.0:
        return 1.0
    phase = (progress - start) / PULSE_WINDOW
    return 1.0 + PULSE_SCALE * math.sin(math.pi * phase)


def sample_events(
    events: Sequence[TileEvent], elapsed: float, duration: float
) -> AnimationFrame:
    """Return the frame ``elapsed`` milliseconds into a move's animation.

    At ``elapsed <= 0`` the frame reproduces the board before the move.  From
    ``elapsed >= duration`` on it reproduces the board after the move, with
    absorbed tiles gone and spawned tiles fully visible.
    """

    progress = 1.0 if duration <= 0 else clamp(elapsed / duration)
    settled = progress >= 1.0
    absorbed: List[TileSprite] = []
    sprites: List[TileSprite] = []

    for event in events:
        r0, c0 = event.origin
        r1, c1 = event.destination
        if event.kind is EventKind.SPAWNED:
            if progress <= 0:
                continue
            sprites.append(
                TileSprite(event.tile_id, event.value, r1, c1, opacity=progress)
            )
            continue

        row = lerp(r0, r1, progress)
        col = lerp(c0, c1, progress)
        if event.absorbed:
            if not settled:
                absorbed.append(TileSprite(event.tile_id, event.value, row, col))
            continue

        value = event.value
        scale = 1.0
        if event.kind is EventKind.MERGED and progress > 1.0 - PULSE_WINDOW:
            value = event.final_value
            scale = _pulse(progress)
        sprites.append(TileSprite(event.tile_id, value, row, col, scale=scale))

    # Absorbed tiles slide underneath the tiles they merge into.
    return AnimationFrame(sprites=absorbed + sprites, elapsed=elapsed, duration=duration)


class AnimationController:
    """Track the animation window of the most recent move."""

    def __init__(self, duration_ms: float = DEFAULT_DURATION_MS) -> None:
        if duration_ms <= 0:
            raise ValueError("Animation duration must be positive")
        self.duration = float(duration_ms)
        self.elapsed = 0.0
        self._result: Optional[MoveResult] = None

    @property
    def active(self) -> bool:
        """``True`` while a move is still being animated."""

        return self._result is not None and self.elapsed < self.duration

    def start(self, result: MoveResult) -> None:
        """Begin animating ``result``.

        Raises:
            ValueError: If ``result`` is a no-op, which has nothing to show.
            RuntimeError: If the previous animation has not completed.
        """

        if result.noop:
            raise ValueError("No-op moves are not animated")
        if self.active:
            raise RuntimeError("Animation already in progress")
        self._result = result
        self.elapsed = 0.0

    def advance(self, dt_ms: float) -> bool:
        """Move the clock forward by ``dt_ms``.

        Returns ``True`` on the call that completes the animation window.
        """

        if not self.active:
            return False
        self.elapsed = min(self.duration, self.elapsed + max(0.0, dt_ms))
        if self.elapsed >= self.duration:
            self._result = None
            return True
        return False

    def cancel(self) -> None:
        self._result = None
        self.elapsed = 0.0

    def sample(self, board: Board) -> AnimationFrame:
        """Return the frame to draw now.

        ``board`` is the current board; it is shown directly when no
        animation is running.
        """

        if self._result is None:
            return AnimationFrame.from_board(board)
        return sample_events(self._result.events, self.elapsed, self.duration)
