"""Fixed-rate terminal front-end for the 2048 engine.

:class:`GameLoop` owns the game state and the animation of the move in
flight.  Each tick it handles at most one key, advances the animation clock
and draws exactly one frame, in that order.  Everything runs on one thread;
input waits are bounded by the time left in the tick so a frame is never
late because no key arrived.
"""

from __future__ import annotations

import logging
import random
import time
from typing import Callable, Optional, Protocol, Tuple

from .animation import AnimationController
from .game_state import GameState, GameStatus
from .keys import InputSource, Key
from .moves import Direction
from .perf import TickProfiler
from .render import Frame, RenderPipeline
from .settings import InputPolicy, Settings
from .utils import render_grid


LOGGER = logging.getLogger(__name__)


class DrawingSurface(Protocol):
    @property
    def size(self) -> Tuple[int, int]: ...

    def draw(self, frame: Frame) -> None: ...

    def __enter__(self) -> "DrawingSurface": ...

    def __exit__(self, exc_type, exc, tb) -> Optional[bool]: ...


class GameLoop:
    """Drive input, animation and rendering of one game session."""

    def __init__(
        self,
        input_source: InputSource,
        surface: DrawingSurface,
        settings: Optional[Settings] = None,
        *,
        pipeline: Optional[RenderPipeline] = None,
        profiler: Optional[TickProfiler] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.settings = settings or Settings()
        self.input = input_source
        self.surface = surface
        self.pipeline = pipeline or RenderPipeline()
        self.profiler = profiler or TickProfiler(budget=self.settings.tick_seconds, enabled=False)
        self._clock = clock
        self._sleep = sleep
        self.state = GameState(
            target=self.settings.target, rng=random.Random(self.settings.seed)
        )
        self.state.reset_game()
        self.animation = AnimationController(self.settings.animation_ms)
        self.pending: Optional[Direction] = None
        self.ticks = 0

    @property
    def running(self) -> bool:
        return self.state.status is not GameStatus.QUIT

    @property
    def animating(self) -> bool:
        return self.animation.active

    def restart(self) -> None:
        """Throw away the current game and start a new one."""

        self.animation.cancel()
        self.pending = None
        self.state.reset_game()
        LOGGER.info("Game restarted")

    def _start_move(self, direction: Direction) -> None:
        result = self.state.apply(direction)
        if result.noop:
            LOGGER.debug("Move %s changed nothing", direction.value)
            return
        LOGGER.debug(
            "Move %s: +%d points, %d merge(s), score %d",
            direction.value,
            result.score_delta,
            result.merges,
            self.state.score,
        )
        self.animation.start(result)

    def handle_key(self, key: Optional[Key]) -> None:
        """Apply the state machine transition for ``key``."""

        if key is None:
            return
        if key is Key.QUIT:
            self.state.quit()
            LOGGER.info("Quit with score %d after %d move(s)", self.state.score, self.state.moves)
            return
        if key is Key.RESTART:
            self.restart()
            return
        direction = key.direction
        if direction is None or self.state.status is not GameStatus.PLAYING:
            return
        if self.animating:
            if self.settings.input_policy is InputPolicy.BUFFER:
                self.pending = direction
            return
        self._start_move(direction)

    def _finish_move(self) -> None:
        status = self.state.evaluate()
        if status is GameStatus.WON:
            LOGGER.info("Reached %d with score %d", self.state.target, self.state.score)
        elif status is GameStatus.LOST:
            LOGGER.info("No moves left, final score %d", self.state.score)
            for line in render_grid(self.state.board):
                LOGGER.debug(line)
        if status is not GameStatus.PLAYING:
            self.pending = None
            return
        if self.pending is not None:
            direction, self.pending = self.pending, None
            self._start_move(direction)

    def tick(self, key: Optional[Key], dt_ms: float) -> bool:
        """Run one tick and return ``False`` once the game has been quit.

        The key is handled first, then the animation clock advances by
        ``dt_ms`` and finally one frame is drawn.  A quit skips the drawing.
        """

        self.ticks += 1
        with self.profiler.section("input"):
            self.handle_key(key)
        if not self.running:
            return False
        with self.profiler.section("animate"):
            if self.animation.advance(dt_ms):
                self._finish_move()
            frame = self.animation.sample(self.state.board)
        with self.profiler.section("render"):
            width, height = self.surface.size
            self.surface.draw(self.pipeline.compose(frame, self.state, width, height))
        return True

    def run(self) -> GameState:
        """Play until the player quits and return the final state.

        The surface is held for the whole session and released on every exit
        path.  Errors raised by the input source or the surface propagate.
        """

        budget = self.settings.tick_seconds
        with self.surface:
            LOGGER.info("Game started")
            last = self._clock()
            self.tick(None, 0.0)
            while self.running:
                deadline = last + budget
                key = self.input.poll(max(0.0, deadline - self._clock()))
                remaining = deadline - self._clock()
                if remaining > 0:
                    self._sleep(remaining)
                now = self._clock()
                dt_ms = (now - last) * 1000.0
                last = now
                self.tick(key, dt_ms)
        return self.state
