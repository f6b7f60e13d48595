"""Runtime settings for the terminal front-end."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .board import TARGET, is_tile_value


# Frames per second to run the game loop at
FPS = 60

# Animation window per speed setting; 1 is the slowest.
ANIMATION_MS_BY_SPEED = {1: 200.0, 2: 160.0, 3: 120.0}
DEFAULT_SPEED = 2


class InputPolicy(str, Enum):
    """What to do with a direction pressed while a move is animating.

    ``BUFFER`` keeps the most recent such direction and applies it as soon as
    the animation completes.  ``DROP`` discards it.
    """

    BUFFER = "buffer"
    DROP = "drop"


@dataclass
class Settings:
    animation_ms: float = ANIMATION_MS_BY_SPEED[DEFAULT_SPEED]
    fps: int = FPS
    target: int = TARGET
    input_policy: InputPolicy = InputPolicy.BUFFER
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        if self.animation_ms <= 0:
            raise ValueError("animation_ms must be positive")
        if not 1 <= self.fps <= 240:
            raise ValueError("fps must be between 1 and 240")
        if not is_tile_value(self.target) or self.target < 8:
            raise ValueError("target must be a power of two of at least 8")
        self.input_policy = InputPolicy(self.input_policy)

    @classmethod
    def for_speed(cls, speed: int, **kwargs) -> "Settings":
        """Return settings using the animation length of ``speed``."""

        if speed not in ANIMATION_MS_BY_SPEED:
            raise ValueError(f"Unknown animation speed: {speed}")
        return cls(animation_ms=ANIMATION_MS_BY_SPEED[speed], **kwargs)

    @property
    def tick_seconds(self) -> float:
        return 1.0 / self.fps

    @property
    def tick_ms(self) -> float:
        return 1000.0 / self.fps
