"""Turn animation frames into drawable terminal primitives.

:class:`RenderPipeline` lays out the board, the tiles of an
:class:`~tui2048.animation.AnimationFrame` and the status lines as
:class:`FillRect` and :class:`Label` items measured in character cells.
:func:`rasterize` paints those items onto a :class:`Canvas`, a numpy
character and colour buffer the terminal surface can emit in one write.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

import numpy as np

from .animation import AnimationFrame, TileSprite
from .board import SIZE
from .game_state import GameState, GameStatus
from .utils import lerp


RGB = Tuple[int, int, int]

# Size of a single board cell in terminal columns and rows
TILE_WIDTH = 8
TILE_HEIGHT = 3
# Gap between cells and around the grid
MARGIN_X = 2
MARGIN_Y = 1
# Top-left corner of the board on screen, leaving a row for the title
BOARD_X = 2
BOARD_Y = 1

BOARD_WIDTH = MARGIN_X + SIZE * (TILE_WIDTH + MARGIN_X)
BOARD_HEIGHT = MARGIN_Y + SIZE * (TILE_HEIGHT + MARGIN_Y)
# Width of the controls panel shown right of the board when it fits
CONTROLS_GAP = 4
CONTROLS_WIDTH = 26
# Title row, board, blank row, status and banner rows
MIN_WIDTH = BOARD_X + BOARD_WIDTH
MIN_HEIGHT = BOARD_Y + BOARD_HEIGHT + 3

BACKGROUND_COLOR: RGB = (0, 0, 0)
BOARD_COLOR: RGB = (187, 173, 160)
EMPTY_CELL_COLOR: RGB = (205, 193, 180)
DARK_TEXT: RGB = (119, 110, 101)
LIGHT_TEXT: RGB = (249, 246, 242)
STATUS_TEXT: RGB = (255, 255, 255)
HINT_TEXT: RGB = (128, 128, 128)
BANNER_TEXT: RGB = (102, 178, 255)

TILE_COLORS = {
    2: (238, 228, 218),
    4: (237, 224, 200),
    8: (242, 177, 121),
    16: (245, 149, 99),
    32: (246, 124, 95),
    64: (246, 94, 59),
    128: (237, 207, 114),
    256: (237, 204, 97),
    512: (237, 200, 80),
    1024: (237, 197, 63),
    2048: (237, 194, 46),
}
SUPER_TILE_COLOR: RGB = (60, 58, 50)

CONTROLS = [
    "Controls",
    "Up - Arrow Up | W",
    "Down - Arrow Down | S",
    "Left - Arrow Left | A",
    "Right - Arrow Right | D",
    "Restart - R | Enter",
    "Quit - Q | Esc",
]


@dataclass(frozen=True)
class FillRect:
    x: int
    y: int
    width: int
    height: int
    color: RGB


@dataclass(frozen=True)
class Label:
    """Text drawn left to right from ``(x, y)``.

    A ``bg`` of ``None`` keeps whatever colour is already underneath.
    """

    x: int
    y: int
    text: str
    fg: RGB
    bg: Optional[RGB] = None


Primitive = Union[FillRect, Label]


@dataclass
class Frame:
    width: int
    height: int
    items: List[Primitive] = field(default_factory=list)
    background: RGB = BACKGROUND_COLOR


def tile_color(value: int) -> RGB:
    return TILE_COLORS.get(value, SUPER_TILE_COLOR)


def text_color(value: int) -> RGB:
    return DARK_TEXT if value <= 4 else LIGHT_TEXT


def blend(base: RGB, color: RGB, amount: float) -> RGB:
    """Mix ``color`` over ``base``; ``amount`` of ``1`` gives ``color``."""

    return tuple(int(round(lerp(b, c, amount))) for b, c in zip(base, color))  # type: ignore[return-value]


def cell_origin(row: float, col: float) -> Tuple[float, float]:
    """Return the screen ``(x, y)`` of the top-left corner of a grid cell.

    Fractional rows and columns give positions between cells, which is how
    moving tiles are placed.
    """

    x = BOARD_X + MARGIN_X + col * (TILE_WIDTH + MARGIN_X)
    y = BOARD_Y + MARGIN_Y + row * (TILE_HEIGHT + MARGIN_Y)
    return x, y


class RenderPipeline:
    """Compose full frames for a terminal of a given size."""

    def compose(
        self, frame: AnimationFrame, state: GameState, width: int, height: int
    ) -> Frame:
        out = Frame(width=width, height=height)
        if width < MIN_WIDTH or height < MIN_HEIGHT:
            out.items.append(
                Label(0, 0, f"Terminal too small, need {MIN_WIDTH}x{MIN_HEIGHT}", STATUS_TEXT)
            )
            return out

        out.items.append(Label(BOARD_X, 0, "2048", STATUS_TEXT))
        out.items.append(FillRect(BOARD_X, BOARD_Y, BOARD_WIDTH, BOARD_HEIGHT, BOARD_COLOR))
        for r in range(SIZE):
            for c in range(SIZE):
                x, y = cell_origin(r, c)
                out.items.append(FillRect(int(x), int(y), TILE_WIDTH, TILE_HEIGHT, EMPTY_CELL_COLOR))

        for sprite in frame.sprites:
            out.items.extend(self._tile(sprite))

        status_y = BOARD_Y + BOARD_HEIGHT + 1
        out.items.append(
            Label(
                BOARD_X,
                status_y,
                f"Score: {state.score}   Best: {state.best}   Moves: {state.moves}",
                STATUS_TEXT,
            )
        )
        banner = self.banner(state)
        if banner:
            out.items.append(Label(BOARD_X, status_y + 1, banner, BANNER_TEXT))

        controls_x = BOARD_X + BOARD_WIDTH + CONTROLS_GAP
        if controls_x + CONTROLS_WIDTH <= width:
            for i, line in enumerate(CONTROLS):
                out.items.append(Label(controls_x, BOARD_Y + 1 + i, line, HINT_TEXT))
        return out

    def _tile(self, sprite: TileSprite) -> List[Primitive]:
        x, y = cell_origin(sprite.row, sprite.col)
        grow_x = int(round((sprite.scale - 1.0) * TILE_WIDTH / 2))
        grow_y = int(round((sprite.scale - 1.0) * TILE_HEIGHT / 2))
        left = int(round(x)) - grow_x
        top = int(round(y)) - grow_y
        w = TILE_WIDTH + 2 * grow_x
        h = TILE_HEIGHT + 2 * grow_y
        fill = blend(EMPTY_CELL_COLOR, tile_color(sprite.value), sprite.opacity)
        fg = blend(fill, text_color(sprite.value), sprite.opacity)
        text = str(sprite.value)[:w]
        return [
            FillRect(left, top, w, h, fill),
            Label(left + (w - len(text)) // 2, top + h // 2, text, fg),
        ]

    @staticmethod
    def banner(state: GameState) -> str:
        if state.status is GameStatus.WON:
            return f"You reached {state.target}! Press R to play again or Q to quit."
        if state.status is GameStatus.LOST:
            return "No moves left. Press R to play again or Q to quit."
        return ""


@dataclass
class Canvas:
    """Character cells with a foreground and background colour each."""

    chars: np.ndarray
    fg: np.ndarray
    bg: np.ndarray

    @classmethod
    def blank(cls, width: int, height: int, background: RGB = BACKGROUND_COLOR) -> "Canvas":
        chars = np.full((height, width), " ", dtype="<U1")
        fg = np.zeros((height, width, 3), dtype=np.uint8)
        fg[:, :] = STATUS_TEXT
        bg = np.zeros((height, width, 3), dtype=np.uint8)
        bg[:, :] = background
        return cls(chars, fg, bg)

    @property
    def height(self) -> int:
        return int(self.chars.shape[0])

    @property
    def width(self) -> int:
        return int(self.chars.shape[1])

    def row_text(self, y: int) -> str:
        return "".join(self.chars[y].tolist())


def rasterize(frame: Frame) -> Canvas:
    """Paint ``frame``'s items in order, clipping them to the frame."""

    canvas = Canvas.blank(frame.width, frame.height, frame.background)
    for item in frame.items:
        if isinstance(item, FillRect):
            x0, y0 = max(item.x, 0), max(item.y, 0)
            x1 = min(item.x + item.width, canvas.width)
            y1 = min(item.y + item.height, canvas.height)
            if x0 >= x1 or y0 >= y1:
                continue
            canvas.chars[y0:y1, x0:x1] = " "
            canvas.bg[y0:y1, x0:x1] = item.color
        else:
            if not 0 <= item.y < canvas.height:
                continue
            for offset, char in enumerate(item.text):
                x = item.x + offset
                if 0 <= x < canvas.width:
                    canvas.chars[item.y, x] = char
                    canvas.fg[item.y, x] = item.fg
                    if item.bg is not None:
                        canvas.bg[item.y, x] = item.bg
    return canvas
