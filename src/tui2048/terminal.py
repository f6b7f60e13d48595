"""Terminal drawing surface built on :mod:`blessed`."""

from __future__ import annotations

import logging
from contextlib import ExitStack
from typing import Dict, List, Optional, Tuple

import numpy as np
from blessed import Terminal

from .render import Canvas, Frame, rasterize


LOGGER = logging.getLogger(__name__)

# DEC private mode 2026: terminals that support it present the whole update at
# once, others ignore the sequence.
BEGIN_SYNC = "\x1b[?2026h"
END_SYNC = "\x1b[?2026l"


def _run_starts(canvas: Canvas) -> np.ndarray:
    """Return a ``(height, width)`` mask of the cells that start a colour run."""

    starts = np.ones((canvas.height, canvas.width), dtype=bool)
    fg_change = np.any(canvas.fg[:, 1:] != canvas.fg[:, :-1], axis=-1)
    bg_change = np.any(canvas.bg[:, 1:] != canvas.bg[:, :-1], axis=-1)
    starts[:, 1:] = fg_change | bg_change
    return starts


def encode(canvas: Canvas, term: Terminal) -> str:
    """Return the escape sequence string that paints ``canvas``.

    Consecutive cells sharing both colours are emitted as one run, so escape
    sequences are only built where the colour changes.
    """

    styles: Dict[Tuple[int, ...], str] = {}
    starts = _run_starts(canvas)
    parts: List[str] = []
    for y in range(canvas.height):
        parts.append(term.move_xy(0, y))
        text = canvas.row_text(y)
        xs = np.flatnonzero(starts[y]).tolist()
        for start, end in zip(xs, xs[1:] + [canvas.width]):
            key = tuple(canvas.fg[y, start].tolist() + canvas.bg[y, start].tolist())
            style = styles.get(key)
            if style is None:
                style = term.color_rgb(*key[:3]) + term.on_color_rgb(*key[3:])
                styles[key] = style
            parts.append(style)
            parts.append(text[start:end])
    parts.append(term.normal)
    return "".join(parts)


class TerminalSurface:
    """Own the terminal for the duration of a ``with`` block.

    Entering switches to the alternate screen, puts the keyboard in raw mode
    and hides the cursor.  Raw mode delivers Ctrl-C as a key instead of a
    signal, so it quits the game like ``q``.  Leaving restores all three,
    also when the block raises.
    """

    def __init__(self, term: Terminal) -> None:
        self.term = term
        self._stack: Optional[ExitStack] = None
        self._last_frame: Optional[Frame] = None

    def __enter__(self) -> "TerminalSurface":
        stack = ExitStack()
        try:
            stack.enter_context(self.term.fullscreen())
            stack.enter_context(self.term.raw())
            stack.enter_context(self.term.hidden_cursor())
        except BaseException:
            stack.close()
            raise
        self._stack = stack
        self._last_frame = None
        LOGGER.debug("Terminal acquired (%dx%d)", self.term.width, self.term.height)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._stack is not None:
            self._stack.close()
            self._stack = None
            LOGGER.debug("Terminal released")
        return None

    @property
    def size(self) -> Tuple[int, int]:
        """Return ``(width, height)`` in character cells."""

        return self.term.width, self.term.height

    def draw(self, frame: Frame) -> None:
        """Redraw the screen with ``frame`` in a single write.

        A frame equal to the previous one is neither rasterized nor sent
        again.
        """

        if frame == self._last_frame:
            return
        output = encode(rasterize(frame), self.term)
        stream = self.term.stream
        stream.write(BEGIN_SYNC + self.term.home + output + END_SYNC)
        stream.flush()
        self._last_frame = frame
