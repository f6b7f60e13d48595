"""Keyboard input for the game loop.

The loop only needs an object with a ``poll(timeout)`` method returning at
most one :class:`Key`.  :class:`KeyboardInput` provides it on top of
:mod:`blessed`, whose ``inkey`` already implements a bounded wait.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterator, Optional, Protocol

from blessed import Terminal
from blessed.keyboard import Keystroke

from .moves import Direction


# Seconds to wait for the rest of an escape sequence after a bare Esc.
ESC_DELAY = 0.05


class Key(str, Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    QUIT = "quit"
    RESTART = "restart"
    OTHER = "other"

    @property
    def direction(self) -> Optional[Direction]:
        """The direction this key slides in, ``None`` for non-move keys."""

        try:
            return Direction(self.value)
        except ValueError:
            return None


class InputSource(Protocol):
    def poll(self, timeout: float) -> Optional[Key]:
        """Return the next key, waiting at most ``timeout`` seconds."""
        ...


_NAMED_KEYS = {
    "KEY_UP": Key.UP,
    "KEY_DOWN": Key.DOWN,
    "KEY_LEFT": Key.LEFT,
    "KEY_RIGHT": Key.RIGHT,
    "KEY_ESCAPE": Key.QUIT,
    "KEY_ENTER": Key.RESTART,
}

_CHAR_KEYS = {
    "w": Key.UP,
    "s": Key.DOWN,
    "a": Key.LEFT,
    "d": Key.RIGHT,
    "q": Key.QUIT,
    "\x03": Key.QUIT,  # Ctrl-C arrives as a character in raw mode
    "r": Key.RESTART,
    "\n": Key.RESTART,
    "\r": Key.RESTART,
}


def key_from_keystroke(keystroke: Keystroke) -> Optional[Key]:
    """Translate a blessed keystroke into a :class:`Key`.

    An empty keystroke (the wait timed out) yields ``None``; anything not
    bound to an action yields :attr:`Key.OTHER`.
    """

    if keystroke.is_sequence:
        return _NAMED_KEYS.get(keystroke.name, Key.OTHER)
    if not str(keystroke):
        return None
    return _CHAR_KEYS.get(str(keystroke).lower(), Key.OTHER)


class KeyboardInput:
    """Read keys from a blessed terminal without blocking the render loop."""

    def __init__(self, term: Terminal) -> None:
        self.term = term

    def poll(self, timeout: float) -> Optional[Key]:
        timeout = max(0.0, timeout)
        keystroke = self.term.inkey(timeout=timeout, esc_delay=min(timeout, ESC_DELAY))
        return key_from_keystroke(keystroke)

    def events(self, timeout: float = 0.0) -> Iterator[Optional[Key]]:
        """Yield one poll result after another, forever."""

        while True:
            yield self.poll(timeout)
