"""Board representation for the 2048 playfield."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray


# Dimensions of the board and the value that wins the game.
SIZE = 4
TARGET = 2048

Grid = NDArray[np.int64]
Position = Tuple[int, int]  # (row, col)


def create_empty_grid() -> Grid:
    """Return a new empty board grid filled with zeros."""

    return np.zeros((SIZE, SIZE), dtype=np.int64)


def is_tile_value(value: int) -> bool:
    """Return ``True`` if ``value`` is a power of two no smaller than two."""

    return value >= 2 and value & (value - 1) == 0


@dataclass(frozen=True)
class Tile:
    """A numbered tile with an identity that survives moves."""

    id: int
    value: int
    row: int
    col: int

    @property
    def position(self) -> Position:
        return (self.row, self.col)


class Board:
    """2048 board holding tile values and tile identities.

    ``grid`` stores the tile values (``0`` for an empty cell) and ``ids`` the
    identifier of the tile occupying each cell.  Identifiers are handed out by
    :meth:`place` and are never reused within the lineage of a board, so
    copies produced while applying moves keep issuing fresh ones.
    """

    size: int = SIZE

    def __init__(self) -> None:
        self.grid: Grid = create_empty_grid()
        self.ids: Grid = create_empty_grid()
        self._next_id = 1

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[int]]) -> "Board":
        """Build a board from ``rows`` of values, ``0`` meaning empty.

        Tiles receive identifiers in row-major order.

        Raises:
            ValueError: If the rows do not form a ``SIZE`` x ``SIZE`` grid or
                contain a value that is not a power of two.
        """

        if len(rows) != cls.size or any(len(row) != cls.size for row in rows):
            raise ValueError(f"Board must be {cls.size}x{cls.size}")
        board = cls()
        for r, row in enumerate(rows):
            for c, value in enumerate(row):
                if value:
                    board.place(r, c, int(value))
        return board

    def copy(self) -> "Board":
        """Return an independent copy sharing the identifier sequence."""

        other = Board()
        other.grid = self.grid.copy()
        other.ids = self.ids.copy()
        other._next_id = self._next_id
        return other

    def cleared(self) -> "Board":
        """Return an empty board that continues this board's identifiers."""

        other = Board()
        other._next_id = self._next_id
        return other

    def _check_bounds(self, row: int, col: int) -> None:
        if not (0 <= row < self.size and 0 <= col < self.size):
            raise IndexError("Cell out of bounds")

    def get_cell(self, row: int, col: int) -> int:
        """Safely return the value at ``(row, col)``.

        Raises:
            IndexError: If the coordinates are outside the board.
        """
        self._check_bounds(row, col)
        return int(self.grid[row, col])

    def tile_at(self, row: int, col: int) -> Tile | None:
        """Return the tile at ``(row, col)`` or ``None`` if the cell is empty."""

        value = self.get_cell(row, col)
        if not value:
            return None
        return Tile(int(self.ids[row, col]), value, row, col)

    def is_empty(self, row: int, col: int) -> bool:
        return self.get_cell(row, col) == 0

    def place(self, row: int, col: int, value: int, tile_id: int | None = None) -> Tile:
        """Put a tile of ``value`` on the empty cell ``(row, col)``.

        A fresh identifier is issued unless ``tile_id`` is given, which is how
        moves carry an existing tile to its new cell.

        Raises:
            IndexError: If the coordinates are outside the board.
            ValueError: If the cell is occupied or ``value`` is not a tile value.
        """

        self._check_bounds(row, col)
        if not is_tile_value(value):
            raise ValueError(f"Invalid tile value: {value}")
        if self.grid[row, col]:
            raise ValueError(f"Cell {(row, col)} is already occupied")
        if tile_id is None:
            tile_id = self._next_id
            self._next_id += 1
        self.grid[row, col] = value
        self.ids[row, col] = tile_id
        return Tile(tile_id, value, row, col)

    def tiles(self) -> List[Tile]:
        """Return every tile on the board in row-major order."""

        rows, cols = np.nonzero(self.grid)
        return [
            Tile(int(self.ids[r, c]), int(self.grid[r, c]), int(r), int(c))
            for r, c in zip(rows, cols)
        ]

    def empty_cells(self) -> List[Position]:
        rows, cols = np.nonzero(self.grid == 0)
        return [(int(r), int(c)) for r, c in zip(rows, cols)]

    def is_full(self) -> bool:
        return bool(np.all(self.grid != 0))

    def max_value(self) -> int:
        return int(self.grid.max())

    def rows(self) -> List[List[int]]:
        """Return the values as nested lists, handy for tests and logging."""

        return self.grid.tolist()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return bool(np.array_equal(self.grid, other.grid))

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Board({self.rows()!r})"
