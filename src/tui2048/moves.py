"""Slide, merge and spawn logic.

A move is resolved line by line.  Each line is read from the edge the tiles
travel towards (the *leading edge*): occupied cells are compressed towards
that edge and, scanning from it, a tile merges with the next tile when both
hold the same value.  A tile produced by a merge does not merge again within
the same move, so ``[2, 2, 2, 0]`` moved left becomes ``[4, 2, 0, 0]``.

:func:`slide` is the deterministic half of a move.  :func:`apply_move` adds
the random spawn that follows every move that changed the board.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from .board import SIZE, Board, Position, Tile


SPAWN_FOUR_PROBABILITY = 0.1


class Direction(str, Enum):
    """The four directions tiles can slide in."""

    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


class EventKind(str, Enum):
    MOVED = "moved"
    MERGED = "merged"
    SPAWNED = "spawned"


@dataclass(frozen=True)
class TileEvent:
    """What happened to one tile during a move.

    ``value`` is the tile's value before the move.  ``final_value`` is its
    value once the move has settled: doubled for the tile that survives a
    merge and ``None`` for the tile absorbed by it.
    """

    tile_id: int
    kind: EventKind
    origin: Position
    destination: Position
    value: int
    final_value: Optional[int]

    @property
    def absorbed(self) -> bool:
        return self.final_value is None


@dataclass
class MoveResult:
    direction: Direction
    events: List[TileEvent] = field(default_factory=list)
    score_delta: int = 0
    changed: bool = False
    spawned: Optional[Tile] = None

    @property
    def noop(self) -> bool:
        return not self.changed

    @property
    def merges(self) -> int:
        return sum(
            1 for e in self.events if e.kind is EventKind.MERGED and not e.absorbed
        )


# (tile_id, value, index along the line)
_LineCell = Tuple[int, int, int]
# (tile_id, value, origin index, destination index, final value)
_LineMove = Tuple[int, int, int, int, Optional[int]]


def _resolve_line(cells: Sequence[_LineCell]) -> Tuple[List[_LineMove], int]:
    """Compress and merge the occupied ``cells`` of one line.

    ``cells`` are ordered from the leading edge.  Returns the per-tile moves
    and the score gained on this line.
    """

    moves: List[_LineMove] = []
    score = 0
    dest = 0
    i = 0
    while i < len(cells):
        tile_id, value, origin = cells[i]
        if i + 1 < len(cells) and cells[i + 1][1] == value:
            other_id, _, other_origin = cells[i + 1]
            merged = value * 2
            moves.append((tile_id, value, origin, dest, merged))
            moves.append((other_id, value, other_origin, dest, None))
            score += merged
            i += 2
        else:
            moves.append((tile_id, value, origin, dest, value))
            i += 1
        dest += 1
    return moves, score


def merge_line(values: Sequence[int]) -> Tuple[List[int], int]:
    """Slide one line of values towards index ``0``.

    Returns the resulting line, padded with zeros, and the score gained.

    >>> merge_line([2, 2, 4, 0])
    ([4, 4, 0, 0], 4)
    """

    cells = [(i, v, i) for i, v in enumerate(values) if v]
    moves, score = _resolve_line(cells)
    result = [0] * len(values)
    for _, _, _, dest, final in moves:
        if final is not None:
            result[dest] = final
    return result, score


def line_positions(direction: Direction, size: int = SIZE) -> List[List[Position]]:
    """Return the board's lines as positions ordered from the leading edge."""

    span = range(size)
    if direction is Direction.LEFT:
        return [[(r, c) for c in span] for r in span]
    if direction is Direction.RIGHT:
        return [[(r, c) for c in reversed(span)] for r in span]
    if direction is Direction.UP:
        return [[(r, c) for r in span] for c in span]
    return [[(r, c) for r in reversed(span)] for c in span]


def slide(board: Board, direction: Direction | str) -> Tuple[Board, MoveResult]:
    """Slide every tile of ``board`` towards ``direction``.

    The input board is left untouched.  The returned result lists one event
    per tile, stationary tiles included.

    Raises:
        ValueError: If ``direction`` is not one of the four directions.
    """

    direction = Direction(direction)
    moved = board.cleared()
    result = MoveResult(direction=direction)

    for line in line_positions(direction, board.size):
        cells = []
        for index, (r, c) in enumerate(line):
            value = int(board.grid[r, c])
            if value:
                cells.append((int(board.ids[r, c]), value, index))
        moves, score = _resolve_line(cells)
        result.score_delta += score
        for tile_id, value, origin, dest, final in moves:
            origin_pos = line[origin]
            dest_pos = line[dest]
            if final is not None:
                moved.place(dest_pos[0], dest_pos[1], final, tile_id=tile_id)
            kind = EventKind.MOVED if final == value else EventKind.MERGED
            result.events.append(
                TileEvent(tile_id, kind, origin_pos, dest_pos, value, final)
            )

    result.changed = moved != board
    return moved, result


def spawn_tile(board: Board, rng: Optional[random.Random] = None) -> Optional[Tile]:
    """Place a new tile on a random empty cell of ``board``.

    The value is ``4`` with probability :data:`SPAWN_FOUR_PROBABILITY` and
    ``2`` otherwise.  Returns ``None`` without touching the board when no
    cell is empty.
    """

    rng = rng or random
    empty = board.empty_cells()
    if not empty:
        return None
    row, col = rng.choice(empty)
    value = 4 if rng.random() < SPAWN_FOUR_PROBABILITY else 2
    return board.place(row, col, value)


def apply_move(
    board: Board, direction: Direction | str, rng: Optional[random.Random] = None
) -> Tuple[Board, MoveResult]:
    """Apply a full move: slide, then spawn one tile if anything changed.

    A no-op move returns an unchanged copy of ``board`` and a result whose
    ``noop`` flag is set; nothing is spawned.
    """

    moved, result = slide(board, direction)
    if result.noop:
        return moved, result
    tile = spawn_tile(moved, rng)
    if tile is not None:
        result.spawned = tile
        result.events.append(
            TileEvent(
                tile.id,
                EventKind.SPAWNED,
                tile.position,
                tile.position,
                tile.value,
                tile.value,
            )
        )
    return moved, result


def new_board(rng: Optional[random.Random] = None) -> Board:
    """Return a fresh board holding exactly two spawned tiles."""

    board = Board()
    spawn_tile(board, rng)
    spawn_tile(board, rng)
    return board
