"""High level game state container."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from enum import Enum
from .board import TARGET, Board
from .moves import Direction, MoveResult, apply_move, new_board
from .utils import any_move_available


class GameStatus(str, Enum):
    PLAYING = "playing"
    WON = "won"
    LOST = "lost"
    QUIT = "quit"


def detect_terminal_state(board: Board, target: int = TARGET) -> GameStatus:
    """Classify ``board`` as won, lost or still playing.

    A board is won as soon as any tile reaches ``target``.  It is lost only
    when every cell is occupied and none of the four directions would change
    it.
    """

    if board.max_value() >= target:
        return GameStatus.WON
    if not any_move_available(board):
        return GameStatus.LOST
    return GameStatus.PLAYING


@dataclass
class GameState:
    """Mutable state for a 2048 game session."""

    board: Board = field(default_factory=Board)
    score: int = 0
    best: int = 0
    moves: int = 0
    status: GameStatus = GameStatus.PLAYING
    target: int = TARGET
    rng: random.Random = field(default_factory=random.Random)

    def reset_game(self) -> None:
        """Start a new game on a freshly spawned board.

        The session's best score is kept; everything else starts over.
        """

        self.board = new_board(self.rng)
        self.score = 0
        self.moves = 0
        self.status = GameStatus.PLAYING

    def apply(self, direction: Direction) -> MoveResult:
        """Apply ``direction`` to the board and book the score.

        No-op moves leave score and move count untouched.  The terminal state
        is not evaluated here; callers do that once the move has been shown.
        """

        board, result = apply_move(self.board, direction, self.rng)
        if result.noop:
            return result
        self.board = board
        self.score += result.score_delta
        self.best = max(self.best, self.score)
        self.moves += 1
        return result

    def evaluate(self) -> GameStatus:
        """Update ``status`` from the board and return it."""

        if self.status is GameStatus.PLAYING:
            self.status = detect_terminal_state(self.board, self.target)
        return self.status

    def quit(self) -> None:
        self.status = GameStatus.QUIT
