"""Profile the move engine with headless random play using :mod:`tui2048.perf`.

Run with::

    PYTHONPATH=src python examples/profile_games.py

Pass ``--help`` for options.  The script plays random moves until each game is
won or lost, then reports how far the games got and where the time went.
"""

from __future__ import annotations

import argparse
import logging
import random
from collections import Counter
from typing import Optional, Sequence

from tui2048.board import TARGET, Board
from tui2048.game_state import GameStatus, detect_terminal_state
from tui2048.moves import Direction, apply_move, new_board
from tui2048.perf import TickProfiler, format_summary


LOGGER = logging.getLogger(__name__)


def play_game(
    rng: random.Random,
    profiler: TickProfiler,
    max_moves: int = 10_000,
    target: int = TARGET,
) -> tuple[Board, int]:
    """Play random moves until the game ends and return the board and score."""

    with profiler.section("new_board"):
        board = new_board(rng)
    score = 0
    directions = list(Direction)
    for _ in range(max_moves):
        board, result = profiler.time_function(
            "apply_move", apply_move, board, rng.choice(directions), rng
        )
        score += result.score_delta
        if result.noop:
            continue
        with profiler.section("detect_terminal_state"):
            status = detect_terminal_state(board, target)
        if status is not GameStatus.PLAYING:
            break
    return board, score


def log_summary(profiler: TickProfiler, *, limit: int, index: int) -> list[dict[str, float | int]]:
    """Log the ``limit`` most expensive sections after game ``index``."""

    summary = profiler.summary(sort_by="total")[: max(0, limit)]
    LOGGER.info("Game %d performance: %s", index, format_summary(summary, limit=len(summary)))
    return summary


def print_report(scores: list[int], highest: Counter, target: int) -> None:
    """Print score statistics and how often each highest tile was reached."""

    games = len(scores)
    wins = sum(count for tile, count in highest.items() if tile >= target)
    print(f"Games: {games}  mean score: {sum(scores) / games:.1f}  best score: {max(scores)}")
    print(f"Reached {target}: {wins}/{games}")
    for tile in sorted(highest, reverse=True):
        print(f"{tile:>6}  {'#' * highest[tile]}")


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--games", type=int, default=20, help="How many games to play.")
    parser.add_argument("--seed", type=int, default=42, help="Seed for moves and spawns.")
    parser.add_argument("--target", type=int, default=TARGET, help="Tile value that ends a game as won.")
    parser.add_argument("--limit", type=int, default=5, help="Sections listed in the timing summary.")
    parser.add_argument("--log-level", default="INFO", help="Logging level (e.g. DEBUG, INFO, WARNING).")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO), format="%(message)s")

    rng = random.Random(args.seed)
    profiler = TickProfiler()
    scores: list[int] = []
    highest: Counter = Counter()
    for game_idx in range(1, args.games + 1):
        board, score = play_game(rng, profiler, target=args.target)
        scores.append(score)
        highest[board.max_value()] += 1
        LOGGER.debug("Game %d: score %d, board %r", game_idx, score, board)

    if scores:
        print_report(scores, highest, args.target)
        log_summary(profiler, limit=args.limit, index=len(scores))


if __name__ == "__main__":
    main()
