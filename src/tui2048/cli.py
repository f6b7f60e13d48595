"""Command line entry point.

Run with: ``tui2048`` or ``python -m tui2048``.  Pass ``--help`` for the
available options.
"""

from __future__ import annotations

import argparse
import logging
import random
import sys
from typing import Optional, Sequence

from blessed import Terminal

from .keys import KeyboardInput
from .moves import new_board
from .perf import TickProfiler, format_summary
from .run_terminal import GameLoop
from .settings import ANIMATION_MS_BY_SPEED, DEFAULT_SPEED, FPS, InputPolicy, Settings
from .terminal import TerminalSurface
from .utils import render_grid


LOGGER = logging.getLogger(__name__)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="tui2048", description="Play 2048 in the terminal.")
    parser.add_argument(
        "--speed",
        type=int,
        choices=sorted(ANIMATION_MS_BY_SPEED),
        default=DEFAULT_SPEED,
        help="Animation speed, 1 is the slowest.",
    )
    parser.add_argument("--fps", type=int, default=FPS, help="Frames drawn per second.")
    parser.add_argument("--target", type=int, default=2048, help="Tile value that wins the game.")
    parser.add_argument(
        "--drop-input",
        dest="input_policy",
        action="store_const",
        const=InputPolicy.DROP,
        default=InputPolicy.BUFFER,
        help="Ignore moves pressed while tiles are still moving instead of queueing the last one.",
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for tile spawns.")
    parser.add_argument(
        "--print",
        dest="print_board",
        action="store_true",
        help="Print a freshly spawned board and exit without entering the terminal UI.",
    )
    parser.add_argument("--log-file", default=None, help="Write log messages to this file.")
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (e.g. DEBUG, INFO, WARNING).",
    )
    parser.add_argument(
        "--profile",
        action="store_true",
        help="Log a timing summary of the tick phases on exit.",
    )
    return parser.parse_args(argv)


def build_settings(args: argparse.Namespace) -> Settings:
    return Settings.for_speed(
        args.speed,
        fps=args.fps,
        target=args.target,
        input_policy=args.input_policy,
        seed=args.seed,
    )


def configure_logging(args: argparse.Namespace) -> None:
    # The terminal is busy drawing the game, so logs only ever go to a file.
    if args.log_file is None:
        return
    logging.basicConfig(
        filename=args.log_file,
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(args)
    try:
        settings = build_settings(args)
    except ValueError as exc:
        print(f"tui2048: {exc}", file=sys.stderr)
        return 2

    if args.print_board:
        for line in render_grid(new_board(random.Random(settings.seed))):
            print(line)
        return 0

    term = Terminal()
    if not term.is_a_tty:
        print("tui2048: standard output is not a terminal", file=sys.stderr)
        return 1

    profiler = TickProfiler(budget=settings.tick_seconds, enabled=args.profile)
    loop = GameLoop(KeyboardInput(term), TerminalSurface(term), settings, profiler=profiler)
    state = loop.run()
    if args.profile:
        LOGGER.info("Tick timings over %d tick(s): %s", loop.ticks, format_summary(profiler.summary()))
    print(f"Final score: {state.score} (best {state.best})")
    return 0


if __name__ == "__main__":  # pragma: no cover - manual execution only
    sys.exit(main())
