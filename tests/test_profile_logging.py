import logging
import random
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

from examples.profile_games import log_summary, main, play_game
from tui2048.game_state import GameStatus, detect_terminal_state
from tui2048.perf import TickProfiler


class FakeClock:
    def __init__(self) -> None:
        self.current = 0.0

    def advance(self, delta: float) -> None:
        self.current += delta

    def __call__(self) -> float:
        return self.current


def test_log_summary_limits_rows_and_output(caplog):
    clock = FakeClock()
    profiler = TickProfiler(clock=clock)
    with profiler.section("slow"):
        clock.advance(0.5)
    with profiler.section("fast"):
        clock.advance(0.1)

    with caplog.at_level(logging.INFO, logger="examples.profile_games"):
        summary = log_summary(profiler, limit=1, index=7)

    assert len(summary) == 1
    assert summary[0]["name"] == "slow"
    message = "".join(caplog.messages)
    assert "slow" in message
    assert "fast" not in message


def test_play_game_runs_until_the_game_ends():
    profiler = TickProfiler()
    board, score = play_game(random.Random(5), profiler)
    assert detect_terminal_state(board) is not GameStatus.PLAYING
    assert score > 0
    names = {row["name"] for row in profiler.summary()}
    assert {"new_board", "apply_move", "detect_terminal_state"} <= names


def test_play_game_stops_once_a_small_target_is_reached():
    board, _ = play_game(random.Random(3), TickProfiler(), target=16)
    assert detect_terminal_state(board, 16) is not GameStatus.PLAYING
    assert board.max_value() >= 16 or board.is_full()


def test_main_reports_scores_and_highest_tiles(capsys, caplog):
    with caplog.at_level(logging.INFO, logger="examples.profile_games"):
        main(["--games", "3", "--seed", "1", "--target", "32", "--limit", "2"])
    out = capsys.readouterr().out.splitlines()
    assert out[0].startswith("Games: 3")
    assert out[1].startswith("Reached 32: ")
    assert sum(line.count("#") for line in out[2:]) == 3
    assert any("Game 3 performance" in message for message in caplog.messages)
