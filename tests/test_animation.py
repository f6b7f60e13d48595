import pytest

from tui2048.animation import (
    PULSE_SCALE,
    AnimationController,
    AnimationFrame,
    sample_events,
)
from tui2048.board import Board
from tui2048.moves import Direction, apply_move, slide


class FakeRng:
    def choice(self, seq):
        return seq[-1]

    def random(self) -> float:
        return 0.5


def start_board():
    return Board.from_rows([[2, 2, 4, 0], [0, 0, 0, 0], [0, 8, 0, 0], [0, 0, 0, 0]])


def layout_of(board):
    return {(float(t.row), float(t.col)): t.value for t in board.tiles()}


def test_sample_at_zero_reproduces_pre_move_layout():
    board = start_board()
    _, result = apply_move(board, Direction.LEFT, FakeRng())
    frame = sample_events(result.events, 0.0, 150.0)
    assert frame.layout() == layout_of(board)


def test_sample_at_end_reproduces_post_move_board():
    board = start_board()
    moved, result = apply_move(board, Direction.LEFT, FakeRng())
    for elapsed in (150.0, 400.0):
        frame = sample_events(result.events, elapsed, 150.0)
        assert frame.layout() == layout_of(moved)
        assert all(s.scale == 1.0 and s.opacity == 1.0 for s in frame.sprites)
        assert sorted(s.tile_id for s in frame.sprites) == sorted(t.id for t in moved.tiles())


def test_moving_tile_is_interpolated_linearly():
    board = Board.from_rows([[0, 0, 0, 2], [0] * 4, [0] * 4, [0] * 4])
    _, result = slide(board, Direction.LEFT)
    frame = sample_events(result.events, 50.0, 100.0)
    (sprite,) = frame.sprites
    assert sprite.row == 0.0
    assert sprite.col == pytest.approx(1.5)


def test_spawned_tile_fades_in_at_its_cell():
    board = Board.from_rows([[0, 0, 0, 2], [0] * 4, [0] * 4, [0] * 4])
    _, result = apply_move(board, Direction.LEFT, FakeRng())
    spawned = result.spawned
    frame = sample_events(result.events, 25.0, 100.0)
    sprite = next(s for s in frame.sprites if s.tile_id == spawned.id)
    assert (sprite.row, sprite.col) == spawned.position
    assert sprite.opacity == pytest.approx(0.25)
    assert spawned.id not in {s.tile_id for s in sample_events(result.events, 0.0, 100.0).sprites}


def test_merged_tile_pulses_near_the_end_of_the_window():
    board = Board.from_rows([[2, 2, 0, 0], [0] * 4, [0] * 4, [0] * 4])
    survivor = board.tile_at(0, 0)
    _, result = slide(board, Direction.LEFT)

    early = sample_events(result.events, 20.0, 100.0)
    sprite = next(s for s in early.sprites if s.tile_id == survivor.id)
    assert sprite.scale == 1.0
    assert sprite.value == 2

    peak = sample_events(result.events, 87.5, 100.0)
    sprite = next(s for s in peak.sprites if s.tile_id == survivor.id)
    assert sprite.scale == pytest.approx(1.0 + PULSE_SCALE)
    assert sprite.value == 4


def test_absorbed_tile_is_drawn_below_and_removed_at_the_end():
    board = Board.from_rows([[2, 2, 0, 0], [0] * 4, [0] * 4, [0] * 4])
    absorbed = board.tile_at(0, 1)
    _, result = slide(board, Direction.LEFT)
    frame = sample_events(result.events, 50.0, 100.0)
    assert frame.sprites[0].tile_id == absorbed.id
    assert frame.sprites[0].col == pytest.approx(0.5)
    final = sample_events(result.events, 100.0, 100.0)
    assert absorbed.id not in {s.tile_id for s in final.sprites}


def test_controller_lifecycle():
    board = start_board()
    moved, result = apply_move(board, Direction.LEFT, FakeRng())
    controller = AnimationController(100.0)
    assert not controller.active
    controller.start(result)
    assert controller.active
    assert controller.sample(moved).layout() == layout_of(board)
    assert controller.advance(60.0) is False
    assert controller.active
    assert controller.advance(60.0) is True
    assert not controller.active
    assert controller.elapsed == 100.0
    assert controller.advance(16.0) is False
    assert controller.sample(moved).layout() == layout_of(moved)


def test_controller_refuses_noop_and_overlapping_animations():
    board = Board.from_rows([[2, 4, 8, 16], [0] * 4, [0] * 4, [0] * 4])
    _, noop = slide(board, Direction.LEFT)
    controller = AnimationController(100.0)
    with pytest.raises(ValueError):
        controller.start(noop)

    _, result = slide(board, Direction.DOWN)
    controller.start(result)
    with pytest.raises(RuntimeError):
        controller.start(result)
    controller.cancel()
    assert not controller.active


def test_controller_requires_positive_duration():
    with pytest.raises(ValueError):
        AnimationController(0)


def test_idle_frame_is_the_board():
    board = start_board()
    frame = AnimationFrame.from_board(board)
    assert frame.progress == 1.0
    assert frame.layout() == layout_of(board)
