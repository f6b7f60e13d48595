from tui2048.animation import AnimationFrame, TileSprite
from tui2048.board import Board
from tui2048.game_state import GameState, GameStatus
from tui2048.render import (
    BOARD_COLOR,
    EMPTY_CELL_COLOR,
    MIN_HEIGHT,
    MIN_WIDTH,
    TILE_HEIGHT,
    TILE_WIDTH,
    FillRect,
    Frame,
    Label,
    RenderPipeline,
    blend,
    cell_origin,
    rasterize,
    tile_color,
)


def make_state(rows=None, status=GameStatus.PLAYING):
    state = GameState()
    state.board = Board.from_rows(rows or [[2, 0, 0, 0], [0] * 4, [0] * 4, [0, 0, 0, 2048]])
    state.status = status
    return state


def compose(state, frame=None, width=80, height=24):
    frame = frame or AnimationFrame.from_board(state.board)
    return RenderPipeline().compose(frame, state, width, height)


def test_tiles_are_drawn_at_their_cells_with_centered_values():
    state = make_state()
    canvas = rasterize(compose(state))
    x, y = cell_origin(3, 3)
    row = canvas.row_text(int(y) + TILE_HEIGHT // 2)
    assert row[int(x):int(x) + TILE_WIDTH] == "  2048  "
    assert tuple(canvas.bg[int(y), int(x)]) == tile_color(2048)
    x, y = cell_origin(0, 1)
    assert tuple(canvas.bg[int(y), int(x)]) == EMPTY_CELL_COLOR


def test_status_line_shows_score_best_and_moves():
    state = make_state()
    state.score, state.best, state.moves = 12, 40, 3
    frame = compose(state)
    texts = [item.text for item in frame.items if isinstance(item, Label)]
    assert "Score: 12   Best: 40   Moves: 3" in texts


def test_banner_for_terminal_states():
    assert RenderPipeline.banner(make_state()) == ""
    assert "You reached 2048!" in RenderPipeline.banner(make_state(status=GameStatus.WON))
    assert "No moves left" in RenderPipeline.banner(make_state(status=GameStatus.LOST))


def test_controls_only_shown_when_they_fit():
    state = make_state()
    wide = [i.text for i in compose(state, width=100).items if isinstance(i, Label)]
    narrow = [i.text for i in compose(state, width=MIN_WIDTH).items if isinstance(i, Label)]
    assert "Controls" in wide
    assert "Controls" not in narrow


def test_small_terminal_gets_a_notice_instead_of_the_board():
    frame = compose(make_state(), width=MIN_WIDTH - 1, height=MIN_HEIGHT)
    assert len(frame.items) == 1
    assert "Terminal too small" in frame.items[0].text


def test_moving_sprite_lands_between_cells():
    state = make_state()
    frame = AnimationFrame(sprites=[TileSprite(1, 4, 0.0, 0.5)], elapsed=50, duration=100)
    items = compose(state, frame).items
    rect = next(i for i in items if isinstance(i, FillRect) and i.color == tile_color(4))
    x0, _ = cell_origin(0, 0)
    x1, _ = cell_origin(0, 1)
    assert rect.x == round((x0 + x1) / 2)


def test_pulsing_sprite_is_drawn_larger():
    state = make_state()
    frame = AnimationFrame(sprites=[TileSprite(1, 8, 1.0, 1.0, scale=1.2)])
    rect = next(
        i for i in compose(state, frame).items if isinstance(i, FillRect) and i.color == tile_color(8)
    )
    assert rect.width > TILE_WIDTH


def test_fading_sprite_blends_towards_the_empty_cell():
    state = make_state()
    invisible = AnimationFrame(sprites=[TileSprite(1, 8, 2.0, 2.0, opacity=0.0)])
    half = AnimationFrame(sprites=[TileSprite(1, 8, 2.0, 2.0, opacity=0.5)])
    tile_rect = compose(state, invisible).items[18]
    assert isinstance(tile_rect, FillRect)
    assert tile_rect.color == EMPTY_CELL_COLOR
    tile_rect = compose(state, half).items[18]
    assert tile_rect.color == blend(EMPTY_CELL_COLOR, tile_color(8), 0.5)


def test_blend_endpoints():
    assert blend((0, 0, 0), (200, 100, 50), 0.0) == (0, 0, 0)
    assert blend((0, 0, 0), (200, 100, 50), 1.0) == (200, 100, 50)
    assert blend((0, 0, 0), (200, 100, 50), 0.5) == (100, 50, 25)


def test_rasterize_clips_items_to_the_frame():
    frame = Frame(
        width=10,
        height=3,
        items=[
            FillRect(-2, -1, 5, 10, BOARD_COLOR),
            Label(8, 1, "hello", (1, 2, 3)),
            Label(0, 5, "hidden", (1, 2, 3)),
        ],
    )
    canvas = rasterize(frame)
    assert canvas.width == 10 and canvas.height == 3
    assert tuple(canvas.bg[2, 2]) == BOARD_COLOR
    assert tuple(canvas.bg[2, 3]) == (0, 0, 0)
    assert canvas.row_text(1) == "        he"
    assert tuple(canvas.fg[1, 9]) == (1, 2, 3)
