import pytest

from tui2048 import cli
from tui2048.settings import ANIMATION_MS_BY_SPEED, InputPolicy, Settings


def test_defaults_build_buffering_settings():
    settings = cli.build_settings(cli.parse_args([]))
    assert settings.input_policy is InputPolicy.BUFFER
    assert settings.target == 2048
    assert settings.fps == 60
    assert settings.animation_ms == ANIMATION_MS_BY_SPEED[2]


def test_flags_map_onto_settings():
    args = cli.parse_args(["--speed", "3", "--fps", "30", "--target", "512", "--drop-input", "--seed", "9"])
    settings = cli.build_settings(args)
    assert settings.animation_ms == ANIMATION_MS_BY_SPEED[3]
    assert settings.fps == 30
    assert settings.target == 512
    assert settings.input_policy is InputPolicy.DROP
    assert settings.seed == 9
    assert settings.tick_ms == pytest.approx(1000.0 / 30)


def test_unknown_speed_is_rejected_by_the_parser():
    with pytest.raises(SystemExit):
        cli.parse_args(["--speed", "7"])


@pytest.mark.parametrize("kwargs", [{"target": 100}, {"target": 4}, {"fps": 0}, {"animation_ms": 0}])
def test_invalid_settings_raise(kwargs):
    with pytest.raises(ValueError):
        Settings(**kwargs)


def test_invalid_target_exits_with_usage_error(capsys):
    assert cli.main(["--target", "1000"]) == 2
    assert "target" in capsys.readouterr().err


def test_print_mode_shows_a_seeded_board(capsys):
    assert cli.main(["--print", "--seed", "4"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 4
    cells = "".join(lines).split()
    assert len([c for c in cells if c != "."]) == 2


def test_non_terminal_output_is_an_error(monkeypatch, capsys):
    class NoTty:
        is_a_tty = False

    monkeypatch.setattr(cli, "Terminal", NoTty)
    assert cli.main([]) == 1
    assert "not a terminal" in capsys.readouterr().err
