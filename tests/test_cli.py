import curses

import pytest

from ttrys import cli
from ttrys.game_state import GameSession


def test_no_arguments_required():
    args = cli.parse_args([])
    config = cli.build_config(args)
    assert config.seed is None
    assert config.max_lock_resets == 15


def test_overrides():
    args = cli.parse_args(
        ["--seed", "9", "--level", "4", "--lock-delay", "250", "--max-lock-resets", "-1", "--bag-size", "5"]
    )
    config = cli.build_config(args)
    assert config.seed == 9
    assert config.start_level == 4
    assert config.lock_delay_ms == 250
    assert config.max_lock_resets is None
    assert config.bag_size == 5


def test_invalid_config_exit_status(capsys):
    assert cli.main(["--bag-size", "9"]) == 2
    assert "bag_size" in capsys.readouterr().err


def test_normal_quit_exits_zero(monkeypatch, capsys):
    def fake_wrapper(func, config):
        session = GameSession(config)
        session.quit()
        return session

    monkeypatch.setattr(curses, "wrapper", fake_wrapper)
    assert cli.main(["--seed", "1"]) == 0
    assert "Game over!" in capsys.readouterr().out


def test_terminal_failure_exits_one(monkeypatch, tmp_path):
    def broken_wrapper(func, config):
        raise curses.error("no terminal")

    monkeypatch.setattr(curses, "wrapper", broken_wrapper)
    log_file = tmp_path / "ttrys.log"
    assert cli.main(["--log-file", str(log_file)]) == 1
