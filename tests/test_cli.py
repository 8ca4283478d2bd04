from __future__ import annotations

import pytest
from loguru import logger

import main
from romlauncher.config import Config


@pytest.fixture
def data_dir(tmp_path):
    Config.reset()
    yield tmp_path / "data"
    logger.remove()
    Config.reset()


def test_bios_command(data_dir, capsys):
    assert main.main(["--data-dir", str(data_dir), "bios"]) == 0
    out = capsys.readouterr().out
    assert "xbox-mcpx" in out
    assert "required" in out


def test_scan_then_list_games(data_dir, tmp_path, capsys):
    roms = tmp_path / "roms"
    roms.mkdir()
    (roms / "Metroid.nes").write_bytes(b"")

    assert main.main(["--data-dir", str(data_dir), "scan", str(roms)]) == 0
    assert "1 new game(s)" in capsys.readouterr().out

    assert main.main(["--data-dir", str(data_dir), "games"]) == 0
    assert "Metroid" in capsys.readouterr().out


def test_scan_without_folders_fails(data_dir, capsys):
    assert main.main(["--data-dir", str(data_dir), "scan"]) == 1


def test_launch_unknown_game_reports_error(data_dir, capsys):
    assert main.main(["--data-dir", str(data_dir), "launch", "nosuch"]) == 1
    assert "Game not found: nosuch" in capsys.readouterr().err


def test_version_of_unknown_emulator(data_dir, capsys):
    assert main.main(["--data-dir", str(data_dir), "version", "nosuch"]) == 1


def test_command_is_required(data_dir):
    with pytest.raises(SystemExit):
        main.main([])
