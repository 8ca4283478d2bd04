from __future__ import annotations

import os

import pytest

from romlauncher.core.events import EMBEDDED_SESSION_ENDED
from romlauncher.embedded.cores import CORE_DEFINITIONS, CoreManager
from romlauncher.embedded.session import EmbeddedSessionTracker
from romlauncher.errors import CoreNotInstalled, EmbeddedDisabled, GameNotFound, RomFileNotFound
from romlauncher.launch.player import MODE_EMBEDDED, MODE_EXTERNAL, Player
from romlauncher.models.core import InstalledCore
from romlauncher.models.session import SessionSource


@pytest.fixture
def cores(config):
    return CoreManager(config)


@pytest.fixture
def install_core(cores):
    def _install(core_id: str = "fceumm", platforms=("nes",), with_data: bool = True) -> InstalledCore:
        core_dir = cores.cores_dir / core_id
        core_dir.mkdir(parents=True, exist_ok=True)
        data_path = core_dir / f"{core_id}-wasm.data"
        if with_data:
            data_path.write_bytes(b"\0")
        core = InstalledCore(
            id=core_id, name=core_id, platforms=list(platforms),
            core_name=core_id, data_path=str(data_path),
        )
        cores.register_core(core)
        return core

    return _install


@pytest.fixture
def embedded(library, config, cores, sessions):
    return EmbeddedSessionTracker(library, config, cores, sessions)


def test_no_cores_installed(cores):
    assert cores.get_installed_cores() == []
    assert cores.get_core_for_platform("nes") is None
    assert not cores.can_play_embedded("nes")


def test_register_and_lookup(cores, install_core):
    install_core("genesis_plus_gx", ("genesis", "megadrive", "sms"))

    assert cores.get_core_for_platform("sms").id == "genesis_plus_gx"
    assert cores.get_core_paths("genesis").core_name == "genesis_plus_gx"
    assert cores.can_play_embedded("megadrive")
    assert not cores.can_play_embedded("snes")


def test_register_replaces_same_id(cores, install_core):
    install_core("fceumm", ("nes",))
    install_core("fceumm", ("nes", "famicom"))
    assert len(cores.get_installed_cores()) == 1
    assert cores.get_core_for_platform("famicom") is not None


def test_available_cores_marks_installed(cores, install_core):
    install_core("mgba", ("gba",))
    available = dict((d.id, installed) for d, installed in cores.get_available_cores())
    assert available["mgba"] is True
    assert available["snes9x"] is False
    assert len(available) == len(CORE_DEFINITIONS)


def test_delete_core(cores, install_core):
    install_core("fceumm", ("nes",))
    assert cores.delete_core("fceumm")
    assert not (cores.cores_dir / "fceumm").exists()
    assert cores.get_installed_cores() == []
    assert not cores.delete_core("fceumm")


def test_prefer_embedded_off_disables_cores(cores, install_core, config):
    install_core("fceumm", ("nes",))
    config.set("prefer_embedded", False)
    assert not cores.can_play_embedded("nes")


def test_check_can_play_reasons(embedded, install_core, config):
    assert not embedded.check_can_play("nes").can_play

    core = install_core("fceumm", ("nes",))
    capability = embedded.check_can_play("nes")
    assert capability.can_play and capability.core_name == "fceumm"

    os.remove(core.data_path)
    capability = embedded.check_can_play("nes")
    assert not capability.can_play
    assert "reinstall" in capability.reason

    config.set("prefer_embedded", False)
    assert "disabled" in embedded.check_can_play("nes").reason


def test_embedded_session_credits_reported_time(embedded, install_core, make_game, library, events):
    install_core("fceumm", ("nes",))
    make_game("mario", "nes")
    received = []
    events.subscribe(EMBEDDED_SESSION_ENDED, received.append)

    embedded.start_session("mario")
    assert library.get_game("mario").last_played is not None

    assert embedded.end_session("mario", elapsed_ms=125_000) == 2
    assert library.get_game("mario").play_time == 2
    assert received[0].source == SessionSource.EMBEDDED
    assert received[0].duration_minutes == 2


def test_embedded_session_uses_clock_without_report(embedded, install_core, make_game, library, clock):
    install_core("fceumm", ("nes",))
    make_game("mario", "nes")

    embedded.start_session("mario")
    clock.advance(240)
    assert embedded.end_session("mario") == 4


def test_end_session_never_started_is_harmless(embedded, make_game, library):
    make_game("mario", "nes")
    assert embedded.end_session("mario") == 0
    assert embedded.end_session("nosuch") == 0


def test_start_session_errors(embedded, install_core, make_game, library, config):
    with pytest.raises(GameNotFound):
        embedded.start_session("nosuch")

    make_game("zelda", "snes")
    with pytest.raises(CoreNotInstalled):
        embedded.start_session("zelda")

    install_core("fceumm", ("nes",))
    game = make_game("mario", "nes")
    library.update_game("mario", {"path": game.path + ".gone"})
    with pytest.raises(RomFileNotFound):
        embedded.start_session("mario")

    config.set("prefer_embedded", False)
    with pytest.raises(EmbeddedDisabled):
        embedded.start_session("mario")


def test_game_info_and_system(embedded, make_game):
    game = make_game("sonic", "genesis")

    assert embedded.get_game_info("sonic") == {"path": game.path, "platform": "genesis", "title": "Sonic"}
    assert embedded.get_rom_path("sonic") == game.path
    assert embedded.get_game_info("nosuch") is None
    assert embedded.get_system("genesis") == "segaMD"
    assert embedded.get_system("ps1") == "psx"
    assert embedded.get_system("snes") == "snes"
    assert embedded.get_system("wonderswan") == "wonderswan"


class CountingLibrary:
    def __init__(self, library) -> None:
        self._library = library
        self.lookups = []

    def get_game(self, game_id):
        self.lookups.append(game_id)
        return self._library.get_game(game_id)


class RecordingLauncher:
    def __init__(self) -> None:
        self.calls = []

    def launch(self, game_id, emulator_id=None):
        self.calls.append((game_id, emulator_id))
        return "handle"


@pytest.fixture
def player(library, cores, embedded):
    launcher = RecordingLauncher()
    return Player(library, cores, launcher, embedded), launcher


def test_player_prefers_embedded_core(player, install_core, make_game, sessions):
    play, launcher = player
    install_core("fceumm", ("nes",))
    make_game("mario", "nes")

    result = play.play("mario")

    assert result.mode == MODE_EMBEDDED
    assert result.system == "nes"
    assert launcher.calls == []
    assert sessions.is_active("mario")


def test_player_explicit_emulator_goes_external(player, install_core, make_game, sessions):
    play, launcher = player
    install_core("fceumm", ("nes",))
    make_game("mario", "nes")

    result = play.play("mario", "retroarch")

    assert result.mode == MODE_EXTERNAL
    assert result.handle == "handle"
    assert launcher.calls == [("mario", "retroarch")]
    assert not sessions.is_active("mario")


def test_player_preferred_emulator_goes_external(player, install_core, make_game):
    play, launcher = player
    install_core("fceumm", ("nes",))
    make_game("mario", "nes", preferred_emulator="retroarch")

    assert play.play("mario").mode == MODE_EXTERNAL
    assert launcher.calls == [("mario", None)]


def test_player_without_core_goes_external(player, make_game):
    play, launcher = player
    make_game("zelda", "snes")

    assert not play.play("zelda").embedded
    assert launcher.calls == [("zelda", None)]


def test_player_unknown_game(player):
    play, _ = player
    with pytest.raises(GameNotFound):
        play.play("nosuch")


def test_player_reads_the_game_once_before_embedding(player, install_core, make_game, library, monkeypatch):
    play, _ = player
    install_core("fceumm", ("nes",))
    make_game("mario", "nes")
    counting = CountingLibrary(library)
    monkeypatch.setattr(play, "_library", counting)

    assert play.play("mario").system == "nes"
    assert counting.lookups == ["mario"]


def test_player_unknown_game_with_explicit_emulator(player):
    play, launcher = player
    with pytest.raises(GameNotFound):
        play.play("nosuch", "retroarch")
    assert launcher.calls == []
