from __future__ import annotations

import os
import stat
import threading
from pathlib import Path

import pytest

from romlauncher.config import Config
from romlauncher.core.events import EventBus
from romlauncher.core.sessions import SessionTracker
from romlauncher.emulators.locator import BinaryLocator
from romlauncher.emulators.registry import EmulatorRegistry
from romlauncher.emulators.selection import EmulatorSelector
from romlauncher.launch.dolphin_config import DolphinConfigurator
from romlauncher.launch.launcher import GameLauncher
from romlauncher.launch.preconditions import PreconditionValidator
from romlauncher.library import Library
from romlauncher.models.emulator import EmulatorDefinition
from romlauncher.models.game import GameRecord


class ManualClock:
    """Wall clock that only moves when told to."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.value = start

    def __call__(self) -> float:
        return self.value

    def advance(self, seconds: float) -> None:
        self.value += seconds


class FakeProcess:
    """Stands in for a spawned emulator until the test calls ``exit``."""

    def __init__(self, pid: int) -> None:
        self.pid = pid
        self.returncode: int | None = None
        self._error: Exception | None = None
        self._exited = threading.Event()

    def exit(self, code: int = 0) -> None:
        self.returncode = code
        self._exited.set()

    def lose(self, error: Exception) -> None:
        """Make the pending ``wait`` raise instead of reporting an exit code."""
        self._error = error
        self._exited.set()

    def wait(self, timeout: float | None = None) -> int | None:
        self._exited.wait(timeout)
        if self._error is not None:
            raise self._error
        return self.returncode


class FakePopen:
    """Records every spawn; set ``error`` to make the next spawn fail."""

    def __init__(self) -> None:
        self.calls: list[tuple[list[str], dict]] = []
        self.processes: list[FakeProcess] = []
        self.error: OSError | None = None

    def __call__(self, command, **kwargs):
        if self.error is not None:
            raise self.error
        self.calls.append((list(command), kwargs))
        process = FakeProcess(pid=4000 + len(self.processes))
        self.processes.append(process)
        return process


def make_executable(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("#!/bin/sh\n", encoding="utf-8")
    path.chmod(path.stat().st_mode | stat.S_IXUSR)
    return path


def make_definition(
    emulator_id: str,
    platforms: tuple[str, ...],
    search_dir: Path,
    launch_args: str = "rom_only",
) -> EmulatorDefinition:
    """A linux-only catalog entry searched for in *search_dir*."""
    return EmulatorDefinition(
        id=emulator_id,
        name=emulator_id.capitalize(),
        executables={"linux": emulator_id, "windows": f"{emulator_id}.exe"},
        platforms=platforms,
        default_paths={"linux": (str(search_dir),)},
        launch_args=launch_args,
    )


@pytest.fixture
def config(tmp_path):
    Config.reset()
    cfg = Config(data_dir=tmp_path / "data")
    yield cfg
    Config.reset()


@pytest.fixture
def library(tmp_path):
    return Library(tmp_path / "data" / "library.json")


@pytest.fixture
def events():
    return EventBus()


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def sessions(library, events, clock):
    return SessionTracker(library, events, clock=clock)


@pytest.fixture
def emu_dir(tmp_path):
    path = tmp_path / "emulators"
    path.mkdir()
    return path


@pytest.fixture
def rom_dir(tmp_path):
    path = tmp_path / "roms"
    path.mkdir()
    return path


@pytest.fixture
def popen():
    return FakePopen()


@pytest.fixture
def make_game(library, rom_dir):
    """Add a game whose ROM file exists on disk."""

    def _make(game_id: str, platform: str, filename: str | None = None, **fields) -> GameRecord:
        rom = rom_dir / (filename or f"{game_id}.rom")
        rom.write_bytes(b"\0" * 16)
        game = GameRecord(id=game_id, title=game_id.title(), platform=platform, path=str(rom), **fields)
        return library.add_game(game)

    return _make


@pytest.fixture
def launch_env(tmp_path, config, library, sessions, emu_dir, popen):
    """Build a ``GameLauncher`` over a private registry of fake emulators."""

    class LaunchEnv:
        def __init__(self) -> None:
            self.registry = EmulatorRegistry()
            self.locator = BinaryLocator(config, os_key="linux", environ={}, home=tmp_path)
            self.selector = EmulatorSelector(self.registry, self.locator, config)
            self.dolphin = DolphinConfigurator(tmp_path / "dolphin", os_key="linux")
            self.validator = PreconditionValidator(
                config, dolphin=self.dolphin, appdata_dir=tmp_path / "appdata",
            )
            self.launcher = GameLauncher(
                library, config, self.selector, self.validator, sessions,
                popen=popen, os_key="linux",
            )

        def add_emulator(self, emulator_id: str, platforms: tuple[str, ...], launch_args: str = "rom_only",
                         installed: bool = True) -> EmulatorDefinition:
            definition = make_definition(emulator_id, platforms, emu_dir / emulator_id, launch_args)
            self.registry.register(definition)
            if installed:
                make_executable(emu_dir / emulator_id / emulator_id)
            return definition

        def exe_path(self, emulator_id: str) -> str:
            return os.path.join(str(emu_dir / emulator_id), emulator_id)

    return LaunchEnv()
