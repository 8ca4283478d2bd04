from __future__ import annotations

import subprocess

from romlauncher.emulators import version
from romlauncher.emulators.catalog import get_definition
from romlauncher.emulators.version import INSTALLED, UNKNOWN, get_emulator_version, parse_version_output


class _Result:
    def __init__(self, stdout: bytes, returncode: int = 0) -> None:
        self.stdout = stdout
        self.returncode = returncode


def test_parse_version_output():
    assert parse_version_output("RetroArch 1.19.1 (Git 1a2b3c)\nmore") == "1.19.1"
    assert parse_version_output("Dolphin 5.0-21088") == "5.0-21088"
    assert parse_version_output("pcsx2 nightly") == "pcsx2 nightly"
    assert parse_version_output("") == UNKNOWN


def test_version_from_binary(monkeypatch):
    calls = []

    def fake_run(command, **kwargs):
        calls.append((command, kwargs))
        return _Result(b"PPSSPP v1.17.1\n")

    monkeypatch.setattr(version.subprocess, "run", fake_run)

    assert get_emulator_version(get_definition("ppsspp"), "/usr/bin/ppsspp") == "1.17.1"
    assert calls[0][0] == ["/usr/bin/ppsspp", "--version"]
    assert calls[0][1]["timeout"] == version.VERSION_TIMEOUT


def test_version_timeout_is_unknown(monkeypatch):
    def fake_run(command, **kwargs):
        raise subprocess.TimeoutExpired(command, kwargs["timeout"])

    monkeypatch.setattr(version.subprocess, "run", fake_run)
    assert get_emulator_version(get_definition("ppsspp"), "/usr/bin/ppsspp") == UNKNOWN


def test_version_nonzero_exit_is_unknown(monkeypatch):
    monkeypatch.setattr(version.subprocess, "run", lambda command, **kwargs: _Result(b"usage", 1))
    assert get_emulator_version(get_definition("ppsspp"), "/usr/bin/ppsspp") == UNKNOWN


def test_version_spawn_error_is_unknown(monkeypatch):
    def fake_run(command, **kwargs):
        raise FileNotFoundError(command[0])

    monkeypatch.setattr(version.subprocess, "run", fake_run)
    assert get_emulator_version(get_definition("ppsspp"), "/usr/bin/ppsspp") == UNKNOWN


def test_gui_only_emulators_are_not_probed(monkeypatch):
    def fake_run(command, **kwargs):
        raise AssertionError("should not run")

    monkeypatch.setattr(version.subprocess, "run", fake_run)
    assert get_emulator_version(get_definition("xemu"), "/usr/bin/xemu") == INSTALLED
    assert get_emulator_version(get_definition("xenia"), "C:/Xenia/xenia.exe") == INSTALLED


def test_not_installed_is_unknown():
    assert get_emulator_version(get_definition("ppsspp"), None) == UNKNOWN
