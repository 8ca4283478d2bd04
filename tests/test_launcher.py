from __future__ import annotations

import subprocess

import pytest

from romlauncher.core.events import SESSION_ENDED
from romlauncher.errors import GameNotFound, SpawnFailure
from romlauncher.launch import launcher as launcher_module
from romlauncher.models.session import SessionSource, SessionState


def test_launch_spawns_detached_and_returns_running_handle(launch_env, make_game, popen, sessions):
    launch_env.add_emulator("alpha", ("snes",))
    game = make_game("zelda", "snes")

    handle = launch_env.launcher.launch("zelda")

    assert handle.state == SessionState.RUNNING
    assert handle.pid == 4000
    assert sessions.is_active("zelda")

    command, kwargs = popen.calls[0]
    assert command == [launch_env.exe_path("alpha"), game.path]
    assert kwargs["cwd"] == str(launch_env.exe_path("alpha")).rsplit("/", 1)[0]
    assert kwargs["stdin"] == subprocess.DEVNULL
    assert kwargs["stdout"] == subprocess.DEVNULL
    assert kwargs["stderr"] == subprocess.DEVNULL
    assert kwargs["start_new_session"] is True
    assert kwargs["env"] is not None

    popen.processes[0].exit()
    assert handle.wait(5)


def test_exit_credits_play_time_and_emits_event(launch_env, make_game, popen, library, events, clock):
    launch_env.add_emulator("alpha", ("snes",))
    make_game("zelda", "snes")
    received = []
    events.subscribe(SESSION_ENDED, received.append)

    handle = launch_env.launcher.launch("zelda")
    clock.advance(125)
    popen.processes[0].exit()

    assert handle.wait(5)
    assert handle.state == SessionState.ENDED
    assert handle.duration_minutes == 2
    assert library.get_game("zelda").play_time == 2
    assert len(received) == 1
    assert received[0].game_id == "zelda"
    assert received[0].duration_minutes == 2
    assert received[0].source == SessionSource.EXTERNAL


def test_two_sequential_sessions_add_up(launch_env, make_game, popen, library, events, clock):
    launch_env.add_emulator("alpha", ("snes",))
    make_game("zelda", "snes")
    received = []
    events.subscribe(SESSION_ENDED, received.append)

    for index in range(2):
        handle = launch_env.launcher.launch("zelda")
        clock.advance(60)
        popen.processes[index].exit()
        assert handle.wait(5)

    assert library.get_game("zelda").play_time == 2
    assert [e.duration_minutes for e in received] == [1, 1]


def test_launch_records_last_played(launch_env, make_game, popen, library):
    launch_env.add_emulator("alpha", ("snes",))
    make_game("zelda", "snes")

    handle = launch_env.launcher.launch("zelda")
    assert library.get_game("zelda").last_played is not None

    popen.processes[0].exit()
    handle.wait(5)


def test_unknown_game(launch_env, popen):
    launch_env.add_emulator("alpha", ("snes",))
    with pytest.raises(GameNotFound):
        launch_env.launcher.launch("nosuch")
    assert popen.calls == []


def test_spawn_failure_leaves_no_session(launch_env, make_game, popen, library, sessions, events):
    launch_env.add_emulator("alpha", ("snes",))
    make_game("zelda", "snes")
    popen.error = FileNotFoundError(2, "No such file or directory")
    received = []
    events.subscribe(SESSION_ENDED, received.append)

    with pytest.raises(SpawnFailure) as exc:
        launch_env.launcher.launch("zelda")

    assert isinstance(exc.value.os_error, FileNotFoundError)
    assert not sessions.is_active("zelda")
    assert library.get_game("zelda").play_time == 0
    assert library.get_game("zelda").last_played is None
    assert received == []


def test_explicit_emulator_is_passed_through(launch_env, make_game, popen):
    launch_env.add_emulator("alpha", ("snes",))
    launch_env.add_emulator("beta", ("snes",), launch_args="fullscreen")
    game = make_game("zelda", "snes")

    handle = launch_env.launcher.launch("zelda", emulator_id="beta")

    assert popen.calls[0][0] == [launch_env.exe_path("beta"), "--fullscreen", game.path]
    popen.processes[0].exit()
    handle.wait(5)


def test_session_ends_once_even_if_finished_twice(launch_env, make_game, popen, library, events, clock):
    launch_env.add_emulator("alpha", ("snes",))
    make_game("zelda", "snes")
    received = []
    events.subscribe(SESSION_ENDED, received.append)

    handle = launch_env.launcher.launch("zelda")
    clock.advance(120)
    popen.processes[0].exit()
    assert handle.wait(5)

    launch_env.launcher._finish(handle)
    assert library.get_game("zelda").play_time == 2
    assert len(received) == 1


def test_session_ends_once_when_exit_code_is_lost(launch_env, make_game, popen, library, events, clock):
    launch_env.add_emulator("alpha", ("snes",))
    make_game("zelda", "snes")
    received = []
    events.subscribe(SESSION_ENDED, received.append)

    handle = launch_env.launcher.launch("zelda")
    clock.advance(180)
    popen.processes[0].lose(ChildProcessError("no child processes"))

    assert handle.wait(5)
    assert handle.ended
    assert handle.returncode is None
    assert handle.duration_minutes == 3
    assert library.get_game("zelda").play_time == 3
    assert len(received) == 1

    launch_env.launcher._finish(handle)
    assert len(received) == 1


def test_overlapping_launches_of_one_game(launch_env, make_game, popen, library, sessions, events, clock):
    launch_env.add_emulator("alpha", ("snes",))
    make_game("zelda", "snes")
    received = []
    events.subscribe(SESSION_ENDED, received.append)

    first = launch_env.launcher.launch("zelda")
    clock.advance(600)
    second = launch_env.launcher.launch("zelda")

    clock.advance(60)
    popen.processes[0].exit()
    assert first.wait(5)
    assert first.duration_minutes == 1
    assert not sessions.is_active("zelda")

    clock.advance(120)
    popen.processes[1].exit()
    assert second.wait(5)
    assert second.duration_minutes == 3

    assert [e.duration_minutes for e in received] == [1, 3]
    assert library.get_game("zelda").play_time == 4


def test_open_emulator(launch_env, popen):
    launch_env.add_emulator("alpha", ("snes",))

    assert launch_env.launcher.open_emulator("alpha")
    assert popen.calls[0][0] == [launch_env.exe_path("alpha")]
    assert not launch_env.launcher.open_emulator("nosuch")


def test_detach_kwargs_posix(monkeypatch):
    monkeypatch.setattr(launcher_module.os, "name", "posix")
    assert launcher_module._detach_kwargs() == {"start_new_session": True}


def test_detach_kwargs_windows(monkeypatch):
    monkeypatch.setattr(launcher_module.os, "name", "nt")
    flags = launcher_module._detach_kwargs()["creationflags"]
    assert flags & 0x00000008
    assert flags & 0x00000200
