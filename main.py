"""ROM Launcher command-line entry point."""

import argparse
import sys
from pathlib import Path

from loguru import logger

from romlauncher.bios import check_bios_status
from romlauncher.config import Config
from romlauncher.core.events import EMBEDDED_SESSION_ENDED, SESSION_ENDED, EventBus
from romlauncher.core.sessions import SessionTracker
from romlauncher.embedded.cores import CoreManager
from romlauncher.embedded.session import EmbeddedSessionTracker
from romlauncher.emulators.locator import BinaryLocator
from romlauncher.emulators.registry import EmulatorRegistry
from romlauncher.emulators.selection import EmulatorSelector
from romlauncher.emulators.version import get_emulator_version
from romlauncher.errors import LaunchError
from romlauncher.launch.launcher import GameLauncher
from romlauncher.launch.player import Player
from romlauncher.launch.preconditions import PreconditionValidator
from romlauncher.library import Library
from romlauncher.logger import setup_logger


class Services:
    """Everything the commands need, wired once."""

    def __init__(self, config: Config) -> None:
        self.config = config
        self.events = EventBus()
        self.library = Library(config.library_path)
        self.registry = EmulatorRegistry.default()
        self.locator = BinaryLocator(config)
        self.selector = EmulatorSelector(self.registry, self.locator, config)
        self.sessions = SessionTracker(self.library, self.events)
        self.validator = PreconditionValidator(config)
        self.launcher = GameLauncher(
            self.library, config, self.selector, self.validator, self.sessions,
        )
        self.cores = CoreManager(config)
        self.embedded = EmbeddedSessionTracker(self.library, config, self.cores, self.sessions)
        self.player = Player(self.library, self.cores, self.launcher, self.embedded)


def _print_session_ended(event) -> None:
    print(f"{event.game_id}: played {event.duration_minutes} minute(s) ({event.source.value})")


def cmd_detect(services: Services, args: argparse.Namespace) -> int:
    for status in services.selector.detect_all():
        mark = "x" if status.installed else " "
        state = "" if status.enabled else " (disabled)"
        print(f"[{mark}] {status.id:<10} {status.name}{state}  {status.path or '-'}")
    return 0


def cmd_games(services: Services, args: argparse.Namespace) -> int:
    for game in services.library.get_games():
        print(f"{game.id}  {game.platform:<10} {game.play_time:>5} min  {game.title}")
    return 0


def cmd_scan(services: Services, args: argparse.Namespace) -> int:
    folders = args.folders or services.config.get("rom_folders") or []
    if not folders:
        print("No folders given and none configured.", file=sys.stderr)
        return 1
    added = services.library.scan_folders(folders)
    for game in added:
        print(f"+ {game.platform:<10} {game.title}")
    print(f"{len(added)} new game(s)")
    return 0


def cmd_launch(services: Services, args: argparse.Namespace) -> int:
    result = services.player.play(args.game_id, args.emulator)
    if result.embedded:
        print(f"Embedded session started for {args.game_id} (system {result.system})")
        return 0

    handle = result.handle
    print(f"Started {handle.emulator.name} (pid {handle.pid})")
    if not args.no_wait:
        handle.wait()
    return 0


def cmd_version(services: Services, args: argparse.Namespace) -> int:
    definition = services.registry.get(args.emulator_id)
    if definition is None:
        print(f"Unknown emulator: {args.emulator_id}", file=sys.stderr)
        return 1
    print(get_emulator_version(definition, services.locator.locate(definition)))
    return 0


def cmd_bios(services: Services, args: argparse.Namespace) -> int:
    for status in check_bios_status(services.config):
        mark = "x" if status.found else " "
        need = "required" if status.required else "optional"
        print(f"[{mark}] {status.id:<13} {status.name} ({need})  {status.path or '-'}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="romlauncher", description="Launch ROMs in emulators.")
    parser.add_argument("--data-dir", type=Path, help="override the data directory")
    parser.add_argument("--log-level", default="INFO", help="console log level")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("detect", help="list emulators and where they were found").set_defaults(func=cmd_detect)
    sub.add_parser("games", help="list the library").set_defaults(func=cmd_games)

    scan = sub.add_parser("scan", help="add ROMs from folders to the library")
    scan.add_argument("folders", nargs="*")
    scan.set_defaults(func=cmd_scan)

    launch = sub.add_parser("launch", help="play a game")
    launch.add_argument("game_id")
    launch.add_argument("--emulator", help="emulator id to use instead of the default")
    launch.add_argument("--no-wait", action="store_true", help="return once the emulator is started")
    launch.set_defaults(func=cmd_launch)

    version = sub.add_parser("version", help="print an emulator's version")
    version.add_argument("emulator_id")
    version.set_defaults(func=cmd_version)

    sub.add_parser("bios", help="show BIOS file status").set_defaults(func=cmd_bios)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    # ---- 1. Config ----
    config = Config(data_dir=args.data_dir)

    # ---- 2. Logger ----
    setup_logger(config.data_dir / "logs", level=args.log_level)
    logger.info("ROM Launcher starting…")

    # ---- 3. Services ----
    services = Services(config)
    services.events.subscribe(SESSION_ENDED, _print_session_ended)
    services.events.subscribe(EMBEDDED_SESSION_ENDED, _print_session_ended)

    # ---- 4. Command ----
    try:
        return args.func(services, args)
    except LaunchError as e:
        logger.error("{}", e)
        print(e, file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
