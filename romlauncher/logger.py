"""Loguru setup for the launcher: a coloured console sink and a rotating file."""

import sys
from pathlib import Path

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {thread.name} | {name}:{function}:{line} | {message}"

LOG_FILE_NAME = "launcher.log"


def setup_logger(log_dir: Path | None = None, level: str = "DEBUG") -> Path:
    """Replace loguru's handlers with the launcher's console and file sinks.

    Parameters
    ----------
    log_dir : Path, optional
        Where ``launcher.log`` goes.  Defaults to ``<data_dir>/logs``.
    level : str
        Console threshold.  The file always gets DEBUG and up, tagged
        with the thread name so exit watchers can be told apart.

    Returns the path of the log file.
    """
    if log_dir is None:
        from romlauncher.config import Config
        log_dir = Config().data_dir / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    logger.configure(handlers=[
        {"sink": sys.stderr, "level": level.upper(), "format": CONSOLE_FORMAT, "colorize": True},
        {
            "sink": str(log_file),
            "level": "DEBUG",
            "format": FILE_FORMAT,
            "rotation": "10 MB",
            "retention": "7 days",
            "encoding": "utf-8",
            "enqueue": True,
        },
    ])
    logger.debug("Logging to {}", log_file)
    return log_file
