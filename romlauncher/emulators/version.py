"""Ask an emulator binary for its version string."""

from __future__ import annotations

import os
import re
import subprocess

from loguru import logger

from romlauncher.models.emulator import EmulatorDefinition

VERSION_TIMEOUT = 3.0

UNKNOWN = "Unknown"
INSTALLED = "Installed"

_VERSION_RE = re.compile(r"(\d+\.\d+[\d.-]*)")


def parse_version_output(output: str) -> str:
    """Pick a version out of the first line of ``--version`` output."""
    lines = output.splitlines()
    first = lines[0].strip() if lines else ""
    match = _VERSION_RE.search(first)
    if match:
        return match.group(1)
    return first[:32] or UNKNOWN


def get_emulator_version(
    definition: EmulatorDefinition,
    path: str | None,
    timeout: float = VERSION_TIMEOUT,
) -> str:
    """Return the installed version of *definition*.

    Some emulators open a window instead of printing a version; those are
    reported as merely ``"Installed"``.  Anything that does not answer
    within *timeout* seconds is killed and reported as ``"Unknown"``.
    """
    if path is None:
        return UNKNOWN
    if definition.skips_version_check or not definition.supports_version_flag:
        return INSTALLED

    try:
        # subprocess.run kills the child when the timeout expires.
        result = subprocess.run(
            [path, "--version"],
            cwd=os.path.dirname(path) or None,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        logger.warning("{} --version timed out after {}s", definition.name, timeout)
        return UNKNOWN
    except OSError as e:
        logger.debug("{} --version failed: {}", definition.name, e)
        return UNKNOWN

    if result.returncode != 0:
        return UNKNOWN
    output = result.stdout.decode("utf-8", errors="replace") if result.stdout else ""
    return parse_version_output(output)
