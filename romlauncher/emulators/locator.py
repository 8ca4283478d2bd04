"""Find an emulator's executable on this machine."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

from loguru import logger

from romlauncher.config import Config
from romlauncher.core.path_resolver import current_os_key, expand_search_path
from romlauncher.models.emulator import EmulatorDefinition


class BinaryLocator:
    """Resolves a catalog entry to an absolute executable path.

    Nothing is cached: the user may install, move or delete emulators
    between two launches and every call must see the current disk state.
    """

    def __init__(
        self,
        config: Config,
        os_key: str | None = None,
        environ: Mapping[str, str] | None = None,
        home: Path | str | None = None,
    ) -> None:
        self._cfg = config
        self._os_key = os_key or current_os_key()
        self._environ = environ
        self._home = home

    @property
    def os_key(self) -> str:
        return self._os_key

    def locate(self, definition: EmulatorDefinition) -> str | None:
        """Return the executable path for *definition*, or ``None``.

        Order: the user's custom path (when it still exists), then each
        candidate directory of the current OS in catalog order.
        """
        custom = self._cfg.get_emulator_path(definition.id)
        if custom:
            if os.path.exists(custom):
                return custom
            logger.warning(
                "Custom path for {} no longer exists ({}); searching default locations",
                definition.name, custom,
            )

        executable = definition.executable_for(self._os_key)
        for raw in definition.search_paths(self._os_key):
            expanded = expand_search_path(
                raw, self._os_key, environ=self._environ, home=self._home
            )
            if not expanded:
                continue
            candidate = os.path.join(expanded, executable)
            if os.path.isfile(candidate):
                logger.debug("Found {} at {}", definition.name, candidate)
                return candidate
            # Some configs store the executable itself as a "directory".
            if expanded.endswith(executable) and os.path.exists(expanded):
                logger.debug("Found {} at {}", definition.name, expanded)
                return expanded

        return None

    def is_installed(self, definition: EmulatorDefinition) -> bool:
        return self.locate(definition) is not None
