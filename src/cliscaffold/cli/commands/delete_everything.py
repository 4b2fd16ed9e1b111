# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Remove every file and folder the CLI persists."""

from __future__ import annotations

import shutil
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from ..protocols import ExitCode, FlagValues
from ..runtime import RuntimeContext, get_config_directory


@dataclass(frozen=True, slots=True)
class RemovalTarget:
    """Path scheduled for removal and whether it may be a directory tree."""

    path: Path
    recursive: bool = False


@dataclass(slots=True)
class DeleteEverythingCommand:
    """Handle ``delete-everything``.

    Only the application's own config directory is removed recursively. The
    config file and log file come from user input, so they are removed only
    when they are regular files or symlinks.
    """

    runtime: RuntimeContext

    def targets(self) -> list[RemovalTarget]:
        """Return the config directory, config file and log file, deduplicated."""

        settings = self.runtime.settings
        candidates = [
            RemovalTarget(get_config_directory(self.runtime.app_name), recursive=True),
            RemovalTarget(settings.config_path),
        ]
        if settings.log_file is not None:
            candidates.append(RemovalTarget(settings.log_file))
        unique: list[RemovalTarget] = []
        seen: set[Path] = set()
        for candidate in candidates:
            resolved = candidate.path.expanduser()
            if resolved in seen:
                continue
            seen.add(resolved)
            unique.append(RemovalTarget(resolved, candidate.recursive))
        return unique

    async def execute(self, args: Sequence[str], flags: FlagValues) -> ExitCode:
        logger = self.runtime.logger
        # Release the log file before it is removed.
        logger.close()
        removed = 0
        for target in self.targets():
            path = target.path
            if not path.exists() and not path.is_symlink():
                logger.debug(f"skip missing path={path}")
                continue
            if path.is_dir() and not path.is_symlink():
                if not target.recursive:
                    logger.warn(f"Skipping {path}: not a file")
                    continue
                shutil.rmtree(path)
            else:
                path.unlink()
            removed += 1
            logger.info(f"Removed {path}")
        if not removed:
            logger.info("Nothing to remove")
        return 0


__all__ = ["DeleteEverythingCommand", "RemovalTarget"]
