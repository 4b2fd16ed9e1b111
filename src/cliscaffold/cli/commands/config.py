# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Read, write and reset stored config values."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from ...errors import CLIError
from ..protocols import ExitCode, FlagValues
from ..runtime import RuntimeContext


@dataclass(slots=True)
class ConfigCommand:
    """Handle ``config [flags] [key] [value]``.

    With no key every setting is printed as JSON. A key alone prints its
    value, a key and a value store it, and ``--reset`` restores the default.
    """

    runtime: RuntimeContext

    async def execute(self, args: Sequence[str], flags: FlagValues) -> ExitCode:
        """Run the command.

        Args:
            args: ``[key]`` or ``[key, value]``.
            flags: Parsed flags; ``reset`` selects reset mode.

        Returns:
            ExitCode: ``0`` on success.

        Raises:
            CLIError: On unknown keys, invalid values or surplus arguments.
        """

        if len(args) > 2:
            raise CLIError(f"Expected at most a key and a value, got {len(args)} arguments")
        key = args[0] if args else None
        value = args[1] if len(args) > 1 else None
        store = self.runtime.config
        logger = self.runtime.logger
        logger.debug(f"config path={store.path}")

        if flags.get("reset"):
            if key is None:
                raise CLIError("A config key is required with --reset")
            if value is not None:
                raise CLIError("--reset does not take a value")
            default = store.reset(key)
            logger.info(f"Reset {key} to {store.entry(key).render(default)}")
            return 0

        if key is None:
            self.runtime.emit_json(store.as_dict())
            return 0

        if value is None:
            logger.echo(store.entry(key).render(store.get(key)))
            return 0

        stored = store.set(key, value)
        logger.info(f"Set {key} to {store.entry(key).render(stored)}")
        return 0


__all__ = ["ConfigCommand"]
