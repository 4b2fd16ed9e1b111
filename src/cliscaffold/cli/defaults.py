# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Built-in command catalog and global flags."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Final

from .commands import ConfigCommand, DeleteEverythingCommand
from .spec import CommandSpec, OptionSpec, OptionType
from .typer_ext import GLOBAL_FLAGS_PANEL

FLAGS_PANEL: Final[str] = "Flags"

DEFAULT_COMMANDS: Final[Mapping[str, CommandSpec]] = MappingProxyType(
    {
        "config": CommandSpec(
            desc="Read, write, and reset config values",
            usage="[flags] [key] [value]",
            options={
                "r": OptionSpec(
                    desc="Reset the config option to its default value",
                    type=OptionType.BOOLEAN,
                    alias="reset",
                    group=FLAGS_PANEL,
                    default=False,
                ),
            },
            handler=ConfigCommand,
        ),
        "delete-everything": CommandSpec(
            desc="Remove all files and folders related to the CLI",
            handler=DeleteEverythingCommand,
        ),
    },
)

DEFAULT_GLOBAL_FLAGS: Final[Mapping[str, OptionSpec]] = MappingProxyType(
    {
        "v": OptionSpec(
            desc="Output verbosity (-v, -vv, -vvv)",
            type=OptionType.COUNT,
            alias="verbose",
            group=GLOBAL_FLAGS_PANEL,
            default=0,
            is_global=True,
        ),
        "q": OptionSpec(
            desc="Suppress all output",
            type=OptionType.BOOLEAN,
            alias="quiet",
            group=GLOBAL_FLAGS_PANEL,
            default=False,
            is_global=True,
        ),
        "ansi": OptionSpec(
            desc="Control color output",
            type=OptionType.BOOLEAN,
            group=GLOBAL_FLAGS_PANEL,
            is_global=True,
        ),
        "config": OptionSpec(
            desc="Specify location of config file",
            type=OptionType.STRING,
            group=GLOBAL_FLAGS_PANEL,
        ),
    },
)

__all__ = ["DEFAULT_COMMANDS", "DEFAULT_GLOBAL_FLAGS", "FLAGS_PANEL"]
