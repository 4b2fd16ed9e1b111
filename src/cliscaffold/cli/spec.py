# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Declarative descriptions of commands and their flags."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING

from ..errors import SchemaError

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from .protocols import HandlerFactory, InlineCommand

OptionDefault = bool | int | str | None


class OptionType(str, Enum):
    """Enumerate flag value types understood by the parser."""

    BOOLEAN = "boolean"
    STRING = "string"
    COUNT = "count"
    CHOICE = "choice"


@dataclass(frozen=True, slots=True)
class OptionSpec:
    """Describe one flag registered on a command.

    The mapping key under which an option is registered is its primary name:
    a single character becomes ``-x`` and anything longer becomes ``--name``.

    Attributes:
        desc: Help text rendered next to the flag.
        type: Value type of the flag.
        alias: Optional long name added next to the primary name.
        group: Help panel the flag is listed under.
        demand: ``True`` when the flag must be supplied.
        choices: Allowed values for ``choice`` flags.
        default: Value used when the flag is absent. A ``boolean`` flag with a
            ``None`` default is tri-state and also accepts ``--no-<name>``.
        is_global: ``True`` when the flag is accepted by every command in the
            tree, not only by the root.
    """

    desc: str = ""
    type: OptionType = OptionType.BOOLEAN
    alias: str | None = None
    group: str | None = None
    demand: bool = False
    choices: tuple[str, ...] = ()
    default: OptionDefault = None
    is_global: bool = False

    def __post_init__(self) -> None:
        if self.type is OptionType.CHOICE and not self.choices:
            raise SchemaError("choice options need at least one choice")
        if self.type is OptionType.COUNT and self.default is not None and not isinstance(self.default, int):
            raise SchemaError("count options need an integer default")

    @property
    def tri_state(self) -> bool:
        """Return ``True`` for boolean flags that stay unset when absent."""

        return self.type is OptionType.BOOLEAN and self.default is None


@dataclass(frozen=True, slots=True)
class CommandSpec:
    """Describe one subcommand and, optionally, its nested subcommands.

    Attributes:
        desc: One-line description shown in command listings.
        usage: Positional synopsis shown after the command name, such as
            ``[flags] [key] [value]``.
        options: Flags accepted by the command keyed by primary name.
        handler: Factory building a :class:`CommandHandler` for the invocation.
        func: Inline callable invoked with ``(args, flags)``.
        commands: Nested subcommands keyed by name.
        demand: Minimum number of positional arguments.
    """

    desc: str = ""
    usage: str = ""
    options: Mapping[str, OptionSpec] = field(default_factory=dict)
    handler: HandlerFactory | None = None
    func: InlineCommand | None = None
    commands: Mapping[str, CommandSpec] | None = None
    demand: int = 0

    def __post_init__(self) -> None:
        if self.handler is not None and self.func is not None:
            raise SchemaError("a command declares either a handler or a func, not both")
        if self.demand < 0:
            raise SchemaError("demand must not be negative")
        object.__setattr__(self, "options", MappingProxyType(dict(self.options)))
        if self.commands is not None:
            object.__setattr__(self, "commands", MappingProxyType(dict(self.commands)))

    @property
    def is_runnable(self) -> bool:
        """Return ``True`` when invoking the command runs a handler or func."""

        return self.handler is not None or self.func is not None


def option_declarations(name: str, option: OptionSpec) -> list[str]:
    """Return parser declarations for the flag registered under ``name``.

    Args:
        name: Primary name of the flag.
        option: Flag description.

    Returns:
        list[str]: Declarations such as ``["-r", "--reset"]`` or
        ``["--ansi/--no-ansi"]``.
    """

    names = [name] if option.alias is None else [name, option.alias]
    declarations = [f"-{item}" if len(item) == 1 else f"--{item}" for item in names]
    if option.tri_state:
        long_names = [item for item in names if len(item) > 1]
        if long_names:
            negated = f"--{long_names[0]}/--no-{long_names[0]}"
            declarations = [item for item in declarations if item != f"--{long_names[0]}"] + [negated]
    return declarations


def option_dest(name: str, option: OptionSpec) -> str:
    """Return the key under which the parsed value of a flag is exposed."""

    if option.alias is not None and len(option.alias) > 1:
        return option.alias.replace("-", "_")
    return name.replace("-", "_")


__all__ = [
    "CommandSpec",
    "OptionDefault",
    "OptionSpec",
    "OptionType",
    "option_declarations",
    "option_dest",
]
