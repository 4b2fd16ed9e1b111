# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Protocols describing the handler surface invoked by the registry."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from .runtime import RuntimeContext

ExitCode = int | None
FlagValues = Mapping[str, Any]


@runtime_checkable
class CommandHandler(Protocol):
    """Unit of work executed once a command has been matched."""

    async def execute(self, args: Sequence[str], flags: FlagValues) -> ExitCode:
        """Run the command.

        Args:
            args: Positional tokens following the command name.
            flags: Parsed flag values keyed by destination name.

        Returns:
            ExitCode: Process exit status; ``None`` means success.
        """


HandlerFactory = Callable[["RuntimeContext"], CommandHandler]
InlineCommand = Callable[[Sequence[str], FlagValues], ExitCode | Awaitable[ExitCode]]


@dataclass(frozen=True, slots=True)
class ParsedArgs:
    """Arguments handed to a handler after parsing.

    Attributes:
        command_path: Names from the root command down to the matched one.
        args: Positional tokens after the matched command name.
        flags: Flag values, global flags merged across the command path.
    """

    command_path: tuple[str, ...]
    args: tuple[str, ...] = ()
    flags: Mapping[str, Any] = field(default_factory=dict)

    @property
    def command(self) -> str:
        """Return the name of the matched command."""

        return self.command_path[-1] if self.command_path else ""


__all__ = [
    "CommandHandler",
    "ExitCode",
    "FlagValues",
    "HandlerFactory",
    "InlineCommand",
    "ParsedArgs",
]
