# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Typer/Click classes and parameter builders used to assemble the command tree."""

from __future__ import annotations

import sys
from collections.abc import Callable, Sequence
from difflib import get_close_matches
from typing import Any, Final

import click
import typer
from click.core import Context, ParameterSource
from typer.core import TyperArgument, TyperCommand, TyperGroup, TyperOption

from .spec import OptionSpec, OptionType, option_declarations, option_dest

MARKUP_MODE: Final = "rich"
GLOBAL_FLAGS_PANEL: Final[str] = "Global Flags"
POSITIONAL_DEST: Final[str] = "args"

FailureHandler = Callable[[click.ClickException], int]


def _unset_when_absent(ctx: Context, param: click.Parameter, value: Any) -> Any:
    # Tri-state flags read as None unless given on the command line.
    if param.name and ctx.get_parameter_source(param.name) in (ParameterSource.DEFAULT, None):
        return None
    return value


def _move_help_option(option: click.Option | None) -> click.Option | None:
    if option is not None:
        # Rich help groups parameters by this attribute.
        setattr(option, "rich_help_panel", GLOBAL_FLAGS_PANEL)
    return option


class ScaffoldCommand(TyperCommand):
    """Leaf command listing ``-h/--help`` with the global flags."""

    def get_help_option(self, ctx: Context) -> click.Option | None:
        """Return the help option, filed under the global flags panel."""

        return _move_help_option(super().get_help_option(ctx))


class ScaffoldGroup(TyperGroup):
    """Command group keeping registration order and suggesting near misses.

    The root group also owns failure handling: parse errors are routed to
    ``on_failure`` and every run ends with an explicit exit status.
    """

    def __init__(self, *, on_failure: FailureHandler | None = None, **attrs: Any) -> None:
        """Initialise the group.

        Args:
            on_failure: Callback invoked with parser errors; returns the exit code.
            **attrs: Keyword arguments forwarded to :class:`typer.core.TyperGroup`.
        """

        super().__init__(**attrs)
        self.on_failure = on_failure

    def get_help_option(self, ctx: Context) -> click.Option | None:
        """Return the help option, filed under the global flags panel."""

        return _move_help_option(super().get_help_option(ctx))

    def list_commands(self, ctx: Context) -> list[str]:
        """Return sub-command names in registration order."""

        return list(self.commands)

    def resolve_command(
        self,
        ctx: Context,
        args: list[str],
    ) -> tuple[str | None, click.Command | None, list[str]]:
        """Resolve the sub-command, appending suggestions for unknown names."""

        try:
            return super().resolve_command(ctx, args)
        except click.UsageError as exc:
            token = args[0] if args else ""
            matches = get_close_matches(token, self.list_commands(ctx), n=3, cutoff=0.6)
            if not matches or token in self.commands or "Did you mean" in exc.message:
                raise
            suggestion = " or ".join(repr(match) for match in matches)
            raise click.UsageError(f"{exc.message} Did you mean {suggestion}?", ctx) from exc

    def main(  # type: ignore[override]
        self,
        args: Sequence[str] | None = None,
        prog_name: str | None = None,
        complete_var: str | None = None,
        standalone_mode: bool = True,
        **extra: Any,
    ) -> Any:
        """Run the command tree and translate the outcome into an exit status.

        Args:
            args: Arguments to parse; ``sys.argv[1:]`` when ``None``.
            prog_name: Program name shown in usage output.
            complete_var: Shell completion environment variable name.
            standalone_mode: When ``True`` the process exits with the status,
                otherwise the status is returned.
            **extra: Extra keyword arguments forwarded to context creation.

        Returns:
            Any: The exit status when ``standalone_mode`` is ``False``.
        """

        try:
            result = super().main(
                args=args,
                prog_name=prog_name,
                complete_var=complete_var,
                standalone_mode=False,
                **extra,
            )
        except click.UsageError as exc:
            if self.on_failure is None:
                raise
            result = self.on_failure(exc)
        code = result if isinstance(result, int) else 0
        if standalone_mode:
            sys.exit(code)
        return code


def show_help(ctx: Context | None) -> None:
    """Print help for ``ctx``.

    Rich help renders straight to the console and returns an empty string;
    plain help is returned as text and echoed here.
    """

    if ctx is None:
        return
    text = ctx.get_help()
    if text:
        typer.echo(text)


def build_option(name: str, option: OptionSpec) -> TyperOption:
    """Translate an :class:`OptionSpec` into a Typer option.

    Args:
        name: Primary name the option is registered under.
        option: Declarative option description.

    Returns:
        TyperOption: Parameter ready to attach to a command.
    """

    decls = [option_dest(name, option), *option_declarations(name, option)]
    common: dict[str, Any] = {
        "param_decls": decls,
        "help": option.desc or None,
        "required": option.demand,
        "rich_help_panel": option.group,
    }
    if option.type is OptionType.COUNT:
        return TyperOption(count=True, default=option.default or 0, **common)
    if option.type is OptionType.BOOLEAN:
        if option.tri_state:
            has_secondary = any("/" in decl for decl in decls)
            return TyperOption(
                default=None,
                is_flag=None if has_secondary else True,
                callback=_unset_when_absent,
                **common,
            )
        return TyperOption(is_flag=True, default=bool(option.default), **common)
    if option.type is OptionType.CHOICE:
        return TyperOption(type=click.Choice(list(option.choices)), default=option.default, **common)
    return TyperOption(type=click.STRING, default=option.default, **common)


def build_positional(usage: str) -> TyperArgument:
    """Return the variadic argument collecting tokens after the command name."""

    return TyperArgument(
        param_decls=[POSITIONAL_DEST],
        nargs=-1,
        required=False,
        metavar=usage or None,
        help="Positional arguments passed to the command.",
    )


def build_version_option(callback: Callable[[Context, click.Parameter, bool], None]) -> TyperOption:
    """Return the eager ``-V/--version`` flag bound to ``callback``."""

    return TyperOption(
        param_decls=["version", "-V", "--version"],
        is_flag=True,
        default=False,
        expose_value=False,
        is_eager=True,
        callback=callback,
        help="Show version number",
        rich_help_panel=GLOBAL_FLAGS_PANEL,
    )


__all__ = [
    "GLOBAL_FLAGS_PANEL",
    "MARKUP_MODE",
    "POSITIONAL_DEST",
    "FailureHandler",
    "ScaffoldCommand",
    "ScaffoldGroup",
    "build_option",
    "build_positional",
    "build_version_option",
    "show_help",
]
