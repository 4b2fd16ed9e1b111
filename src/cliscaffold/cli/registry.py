# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Command registry: merges declarations, builds the parser tree and dispatches."""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, TypeVar

import click
import typer
from click.core import Context, ParameterSource

from .. import __version__
from ..config.schema import DEFAULT_CONFIG_SCHEMA, ConfigSchemaEntry, validate_schema
from ..errors import CLIError
from ..logging import CLILogger, build_cli_logger
from ..runtime.console import detect_tty
from .defaults import DEFAULT_COMMANDS, DEFAULT_GLOBAL_FLAGS
from .protocols import ExitCode, ParsedArgs
from .runtime import RuntimeContext, build_runtime_context, resolve_colors
from .spec import CommandSpec, OptionSpec, OptionType, option_dest
from .typer_ext import (
    MARKUP_MODE,
    POSITIONAL_DEST,
    ScaffoldCommand,
    ScaffoldGroup,
    build_option,
    build_positional,
    build_version_option,
    show_help,
)

RegistryT = TypeVar("RegistryT", bound="CLIRegistry")

ROOT_USAGE = "command [flags] [options] [arguments]"
FAILURE_EXIT_CODE = 1
_DEFAULT_SOURCES = (ParameterSource.DEFAULT, ParameterSource.DEFAULT_MAP, None)


@dataclass(frozen=True, slots=True)
class _CommandCallback:
    """Click callback bound to one registered command."""

    registry: CLIRegistry
    path: tuple[str, ...]
    spec: CommandSpec

    def __call__(self, **params: Any) -> int | None:
        ctx = click.get_current_context()
        if isinstance(ctx.command, click.Group) and ctx.invoked_subcommand is not None:
            return None
        args = tuple(params.get(POSITIONAL_DEST) or ())
        if len(args) < self.spec.demand:
            ctx.fail(f"Not enough non-option arguments: got {len(args)}, need at least {self.spec.demand}")
        parsed = ParsedArgs(
            command_path=self.path,
            args=args,
            flags=self.registry.collect_flags(ctx),
        )
        return self.registry.dispatch(self.spec, parsed)


@dataclass(frozen=True, slots=True)
class _VersionCallback:
    """Eager ``--version`` callback printing the registry name and version."""

    registry: CLIRegistry

    def __call__(self, ctx: Context, _param: click.Parameter, value: bool) -> None:
        if not value or ctx.resilient_parsing:
            return
        typer.echo(f"{self.registry.name} version {self.registry.version}")
        ctx.exit()


def _root_callback(**_params: Any) -> int:
    ctx = click.get_current_context()
    if ctx.invoked_subcommand is None:
        show_help(ctx)
    return 0


async def _await_result(result: Awaitable[ExitCode]) -> ExitCode:
    return await result


def _fallback_logger(flags: Mapping[str, Any]) -> CLILogger:
    """Return a console logger for failures raised before a runtime exists."""

    colorize = resolve_colors(is_tty=detect_tty(), ansi=flags.get("ansi"), stored_colors=True)
    return build_cli_logger(colorize=colorize)


def _exit_code(result: object) -> int:
    if result is None:
        return 0
    if isinstance(result, int):
        return result
    raise CLIError(f"Command returned a non-integer exit code: {result!r}")


class CLIRegistry:
    """Own the command catalog, config schema and global flags of one CLI.

    Callers layer their own declarations on top of the built-in ``config``
    and ``delete-everything`` commands, the default config schema and the
    default global flags, then call :meth:`run`.
    """

    def __init__(self, name: str, banner: str = "", *, version: str | None = None) -> None:
        """Create a registry seeded with the built-in declarations.

        Args:
            name: Application name used for the config path and help output.
            banner: Text printed above the root usage line.
            version: Version reported by ``--version``.
        """

        self.name = name
        self.banner = banner
        self.version = version or __version__
        self.commands: dict[str, CommandSpec] = dict(DEFAULT_COMMANDS)
        self.config: dict[str, ConfigSchemaEntry] = dict(DEFAULT_CONFIG_SCHEMA)
        self.global_flags: dict[str, OptionSpec] = dict(DEFAULT_GLOBAL_FLAGS)

    def initialize(
        self: RegistryT,
        commands: Mapping[str, CommandSpec] | None = None,
        config: Mapping[str, ConfigSchemaEntry] | None = None,
        global_flags: Mapping[str, OptionSpec] | None = None,
    ) -> RegistryT:
        """Shallow-merge overrides onto the current tables.

        An override replaces the whole entry stored under the same key; keys
        present on only one side are kept. Calling this again merges onto the
        already-merged tables.

        Args:
            commands: Commands to add or replace.
            config: Config schema entries to add or replace.
            global_flags: Global flags to add or replace.

        Returns:
            CLIRegistry: ``self`` for chaining.

        Raises:
            SchemaError: If a config override is filed under a key other than
                its own.
        """

        if config:
            validate_schema(config)
        self.commands = {**self.commands, **(commands or {})}
        self.config = {**self.config, **(config or {})}
        self.global_flags = {**self.global_flags, **(global_flags or {})}
        return self

    def set_banner(self: RegistryT, banner: str) -> RegistryT:
        """Set the banner printed above the root usage line."""

        self.banner = banner
        return self

    def set_name(self: RegistryT, name: str) -> RegistryT:
        """Set the application name."""

        self.name = name
        return self

    def set_version(self: RegistryT, version: str) -> RegistryT:
        """Set the version reported by ``--version``."""

        self.version = version
        return self

    # Tree construction -------------------------------------------------

    def register_tree(
        self,
        commands: Mapping[str, CommandSpec],
        parser_root: click.Group,
        parent_path: tuple[str, ...] = (),
    ) -> click.Group:
        """Register ``commands`` on ``parser_root`` in insertion order.

        Commands declaring nested ``commands`` become groups and their
        children are registered on them recursively.

        Args:
            commands: Command declarations keyed by name.
            parser_root: Group receiving the commands.
            parent_path: Names leading to ``parser_root``.

        Returns:
            click.Group: ``parser_root``.
        """

        for name, spec in commands.items():
            path = (*parent_path, name)
            params = self._command_params(spec)
            callback = _CommandCallback(self, path, spec)
            command: click.Command
            if spec.commands:
                group = ScaffoldGroup(
                    name=name,
                    help=spec.desc,
                    params=params,
                    callback=callback,
                    invoke_without_command=True,
                    rich_markup_mode=MARKUP_MODE,
                )
                command = self.register_tree(spec.commands, group, path)
            else:
                command = ScaffoldCommand(
                    name,
                    help=spec.desc,
                    params=[*params, build_positional(spec.usage)],
                    callback=callback,
                    options_metavar="" if spec.usage else "[OPTIONS]",
                    rich_markup_mode=MARKUP_MODE,
                )
            parser_root.add_command(command, name)
        return parser_root

    def _command_params(self, spec: CommandSpec) -> list[click.Parameter]:
        params: list[click.Parameter] = [build_option(name, option) for name, option in spec.options.items()]
        taken = {option_dest(name, option) for name, option in spec.options.items()}
        for name, option in self.global_flags.items():
            if option.is_global and option_dest(name, option) not in taken:
                params.append(build_option(name, option))
        return params

    def build_app(self) -> ScaffoldGroup:
        """Return the root group holding the full command tree."""

        root = ScaffoldGroup(
            name=self.name,
            help=self._root_help(),
            params=[
                build_version_option(_VersionCallback(self)),
                *(build_option(name, option) for name, option in self.global_flags.items()),
            ],
            callback=_root_callback,
            invoke_without_command=True,
            options_metavar="",
            subcommand_metavar=ROOT_USAGE,
            context_settings={"help_option_names": ["-h", "--help"]},
            rich_markup_mode=MARKUP_MODE,
            on_failure=self.fail,
        )
        self.register_tree(self.commands, root)
        return root

    def _root_help(self) -> str:
        lines = [f"[cyan]{self.banner}[/cyan]"] if self.banner else []
        lines.append(f"[cyan]{self.name}[/cyan] version [magenta]{self.version}[/magenta]")
        return "\n\n".join(lines)

    # Invocation --------------------------------------------------------

    def run(self, argv: Sequence[str] | None = None, *, standalone_mode: bool = True) -> int:
        """Parse ``argv`` (process arguments by default) and run the command.

        Args:
            argv: Arguments excluding the program name.
            standalone_mode: Exit the process when ``True``; return the exit
                status otherwise.

        Returns:
            int: Exit status, only when ``standalone_mode`` is ``False``.
        """

        app = self.build_app()
        return app.main(
            args=list(argv) if argv is not None else None,
            prog_name=self.name,
            standalone_mode=standalone_mode,
        )

    def fail(self, error: click.ClickException) -> int:
        """Show help for the failing command, log ``error`` and return ``1``."""

        ctx = getattr(error, "ctx", None)
        show_help(ctx)
        flags = self.collect_flags(ctx) if ctx is not None else {}
        _fallback_logger(flags).error(error.format_message())
        return FAILURE_EXIT_CODE

    def collect_flags(self, ctx: Context) -> dict[str, Any]:
        """Merge parsed parameters from the root context down to ``ctx``.

        Global flags may be given before or after a command name. Counts are
        summed across levels; for other flags the deepest explicitly supplied
        value wins.

        Args:
            ctx: Context of the matched command.

        Returns:
            dict[str, Any]: Flag values keyed by destination name.
        """

        counts = {
            option_dest(name, option)
            for name, option in self.global_flags.items()
            if option.type is OptionType.COUNT
        }
        chain: list[Context] = []
        current: Context | None = ctx
        while current is not None:
            chain.append(current)
            current = current.parent
        flags: dict[str, Any] = {}
        for level in reversed(chain):
            for key, value in level.params.items():
                if key == POSITIONAL_DEST:
                    continue
                if key in counts and key in flags:
                    flags[key] = int(flags[key] or 0) + int(value or 0)
                elif key not in flags or level.get_parameter_source(key) not in _DEFAULT_SOURCES:
                    flags[key] = value
        return flags

    def dispatch(self, command: CommandSpec, parsed: ParsedArgs) -> int:
        """Resolve runtime settings and run the handler bound to ``command``.

        Args:
            command: Matched command declaration.
            parsed: Positional arguments and merged flags.

        Returns:
            int: Exit status for the process.
        """

        try:
            runtime = build_runtime_context(
                app_name=self.name,
                version=self.version,
                schema=self.config,
                flags=parsed.flags,
            )
        except CLIError as exc:
            _fallback_logger(parsed.flags).error(str(exc))
            return exc.exit_code

        try:
            runtime.logger.debug(
                f"dispatch command={' '.join(parsed.command_path)} args={list(parsed.args)} "
                f"verbosity={runtime.settings.verbosity} config={runtime.settings.config_path}"
            )
            return self._invoke(command, parsed, runtime)
        except CLIError as exc:
            runtime.logger.error(str(exc))
            return exc.exit_code
        finally:
            runtime.close()

    def _invoke(self, command: CommandSpec, parsed: ParsedArgs, runtime: RuntimeContext) -> int:
        if not command.is_runnable:
            show_help(click.get_current_context(silent=True))
            return 0
        if command.handler is not None:
            handler = command.handler(runtime)
            return _exit_code(asyncio.run(_await_result(handler.execute(parsed.args, parsed.flags))))
        if command.func is not None:
            result = command.func(parsed.args, parsed.flags)
            if inspect.isawaitable(result):
                result = asyncio.run(_await_result(result))
            return _exit_code(result)
        return 0


__all__ = ["CLIRegistry", "FAILURE_EXIT_CODE", "ROOT_USAGE"]
