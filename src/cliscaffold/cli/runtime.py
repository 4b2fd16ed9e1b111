# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Per-invocation runtime settings resolved from flags and stored config."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final

import typer
from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn, TimeElapsedColumn

from ..config import ConfigSchema, ConfigStore, ConfigValue
from ..errors import ConfigValueError
from ..logging import CLILogger
from ..runtime.console import detect_tty, get_console_manager

VERBOSITY_BY_COUNT: Final[tuple[str, ...]] = ("info", "verbose", "debug", "silly")
QUIET_VERBOSITY: Final[str] = "error"


def resolve_verbosity(count: int | None, quiet: bool | None = False) -> str:
    """Map the ``-v`` count and ``--quiet`` flag to a console verbosity.

    Args:
        count: Number of ``-v`` occurrences; ``None`` counts as zero.
        quiet: ``True`` when ``-q/--quiet`` was supplied.

    Returns:
        str: ``error`` when quiet, otherwise ``info``, ``verbose``, ``debug``
        or ``silly`` for counts of 0, 1, 2 and 3 or more.
    """

    if quiet:
        return QUIET_VERBOSITY
    index = min(max(int(count or 0), 0), len(VERBOSITY_BY_COUNT) - 1)
    return VERBOSITY_BY_COUNT[index]


def get_config_directory(app_name: str) -> Path:
    """Return the platform configuration directory for ``app_name``."""

    return Path(typer.get_app_dir(app_name))


def resolve_config_path(app_name: str, explicit: str | Path | None = None) -> Path:
    """Return the config file used for this invocation.

    Args:
        app_name: Application name used for the default directory and file.
        explicit: Value of ``--config`` when supplied.

    Returns:
        Path: ``explicit`` unchanged, or ``<config dir>/<app_name>.ini``.
    """

    if explicit:
        return Path(explicit)
    return get_config_directory(app_name) / f"{app_name}.ini"


def resolve_colors(*, is_tty: bool, ansi: bool | None, stored_colors: bool) -> bool:
    """Decide whether colour output is enabled.

    An explicit ``--ansi``/``--no-ansi`` only applies on an interactive
    terminal. Otherwise colours are off when the ``cli.colors`` setting is
    false or stdout is not a terminal.

    Args:
        is_tty: Whether stdout is an interactive terminal.
        ansi: Explicit ``--ansi`` value, ``None`` when absent.
        stored_colors: Stored ``cli.colors`` value.

    Returns:
        bool: ``True`` when colour output is enabled.
    """

    if is_tty and ansi is not None:
        return bool(ansi)
    if not stored_colors or not is_tty:
        return False
    return True


@dataclass(frozen=True, slots=True)
class RuntimeSettings:
    """Verbosity, colour and logging settings resolved for one invocation."""

    verbosity: str
    colorize: bool
    timestamp: bool
    log_file: Path | None
    log_level: str
    config_path: Path


@dataclass(slots=True)
class RuntimeContext:
    """State handed to command handlers in place of process-wide globals.

    Attributes:
        app_name: Name of the running application.
        version: Version string reported by ``--version``.
        settings: Resolved runtime settings.
        config: Config store bound to :attr:`RuntimeSettings.config_path`.
        logger: Logger configured from :attr:`settings`.
    """

    app_name: str
    version: str
    settings: RuntimeSettings
    config: ConfigStore
    logger: CLILogger

    @property
    def console(self) -> Console:
        """Return the stdout console matching the resolved colour setting."""

        return get_console_manager().get(color=self.settings.colorize)

    def emit_json(self, payload: Any) -> None:
        """Print ``payload`` as JSON, indented when ``json.pretty`` is set."""

        indent = 2 if self.config.get("json.pretty") else None
        self.logger.echo(json.dumps(payload, indent=indent, default=str))

    def progress(self) -> Progress:
        """Return a progress display honouring the ``cli.progress*`` settings.

        The display is disabled when progress bars are switched off, colour
        output is disabled or output is quiet.

        Raises:
            ConfigValueError: If ``cli.progressInterval`` is not a positive
                number of milliseconds.
        """

        interval = _progress_interval(self.config.get("cli.progressInterval"))
        enabled = (
            bool(self.config.get("cli.progressBars"))
            and self.settings.colorize
            and self.settings.verbosity != QUIET_VERBOSITY
        )
        return Progress(
            SpinnerColumn(),
            TextColumn("{task.description}"),
            BarColumn(),
            TimeElapsedColumn(),
            console=self.console,
            refresh_per_second=1000 / interval,
            transient=True,
            disable=not enabled,
        )

    def close(self) -> None:
        """Release resources held by the logger."""

        self.logger.close()


def _progress_interval(raw: object) -> float:
    try:
        interval = float(str(raw))
    except ValueError:
        raise ConfigValueError(f"cli.progressInterval must be a number of milliseconds, got {raw!r}") from None
    if interval <= 0:
        raise ConfigValueError(f"cli.progressInterval must be positive, got {raw!r}")
    return interval


def _stored_or_default(config: ConfigStore, key: str, problems: list[str]) -> ConfigValue:
    """Return the stored value for ``key``, or its default when it does not parse.

    Parse failures are appended to ``problems`` and logged as warnings once
    the logger exists.
    """

    try:
        return config.get(key)
    except ConfigValueError as exc:
        entry = config.entry(key)
        problems.append(f"{exc}; using default {entry.render(entry.default)!r}")
        return entry.default


def build_runtime_context(
    *,
    app_name: str,
    version: str,
    schema: ConfigSchema,
    flags: Mapping[str, Any],
    is_tty: bool | None = None,
) -> RuntimeContext:
    """Resolve settings from ``flags`` and stored config, then build the context.

    Args:
        app_name: Application name used for the default config path.
        version: Application version.
        schema: Merged config schema.
        flags: Parsed flag values; ``verbose``, ``quiet``, ``ansi`` and
            ``config`` are consulted.
        is_tty: Terminal detection override; detected from stdout when ``None``.

    Returns:
        RuntimeContext: Context with a fresh config store and logger.
    """

    verbosity = resolve_verbosity(flags.get("verbose"), flags.get("quiet"))
    config_path = resolve_config_path(app_name, flags.get("config"))
    config = ConfigStore(config_path, schema)
    problems: list[str] = []
    tty = detect_tty() if is_tty is None else is_tty
    colorize = resolve_colors(
        is_tty=tty,
        ansi=flags.get("ansi"),
        stored_colors=bool(_stored_or_default(config, "cli.colors", problems)),
    )
    log_file = str(_stored_or_default(config, "log.file", problems))
    settings = RuntimeSettings(
        verbosity=verbosity,
        colorize=colorize,
        timestamp=bool(_stored_or_default(config, "cli.timestamp", problems)),
        log_file=Path(log_file) if log_file else None,
        log_level=str(_stored_or_default(config, "log.level", problems)),
        config_path=config_path,
    )
    logger = CLILogger(
        verbosity=settings.verbosity,
        colorize=settings.colorize,
        timestamp=settings.timestamp,
        log_file=settings.log_file,
        log_level=settings.log_level,
        name=app_name,
    )
    for problem in problems:
        logger.warn(problem)
    return RuntimeContext(
        app_name=app_name,
        version=version,
        settings=settings,
        config=config,
        logger=logger,
    )


__all__ = [
    "QUIET_VERBOSITY",
    "VERBOSITY_BY_COUNT",
    "RuntimeContext",
    "RuntimeSettings",
    "build_runtime_context",
    "get_config_directory",
    "resolve_colors",
    "resolve_config_path",
    "resolve_verbosity",
]
