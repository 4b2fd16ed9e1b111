# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""User-facing logger with verbosity levels, optional colour and a file sink."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Final, Literal

import typer
from rich.text import Text

from .runtime.console import get_console_manager

LogLevelName = Literal["error", "warn", "info", "verbose", "debug", "silly"]

LEVELS: Final[dict[str, int]] = {
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "info": logging.INFO,
    "verbose": 15,
    "debug": logging.DEBUG,
    "silly": 5,
}

LEVEL_STYLES: Final[dict[str, str]] = {
    "error": "bold red",
    "warn": "yellow",
    "info": "green",
    "verbose": "cyan",
    "debug": "blue",
    "silly": "magenta",
}

FILE_FORMAT: Final[str] = "%(asctime)s %(levelname)s %(message)s"
FILE_DATEFMT: Final[str] = "%Y-%m-%d %H:%M:%S"
TIMESTAMP_FORMAT: Final[str] = "%H:%M:%S"

logging.addLevelName(LEVELS["verbose"], "VERBOSE")
logging.addLevelName(LEVELS["silly"], "SILLY")


def level_number(level: str) -> int:
    """Return the numeric threshold for ``level``.

    Raises:
        ValueError: If ``level`` is not a known level name.
    """

    try:
        return LEVELS[level]
    except KeyError:
        raise ValueError(f"Unknown log level '{level}'") from None


@dataclass(slots=True)
class CLILogger:
    """Route messages to the terminal and, optionally, to a log file.

    Console output is filtered by :attr:`verbosity` while the file sink is
    filtered by :attr:`log_level`; the two thresholds are independent.
    Errors and warnings go to standard error.
    """

    verbosity: str = "info"
    colorize: bool = False
    timestamp: bool = False
    log_file: Path | None = None
    log_level: str = "info"
    name: str = "cliscaffold"
    _file_logger: logging.Logger | None = field(init=False, default=None, repr=False)

    def __post_init__(self) -> None:
        level_number(self.verbosity)
        level_number(self.log_level)
        if self.log_file is not None:
            self._file_logger = _configure_file_logger(self.name, Path(self.log_file), self.log_level)

    def enabled_for(self, level: str) -> bool:
        """Return ``True`` when console output is emitted for ``level``."""

        return level_number(level) >= level_number(self.verbosity)

    def log(self, level: LogLevelName, message: str) -> None:
        """Emit ``message`` at ``level`` to every configured sink.

        Args:
            level: Level name, from ``error`` (most severe) to ``silly``.
            message: Text to record.
        """

        if self._file_logger is not None:
            self._file_logger.log(level_number(level), message)
        if not self.enabled_for(level):
            return
        console = get_console_manager().get(color=self.colorize, stderr=level in {"error", "warn"})
        text = Text()
        if self.timestamp:
            text.append(f"[{datetime.now().strftime(TIMESTAMP_FORMAT)}] ", style="dim" if self.colorize else "")
        label_style = LEVEL_STYLES[level] if self.colorize else ""
        text.append(f"{level}:", style=label_style)
        text.append(f" {message}")
        console.print(text)

    def error(self, message: str) -> None:
        """Log an error message."""

        self.log("error", message)

    def warn(self, message: str) -> None:
        """Log a warning message."""

        self.log("warn", message)

    def info(self, message: str) -> None:
        """Log an informational message."""

        self.log("info", message)

    def verbose(self, message: str) -> None:
        """Log a message shown with ``-v``."""

        self.log("verbose", message)

    def debug(self, message: str) -> None:
        """Log a message shown with ``-vv``."""

        self.log("debug", message)

    def silly(self, message: str) -> None:
        """Log a message shown with ``-vvv``."""

        self.log("silly", message)

    def echo(self, message: str) -> None:
        """Write ``message`` to stdout regardless of verbosity.

        Args:
            message: Program output, as opposed to diagnostics.
        """

        typer.echo(message)

    def close(self) -> None:
        """Flush and detach the file sink, if any."""

        if self._file_logger is None:
            return
        for handler in self._file_logger.handlers[:]:
            handler.close()
            self._file_logger.removeHandler(handler)
        self._file_logger = None


def _configure_file_logger(name: str, path: Path, level: str) -> logging.Logger:
    """Return a non-propagating stdlib logger writing to ``path``.

    Existing handlers are replaced so repeated initialisation in one process
    does not duplicate lines.
    """

    path = path.expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    file_logger = logging.getLogger(f"cliscaffold.file.{name}")
    file_logger.setLevel(level_number(level))
    file_logger.propagate = False
    for existing in file_logger.handlers[:]:
        existing.close()
        file_logger.removeHandler(existing)
    handler = logging.FileHandler(path, encoding="utf-8", delay=True)
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=FILE_DATEFMT))
    file_logger.addHandler(handler)
    return file_logger


def build_cli_logger(*, verbosity: str = "info", colorize: bool = False) -> CLILogger:
    """Return a console-only :class:`CLILogger`.

    Used before a runtime context exists, for example when argument parsing
    fails.

    Args:
        verbosity: Console threshold.
        colorize: Whether terminal colour output is enabled.

    Returns:
        CLILogger: Logger without a file sink.
    """

    return CLILogger(verbosity=verbosity, colorize=colorize)


__all__ = [
    "LEVELS",
    "CLILogger",
    "LogLevelName",
    "build_cli_logger",
    "level_number",
]
