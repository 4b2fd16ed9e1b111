# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exception hierarchy shared by the registry, config store and handlers."""

from __future__ import annotations

from collections.abc import Sequence


class CLIError(RuntimeError):
    """Error raised when a CLI command fails and should exit with a status code."""

    def __init__(self, message: str, *, exit_code: int = 1) -> None:
        """Initialise the error with a message and exit code.

        Args:
            message: Human-readable error message shown to the user.
            exit_code: Exit status associated with the failure.
        """

        super().__init__(message)
        self.exit_code = exit_code


class SchemaError(ValueError):
    """Raised when a command, option or config schema declaration is invalid."""


class UnknownConfigKeyError(CLIError):
    """Raised when a config key is not declared by the active schema."""

    def __init__(self, key: str, available: Sequence[str]) -> None:
        super().__init__(f"Unknown config key '{key}'")
        self.key = key
        self.available = tuple(available)


class ConfigValueError(CLIError):
    """Raised when a stored or supplied config value does not fit its schema."""


__all__ = [
    "CLIError",
    "ConfigValueError",
    "SchemaError",
    "UnknownConfigKeyError",
]
