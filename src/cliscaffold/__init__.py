# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Micro-framework for declarative multi-command CLIs."""

from __future__ import annotations

from importlib import metadata

try:
    __version__ = metadata.version("cliscaffold")
except metadata.PackageNotFoundError:  # pragma: no cover - local development fallback
    __version__ = "0.0.0"

from .cli.registry import CLIRegistry  # noqa: E402
from .cli.spec import CommandSpec, OptionSpec, OptionType  # noqa: E402
from .config.schema import ConfigSchemaEntry, ConfigValueType  # noqa: E402
from .errors import CLIError  # noqa: E402

__all__ = [
    "CLIError",
    "CLIRegistry",
    "CommandSpec",
    "ConfigSchemaEntry",
    "ConfigValueType",
    "OptionSpec",
    "OptionType",
    "__version__",
]
