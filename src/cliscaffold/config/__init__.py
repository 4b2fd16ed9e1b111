# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Config schema and INI store exports."""

from __future__ import annotations

from .schema import (
    DEFAULT_CONFIG_SCHEMA,
    ConfigSchema,
    ConfigSchemaEntry,
    ConfigValue,
    ConfigValueType,
    schema_table,
)
from .store import ConfigStore

__all__ = [
    "DEFAULT_CONFIG_SCHEMA",
    "ConfigSchema",
    "ConfigSchemaEntry",
    "ConfigStore",
    "ConfigValue",
    "ConfigValueType",
    "schema_table",
]
