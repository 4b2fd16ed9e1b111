# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Typed schema describing the settings persisted by :class:`ConfigStore`."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from enum import Enum
from types import MappingProxyType
from typing import Final

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..errors import ConfigValueError, SchemaError

ConfigValue = bool | str

_TRUE_TOKENS: Final[frozenset[str]] = frozenset({"1", "true", "yes", "on"})
_FALSE_TOKENS: Final[frozenset[str]] = frozenset({"0", "false", "no", "off"})


class ConfigValueType(str, Enum):
    """Enumerate value types understood by the config store."""

    BOOL = "bool"
    STRING = "string"
    CHOICE = "choice"


class ConfigSchemaEntry(BaseModel):
    """Describe one persisted setting and its default value.

    Attributes:
        key: Dotted key such as ``cli.colors``; the first segment names the
            INI section.
        type: Value type used when parsing stored text.
        default: Value reported when nothing is stored for ``key``.
        choices: Allowed values for ``choice`` entries.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    key: str = Field(min_length=1)
    type: ConfigValueType
    default: ConfigValue
    choices: tuple[str, ...] = ()

    @model_validator(mode="after")
    def _check_default(self) -> ConfigSchemaEntry:
        """Reject defaults that do not match the declared type."""

        if self.type is ConfigValueType.BOOL and not isinstance(self.default, bool):
            raise ValueError(f"{self.key}: bool entries need a bool default")
        if self.type is not ConfigValueType.BOOL and not isinstance(self.default, str):
            raise ValueError(f"{self.key}: {self.type.value} entries need a string default")
        if self.type is ConfigValueType.CHOICE:
            if not self.choices:
                raise ValueError(f"{self.key}: choice entries need choices")
            if self.default not in self.choices:
                raise ValueError(f"{self.key}: default {self.default!r} is not one of {list(self.choices)}")
        return self

    @property
    def section(self) -> str:
        """Return the INI section holding this entry."""

        section, _, _ = self._split()
        return section

    @property
    def option(self) -> str:
        """Return the INI option name holding this entry."""

        _, _, option = self._split()
        return option

    def _split(self) -> tuple[str, str, str]:
        section, dot, option = self.key.partition(".")
        if not dot:
            return "general", "", self.key
        return section, dot, option

    def parse(self, raw: str) -> ConfigValue:
        """Convert user or file supplied text into a typed value.

        Args:
            raw: Text read from the INI file or the command line.

        Returns:
            ConfigValue: Value matching :attr:`type`.

        Raises:
            ConfigValueError: If ``raw`` cannot be represented by this entry.
        """

        text = raw.strip()
        if self.type is ConfigValueType.BOOL:
            lowered = text.lower()
            if lowered in _TRUE_TOKENS:
                return True
            if lowered in _FALSE_TOKENS:
                return False
            raise ConfigValueError(f"Invalid boolean for {self.key}: {raw!r}")
        if self.type is ConfigValueType.CHOICE and text not in self.choices:
            allowed = ", ".join(self.choices)
            raise ConfigValueError(f"Invalid value for {self.key}: {raw!r} (choose from {allowed})")
        return text

    def render(self, value: ConfigValue) -> str:
        """Return the INI text used to persist ``value``."""

        if self.type is ConfigValueType.BOOL:
            return "true" if value else "false"
        return str(value)


ConfigSchema = Mapping[str, ConfigSchemaEntry]


def schema_table(entries: Iterable[ConfigSchemaEntry]) -> dict[str, ConfigSchemaEntry]:
    """Index ``entries`` by key, rejecting duplicates.

    Args:
        entries: Schema entries in declaration order.

    Returns:
        dict[str, ConfigSchemaEntry]: Mapping preserving declaration order.

    Raises:
        SchemaError: If two entries share the same key.
    """

    table: dict[str, ConfigSchemaEntry] = {}
    for entry in entries:
        if entry.key in table:
            raise SchemaError(f"Duplicate config key '{entry.key}'")
        table[entry.key] = entry
    return table


def validate_schema(schema: ConfigSchema) -> None:
    """Ensure every mapping key matches the key declared by its entry."""

    for key, entry in schema.items():
        if key != entry.key:
            raise SchemaError(f"Config schema key '{key}' does not match entry key '{entry.key}'")


LOG_LEVEL_CHOICES: Final[tuple[str, ...]] = ("info", "verbose", "debug", "silly")

DEFAULT_CONFIG_SCHEMA: Final[Mapping[str, ConfigSchemaEntry]] = MappingProxyType(
    schema_table(
        (
            ConfigSchemaEntry(key="cli.colors", type=ConfigValueType.BOOL, default=True),
            ConfigSchemaEntry(key="cli.progressBars", type=ConfigValueType.BOOL, default=True),
            ConfigSchemaEntry(key="cli.progressInterval", type=ConfigValueType.STRING, default="250"),
            ConfigSchemaEntry(key="cli.timestamp", type=ConfigValueType.BOOL, default=False),
            ConfigSchemaEntry(key="json.pretty", type=ConfigValueType.BOOL, default=False),
            ConfigSchemaEntry(key="log.file", type=ConfigValueType.STRING, default=""),
            ConfigSchemaEntry(
                key="log.level",
                type=ConfigValueType.CHOICE,
                default="info",
                choices=LOG_LEVEL_CHOICES,
            ),
        ),
    ),
)

__all__ = [
    "DEFAULT_CONFIG_SCHEMA",
    "LOG_LEVEL_CHOICES",
    "ConfigSchema",
    "ConfigSchemaEntry",
    "ConfigValue",
    "ConfigValueType",
    "schema_table",
    "validate_schema",
]
