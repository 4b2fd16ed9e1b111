# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""INI-backed key/value settings bound to a :mod:`schema` table."""

from __future__ import annotations

import configparser
from collections.abc import Iterator
from pathlib import Path

from ..errors import ConfigValueError, UnknownConfigKeyError
from .schema import ConfigSchema, ConfigSchemaEntry, ConfigValue, validate_schema


class ConfigStore:
    """Load, query and persist settings declared by a config schema.

    Values are stored as ``[section] option = value`` where the dotted key
    ``section.option`` names the entry. Keys absent from the file resolve to
    their schema default. Writes go straight to disk.
    """

    def __init__(self, path: Path | str, schema: ConfigSchema) -> None:
        """Bind the store to ``path`` and read any existing content.

        Args:
            path: Location of the INI file; it does not need to exist yet.
            schema: Mapping of dotted keys to schema entries.

        Raises:
            ConfigValueError: If the file exists but cannot be read or parsed.
        """

        validate_schema(schema)
        self.path = Path(path).expanduser()
        self.schema = schema
        self._parser = configparser.ConfigParser(interpolation=None)
        self._parser.optionxform = str  # type: ignore[assignment,method-assign]
        self._load()

    def _load(self) -> None:
        if not self.path.is_file():
            return
        try:
            with self.path.open(encoding="utf-8") as handle:
                self._parser.read_file(handle, source=str(self.path))
        except (configparser.Error, UnicodeDecodeError) as exc:
            raise ConfigValueError(f"Unable to parse config file {self.path}: {exc}") from exc
        except OSError as exc:
            raise ConfigValueError(f"Unable to read config file {self.path}: {exc}") from exc

    def entry(self, key: str) -> ConfigSchemaEntry:
        """Return the schema entry for ``key``.

        Raises:
            UnknownConfigKeyError: If ``key`` is not declared.
        """

        try:
            return self.schema[key]
        except KeyError:
            raise UnknownConfigKeyError(key, list(self.schema)) from None

    def get(self, key: str) -> ConfigValue:
        """Return the stored value for ``key`` or its schema default.

        Args:
            key: Dotted config key.

        Returns:
            ConfigValue: Typed value for ``key``.

        Raises:
            UnknownConfigKeyError: If ``key`` is not declared.
            ConfigValueError: If the stored text does not fit the schema.
        """

        entry = self.entry(key)
        raw = self._parser.get(entry.section, entry.option, fallback=None)
        if raw is None:
            return entry.default
        return entry.parse(raw)

    def is_set(self, key: str) -> bool:
        """Return ``True`` when ``key`` has a value persisted in the file."""

        entry = self.entry(key)
        return self._parser.has_option(entry.section, entry.option)

    def set(self, key: str, value: ConfigValue) -> ConfigValue:
        """Persist ``value`` for ``key``.

        String input is parsed according to the schema type so command-line
        text such as ``"false"`` is stored as a boolean.

        Args:
            key: Dotted config key.
            value: Typed value or text to parse.

        Returns:
            ConfigValue: The typed value that was stored.
        """

        entry = self.entry(key)
        typed = entry.parse(value if isinstance(value, str) else entry.render(value))
        if not self._parser.has_section(entry.section):
            self._parser.add_section(entry.section)
        self._parser.set(entry.section, entry.option, entry.render(typed))
        self.save()
        return typed

    def reset(self, key: str) -> ConfigValue:
        """Drop any stored value for ``key`` and return its default."""

        entry = self.entry(key)
        if self._parser.has_section(entry.section):
            self._parser.remove_option(entry.section, entry.option)
            if not self._parser.options(entry.section):
                self._parser.remove_section(entry.section)
        self.save()
        return entry.default

    def items(self) -> Iterator[tuple[str, ConfigValue]]:
        """Yield ``(key, value)`` pairs for every schema key in declaration order."""

        for key in self.schema:
            yield key, self.get(key)

    def as_dict(self) -> dict[str, ConfigValue]:
        """Return the effective configuration as a plain mapping."""

        return dict(self.items())

    def save(self) -> None:
        """Write the current content to :attr:`path`, creating parent directories."""

        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8") as handle:
            self._parser.write(handle)


__all__ = ["ConfigStore"]
