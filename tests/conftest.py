# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from cliscaffold.cli.registry import CLIRegistry


@pytest.fixture(autouse=True)
def config_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Redirect the platform config directory into ``tmp_path``."""

    home = tmp_path / "config-home"

    def fake_app_dir(app_name: str, *args: object, **kwargs: object) -> str:
        return str(home / app_name)

    monkeypatch.setattr("typer.get_app_dir", fake_app_dir)
    return home


@pytest.fixture
def registry() -> CLIRegistry:
    """Return a registry holding only the built-in declarations."""

    return CLIRegistry("demo", banner="Demo banner", version="1.2.3").initialize()


@pytest.fixture
def config_file(config_home: Path) -> Path:
    """Return the default config file location for the ``demo`` registry."""

    return config_home / "demo" / "demo.ini"
