# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Console entry point exposing the built-in commands."""

from __future__ import annotations

from .registry import CLIRegistry

registry = CLIRegistry("cliscaffold", banner="Declarative multi-command CLI scaffold.").initialize()


def main() -> None:
    """Run the CLI against the process arguments and exit."""

    registry.run()


__all__ = ["main", "registry"]
