# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Checks that the command tree and the installed click share one runtime."""

from __future__ import annotations

import click
import typer
from typer.core import TyperArgument, TyperOption

from cliscaffold.cli.typer_ext import ScaffoldCommand, ScaffoldGroup


def test_command_classes_derive_from_installed_click() -> None:
    assert issubclass(ScaffoldGroup, click.Group)
    assert issubclass(ScaffoldCommand, click.Command)
    assert issubclass(TyperOption, click.Option)
    assert issubclass(TyperArgument, click.Argument)


def test_typer_context_is_a_click_context() -> None:
    assert issubclass(typer.Context, click.Context)


def test_nested_dispatch_sees_active_context() -> None:
    seen: list[click.Context] = []

    def capture() -> int:
        seen.append(click.get_current_context())
        return 0

    group = ScaffoldGroup(name="root", invoke_without_command=True, callback=lambda: None)
    group.add_command(ScaffoldCommand("leaf", callback=capture), "leaf")

    assert group.main(["leaf"], standalone_mode=False) == 0
    assert seen and seen[0].info_name == "leaf"
