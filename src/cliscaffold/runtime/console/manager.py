# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Rich console management utilities."""

from __future__ import annotations

import sys
from functools import lru_cache
from typing import Literal

from rich.console import Console


def detect_tty() -> bool:
    """Return ``True`` when stdout appears to be backed by a terminal.

    Returns:
        bool: ``True`` when ``sys.stdout`` reports TTY support, ``False`` otherwise.
    """

    try:
        return sys.stdout.isatty()
    except (AttributeError, ValueError):
        return False


class RichConsoleManager:
    """Provision Rich :class:`Console` instances keyed by colour and stream."""

    def __init__(self) -> None:
        """Initialise the manager with an empty cache keyed by presentation flags."""

        self._cache: dict[tuple[bool, bool], Console] = {}

    def get(self, *, color: bool, stderr: bool = False) -> Console:
        """Return a Rich console configured for the ``color`` preference.

        A cached console is rebuilt when ``sys.stdout`` or ``sys.stderr`` has
        been swapped since it was created, for example under a test runner.

        Args:
            color: ``True`` when ANSI colour output should be enabled.
            stderr: ``True`` to write to standard error instead of standard output.

        Returns:
            Console: Cached or newly constructed console matching the preferences.
        """

        stream = sys.stderr if stderr else sys.stdout
        key = (color, stderr)
        cached = self._cache.get(key)
        if cached is None or cached.file is not stream:
            color_system: Literal["auto", "standard", "256", "truecolor", "windows"] | None = (
                "auto" if color else None
            )
            self._cache[key] = Console(
                file=stream,
                color_system=color_system,
                force_terminal=color or None,
                no_color=not color,
                highlight=False,
                soft_wrap=True,
            )
        return self._cache[key]

    def clear(self) -> None:
        """Forget every cached console."""

        self._cache.clear()

    def __call__(self, *, color: bool, stderr: bool = False) -> Console:
        """Return a console, mirroring :meth:`get`."""

        return self.get(color=color, stderr=stderr)


@lru_cache(maxsize=1)
def get_console_manager() -> RichConsoleManager:
    """Return the process-wide :class:`RichConsoleManager` instance.

    Returns:
        RichConsoleManager: Singleton console manager bound to the process.
    """

    return RichConsoleManager()


__all__ = [
    "RichConsoleManager",
    "detect_tty",
    "get_console_manager",
]
