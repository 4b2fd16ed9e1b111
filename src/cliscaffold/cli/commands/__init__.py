# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Built-in command handlers."""

from __future__ import annotations

from .config import ConfigCommand
from .delete_everything import DeleteEverythingCommand

__all__ = ["ConfigCommand", "DeleteEverythingCommand"]
