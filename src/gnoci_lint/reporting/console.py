# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Reporter rendering to a Rich console for local runs."""

from __future__ import annotations

from pathlib import Path

from ..core.logging import fail, info, section, warn
from .base import BaseReporter


class ConsoleReporter(BaseReporter):
    """Render reporter calls with the shared logging helpers.

    ``PATH`` changes and problem matchers only make sense on a CI runner, so they
    are logged instead of applied. State lives in memory for the lifetime of the
    process.
    """

    def __init__(self, *, use_emoji: bool = True, use_color: bool | None = None) -> None:
        super().__init__()
        self._use_emoji = use_emoji
        self._use_color = use_color
        self._state: dict[str, str] = {}

    def info(self, message: str) -> None:
        info(message, use_emoji=self._use_emoji, use_color=self._use_color)

    def warning(self, message: str) -> None:
        warn(message, use_emoji=self._use_emoji, use_color=self._use_color)

    def error(self, message: str) -> None:
        fail(message, use_emoji=self._use_emoji, use_color=self._use_color)

    def _start_group(self, title: str) -> None:
        section(title, use_color=bool(self._use_color))

    def _end_group(self) -> None:
        return None

    def add_path(self, directory: Path) -> None:
        self.info(f"Installed tool directory: {directory}")

    def add_matcher(self, config_path: Path) -> None:
        self.info(f"Problem matcher available at {config_path}")

    def save_state(self, name: str, value: str) -> None:
        self._state[name] = value

    def get_state(self, name: str) -> str:
        return self._state.get(name, "")


__all__ = ["ConsoleReporter"]
