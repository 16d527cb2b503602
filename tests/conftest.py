# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from gnoci_lint.reporting.base import BaseReporter


class RecordingReporter(BaseReporter):
    """Reporter capturing every call for assertions."""

    def __init__(self) -> None:
        super().__init__()
        self.infos: list[str] = []
        self.warnings: list[str] = []
        self.errors: list[str] = []
        self.groups: list[str] = []
        self.paths: list[Path] = []
        self.matchers: list[Path] = []
        self.state: dict[str, str] = {}
        self.events: list[tuple[str, str]] = []

    def info(self, message: str) -> None:
        self.infos.append(message)
        self.events.append(("info", message))

    def warning(self, message: str) -> None:
        self.warnings.append(message)
        self.events.append(("warning", message))

    def error(self, message: str) -> None:
        self.errors.append(message)
        self.events.append(("error", message))

    def _start_group(self, title: str) -> None:
        self.groups.append(title)
        self.events.append(("group", title))

    def _end_group(self) -> None:
        self.events.append(("endgroup", ""))

    def add_path(self, directory: Path) -> None:
        self.paths.append(directory)

    def add_matcher(self, config_path: Path) -> None:
        self.matchers.append(config_path)

    def save_state(self, name: str, value: str) -> None:
        self.state[name] = value

    def get_state(self, name: str) -> str:
        return self.state.get(name, "")


@pytest.fixture
def reporter() -> RecordingReporter:
    """Return a fresh recording reporter."""
    return RecordingReporter()
