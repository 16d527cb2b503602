# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Reporter emitting GitHub Actions workflow commands."""

from __future__ import annotations

import os
import uuid
from collections.abc import Mapping
from pathlib import Path
from typing import Final

from ..core.logging import plain
from .base import BaseReporter

GITHUB_PATH_ENV: Final[str] = "GITHUB_PATH"
GITHUB_STATE_ENV: Final[str] = "GITHUB_STATE"
STATE_PREFIX: Final[str] = "STATE_"


def escape_data(value: str) -> str:
    """Escape ``value`` for use as the message of a workflow command."""

    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def _append_file_command(path: Path, line: str) -> None:
    with path.open("a", encoding="utf-8") as handle:
        handle.write(f"{line}{os.linesep}")


class GitHubActionsReporter(BaseReporter):
    """Translate reporter calls into workflow commands and file commands.

    Args:
        env: Environment mapping providing ``GITHUB_PATH``, ``GITHUB_STATE`` and
            ``STATE_*`` values, defaults to :data:`os.environ`.
    """

    def __init__(self, env: Mapping[str, str] | None = None) -> None:
        super().__init__()
        self._env = os.environ if env is None else env

    def info(self, message: str) -> None:
        plain(message)

    def warning(self, message: str) -> None:
        plain(f"::warning::{escape_data(message)}")

    def error(self, message: str) -> None:
        plain(f"::error::{escape_data(message)}")

    def _start_group(self, title: str) -> None:
        plain(f"::group::{escape_data(title)}")

    def _end_group(self) -> None:
        plain("::endgroup::")

    def add_path(self, directory: Path) -> None:
        target = self._env.get(GITHUB_PATH_ENV)
        if not target:
            self.warning(f"{GITHUB_PATH_ENV} is not set; {directory} was not added to PATH")
            return
        _append_file_command(Path(target), str(directory))
        self.info(f"Added {directory} to PATH")

    def add_matcher(self, config_path: Path) -> None:
        plain(f"::add-matcher::{config_path}")

    def save_state(self, name: str, value: str) -> None:
        target = self._env.get(GITHUB_STATE_ENV)
        if not target:
            self.warning(f"{GITHUB_STATE_ENV} is not set; state {name!r} was not saved")
            return
        delimiter = f"ghadelimiter_{uuid.uuid4()}"
        _append_file_command(Path(target), f"{name}<<{delimiter}{os.linesep}{value}{os.linesep}{delimiter}")

    def get_state(self, name: str) -> str:
        return self._env.get(f"{STATE_PREFIX}{name}", "")


__all__ = ["GitHubActionsReporter", "escape_data"]
