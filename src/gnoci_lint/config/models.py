# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models describing the action inputs."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Final

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..core.models import LATEST_VERSION, VersionSpec

DEFAULT_SOURCE_REPOSITORY: Final[str] = "https://github.com/gnolang/gno.git"
DEBUG_CACHE: Final[str] = "cache"


class ConfigError(Exception):
    """Raised when configuration input is invalid."""


class InstallMode(str, Enum):
    """Enumerate the supported installation modes.

    Both modes build from source; ``goinstall`` additionally runs the install
    target so the binary lands in the Go toolchain's ``bin`` directory.
    """

    BINARY = "binary"
    GOINSTALL = "goinstall"

    @property
    def also_install(self) -> bool:
        """Return ``True`` when the pipeline runs the install target after building."""

        return self is InstallMode.GOINSTALL


class ActionInputs(BaseModel):
    """Validated inputs driving a single run."""

    model_config = ConfigDict(frozen=True)

    only_new_issues: bool
    install_mode: InstallMode = InstallMode.GOINSTALL
    version: str = LATEST_VERSION
    github_token: str = Field(default="", repr=False)
    debug: frozenset[str] = frozenset()
    problem_matchers: bool = False
    working_directory: Path | None = None
    args: tuple[str, ...] = ()
    skip_cache: bool = False
    timeout: float | None = Field(default=None, gt=0)
    source_repository: str = DEFAULT_SOURCE_REPOSITORY

    @field_validator("version")
    @classmethod
    def _validate_version(cls, value: str) -> str:
        VersionSpec(value)
        return value

    @model_validator(mode="after")
    def _require_token_for_scoping(self) -> ActionInputs:
        if self.only_new_issues and not self.github_token:
            raise ValueError("github-token is required when only-new-issues is enabled")
        return self

    @property
    def version_spec(self) -> VersionSpec:
        """Return the requested source revision."""

        return VersionSpec(self.version)

    def debug_enabled(self, flag: str) -> bool:
        """Return ``True`` when ``flag`` was listed in the ``debug`` input."""

        return flag in self.debug


__all__ = [
    "DEBUG_CACHE",
    "DEFAULT_SOURCE_REPOSITORY",
    "ActionInputs",
    "ConfigError",
    "InstallMode",
]
