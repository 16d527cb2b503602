# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Value objects exchanged between the installer, fetcher and runner."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Final

LATEST_VERSION: Final[str] = "latest"
PATCH_ARGUMENT: Final[str] = "--new-from-patch"


class InvalidVersionError(ValueError):
    """Raised when a version reference cannot be passed safely to git."""


@dataclass(frozen=True, slots=True)
class VersionSpec:
    """Tag, branch or commit naming the linter source revision."""

    ref: str = LATEST_VERSION

    def __post_init__(self) -> None:
        if not self.ref or self.ref != self.ref.strip() or any(ch.isspace() for ch in self.ref):
            raise InvalidVersionError(f"invalid version reference: {self.ref!r}")
        if self.ref.startswith("-"):
            raise InvalidVersionError(f"version reference must not start with '-': {self.ref!r}")

    @property
    def is_latest(self) -> bool:
        """Return ``True`` when the default branch should be used as cloned."""

        return self.ref == LATEST_VERSION

    def __str__(self) -> str:
        return self.ref


@dataclass(frozen=True, slots=True)
class InstalledTool:
    """Resolved path of the installed linter executable."""

    path: Path

    @property
    def directory(self) -> Path:
        """Return the directory exposed on ``PATH`` for later CI steps."""

        return self.path.parent


@dataclass(frozen=True, slots=True)
class DiffPatch:
    """Unified diff restricting reported issues, plus its on-disk location.

    An empty patch (no text, no path) means that every issue is reported.
    """

    text: str = ""
    path: Path | None = None

    @classmethod
    def empty(cls) -> DiffPatch:
        """Return the patch used when diff scoping is disabled or unavailable."""

        return cls()

    @property
    def is_empty(self) -> bool:
        """Return ``True`` when no scoping applies."""

        return self.path is None

    def lint_arguments(self) -> list[str]:
        """Return the linter arguments scoping issues to this patch."""

        if self.path is None:
            return []
        return [f"{PATCH_ARGUMENT}={self.path}"]


class LintOutcome(str, Enum):
    """Classify a linter exit status."""

    CLEAN = "clean"
    ISSUES_FOUND = "issues_found"
    TOOL_FAILURE = "tool_failure"


@dataclass(frozen=True, slots=True)
class RunResult:
    """Exit status and captured streams of a linter invocation."""

    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def outcome(self) -> LintOutcome:
        """Map the exit status onto a :class:`LintOutcome`.

        Exit status ``1`` is the linter's normal way of reporting issues; any
        other non-zero status means the tool itself failed.
        """

        if self.returncode == 0:
            return LintOutcome.CLEAN
        if self.returncode == 1:
            return LintOutcome.ISSUES_FOUND
        return LintOutcome.TOOL_FAILURE


__all__ = [
    "LATEST_VERSION",
    "PATCH_ARGUMENT",
    "DiffPatch",
    "InstalledTool",
    "InvalidVersionError",
    "LintOutcome",
    "RunResult",
    "VersionSpec",
]
