# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Implementation of the ``gnoci-lint install`` command."""

from __future__ import annotations

import typer

from ...config.models import DEFAULT_SOURCE_REPOSITORY, InstallMode
from ...core.logging import fail, ok
from ...core.models import LATEST_VERSION, InvalidVersionError, VersionSpec
from ...orchestration.runner import default_install_workspace
from ...reporting import ConsoleReporter
from ...runtime.installers import InstallError, install_lint
from ..options import (
    EmojiOption,
    InstallModeOption,
    SourceRepositoryOption,
    TimeoutOption,
    VersionOption,
    WorkspaceOption,
)


def install_command(
    version: VersionOption = LATEST_VERSION,
    mode: InstallModeOption = InstallMode.GOINSTALL,
    workspace: WorkspaceOption = None,
    source_repository: SourceRepositoryOption = DEFAULT_SOURCE_REPOSITORY,
    timeout: TimeoutOption = None,
    emoji: EmojiOption = True,
) -> None:
    """Build the linter from source outside of a CI run."""

    try:
        requested = VersionSpec(version)
    except InvalidVersionError as exc:
        fail(str(exc), use_emoji=emoji)
        raise typer.Exit(code=2) from exc

    reporter = ConsoleReporter(use_emoji=emoji)
    try:
        tool = install_lint(
            requested,
            mode,
            workspace=(workspace or default_install_workspace()).resolve(),
            source_url=source_repository,
            reporter=reporter,
            timeout=timeout,
        )
    except InstallError as exc:
        fail(str(exc), use_emoji=emoji)
        raise typer.Exit(code=1) from exc

    ok(f"gno is available at {tool.path}", use_emoji=emoji)
    raise typer.Exit(code=0)


def register(app: typer.Typer) -> None:
    """Register the ``install`` command with ``app``."""

    app.command(name="install")(install_command)


__all__ = ["install_command", "register"]
