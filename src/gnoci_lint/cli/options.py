# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Typer option aliases shared by the CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from ..config.models import InstallMode

EmojiOption = Annotated[
    bool,
    typer.Option("--emoji/--no-emoji", help="Toggle emoji in CLI output."),
]
VersionOption = Annotated[
    str,
    typer.Option("--version", "-v", help="Tag, branch or commit of the linter to install."),
]
InstallModeOption = Annotated[
    InstallMode,
    typer.Option("--mode", "-m", case_sensitive=False, help="Installation mode."),
]
WorkspaceOption = Annotated[
    Path | None,
    typer.Option("--workspace", "-w", help="Directory receiving the source checkout."),
]
SourceRepositoryOption = Annotated[
    str,
    typer.Option("--source-repository", help="Git URL the linter is built from."),
]
TimeoutOption = Annotated[
    float | None,
    typer.Option("--timeout", help="Per-step timeout in seconds."),
]
PatchFileArgument = Annotated[
    Path | None,
    typer.Argument(help="Unified diff to normalise; reads standard input when omitted or '-'."),
]
WorkingDirectoryOption = Annotated[
    str | None,
    typer.Option(
        "--working-directory",
        "-C",
        help="Repository-relative directory the linter runs in; other files are dropped.",
    ),
]
SummaryOption = Annotated[
    bool,
    typer.Option("--summary", help="Print file, hunk and line counts instead of the patch."),
]

__all__ = [
    "EmojiOption",
    "InstallModeOption",
    "PatchFileArgument",
    "SourceRepositoryOption",
    "SummaryOption",
    "TimeoutOption",
    "VersionOption",
    "WorkingDirectoryOption",
    "WorkspaceOption",
]
