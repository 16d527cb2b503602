# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Implementation of the ``gnoci-lint normalize-diff`` command."""

from __future__ import annotations

from pathlib import Path

import typer

from ...diff import normalize_patch, reroot_patch, summarize_patch
from ..options import PatchFileArgument, SummaryOption, WorkingDirectoryOption


def _read_patch(path: Path | None) -> str:
    if path is None or str(path) == "-":
        return typer.get_binary_stream("stdin").read().decode("utf-8")
    with path.open(encoding="utf-8", newline="") as handle:
        return handle.read()


def normalize_diff_command(
    patch_file: PatchFileArgument = None,
    working_directory: WorkingDirectoryOption = None,
    summary: SummaryOption = False,
) -> None:
    """Normalise a unified diff the way change-set patches are prepared."""

    try:
        text = _read_patch(patch_file)
    except (OSError, UnicodeDecodeError) as exc:
        typer.echo(f"could not read patch: {exc}", err=True)
        raise typer.Exit(code=2) from exc

    patch = normalize_patch(text)
    if working_directory:
        patch = reroot_patch(patch, working_directory)

    if summary:
        counts = summarize_patch(patch)
        typer.echo(
            f"files={counts.files} hunks={counts.hunks} additions={counts.additions} deletions={counts.deletions}",
        )
        return
    typer.echo(patch, nl=False)


def register(app: typer.Typer) -> None:
    """Register the ``normalize-diff`` command with ``app``."""

    app.command(name="normalize-diff")(normalize_diff_command)


__all__ = ["normalize_diff_command", "register"]
