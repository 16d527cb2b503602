# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring the commands."""

from __future__ import annotations

import typer

from .commands import register_commands

app = typer.Typer(
    name="gnoci-lint",
    help="Install and run the gno linter in CI, reporting only new issues.",
    add_completion=False,
    no_args_is_help=True,
)
register_commands(app)


def main() -> None:
    """Console script entry point."""

    app()


__all__ = ["app", "main"]
