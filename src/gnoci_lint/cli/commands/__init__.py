# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""CLI command registry."""

from __future__ import annotations

import typer

from . import diff, install, post, run

__all__ = ["register_commands"]


def register_commands(app: typer.Typer) -> None:
    """Register the built-in commands on ``app``.

    Args:
        app: Typer application receiving command registrations.
    """

    run.register(app)
    post.register(app)
    install.register(app)
    diff.register(app)
