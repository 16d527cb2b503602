# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Implementation of the ``gnoci-lint run`` command (main phase)."""

from __future__ import annotations

import typer

from ...config import ConfigError, load_inputs
from ...github import load_event_context
from ...orchestration import runner
from ...reporting import select_reporter
from ..options import EmojiOption


def run_main(emoji: EmojiOption = True) -> None:
    """Install the linter, fetch the change-set patch and lint the project.

    Inputs are read from ``INPUT_*`` environment variables; the command exits
    with status 1 whenever the run was marked as failed.
    """

    reporter = select_reporter(use_emoji=emoji)
    try:
        inputs = load_inputs()
        event = load_event_context()
    except ConfigError as exc:
        reporter.set_failed(str(exc))
        raise typer.Exit(code=1) from exc

    runner.run(inputs, event, reporter)
    raise typer.Exit(code=1 if reporter.failed else 0)


def register(app: typer.Typer) -> None:
    """Register the ``run`` command with ``app``."""

    app.command(name="run")(run_main)


__all__ = ["register", "run_main"]
