# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Implementation of the ``gnoci-lint post`` command (post phase)."""

from __future__ import annotations

import typer

from ...config import ConfigError, load_inputs
from ...orchestration import runner
from ...reporting import select_reporter
from ..options import EmojiOption


def post_main(emoji: EmojiOption = True) -> None:
    """Save the build caches restored by the main phase."""

    reporter = select_reporter(use_emoji=emoji)
    try:
        inputs = load_inputs()
    except ConfigError as exc:
        reporter.set_failed(str(exc))
        raise typer.Exit(code=1) from exc

    cache = runner.default_cache_bridge(inputs, reporter)
    succeeded = runner.post_run(cache, reporter)
    raise typer.Exit(code=0 if succeeded else 1)


def register(app: typer.Typer) -> None:
    """Register the ``post`` command with ``app``."""

    app.command(name="post")(post_main)


__all__ = ["post_main", "register"]
