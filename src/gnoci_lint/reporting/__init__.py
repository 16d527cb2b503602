# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Concrete reporters and reporter selection."""

from __future__ import annotations

import os
from collections.abc import Mapping

from ..interfaces.reporting import Reporter
from .base import BaseReporter
from .console import ConsoleReporter
from .github import GitHubActionsReporter, escape_data


def select_reporter(env: Mapping[str, str] | None = None, *, use_emoji: bool = True) -> Reporter:
    """Return the reporter matching the environment the process runs in.

    Args:
        env: Environment mapping, defaults to :data:`os.environ`.
        use_emoji: Emoji preference for the console reporter.

    Returns:
        Reporter: Workflow-command reporter on GitHub Actions, console reporter otherwise.
    """

    source = os.environ if env is None else env
    if source.get("GITHUB_ACTIONS") == "true":
        return GitHubActionsReporter(source)
    return ConsoleReporter(use_emoji=use_emoji)


__all__ = [
    "BaseReporter",
    "ConsoleReporter",
    "GitHubActionsReporter",
    "escape_data",
    "select_reporter",
]
