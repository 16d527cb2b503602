# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Console output used by the reporters and the standalone CLI commands."""

from __future__ import annotations

import sys
from enum import Enum
from functools import lru_cache

from rich.console import Console
from rich.rule import Rule
from rich.text import Text


class Level(Enum):
    """Message levels with their emoji prefix and colour."""

    INFO = ("ℹ️ ", "cyan")
    OK = ("✅ ", "green")
    WARN = ("⚠️ ", "yellow")
    FAIL = ("❌ ", "red")

    def __init__(self, prefix: str, style: str) -> None:
        self.prefix = prefix
        self.style = style


def _stdout_is_tty() -> bool:
    try:
        return sys.stdout.isatty()
    except (AttributeError, ValueError):
        return False


@lru_cache(maxsize=None)
def _console(color: bool, emoji: bool, tty: bool) -> Console:
    # Keyed on the TTY state so output captured by a test runner stays free of escape codes.
    return Console(
        color_system="auto" if color and tty else None,
        force_terminal=tty,
        no_color=not (color and tty),
        emoji=emoji,
        highlight=False,
        soft_wrap=True,
    )


def get_console(*, color: bool, emoji: bool) -> Console:
    """Return the shared console for ``color`` and ``emoji`` on the current stdout."""

    return _console(color, emoji, _stdout_is_tty())


def emit(level: Level, msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Print ``msg`` with the prefix and colour of ``level``.

    Args:
        level: Message level.
        msg: Message text, never interpreted as markup.
        use_emoji: Prefix the message with the level's emoji.
        use_color: Explicit colour flag, defaults to whether stdout is a TTY.
    """

    color_enabled = _stdout_is_tty() if use_color is None else use_color
    text = Text(f"{level.prefix}{msg}" if use_emoji else msg)
    if color_enabled:
        text.stylize(level.style)
    get_console(color=color_enabled, emoji=use_emoji).print(text)


def plain(msg: str) -> None:
    """Print ``msg`` verbatim, as required for workflow commands."""

    get_console(color=False, emoji=False).print(Text(msg))


def section(title: str, *, use_color: bool) -> None:
    """Print a group header: a rule on colour terminals, a text marker elsewhere."""

    console = get_console(color=use_color, emoji=True)
    if use_color and _stdout_is_tty():
        console.print()
        console.print(Rule(title))
    else:
        console.print(Text(f"\n--- {title} ---"))


def info(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    emit(Level.INFO, msg, use_emoji=use_emoji, use_color=use_color)


def ok(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    emit(Level.OK, msg, use_emoji=use_emoji, use_color=use_color)


def warn(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    emit(Level.WARN, msg, use_emoji=use_emoji, use_color=use_color)


def fail(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    emit(Level.FAIL, msg, use_emoji=use_emoji, use_color=use_color)


__all__ = ["Level", "emit", "fail", "get_console", "info", "ok", "plain", "section", "warn"]
