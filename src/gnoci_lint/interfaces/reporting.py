# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Reporting port through which runs talk to the CI platform."""

from __future__ import annotations

from abc import abstractmethod
from collections.abc import Iterator
from contextlib import AbstractContextManager
from pathlib import Path
from typing import Protocol, runtime_checkable


@runtime_checkable
class Reporter(Protocol):
    """Define the CI-facing side effects a run may produce.

    Implementations own every global the CI platform exposes (log stream,
    ``PATH`` file, step state, failure flag) so orchestration code never
    touches them directly.
    """

    @abstractmethod
    def info(self, message: str) -> None:
        """Emit an informational log line."""
        raise NotImplementedError

    @abstractmethod
    def warning(self, message: str) -> None:
        """Emit a warning annotation."""
        raise NotImplementedError

    @abstractmethod
    def error(self, message: str) -> None:
        """Emit an error annotation without failing the run."""
        raise NotImplementedError

    @abstractmethod
    def group(self, title: str) -> AbstractContextManager[None]:
        """Return a context manager wrapping log lines in a collapsible group.

        Args:
            title: Group title shown by the CI log viewer.
        """
        raise NotImplementedError

    @abstractmethod
    def add_path(self, directory: Path) -> None:
        """Expose ``directory`` on ``PATH`` for subsequent CI steps."""
        raise NotImplementedError

    @abstractmethod
    def add_matcher(self, config_path: Path) -> None:
        """Register an annotation problem matcher configuration."""
        raise NotImplementedError

    @abstractmethod
    def save_state(self, name: str, value: str) -> None:
        """Persist ``value`` for the post phase of the same step."""
        raise NotImplementedError

    @abstractmethod
    def get_state(self, name: str) -> str:
        """Return a value saved by :meth:`save_state` in the main phase, or ``""``."""
        raise NotImplementedError

    @abstractmethod
    def set_failed(self, message: str) -> None:
        """Mark the run as failed with ``message``."""
        raise NotImplementedError

    @property
    @abstractmethod
    def failed(self) -> bool:
        """Return ``True`` once :meth:`set_failed` has been called."""
        raise NotImplementedError


def iter_output_lines(*streams: str | None) -> Iterator[str]:
    """Yield the non-empty captured streams in order, stripped of trailing newlines."""

    for stream in streams:
        if stream:
            yield stream.rstrip("\n")


__all__ = ["Reporter", "iter_output_lines"]
