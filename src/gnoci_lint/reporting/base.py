# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""State shared by the concrete reporters."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager

from ..interfaces.reporting import Reporter


class BaseReporter(Reporter, ABC):
    """Track the failure flag and implement grouping on top of two hooks."""

    def __init__(self) -> None:
        self._failed = False
        self._failure_messages: list[str] = []

    @property
    def failed(self) -> bool:
        return self._failed

    @property
    def failure_messages(self) -> tuple[str, ...]:
        """Return every message passed to :meth:`set_failed`, oldest first."""

        return tuple(self._failure_messages)

    def set_failed(self, message: str) -> None:
        self._failed = True
        self._failure_messages.append(message)
        self.error(message)

    @contextmanager
    def group(self, title: str) -> Iterator[None]:
        self._start_group(title)
        try:
            yield
        finally:
            self._end_group()

    @abstractmethod
    def _start_group(self, title: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def _end_group(self) -> None:
        raise NotImplementedError


__all__ = ["BaseReporter"]
