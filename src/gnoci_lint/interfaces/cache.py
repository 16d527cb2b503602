# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Cache service contract used by the cache bridge."""

from __future__ import annotations

from abc import abstractmethod
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol, runtime_checkable


class CacheServiceError(RuntimeError):
    """Raised by cache services when an archive cannot be read or written."""


@runtime_checkable
class CacheService(Protocol):
    """Define the contract implemented by artifact cache backends.

    Keys are opaque strings; ``restore_keys`` are prefixes tried in order when
    the primary key misses.
    """

    @abstractmethod
    def restore(
        self,
        paths: Sequence[Path],
        primary_key: str,
        restore_keys: Sequence[str] = (),
    ) -> str | None:
        """Populate ``paths`` from the best matching entry.

        Args:
            paths: Local directories the entry was saved from.
            primary_key: Exact key to look up first.
            restore_keys: Ordered key prefixes used as fallbacks.

        Returns:
            str | None: Key of the restored entry, ``None`` on a miss.
        """
        raise NotImplementedError

    @abstractmethod
    def save(self, paths: Sequence[Path], key: str) -> None:
        """Persist ``paths`` under ``key``.

        Args:
            paths: Local directories to archive; missing ones are skipped.
            key: Key the archive is stored under.
        """
        raise NotImplementedError


__all__ = ["CacheService", "CacheServiceError"]
