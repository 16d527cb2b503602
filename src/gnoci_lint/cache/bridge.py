# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Restore the build caches before installing and save them in the post phase."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Final

from ..interfaces.cache import CacheService, CacheServiceError
from ..interfaces.reporting import Reporter
from .keys import CacheKey

PRIMARY_KEY_STATE: Final[str] = "cache-primary-key"
MATCHED_KEY_STATE: Final[str] = "cache-matched-key"


class CacheBridge:
    """Connect a :class:`CacheService` to the two phases of a run.

    The main phase restores and records the keys through the reporter's step
    state; the post phase reads them back to decide whether saving is needed.
    """

    def __init__(
        self,
        service: CacheService,
        reporter: Reporter,
        paths: Sequence[Path],
        *,
        enabled: bool = True,
    ) -> None:
        self._service = service
        self._reporter = reporter
        self._paths = tuple(paths)
        self._enabled = enabled

    @property
    def paths(self) -> tuple[Path, ...]:
        return self._paths

    def restore(self, key: CacheKey) -> str | None:
        """Restore the best match for ``key``.

        Returns:
            str | None: Key of the restored entry, ``None`` on a miss, a failure
            or when caching is disabled. Failures never abort the run.
        """

        if not self._enabled:
            self._reporter.info("Skipping cache restoration")
            return None
        self._reporter.save_state(PRIMARY_KEY_STATE, key.primary)
        try:
            matched = self._service.restore(self._paths, key.primary, key.restore_keys)
        except (CacheServiceError, OSError) as exc:
            self._reporter.warning(f"Failed to restore cache: {exc}")
            return None
        if matched is None:
            self._reporter.info("Cache not found")
            return None
        self._reporter.info(f"Restored cache for gnoci-lint from key '{key.primary}' (matched '{matched}')")
        self._reporter.save_state(MATCHED_KEY_STATE, matched)
        return matched

    def save(self) -> bool:
        """Save the caches under the primary key recorded by :meth:`restore`.

        Returns:
            bool: ``True`` when an archive was written.

        Raises:
            CacheServiceError: If the service cannot write the archive.
        """

        if not self._enabled:
            self._reporter.info("Skipping cache saving")
            return False
        primary_key = self._reporter.get_state(PRIMARY_KEY_STATE)
        if not primary_key:
            self._reporter.warning("Error retrieving key from state.")
            return False
        if primary_key == self._reporter.get_state(MATCHED_KEY_STATE):
            self._reporter.info(f"Cache hit occurred on the primary key {primary_key}, not saving cache.")
            return False
        self._service.save(self._paths, primary_key)
        self._reporter.info(f"Saved cache for gnoci-lint with key '{primary_key}'")
        return True


__all__ = ["MATCHED_KEY_STATE", "PRIMARY_KEY_STATE", "CacheBridge"]
