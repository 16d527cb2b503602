# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Directory-backed cache service storing one tarball per key."""

from __future__ import annotations

import io
import json
import os
import tarfile
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Final

from ..interfaces.cache import CacheService, CacheServiceError
from .keys import sanitize_key_part

ARCHIVE_SUFFIX: Final[str] = ".tar.gz"
MANIFEST_NAME: Final[str] = "manifest.json"
CACHE_DIR_ENV: Final[str] = "GNOCI_LINT_CACHE_DIR"


def default_cache_root(env: Mapping[str, str] | None = None) -> Path:
    """Return the directory archives are stored in.

    ``GNOCI_LINT_CACHE_DIR`` wins, then the runner tool cache, then ``~/.cache``.
    """

    source = os.environ if env is None else env
    if explicit := source.get(CACHE_DIR_ENV):
        return Path(explicit)
    if tool_cache := source.get("RUNNER_TOOL_CACHE"):
        return Path(tool_cache) / "gnoci-lint"
    return Path.home() / ".cache" / "gnoci-lint"


class LocalCacheService(CacheService):
    """Persist cached directories as gzip tarballs below ``root``.

    Each archive stores the cached directories under numeric member names plus a
    JSON manifest mapping those names back to the original paths.
    """

    def __init__(self, root: Path) -> None:
        self._root = root

    def archive_for(self, key: str) -> Path:
        """Return the archive path used for ``key``."""

        return self._root / f"{sanitize_key_part(key)}{ARCHIVE_SUFFIX}"

    def restore(
        self,
        paths: Sequence[Path],
        primary_key: str,
        restore_keys: Sequence[str] = (),
    ) -> str | None:
        archive = self._lookup(primary_key, restore_keys)
        if archive is None:
            return None
        try:
            with tarfile.open(archive, "r:gz") as tar:
                stored_key, stored_paths = self._read_manifest(tar)
                self._extract(tar, stored_paths, paths)
        except (OSError, tarfile.TarError, KeyError, ValueError) as exc:
            raise CacheServiceError(f"could not restore {archive.name}: {exc}") from exc
        return stored_key or archive.name.removesuffix(ARCHIVE_SUFFIX)

    def save(self, paths: Sequence[Path], key: str) -> None:
        target = self.archive_for(key)
        partial = target.with_name(f".{target.name}.partial")
        members = {str(index): path for index, path in enumerate(paths) if path.exists()}
        manifest = {"key": key, "paths": {index: str(path) for index, path in members.items()}}
        try:
            self._root.mkdir(parents=True, exist_ok=True)
            with tarfile.open(partial, "w:gz") as tar:
                payload = json.dumps(manifest, indent=2).encode("utf-8")
                info = tarfile.TarInfo(MANIFEST_NAME)
                info.size = len(payload)
                tar.addfile(info, io.BytesIO(payload))
                for index, path in members.items():
                    tar.add(path, arcname=index)
            partial.replace(target)
        except (OSError, tarfile.TarError) as exc:
            partial.unlink(missing_ok=True)
            raise CacheServiceError(f"could not save cache {key!r}: {exc}") from exc

    def _lookup(self, primary_key: str, restore_keys: Sequence[str]) -> Path | None:
        exact = self.archive_for(primary_key)
        if exact.is_file():
            return exact
        if not self._root.is_dir():
            return None
        for prefix in restore_keys:
            pattern = f"{sanitize_key_part(prefix)}*{ARCHIVE_SUFFIX}"
            candidates = sorted(
                self._root.glob(pattern),
                key=lambda candidate: candidate.stat().st_mtime,
                reverse=True,
            )
            if candidates:
                return candidates[0]
        return None

    @staticmethod
    def _read_manifest(tar: tarfile.TarFile) -> tuple[str, dict[str, str]]:
        handle = tar.extractfile(MANIFEST_NAME)
        if handle is None:
            raise ValueError(f"{MANIFEST_NAME} missing from archive")
        manifest = json.loads(handle.read().decode("utf-8"))
        stored = manifest.get("paths") if isinstance(manifest, dict) else None
        if not isinstance(stored, dict):
            raise ValueError(f"{MANIFEST_NAME} is malformed")
        return str(manifest.get("key") or ""), {str(index): str(path) for index, path in stored.items()}

    @staticmethod
    def _extract(tar: tarfile.TarFile, stored: Mapping[str, str], paths: Sequence[Path]) -> None:
        wanted = {str(path): path for path in paths}
        for index, original in stored.items():
            target = wanted.get(original)
            if target is None:
                continue
            selected: list[tarfile.TarInfo] = []
            for member in tar.getmembers():
                if member.name == index or member.name.startswith(f"{index}/"):
                    member.name = f"{target.name}{member.name[len(index):]}"
                    selected.append(member)
            target.parent.mkdir(parents=True, exist_ok=True)
            tar.extractall(path=target.parent, members=selected, filter="data")


__all__ = ["CACHE_DIR_ENV", "LocalCacheService", "default_cache_root"]
