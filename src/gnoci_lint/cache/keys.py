# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Cache keys and cached paths derived from the build environment."""

from __future__ import annotations

import platform
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from hashlib import sha256
from pathlib import Path
from typing import Final

from ..core.models import VersionSpec
from ..core.process import CommandOptions, SubprocessExecutionError, run_command

KEY_PREFIX: Final[str] = "gnoci-lint.cache"
MANIFEST_FILES: Final[tuple[str, ...]] = ("go.sum", "gno.mod", "gnomod.toml")
_UNSAFE_KEY_CHARS: Final[re.Pattern[str]] = re.compile(r"[^A-Za-z0-9._-]")

GoEnvReader = Callable[[Sequence[str]], list[str]]


@dataclass(frozen=True, slots=True)
class CacheKey:
    """Primary cache key plus ordered prefixes tried when it misses."""

    primary: str
    restore_keys: tuple[str, ...] = ()


def sanitize_key_part(value: str) -> str:
    """Replace characters that are unsafe in cache keys and file names."""

    return _UNSAFE_KEY_CHARS.sub("_", value)


def manifest_digest(root: Path) -> str:
    """Return a short digest of the dependency manifests found in ``root``.

    Returns:
        str: Hex digest, empty when no manifest exists.
    """

    digest = sha256(usedforsecurity=False)
    found = False
    for name in MANIFEST_FILES:
        candidate = root / name
        if not candidate.is_file():
            continue
        found = True
        digest.update(name.encode("utf-8"))
        digest.update(candidate.read_bytes())
    return digest.hexdigest()[:16] if found else ""


def build_cache_key(
    version: VersionSpec,
    *,
    root: Path,
    system: str | None = None,
    machine: str | None = None,
) -> CacheKey:
    """Derive the cache key for ``version`` built on the current platform.

    Args:
        version: Linter revision being installed.
        root: Directory holding the project's dependency manifests.
        system: Operating system name, defaults to :func:`platform.system`.
        machine: Architecture name, defaults to :func:`platform.machine`.

    Returns:
        CacheKey: Key whose restore prefix ignores the manifest digest.
    """

    parts = (
        (system or platform.system()).lower(),
        (machine or platform.machine()).lower(),
        version.ref,
    )
    base = "-".join([KEY_PREFIX, *(sanitize_key_part(part) for part in parts)])
    digest = manifest_digest(root)
    if not digest:
        return CacheKey(primary=base)
    return CacheKey(primary=f"{base}-{digest}", restore_keys=(f"{base}-",))


def _read_go_env(names: Sequence[str]) -> list[str]:
    completed = run_command(["go", "env", *names], options=CommandOptions(check=True))
    return (completed.stdout or "").splitlines()


def default_cache_paths(*, reader: GoEnvReader | None = None, home: Path | None = None) -> list[Path]:
    """Return the Go build and module cache directories.

    Falls back to the toolchain defaults under ``home`` when ``go`` is not
    available yet, which is common before the first installation.
    """

    home_dir = home or Path.home()
    fallback = [home_dir / ".cache" / "go-build", home_dir / "go" / "pkg" / "mod"]
    try:
        lines = (reader or _read_go_env)(["GOCACHE", "GOMODCACHE"])
    except (FileNotFoundError, SubprocessExecutionError):
        return fallback
    resolved = [Path(line.strip()) if line.strip() else default for line, default in zip(lines, fallback)]
    return resolved if len(resolved) == len(fallback) else fallback


__all__ = [
    "KEY_PREFIX",
    "CacheKey",
    "build_cache_key",
    "default_cache_paths",
    "manifest_digest",
    "sanitize_key_part",
]
