# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Build cache keys, the local cache service and the phase bridge."""

from __future__ import annotations

from .bridge import MATCHED_KEY_STATE, PRIMARY_KEY_STATE, CacheBridge
from .keys import CacheKey, build_cache_key, default_cache_paths, manifest_digest, sanitize_key_part
from .local import CACHE_DIR_ENV, LocalCacheService, default_cache_root

__all__ = [
    "CACHE_DIR_ENV",
    "MATCHED_KEY_STATE",
    "PRIMARY_KEY_STATE",
    "CacheBridge",
    "CacheKey",
    "LocalCacheService",
    "build_cache_key",
    "default_cache_paths",
    "default_cache_root",
    "manifest_digest",
    "sanitize_key_part",
]
