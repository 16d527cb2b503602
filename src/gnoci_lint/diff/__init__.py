# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Unified diff normalisation used by diff-scoped linting."""

from __future__ import annotations

from .normalize import (
    LineKind,
    PatchSummary,
    classify_lines,
    looks_like_unified_diff,
    normalize_patch,
    reroot_patch,
    split_lines,
    summarize_patch,
)

__all__ = [
    "LineKind",
    "PatchSummary",
    "classify_lines",
    "looks_like_unified_diff",
    "normalize_patch",
    "reroot_patch",
    "split_lines",
    "summarize_patch",
]
