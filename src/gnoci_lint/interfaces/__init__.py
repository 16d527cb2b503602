# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Protocols shared across gnoci-lint."""

from __future__ import annotations

from .cache import CacheService, CacheServiceError
from .reporting import Reporter, iter_output_lines

__all__ = ["CacheService", "CacheServiceError", "Reporter", "iter_output_lines"]
