# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CI helper installing the gno linter and reporting its result."""

from __future__ import annotations

__version__ = "0.3.0"

__all__ = ["__version__"]
