# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Installer entry points."""

from __future__ import annotations

from .gno import BINARY_NAME, InstallError, InstallPipeline, install_lint, resolve_install_root

__all__ = [
    "BINARY_NAME",
    "InstallError",
    "InstallPipeline",
    "install_lint",
    "resolve_install_root",
]
