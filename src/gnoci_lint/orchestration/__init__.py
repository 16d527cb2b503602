# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Run orchestration: change-set fetching, preparation and reporting."""

from __future__ import annotations

from .changeset import fetch_patch, working_directory_prefix
from .runner import (
    Orchestrator,
    PreparedEnv,
    RunPhase,
    default_cache_bridge,
    default_install_workspace,
    post_run,
    prepare_env,
    run,
    run_lint,
    validate_working_directory,
)

__all__ = [
    "Orchestrator",
    "PreparedEnv",
    "RunPhase",
    "default_cache_bridge",
    "default_install_workspace",
    "fetch_patch",
    "post_run",
    "prepare_env",
    "run",
    "run_lint",
    "validate_working_directory",
    "working_directory_prefix",
]
