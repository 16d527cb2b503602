# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Action input models and loaders."""

from __future__ import annotations

from .loaders import get_boolean_input, get_input, input_variable, load_inputs
from .models import DEBUG_CACHE, DEFAULT_SOURCE_REPOSITORY, ActionInputs, ConfigError, InstallMode

__all__ = [
    "DEBUG_CACHE",
    "DEFAULT_SOURCE_REPOSITORY",
    "ActionInputs",
    "ConfigError",
    "InstallMode",
    "get_boolean_input",
    "get_input",
    "input_variable",
    "load_inputs",
]
