# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Hosting API access and event context."""

from __future__ import annotations

from .client import DIFF_MEDIA_TYPE, GitHubApiError, GitHubClient
from .context import DEFAULT_API_URL, EventContext, EventKind, load_event_context

__all__ = [
    "DEFAULT_API_URL",
    "DIFF_MEDIA_TYPE",
    "EventContext",
    "EventKind",
    "GitHubApiError",
    "GitHubClient",
    "load_event_context",
]
