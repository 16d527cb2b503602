# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Description of the CI event that triggered the run."""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Final

from ..config.models import ConfigError

DEFAULT_API_URL: Final[str] = "https://api.github.com"


class EventKind(str, Enum):
    """Event families that decide how the change set is fetched."""

    PULL_REQUEST = "pull_request"
    PUSH = "push"
    MERGE_GROUP = "merge_group"
    OTHER = "other"

    @classmethod
    def from_event_name(cls, name: str) -> EventKind:
        """Map a workflow event name onto an :class:`EventKind`.

        Args:
            name: Value of ``GITHUB_EVENT_NAME``.

        Returns:
            EventKind: Matching kind, :attr:`OTHER` when unrecognised.
        """

        if name in {"pull_request", "pull_request_target"}:
            return cls.PULL_REQUEST
        if name == "push":
            return cls.PUSH
        if name == "merge_group":
            return cls.MERGE_GROUP
        return cls.OTHER


@dataclass(frozen=True, slots=True)
class EventContext:
    """Event name, repository coordinates and webhook payload of the run."""

    event_name: str
    owner: str = ""
    repo: str = ""
    payload: Mapping[str, Any] = field(default_factory=dict)
    workspace: Path | None = None
    api_url: str = DEFAULT_API_URL

    @property
    def kind(self) -> EventKind:
        return EventKind.from_event_name(self.event_name)

    @property
    def pull_request_number(self) -> int | None:
        """Return the pull request number carried by the payload, if any."""

        pull_request = self.payload.get("pull_request")
        if not isinstance(pull_request, Mapping):
            return None
        number = pull_request.get("number")
        return number if isinstance(number, int) else None

    @property
    def push_range(self) -> tuple[str, str] | None:
        """Return the ``(before, after)`` commits of a push payload, if present."""

        before = self.payload.get("before")
        after = self.payload.get("after")
        if isinstance(before, str) and isinstance(after, str) and before and after:
            return before, after
        return None


def _load_payload(path: str) -> Mapping[str, Any]:
    if not path:
        return {}
    event_path = Path(path)
    if not event_path.is_file():
        return {}
    try:
        payload = json.loads(event_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"could not read event payload {event_path}: {exc}") from exc
    return payload if isinstance(payload, dict) else {}


def load_event_context(env: Mapping[str, str] | None = None) -> EventContext:
    """Build the :class:`EventContext` from runner environment variables.

    Args:
        env: Environment mapping, defaults to :data:`os.environ`.

    Returns:
        EventContext: Context describing the triggering event.

    Raises:
        ConfigError: If the event payload file exists but is not valid JSON.
    """

    source = os.environ if env is None else env
    owner, _, repo = source.get("GITHUB_REPOSITORY", "").partition("/")
    workspace = source.get("GITHUB_WORKSPACE", "")
    return EventContext(
        event_name=source.get("GITHUB_EVENT_NAME", ""),
        owner=owner,
        repo=repo,
        payload=_load_payload(source.get("GITHUB_EVENT_PATH", "")),
        workspace=Path(workspace) if workspace else None,
        api_url=source.get("GITHUB_API_URL") or DEFAULT_API_URL,
    )


__all__ = ["DEFAULT_API_URL", "EventContext", "EventKind", "load_event_context"]
