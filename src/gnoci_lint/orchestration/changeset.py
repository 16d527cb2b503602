# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Fetch the diff of the current change so only new issues are reported.

Every failure here degrades to an empty :class:`DiffPatch`: the run then lints
everything instead of aborting.
"""

from __future__ import annotations

import tempfile
from collections.abc import Callable
from pathlib import Path
from typing import Final

import httpx

from ..config.models import ActionInputs
from ..core.models import DiffPatch
from ..diff import normalize_patch, reroot_patch, summarize_patch
from ..github.client import GitHubApiError, GitHubClient
from ..github.context import EventContext, EventKind
from ..interfaces.reporting import Reporter

PULL_PATCH_NAME: Final[str] = "pull.patch"
PUSH_PATCH_NAME: Final[str] = "push.patch"
TEMP_DIR_PREFIX: Final[str] = "gnoci-lint-"

ClientFactory = Callable[[ActionInputs, EventContext], GitHubClient]
DiffRequest = Callable[[GitHubClient], str]


def default_client_factory(inputs: ActionInputs, event: EventContext) -> GitHubClient:
    """Return a :class:`GitHubClient` authenticated with the ``github-token`` input."""

    return GitHubClient(inputs.github_token, base_url=event.api_url, timeout=inputs.timeout)


def working_directory_prefix(inputs: ActionInputs, event: EventContext) -> str | None:
    """Return the repository-relative working directory, if the linter runs in one.

    Returns:
        str | None: POSIX-style prefix, ``None`` when the linter runs at the
        repository root or outside the workspace.
    """

    if inputs.working_directory is None:
        return None
    workspace = (event.workspace or Path.cwd()).resolve()
    try:
        relative = inputs.working_directory.resolve().relative_to(workspace)
    except ValueError:
        return None
    prefix = relative.as_posix()
    return None if prefix in {"", "."} else prefix


def _plan_request(event: EventContext, reporter: Reporter) -> tuple[str, str, DiffRequest] | None:
    kind = event.kind
    if kind is EventKind.PULL_REQUEST:
        number = event.pull_request_number
        if number is None:
            reporter.warning("No pull request in context")
            return None
        return (
            "pull request",
            PULL_PATCH_NAME,
            lambda client: client.fetch_pull_request_diff(event.owner, event.repo, number),
        )
    if kind is EventKind.PUSH:
        push_range = event.push_range
        if push_range is None:
            reporter.warning("No before/after commits in push context")
            return None
        before, after = push_range
        return (
            "push",
            PUSH_PATCH_NAME,
            lambda client: client.fetch_compare_diff(event.owner, event.repo, before, after),
        )
    if kind is EventKind.MERGE_GROUP:
        return None
    reporter.info(
        "Not fetching patch for showing only new issues because it's not a pull request context: "
        f"event name is {event.event_name}",
    )
    return None


def fetch_patch(
    inputs: ActionInputs,
    event: EventContext,
    *,
    reporter: Reporter,
    temp_dir: Path | None = None,
    client_factory: ClientFactory | None = None,
) -> DiffPatch:
    """Return the change-set patch restricting reported issues.

    Args:
        inputs: Validated action inputs.
        event: Event that triggered the run.
        reporter: Destination for warnings and progress.
        temp_dir: Directory receiving the patch file, created on demand when omitted.
        client_factory: Factory for the hosting API client.

    Returns:
        DiffPatch: Patch written to ``<temp_dir>/{pull|push}.patch``, or an empty
        patch when scoping is disabled, not applicable or failed.
    """

    if not inputs.only_new_issues:
        return DiffPatch.empty()
    planned = _plan_request(event, reporter)
    if planned is None:
        return DiffPatch.empty()
    label, filename, request = planned

    factory = client_factory or default_client_factory
    try:
        with factory(inputs, event) as client:
            raw_patch = request(client)
    except (GitHubApiError, httpx.HTTPError, httpx.InvalidURL, ValueError) as exc:
        # ValueError covers tokens and URLs httpx cannot encode into a request.
        reporter.warning(f"failed to fetch {label} patch: {exc}")
        return DiffPatch.empty()

    patch = normalize_patch(raw_patch)
    prefix = working_directory_prefix(inputs, event)
    if prefix is not None:
        patch = reroot_patch(patch, prefix)
    summary = summarize_patch(patch)
    reporter.info(
        f"Fetched {label} patch: {summary.files} file(s), {summary.hunks} hunk(s), "
        f"+{summary.additions}/-{summary.deletions}",
    )

    try:
        target_dir = temp_dir if temp_dir is not None else Path(tempfile.mkdtemp(prefix=TEMP_DIR_PREFIX))
        target_dir.mkdir(parents=True, exist_ok=True)
        patch_path = target_dir / filename
        reporter.info(f"Writing patch to {patch_path}")
        patch_path.write_text(patch, encoding="utf-8", newline="")
    except OSError as exc:
        reporter.warning(f"failed to save {label} patch: {exc}")
        return DiffPatch.empty()
    return DiffPatch(text=patch, path=patch_path)


__all__ = [
    "PULL_PATCH_NAME",
    "PUSH_PATCH_NAME",
    "default_client_factory",
    "fetch_patch",
    "working_directory_prefix",
]
