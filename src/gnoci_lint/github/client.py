# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Minimal GitHub REST client retrieving diffs."""

from __future__ import annotations

from types import TracebackType
from typing import Final
from urllib.parse import quote

import httpx

from .. import __version__
from .context import DEFAULT_API_URL

GITHUB_API_VERSION: Final[str] = "2022-11-28"
DIFF_MEDIA_TYPE: Final[str] = "application/vnd.github.diff"
DEFAULT_TIMEOUT_SECONDS: Final[float] = 30.0


class GitHubApiError(RuntimeError):
    """Raised when a GitHub API request returns a non-success status."""

    def __init__(self, message: str, *, status_code: int, endpoint: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.endpoint = endpoint


def _segment(value: str) -> str:
    return quote(value, safe="")


class GitHubClient:
    """Fetch pull request and compare diffs using a bearer token.

    Args:
        token: Token sent as ``Authorization: Bearer``.
        base_url: REST API root, e.g. ``https://api.github.com``.
        timeout: Request timeout in seconds.
        transport: Optional transport, mainly for tests.
    """

    def __init__(
        self,
        token: str,
        *,
        base_url: str = DEFAULT_API_URL,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._client = httpx.Client(
            base_url=base_url,
            headers={
                "Authorization": f"Bearer {token}",
                "X-GitHub-Api-Version": GITHUB_API_VERSION,
                "User-Agent": f"gnoci-lint/{__version__}",
            },
            timeout=timeout if timeout is not None else DEFAULT_TIMEOUT_SECONDS,
            transport=transport,
        )

    def __enter__(self) -> GitHubClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        """Release the underlying connection pool."""

        self._client.close()

    def fetch_pull_request_diff(self, owner: str, repo: str, number: int) -> str:
        """Return the unified diff of pull request ``number``.

        Raises:
            GitHubApiError: If the API does not answer with ``200``.
            httpx.HTTPError: On transport failures.
        """

        endpoint = f"/repos/{_segment(owner)}/{_segment(repo)}/pulls/{number}"
        return self._request_diff(endpoint)

    def fetch_compare_diff(self, owner: str, repo: str, base: str, head: str) -> str:
        """Return the unified diff between commits ``base`` and ``head``.

        Raises:
            GitHubApiError: If the API does not answer with ``200``.
            httpx.HTTPError: On transport failures.
        """

        basehead = f"{_segment(base)}...{_segment(head)}"
        endpoint = f"/repos/{_segment(owner)}/{_segment(repo)}/compare/{basehead}"
        return self._request_diff(endpoint)

    def _request_diff(self, endpoint: str) -> str:
        response = self._client.get(endpoint, headers={"Accept": DIFF_MEDIA_TYPE})
        if response.status_code != httpx.codes.OK:
            raise GitHubApiError(
                f"response status is {response.status_code}",
                status_code=response.status_code,
                endpoint=endpoint,
            )
        return response.text


__all__ = ["DIFF_MEDIA_TYPE", "GITHUB_API_VERSION", "GitHubApiError", "GitHubClient"]
