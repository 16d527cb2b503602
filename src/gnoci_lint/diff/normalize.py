# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Repair unified diffs returned by the hosting API before handing them to the linter.

The linter's changed-lines filter counts hunk lines exactly, so every function
here only touches header lines. Hunk bodies are tracked using the counts of
their ``@@`` headers and are copied through byte for byte.
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Final

GIT_HEADER: Final[str] = "diff --git "
HUNK_HEADER_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^@@ -(?P<old_start>\d+)(?:,(?P<old_count>\d+))? \+(?P<new_start>\d+)(?:,(?P<new_count>\d+))? @@",
)
FILE_HEADER_PREFIXES: Final[tuple[str, ...]] = (
    GIT_HEADER,
    "index ",
    "--- ",
    "+++ ",
    "old mode ",
    "new mode ",
    "new file mode ",
    "deleted file mode ",
    "similarity index ",
    "dissimilarity index ",
    "rename from ",
    "rename to ",
    "copy from ",
    "copy to ",
)
_REROOTED_PREFIXES: Final[tuple[str, ...]] = (
    "--- a/",
    "+++ b/",
    "rename from ",
    "rename to ",
    "copy from ",
    "copy to ",
)


class LineKind(str, Enum):
    """Role of a physical line inside a unified diff."""

    FILE_HEADER = "file_header"
    HUNK_HEADER = "hunk_header"
    ADDED = "added"
    REMOVED = "removed"
    CONTEXT = "context"
    MARKER = "marker"
    OTHER = "other"


@dataclass(frozen=True, slots=True)
class PatchSummary:
    """Counts describing a unified diff."""

    files: int
    hunks: int
    additions: int
    deletions: int
    hunk_changes: tuple[tuple[int, int], ...]


def split_lines(text: str) -> list[str]:
    """Split ``text`` on ``\\n`` keeping terminators, so ``"".join`` restores it exactly.

    Unlike :meth:`str.splitlines`, carriage returns and other separators stay
    part of the line content.
    """

    parts = text.split("\n")
    lines = [f"{part}\n" for part in parts[:-1]]
    if parts[-1]:
        lines.append(parts[-1])
    return lines


def _content(line: str) -> str:
    return line[:-1] if line.endswith("\n") else line


def classify_lines(lines: Sequence[str]) -> Iterator[tuple[LineKind, str]]:
    """Yield each line of a unified diff together with its :class:`LineKind`.

    Hunk bodies are delimited by the line counts of their ``@@`` header, so a
    removed line that reads ``--- x`` is never mistaken for a file header. A line
    that cannot belong to a hunk ends the hunk early.
    """

    old_remaining = 0
    new_remaining = 0
    for line in lines:
        content = _content(line)
        if old_remaining > 0 or new_remaining > 0:
            head = content[:1]
            if head in {" ", ""}:
                old_remaining -= 1
                new_remaining -= 1
                yield LineKind.CONTEXT, line
                continue
            if head == "-":
                old_remaining -= 1
                yield LineKind.REMOVED, line
                continue
            if head == "+":
                new_remaining -= 1
                yield LineKind.ADDED, line
                continue
            if head == "\\":
                yield LineKind.MARKER, line
                continue
            old_remaining = new_remaining = 0

        match = HUNK_HEADER_PATTERN.match(content)
        if match is not None:
            old_remaining = int(match.group("old_count") or 1)
            new_remaining = int(match.group("new_count") or 1)
            yield LineKind.HUNK_HEADER, line
        elif content.startswith("\\"):
            yield LineKind.MARKER, line
        elif content.startswith(FILE_HEADER_PREFIXES):
            yield LineKind.FILE_HEADER, line
        else:
            yield LineKind.OTHER, line


def looks_like_unified_diff(text: str) -> bool:
    """Return ``True`` when ``text`` carries at least one unified-diff file header."""

    previous = ""
    for line in text.split("\n"):
        if line.startswith(GIT_HEADER):
            return True
        if line.startswith("+++ ") and previous.startswith("--- "):
            return True
        previous = line
    return False


_FRAMING_KINDS: Final[frozenset[LineKind]] = frozenset({LineKind.FILE_HEADER, LineKind.HUNK_HEADER})


def _strip_carriage_return(line: str) -> str:
    if line.endswith("\r\n"):
        return f"{line[:-2]}\n"
    if line.endswith("\r"):
        return line[:-1]
    return line


def normalize_patch(text: str) -> str:
    """Return ``text`` with file-header framing the linter's diff parser accepts.

    Carriage returns are dropped from file and hunk header lines and the patch is
    terminated with a newline. ``\\ No newline at end of file`` markers and every
    hunk line are preserved verbatim. Text without any diff file header is
    returned unchanged, and the function is idempotent.

    Args:
        text: Raw diff as returned by the hosting API.

    Returns:
        str: Normalised diff.
    """

    if not text or not looks_like_unified_diff(text):
        return text
    repaired = [
        _strip_carriage_return(line) if kind in _FRAMING_KINDS else line
        for kind, line in classify_lines(split_lines(text))
    ]
    result = "".join(repaired)
    if not result.endswith("\n"):
        result = f"{result}\n"
    return result


def _clean_prefix(prefix: str) -> str:
    cleaned = prefix.strip().replace("\\", "/")
    while cleaned.startswith("./"):
        cleaned = cleaned[2:]
    return cleaned.strip("/")


def _reroot_header(line: str, prefix: str) -> str:
    if line.startswith(GIT_HEADER):
        return line.replace(f" a/{prefix}/", " a/", 1).replace(f" b/{prefix}/", " b/", 1)
    for marker in _REROOTED_PREFIXES:
        scoped = f"{marker}{prefix}/"
        if line.startswith(scoped):
            return f"{marker}{line[len(scoped):]}"
    return line


def reroot_patch(text: str, prefix: str) -> str:
    """Scope a git-style diff to the sub-directory ``prefix`` of the repository.

    File sections outside ``prefix`` are dropped and ``prefix/`` is removed from
    the paths of the remaining headers, so that paths match a linter running
    inside ``prefix``. Hunks of kept sections are untouched. Diffs without
    ``diff --git`` headers and empty prefixes are returned unchanged.

    Args:
        text: Unified diff, typically already normalised.
        prefix: Repository-relative directory, e.g. ``examples/gno.land``.

    Returns:
        str: Diff restricted to ``prefix``.
    """

    cleaned = _clean_prefix(prefix)
    if not cleaned or cleaned == "." or GIT_HEADER not in text:
        return text

    output: list[str] = []
    keep = True
    in_section_header = False
    for kind, line in classify_lines(split_lines(text)):
        if kind is LineKind.FILE_HEADER and line.startswith(GIT_HEADER):
            keep = line.startswith(f"{GIT_HEADER}a/{cleaned}/")
            in_section_header = True
        elif kind is LineKind.HUNK_HEADER:
            in_section_header = False
        if not keep:
            continue
        if in_section_header and kind is LineKind.FILE_HEADER:
            line = _reroot_header(line, cleaned)
        output.append(line)
    return "".join(output)


def summarize_patch(text: str) -> PatchSummary:
    """Count files, hunks and changed lines of ``text``.

    Returns:
        PatchSummary: Summary; ``hunk_changes`` lists ``(added, removed)`` per hunk.
    """

    git_files = 0
    plain_files = 0
    hunk_changes: list[list[int]] = []
    for kind, line in classify_lines(split_lines(text)):
        if kind is LineKind.FILE_HEADER:
            if line.startswith(GIT_HEADER):
                git_files += 1
            elif line.startswith("+++ "):
                plain_files += 1
        elif kind is LineKind.HUNK_HEADER:
            hunk_changes.append([0, 0])
        elif kind is LineKind.ADDED:
            hunk_changes[-1][0] += 1
        elif kind is LineKind.REMOVED:
            hunk_changes[-1][1] += 1
    changes = tuple((added, removed) for added, removed in hunk_changes)
    return PatchSummary(
        files=git_files or plain_files,
        hunks=len(changes),
        additions=sum(added for added, _ in changes),
        deletions=sum(removed for _, removed in changes),
        hunk_changes=changes,
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
