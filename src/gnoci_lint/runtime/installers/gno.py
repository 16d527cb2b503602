# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Build and install the ``gno`` linter from a source checkout."""

from __future__ import annotations

import os
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path
from subprocess import CompletedProcess
from typing import Final

from ...config.models import InstallMode
from ...core.models import InstalledTool, VersionSpec
from ...core.process import CommandOptions, SubprocessExecutionError, run_command
from ...interfaces.reporting import Reporter, iter_output_lines

CHECKOUT_DIRNAME: Final[str] = "gno"
BUILD_SUBDIR: Final[str] = "gnovm"
BINARY_NAME: Final[str] = "gno"
REMOTE_DEFAULT_BRANCH: Final[str] = "origin/HEAD"

Runner = Callable[[Sequence[str], CommandOptions], CompletedProcess[str]]


class InstallError(RuntimeError):
    """Raised when a step of the install pipeline fails."""

    def __init__(self, step: str, returncode: int | None, detail: str) -> None:
        status = f"exit status {returncode}" if returncode is not None else "not runnable"
        super().__init__(f"install step '{step}' failed ({status}): {detail}")
        self.step = step
        self.returncode = returncode


@dataclass(frozen=True, slots=True)
class InstallPipeline:
    """Clone, checkout, build and optionally install the linter.

    Attributes:
        source_url: Git URL of the upstream repository.
        workspace: Directory receiving the ``gno`` checkout.
        also_install: Run ``make install`` after ``make build`` and resolve the
            binary from ``$(go env GOPATH)/bin``.
        timeout: Per-step timeout in seconds.
    """

    source_url: str
    workspace: Path
    also_install: bool = True
    timeout: float | None = None

    @property
    def checkout(self) -> Path:
        return self.workspace / CHECKOUT_DIRNAME

    @property
    def build_dir(self) -> Path:
        return self.checkout / BUILD_SUBDIR

    def steps(self, version: VersionSpec) -> list[tuple[str, list[str], Path]]:
        """Return ``(name, command, cwd)`` for every build step of ``version``."""

        planned: list[tuple[str, list[str], Path]] = []
        reused = self.checkout.is_dir()
        if reused:
            # A reused checkout sits at whatever revision the previous run built.
            planned.append(("fetch", ["git", "fetch", "--tags", "--force", "origin"], self.checkout))
        else:
            planned.append(("clone", ["git", "clone", self.source_url, str(self.checkout)], self.workspace))
        if not version.is_latest:
            planned.append(("checkout", ["git", "checkout", version.ref], self.checkout))
        elif reused:
            planned.append(("checkout", ["git", "checkout", "--detach", REMOTE_DEFAULT_BRANCH], self.checkout))
        planned.append(("build", ["make", "build"], self.build_dir))
        if self.also_install:
            planned.append(("install", ["make", "install"], self.build_dir))
        return planned


def _default_runner(args: Sequence[str], options: CommandOptions) -> CompletedProcess[str]:
    return run_command(args, options=options)


def _run_step(
    name: str,
    args: Sequence[str],
    options: CommandOptions,
    *,
    runner: Runner,
    reporter: Reporter,
) -> CompletedProcess[str]:
    try:
        completed = runner(args, options)
    except SubprocessExecutionError as exc:
        for line in iter_output_lines(exc.stdout, exc.stderr):
            reporter.info(line)
        raise InstallError(name, exc.returncode, exc.stderr or exc.stdout or str(exc)) from exc
    except FileNotFoundError as exc:
        raise InstallError(name, None, str(exc)) from exc
    for line in iter_output_lines(completed.stdout, completed.stderr):
        reporter.info(line)
    return completed


def resolve_install_root(
    *,
    runner: Runner,
    reporter: Reporter,
    timeout: float | None = None,
) -> Path:
    """Return ``$(go env GOPATH)``, the install root of the Go toolchain.

    Raises:
        InstallError: If ``go env`` fails or reports an empty path.
    """

    completed = _run_step(
        "resolve",
        ["go", "env", "GOPATH"],
        CommandOptions(timeout=timeout),
        runner=runner,
        reporter=reporter,
    )
    # GOPATH may list several entries; the toolchain installs into the first.
    first_entry = (completed.stdout or "").strip().split(os.pathsep)[0]
    if not first_entry:
        raise InstallError("resolve", completed.returncode, "go env GOPATH returned an empty path")
    return Path(first_entry)


def install_lint(
    version: VersionSpec,
    mode: InstallMode,
    *,
    workspace: Path,
    source_url: str,
    reporter: Reporter,
    timeout: float | None = None,
    runner: Runner | None = None,
) -> InstalledTool:
    """Install the linter at ``version`` and return its executable path.

    Every step runs as a separate process; its output is logged and only the
    exit status decides success. There is no retry: the first failing step
    aborts the installation.

    Args:
        version: Source revision to build.
        mode: Installation mode selecting whether ``make install`` runs.
        workspace: Directory receiving the source checkout.
        source_url: Git URL of the upstream repository.
        reporter: Destination for step output.
        timeout: Per-step timeout in seconds.
        runner: Command runner, defaults to :func:`run_command`.

    Returns:
        InstalledTool: Path to the installed ``gno`` binary.

    Raises:
        InstallError: If any step exits with a non-zero status.
    """

    execute = runner or _default_runner
    reporter.info(f"Installation mode: {mode.value}")
    reporter.info(f"Installing gno {version}...")
    started_at = time.monotonic()

    pipeline = InstallPipeline(
        source_url=source_url,
        workspace=workspace,
        also_install=mode.also_install,
        timeout=timeout,
    )
    workspace.mkdir(parents=True, exist_ok=True)
    if pipeline.checkout.is_dir():
        reporter.info(f"Reusing existing checkout at {pipeline.checkout}")
    base_options = CommandOptions(timeout=pipeline.timeout)
    for name, args, cwd in pipeline.steps(version):
        _run_step(name, args, base_options.with_cwd(cwd), runner=execute, reporter=reporter)

    if pipeline.also_install:
        lint_path = resolve_install_root(runner=execute, reporter=reporter, timeout=timeout) / "bin" / BINARY_NAME
    else:
        lint_path = pipeline.build_dir / "build" / BINARY_NAME

    elapsed_ms = int((time.monotonic() - started_at) * 1000)
    reporter.info(f"Installed gno into {lint_path} in {elapsed_ms}ms")
    return InstalledTool(path=lint_path)


__all__ = [
    "BINARY_NAME",
    "REMOTE_DEFAULT_BRANCH",
    "InstallError",
    "InstallPipeline",
    "install_lint",
    "resolve_install_root",
]
