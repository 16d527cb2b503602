# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for building the linter from source."""

from __future__ import annotations

import os
from collections.abc import Sequence
from pathlib import Path
from subprocess import CompletedProcess

import pytest

from gnoci_lint.config import InstallMode
from gnoci_lint.core.models import VersionSpec
from gnoci_lint.core.process import CommandOptions, SubprocessExecutionError
from gnoci_lint.runtime.installers import InstallError, InstallPipeline, install_lint

SOURCE = "https://example.invalid/gno.git"


class FakeRunner:
    """Record commands, create the clone target and answer ``go env GOPATH``."""

    def __init__(self, gopath: str = "/home/runner/go", fail_on: str | None = None) -> None:
        self.gopath = gopath
        self.fail_on = fail_on
        self.calls: list[tuple[list[str], Path | None]] = []

    def __call__(self, args: Sequence[str], options: CommandOptions) -> CompletedProcess[str]:
        command = list(args)
        self.calls.append((command, options.cwd))
        if self.fail_on is not None and " ".join(command) == self.fail_on:
            raise SubprocessExecutionError(command, 2, "partial output\n", "make: *** [build] Error 2\n")
        if command[:2] == ["git", "clone"]:
            Path(command[3]).mkdir(parents=True, exist_ok=True)
        if command[:2] == ["go", "env"]:
            return CompletedProcess(command, 0, f"{self.gopath}\n", "")
        return CompletedProcess(command, 0, f"ran {command[0]}\n", "")


def test_goinstall_pipeline_builds_installs_and_resolves_gopath(reporter, tmp_path: Path) -> None:
    runner = FakeRunner()

    tool = install_lint(
        VersionSpec("v0.1.0"),
        InstallMode.GOINSTALL,
        workspace=tmp_path,
        source_url=SOURCE,
        reporter=reporter,
        runner=runner,
    )

    checkout = tmp_path / "gno"
    assert runner.calls == [
        (["git", "clone", SOURCE, str(checkout)], tmp_path),
        (["git", "checkout", "v0.1.0"], checkout),
        (["make", "build"], checkout / "gnovm"),
        (["make", "install"], checkout / "gnovm"),
        (["go", "env", "GOPATH"], None),
    ]
    assert tool.path == Path("/home/runner/go/bin/gno")
    assert reporter.infos[0] == "Installation mode: goinstall"
    assert reporter.infos[1] == "Installing gno v0.1.0..."
    assert "ran git" in reporter.infos
    assert reporter.infos[-1].startswith("Installed gno into /home/runner/go/bin/gno in ")


def test_binary_mode_skips_install_and_uses_build_output(reporter, tmp_path: Path) -> None:
    runner = FakeRunner()

    tool = install_lint(
        VersionSpec(),
        InstallMode.BINARY,
        workspace=tmp_path,
        source_url=SOURCE,
        reporter=reporter,
        runner=runner,
    )

    commands = [command for command, _ in runner.calls]
    assert commands == [["git", "clone", SOURCE, str(tmp_path / "gno")], ["make", "build"]]
    assert tool.path == tmp_path / "gno" / "gnovm" / "build" / "gno"


def test_existing_checkout_is_reused(tmp_path: Path) -> None:
    (tmp_path / "gno").mkdir()
    pipeline = InstallPipeline(source_url=SOURCE, workspace=tmp_path, also_install=False)

    steps = [name for name, _, _ in pipeline.steps(VersionSpec("main"))]

    assert steps == ["fetch", "checkout", "build"]


def test_reused_checkout_moves_latest_to_remote_default_branch(reporter, tmp_path: Path) -> None:
    runner = FakeRunner()
    checkout = tmp_path / "gno"

    install_lint(
        VersionSpec("v0.1.0"),
        InstallMode.BINARY,
        workspace=tmp_path,
        source_url=SOURCE,
        reporter=reporter,
        runner=runner,
    )
    runner.calls.clear()
    install_lint(
        VersionSpec("latest"),
        InstallMode.BINARY,
        workspace=tmp_path,
        source_url=SOURCE,
        reporter=reporter,
        runner=runner,
    )

    assert runner.calls == [
        (["git", "fetch", "--tags", "--force", "origin"], checkout),
        (["git", "checkout", "--detach", "origin/HEAD"], checkout),
        (["make", "build"], checkout / "gnovm"),
    ]
    assert f"Reusing existing checkout at {checkout}" in reporter.infos


def test_reused_checkout_fetches_before_pinned_checkout(tmp_path: Path) -> None:
    (tmp_path / "gno").mkdir()
    pipeline = InstallPipeline(source_url=SOURCE, workspace=tmp_path)

    commands = [command for _, command, _ in pipeline.steps(VersionSpec("v0.2.0"))]

    assert commands[:2] == [["git", "fetch", "--tags", "--force", "origin"], ["git", "checkout", "v0.2.0"]]


def test_first_gopath_entry_is_used(reporter, tmp_path: Path) -> None:
    runner = FakeRunner(gopath=os.pathsep.join(["/first", "/second"]))

    tool = install_lint(
        VersionSpec(),
        InstallMode.GOINSTALL,
        workspace=tmp_path,
        source_url=SOURCE,
        reporter=reporter,
        runner=runner,
    )

    assert tool.path == Path("/first/bin/gno")


def test_failing_step_aborts_with_install_error(reporter, tmp_path: Path) -> None:
    runner = FakeRunner(fail_on="make build")

    with pytest.raises(InstallError) as excinfo:
        install_lint(
            VersionSpec(),
            InstallMode.GOINSTALL,
            workspace=tmp_path,
            source_url=SOURCE,
            reporter=reporter,
            runner=runner,
        )

    assert excinfo.value.step == "build"
    assert excinfo.value.returncode == 2
    assert [command for command, _ in runner.calls][-1] == ["make", "build"]
    assert "make: *** [build] Error 2" in reporter.infos


def test_missing_executable_is_reported(reporter, tmp_path: Path) -> None:
    def runner(args: Sequence[str], options: CommandOptions) -> CompletedProcess[str]:
        raise FileNotFoundError("Executable 'git' was not found on PATH")

    with pytest.raises(InstallError, match="install step 'clone' failed \\(not runnable\\)"):
        install_lint(
            VersionSpec(),
            InstallMode.BINARY,
            workspace=tmp_path,
            source_url=SOURCE,
            reporter=reporter,
            runner=runner,
        )


def test_empty_gopath_is_an_install_error(reporter, tmp_path: Path) -> None:
    runner = FakeRunner(gopath="")

    with pytest.raises(InstallError, match="empty path"):
        install_lint(
            VersionSpec(),
            InstallMode.GOINSTALL,
            workspace=tmp_path,
            source_url=SOURCE,
            reporter=reporter,
            runner=runner,
        )
