# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the main and post phase orchestration."""

from __future__ import annotations

import json
import re
from collections.abc import Sequence
from pathlib import Path
from subprocess import CompletedProcess

import httpx
import pytest

from gnoci_lint.cache import CacheBridge, CacheKey
from gnoci_lint.config import ActionInputs, ConfigError
from gnoci_lint.core.models import DiffPatch, InstalledTool
from gnoci_lint.core.process import CommandOptions
from gnoci_lint.github import EventContext, GitHubClient
from gnoci_lint.interfaces.cache import CacheServiceError
from gnoci_lint.orchestration import (
    Orchestrator,
    RunPhase,
    default_cache_bridge,
    default_install_workspace,
    fetch_patch,
    post_run,
    prepare_env,
    validate_working_directory,
)
from gnoci_lint.orchestration import runner
from gnoci_lint.orchestration.runner import PROBLEM_MATCHERS_PATH
from gnoci_lint.runtime.installers import install_lint

TOOL = InstalledTool(path=Path("/opt/go/bin/gno"))
EVENT = EventContext(event_name="workflow_dispatch", owner="o", repo="r")


class FakeLinter:
    """Command runner standing in for the installed linter."""

    def __init__(self, returncode: int = 0, stdout: str = "") -> None:
        self.returncode = returncode
        self.stdout = stdout
        self.calls: list[tuple[list[str], CommandOptions]] = []

    def __call__(self, args: Sequence[str], options: CommandOptions) -> CompletedProcess[str]:
        self.calls.append((list(args), options))
        if list(args[1:]) == ["cache", "status"]:
            return CompletedProcess(list(args), 0, "cache: 3 entries\n", "")
        return CompletedProcess(list(args), self.returncode, self.stdout, "")


def _installer(calls: list[str] | None = None):
    def install(inputs: ActionInputs, workspace: Path, reporter) -> InstalledTool:
        if calls is not None:
            calls.append("install")
        return TOOL

    return install


def _no_patch(inputs: ActionInputs, event: EventContext, reporter) -> DiffPatch:
    return DiffPatch.empty()


def _orchestrator(reporter, tmp_path: Path, linter: FakeLinter, **overrides) -> Orchestrator:
    inputs = overrides.pop("inputs", ActionInputs(only_new_issues=False))
    event = overrides.pop("event", EVENT)
    options = {
        "workspace": tmp_path / "workspace",
        "installer": _installer(),
        "fetcher": _no_patch,
        "command_runner": linter,
        "matchers_path": tmp_path / "missing-matchers.json",
    }
    options.update(overrides)
    return Orchestrator(inputs, event, reporter, **options)


def test_clean_run_reports_no_issues(reporter, tmp_path: Path) -> None:
    linter = FakeLinter(returncode=0, stdout="all good\n")
    orchestrator = _orchestrator(reporter, tmp_path, linter)

    result = orchestrator.run()

    assert result is not None
    assert result.returncode == 0
    assert not reporter.failed
    assert orchestrator.phase is RunPhase.DONE
    assert reporter.groups == ["prepare environment", "run gnoci-lint"]
    assert reporter.paths == [Path("/opt/go/bin")]
    assert "gnoci-lint found no issues" in reporter.infos
    assert "all good" in reporter.infos
    assert linter.calls[0][0] == ["/opt/go/bin/gno", "lint"]
    assert linter.calls[0][1].check is False
    assert any(line.startswith("Prepared env in ") for line in reporter.infos)
    assert reporter.infos[-1].startswith("Ran gnoci-lint in ")


def test_exit_status_one_means_issues_found(reporter, tmp_path: Path) -> None:
    _orchestrator(reporter, tmp_path, FakeLinter(returncode=1)).run()

    assert reporter.failed
    assert reporter.failure_messages == ("issues found",)


@pytest.mark.parametrize("code", [2, 124])
def test_other_exit_status_is_a_tool_failure(reporter, tmp_path: Path, code: int) -> None:
    _orchestrator(reporter, tmp_path, FakeLinter(returncode=code)).run()

    assert reporter.failure_messages == (f"gnoci-lint exit with code {code}",)


def test_working_directory_must_be_a_directory(reporter, tmp_path: Path) -> None:
    not_a_dir = tmp_path / "file.txt"
    not_a_dir.write_text("", encoding="utf-8")
    linter = FakeLinter()
    inputs = ActionInputs(only_new_issues=False, working_directory=not_a_dir)

    result = _orchestrator(reporter, tmp_path, linter, inputs=inputs).run()

    assert result is None
    assert linter.calls == []
    message = f"working-directory ({not_a_dir}) was not a path"
    assert reporter.failure_messages == (message,)
    assert f"Failed to run: {message}" in reporter.errors


def test_linter_runs_inside_working_directory(reporter, tmp_path: Path) -> None:
    project = tmp_path / "project"
    project.mkdir()
    linter = FakeLinter()
    inputs = ActionInputs(only_new_issues=False, working_directory=project, args=("-v",), timeout=30)

    _orchestrator(reporter, tmp_path, linter, inputs=inputs).run()

    args, options = linter.calls[0]
    assert args == ["/opt/go/bin/gno", "lint", "-v"]
    assert options.cwd == project.resolve()
    assert options.timeout == 30


def test_install_failure_stops_before_linting(reporter, tmp_path: Path) -> None:
    def broken_installer(inputs: ActionInputs, workspace: Path, reporter) -> InstalledTool:
        raise RuntimeError("install step 'build' failed (exit status 2): boom")

    linter = FakeLinter()
    orchestrator = _orchestrator(reporter, tmp_path, linter, installer=broken_installer)

    assert orchestrator.run() is None
    assert orchestrator.phase is RunPhase.PREPARING
    assert linter.calls == []
    assert reporter.paths == []
    assert reporter.failure_messages == ("install step 'build' failed (exit status 2): boom",)


def test_debug_cache_runs_cache_status_first(reporter, tmp_path: Path) -> None:
    linter = FakeLinter()
    inputs = ActionInputs(only_new_issues=False, debug=frozenset({"cache"}))

    _orchestrator(reporter, tmp_path, linter, inputs=inputs).run()

    assert [args for args, _ in linter.calls] == [
        ["/opt/go/bin/gno", "cache", "status"],
        ["/opt/go/bin/gno", "lint"],
    ]
    assert "cache: 3 entries" in reporter.infos


def test_problem_matchers_registered_when_present(reporter, tmp_path: Path) -> None:
    matchers = tmp_path / "problem-matchers.json"
    matchers.write_text("{}", encoding="utf-8")
    inputs = ActionInputs(only_new_issues=False, problem_matchers=True)

    _orchestrator(reporter, tmp_path, FakeLinter(), inputs=inputs, matchers_path=matchers).run()

    assert reporter.matchers == [matchers]


def test_problem_matchers_skipped_when_missing(reporter, tmp_path: Path) -> None:
    inputs = ActionInputs(only_new_issues=False, problem_matchers=True)

    _orchestrator(reporter, tmp_path, FakeLinter(), inputs=inputs).run()

    assert reporter.matchers == []


def test_push_event_scopes_lint_to_fetched_patch(reporter, tmp_path: Path) -> None:
    requested: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requested.append(request.url.path)
        return httpx.Response(200, text="diff --git a/a.gno b/a.gno\n--- a/a.gno\n+++ b/a.gno\n@@ -1 +1 @@\n-x\n+y\n")

    def fetcher(inputs: ActionInputs, event: EventContext, reporter) -> DiffPatch:
        return fetch_patch(
            inputs,
            event,
            reporter=reporter,
            temp_dir=tmp_path / "patches",
            client_factory=lambda i, e: GitHubClient(i.github_token, transport=httpx.MockTransport(handler)),
        )

    build_steps: list[list[str]] = []

    def build_runner(args: Sequence[str], options: CommandOptions) -> CompletedProcess[str]:
        build_steps.append(list(args))
        stdout = "/home/runner/go\n" if list(args[:2]) == ["go", "env"] else ""
        return CompletedProcess(list(args), 0, stdout, "")

    def installer(inputs: ActionInputs, workspace: Path, reporter) -> InstalledTool:
        return install_lint(
            inputs.version_spec,
            inputs.install_mode,
            workspace=workspace,
            source_url=inputs.source_repository,
            reporter=reporter,
            runner=build_runner,
        )

    linter = FakeLinter(returncode=0)
    event = EventContext(event_name="push", owner="o", repo="r", payload={"before": "abc", "after": "def"})
    inputs = ActionInputs(only_new_issues=True, github_token="t", version="v1.2.3")

    _orchestrator(reporter, tmp_path, linter, inputs=inputs, event=event, fetcher=fetcher, installer=installer).run()

    assert requested == ["/repos/o/r/compare/abc...def"]
    assert ["git", "checkout", "v1.2.3"] in build_steps
    assert reporter.paths == [Path("/home/runner/go/bin")]
    patch_path = tmp_path / "patches" / "push.patch"
    assert patch_path.read_text(encoding="utf-8").endswith("+y\n")
    assert linter.calls[-1][0] == ["/home/runner/go/bin/gno", "lint", f"--new-from-patch={patch_path}"]
    assert "gnoci-lint found no issues" in reporter.infos
    assert not reporter.failed


class OrderedService:
    def __init__(self, log: list[str]) -> None:
        self.log = log

    def restore(self, paths, primary_key, restore_keys=()):
        self.log.append("restore")
        return None

    def save(self, paths, key) -> None:
        self.log.append(f"save:{key}")


def test_cache_restore_precedes_install(reporter, tmp_path: Path) -> None:
    log: list[str] = []
    bridge = CacheBridge(OrderedService(log), reporter, [tmp_path / "cache"])

    prepared = prepare_env(
        ActionInputs(only_new_issues=False),
        EVENT,
        reporter=reporter,
        workspace=tmp_path,
        cache=bridge,
        cache_key=CacheKey(primary="k"),
        installer=_installer(log),
        fetcher=_no_patch,
    )

    assert log == ["restore", "install"]
    assert prepared.tool == TOOL
    assert prepared.patch.is_empty


def test_post_run_saves_primary_key(reporter, tmp_path: Path) -> None:
    log: list[str] = []
    bridge = CacheBridge(OrderedService(log), reporter, [tmp_path / "cache"])
    reporter.save_state("cache-primary-key", "k")

    assert post_run(bridge, reporter) is True
    assert log == ["save:k"]
    assert not reporter.failed


def test_post_run_failure_marks_phase_failed(reporter, tmp_path: Path) -> None:
    class BrokenService(OrderedService):
        def save(self, paths, key) -> None:
            raise CacheServiceError("no space left")

    bridge = CacheBridge(BrokenService([]), reporter, [tmp_path / "cache"])
    reporter.save_state("cache-primary-key", "k")

    assert post_run(bridge, reporter) is False
    assert "Failed to post-run: no space left" in reporter.errors
    assert reporter.failure_messages == ("no space left",)


def test_validate_working_directory(tmp_path: Path) -> None:
    assert validate_working_directory(None) is None
    assert validate_working_directory(tmp_path) == tmp_path.resolve()
    with pytest.raises(ConfigError, match="was not a path"):
        validate_working_directory(tmp_path / "missing")


def test_default_install_workspace_prefers_runner_temp(tmp_path: Path) -> None:
    assert default_install_workspace({"RUNNER_TEMP": str(tmp_path)}) == tmp_path / "gnoci-lint"


def test_skip_cache_disables_bridge(reporter, tmp_path: Path) -> None:
    inputs = ActionInputs(only_new_issues=False, skip_cache=True)

    bridge = default_cache_bridge(inputs, reporter, {"GNOCI_LINT_CACHE_DIR": str(tmp_path)})

    assert bridge.paths == ()
    assert bridge.restore(CacheKey(primary="k")) is None
    assert reporter.infos == ["Skipping cache restoration"]


def test_cache_setup_failure_runs_without_cache(reporter, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    prepared_with: dict[str, object] = {}

    def unreadable_manifest(version, *, root):
        raise OSError("go.sum: permission denied")

    def stop_preparing(inputs, event, **kwargs):
        prepared_with.update(kwargs)
        raise RuntimeError("stop before installing")

    monkeypatch.setattr(runner, "build_cache_key", unreadable_manifest)
    monkeypatch.setattr(runner, "prepare_env", stop_preparing)
    inputs = ActionInputs(only_new_issues=False, skip_cache=True)
    env = {"GNOCI_LINT_CACHE_DIR": str(tmp_path / "cache"), "RUNNER_TEMP": str(tmp_path)}

    assert runner.run(inputs, EVENT, reporter, env=env) is None
    assert reporter.warnings == ["Failed to set up cache: go.sum: permission denied"]
    assert prepared_with["cache"] is None
    assert prepared_with["cache_key"] is None
    assert reporter.errors == ["Failed to run: stop before installing"]


def test_bundled_problem_matcher_parses_lint_output() -> None:
    config = json.loads(PROBLEM_MATCHERS_PATH.read_text(encoding="utf-8"))
    [matcher] = config["problemMatcher"]
    pattern = re.compile(matcher["pattern"][0]["regexp"])

    match = pattern.match("gno.land/r/demo/foo.gno:12:5: undefined: bar (code=gnoTypeCheckError)")

    assert matcher["owner"] == "gnoci-lint"
    assert match is not None
    assert match.groups() == ("gno.land/r/demo/foo.gno", "12", "5", "undefined: bar", "gnoTypeCheckError")
