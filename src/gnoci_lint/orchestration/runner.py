# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Drive the main and post phases of a gnoci-lint run."""

from __future__ import annotations

import os
import shlex
import tempfile
import time
from collections.abc import Callable, Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from subprocess import CompletedProcess
from typing import Final

from ..cache import CacheBridge, CacheKey, LocalCacheService, build_cache_key, default_cache_paths, default_cache_root
from ..config.models import DEBUG_CACHE, ActionInputs, ConfigError
from ..core.models import DiffPatch, InstalledTool, LintOutcome, RunResult
from ..core.process import CommandOptions, run_command
from ..github.context import EventContext
from ..interfaces.reporting import Reporter, iter_output_lines
from ..runtime.installers import install_lint
from .changeset import fetch_patch

PROBLEM_MATCHERS_PATH: Final[Path] = Path(__file__).resolve().parents[1] / "problem-matchers.json"
PREPARE_GROUP: Final[str] = "prepare environment"
RUN_GROUP: Final[str] = "run gnoci-lint"

Installer = Callable[[ActionInputs, Path, Reporter], InstalledTool]
Fetcher = Callable[[ActionInputs, EventContext, Reporter], DiffPatch]
CommandRunner = Callable[[Sequence[str], CommandOptions], CompletedProcess[str]]


class RunPhase(str, Enum):
    """Stages of the main phase, in execution order."""

    INIT = "init"
    PREPARING = "preparing"
    RUNNING = "running"
    REPORTING = "reporting"
    DONE = "done"


@dataclass(frozen=True, slots=True)
class PreparedEnv:
    """Outputs of the preparation stage."""

    tool: InstalledTool
    patch: DiffPatch


def default_install_workspace(env: Mapping[str, str] | None = None) -> Path:
    """Return the directory receiving the linter source checkout."""

    source = os.environ if env is None else env
    base = source.get("RUNNER_TEMP") or tempfile.gettempdir()
    return Path(base) / "gnoci-lint"


def default_cache_bridge(
    inputs: ActionInputs,
    reporter: Reporter,
    env: Mapping[str, str] | None = None,
) -> CacheBridge:
    """Return a bridge over the local cache service for the Go build caches."""

    service = LocalCacheService(default_cache_root(env))
    paths: list[Path] = [] if inputs.skip_cache else default_cache_paths()
    return CacheBridge(service, reporter, paths, enabled=not inputs.skip_cache)


def _default_installer(inputs: ActionInputs, workspace: Path, reporter: Reporter) -> InstalledTool:
    return install_lint(
        inputs.version_spec,
        inputs.install_mode,
        workspace=workspace,
        source_url=inputs.source_repository,
        reporter=reporter,
        timeout=inputs.timeout,
    )


def _default_fetcher(inputs: ActionInputs, event: EventContext, reporter: Reporter) -> DiffPatch:
    return fetch_patch(inputs, event, reporter=reporter)


def _default_command_runner(args: Sequence[str], options: CommandOptions) -> CompletedProcess[str]:
    return run_command(args, options=options)


def _elapsed_ms(started_at: float) -> int:
    return int((time.monotonic() - started_at) * 1000)


def prepare_env(
    inputs: ActionInputs,
    event: EventContext,
    *,
    reporter: Reporter,
    workspace: Path,
    cache: CacheBridge | None = None,
    cache_key: CacheKey | None = None,
    installer: Installer | None = None,
    fetcher: Fetcher | None = None,
) -> PreparedEnv:
    """Install the linter and fetch the change-set patch in parallel.

    Cache restoration runs ahead of the installation in the same worker since
    it populates the Go caches the build reads. Both workers are joined before
    returning.

    Raises:
        InstallError: If the installation fails.
    """

    started_at = time.monotonic()
    install = installer or _default_installer
    fetch = fetcher or _default_fetcher

    def restore_and_install() -> InstalledTool:
        if cache is not None and cache_key is not None:
            cache.restore(cache_key)
        return install(inputs, workspace, reporter)

    with ThreadPoolExecutor(max_workers=2) as executor:
        install_future = executor.submit(restore_and_install)
        patch_future = executor.submit(fetch, inputs, event, reporter)
        patch = patch_future.result()
        tool = install_future.result()

    reporter.info(f"Prepared env in {_elapsed_ms(started_at)}ms")
    return PreparedEnv(tool=tool, patch=patch)


def validate_working_directory(working_directory: Path | None) -> Path | None:
    """Return the absolute working directory, or ``None`` for the current one.

    Raises:
        ConfigError: If the path does not exist or is not a directory.
    """

    if working_directory is None:
        return None
    if not working_directory.is_dir():
        raise ConfigError(f"working-directory ({working_directory}) was not a path")
    return working_directory.resolve()


def _log_completed(reporter: Reporter, completed: CompletedProcess[str]) -> None:
    for line in iter_output_lines(completed.stdout, completed.stderr):
        reporter.info(line)


def run_lint(
    tool: InstalledTool,
    patch: DiffPatch,
    inputs: ActionInputs,
    *,
    reporter: Reporter,
    command_runner: CommandRunner | None = None,
    matchers_path: Path = PROBLEM_MATCHERS_PATH,
) -> RunResult:
    """Invoke ``<tool> lint`` and report its outcome.

    Args:
        tool: Installed linter.
        patch: Change-set patch, empty to report every issue.
        inputs: Validated action inputs.
        reporter: Destination for logs and the failure signal.
        command_runner: Command runner, defaults to :func:`run_command`.
        matchers_path: Problem matcher configuration registered on request.

    Returns:
        RunResult: Exit status and captured output of the linter.

    Raises:
        ConfigError: If ``working-directory`` is not an existing directory.
    """

    execute = command_runner or _default_command_runner
    options = CommandOptions(check=False, timeout=inputs.timeout)

    if inputs.debug_enabled(DEBUG_CACHE):
        _log_completed(reporter, execute([str(tool.path), "cache", "status"], options))

    if inputs.problem_matchers and matchers_path.is_file():
        reporter.add_matcher(matchers_path)

    cwd = validate_working_directory(inputs.working_directory)
    cmd = [str(tool.path), "lint", *inputs.args, *patch.lint_arguments()]
    reporter.info(f"Running [{shlex.join(cmd)}] in [{cwd or Path.cwd()}] ...")
    started_at = time.monotonic()

    completed = execute(cmd, options.with_cwd(cwd))
    _log_completed(reporter, completed)
    result = RunResult(returncode=completed.returncode, stdout=completed.stdout or "", stderr=completed.stderr or "")
    match result.outcome:
        case LintOutcome.CLEAN:
            reporter.info("gnoci-lint found no issues")
        case LintOutcome.ISSUES_FOUND:
            reporter.set_failed("issues found")
        case LintOutcome.TOOL_FAILURE:
            reporter.set_failed(f"gnoci-lint exit with code {result.returncode}")

    reporter.info(f"Ran gnoci-lint in {_elapsed_ms(started_at)}ms")
    return result


class Orchestrator:
    """Run the main phase and track which stage it reached.

    Failures never escape :meth:`run`; they are reported through the reporter,
    whose ``failed`` flag decides the process exit status.
    """

    def __init__(
        self,
        inputs: ActionInputs,
        event: EventContext,
        reporter: Reporter,
        *,
        workspace: Path,
        cache: CacheBridge | None = None,
        cache_key: CacheKey | None = None,
        installer: Installer | None = None,
        fetcher: Fetcher | None = None,
        command_runner: CommandRunner | None = None,
        matchers_path: Path = PROBLEM_MATCHERS_PATH,
    ) -> None:
        self.inputs = inputs
        self.event = event
        self.reporter = reporter
        self.workspace = workspace
        self.cache = cache
        self.cache_key = cache_key
        self.installer = installer
        self.fetcher = fetcher
        self.command_runner = command_runner
        self.matchers_path = matchers_path
        self.phase = RunPhase.INIT
        self.result: RunResult | None = None

    def run(self) -> RunResult | None:
        """Execute the main phase.

        Returns:
            RunResult | None: Linter result, ``None`` when it never ran.
        """

        try:
            self._run()
        except Exception as exc:  # noqa: BLE001
            self.reporter.error(f"Failed to run: {exc}")
            self.reporter.set_failed(str(exc))
        return self.result

    def _run(self) -> None:
        self.phase = RunPhase.PREPARING
        with self.reporter.group(PREPARE_GROUP):
            prepared = prepare_env(
                self.inputs,
                self.event,
                reporter=self.reporter,
                workspace=self.workspace,
                cache=self.cache,
                cache_key=self.cache_key,
                installer=self.installer,
                fetcher=self.fetcher,
            )
        self.reporter.add_path(prepared.tool.directory)

        self.phase = RunPhase.RUNNING
        with self.reporter.group(RUN_GROUP):
            self.result = run_lint(
                prepared.tool,
                prepared.patch,
                self.inputs,
                reporter=self.reporter,
                command_runner=self.command_runner,
                matchers_path=self.matchers_path,
            )
            self.phase = RunPhase.REPORTING
        self.phase = RunPhase.DONE


def _default_cache(
    inputs: ActionInputs,
    reporter: Reporter,
    env: Mapping[str, str] | None,
) -> tuple[CacheBridge | None, CacheKey | None]:
    key_root = inputs.working_directory if inputs.working_directory is not None else Path.cwd()
    try:
        cache = default_cache_bridge(inputs, reporter, env)
        cache_key = build_cache_key(inputs.version_spec, root=key_root)
    except Exception as exc:  # noqa: BLE001
        reporter.warning(f"Failed to set up cache: {exc}")
        return None, None
    return cache, cache_key


def run(
    inputs: ActionInputs,
    event: EventContext,
    reporter: Reporter,
    *,
    env: Mapping[str, str] | None = None,
) -> RunResult | None:
    """Run the main phase with the default installer, fetcher and cache.

    A cache that cannot be set up is reported as a warning and the run goes on
    without it.
    """

    cache, cache_key = _default_cache(inputs, reporter, env)
    orchestrator = Orchestrator(
        inputs,
        event,
        reporter,
        workspace=default_install_workspace(env),
        cache=cache,
        cache_key=cache_key,
    )
    return orchestrator.run()


def post_run(cache: CacheBridge, reporter: Reporter) -> bool:
    """Execute the post phase: save the caches restored by the main phase.

    Returns:
        bool: ``True`` when the phase succeeded.
    """

    try:
        cache.save()
    except Exception as exc:  # noqa: BLE001
        reporter.error(f"Failed to post-run: {exc}")
        reporter.set_failed(str(exc))
        return False
    return True


__all__ = [
    "PREPARE_GROUP",
    "PROBLEM_MATCHERS_PATH",
    "RUN_GROUP",
    "Orchestrator",
    "PreparedEnv",
    "RunPhase",
    "default_cache_bridge",
    "default_install_workspace",
    "post_run",
    "prepare_env",
    "run",
    "run_lint",
    "validate_working_directory",
]
