# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Load :class:`ActionInputs` from ``INPUT_*`` environment variables."""

from __future__ import annotations

import os
import shlex
from collections.abc import Mapping
from pathlib import Path
from typing import Final

from pydantic import ValidationError

from .models import ActionInputs, ConfigError, InstallMode

INPUT_PREFIX: Final[str] = "INPUT_"
TRUE_VALUES: Final[frozenset[str]] = frozenset({"true", "True", "TRUE"})
FALSE_VALUES: Final[frozenset[str]] = frozenset({"false", "False", "FALSE"})


def input_variable(name: str) -> str:
    """Return the environment variable the runner uses for input ``name``."""

    return f"{INPUT_PREFIX}{name.replace(' ', '_').upper()}"


def get_input(name: str, env: Mapping[str, str], *, required: bool = False) -> str:
    """Return the trimmed value of input ``name``.

    Args:
        name: Input name as declared by the action, e.g. ``only-new-issues``.
        env: Environment mapping to read from.
        required: Raise when the input is missing or blank.

    Returns:
        str: Trimmed input value, empty when not supplied.

    Raises:
        ConfigError: If ``required`` is set and no value was supplied.
    """

    value = env.get(input_variable(name), "").strip()
    if required and not value:
        raise ConfigError(f"Input required and not supplied: {name}")
    return value


def get_boolean_input(name: str, env: Mapping[str, str], *, required: bool = False) -> bool:
    """Return input ``name`` interpreted with the YAML 1.2 core boolean spellings.

    Raises:
        ConfigError: If the value is not one of the accepted spellings.
    """

    value = get_input(name, env, required=required)
    if not value:
        return False
    if value in TRUE_VALUES:
        return True
    if value in FALSE_VALUES:
        return False
    raise ConfigError(
        f"Input does not meet YAML 1.2 \"Core Schema\" specification: {name}\n"
        "Support boolean input list: `true | True | TRUE | false | False | FALSE`",
    )


def _parse_install_mode(raw: str) -> InstallMode:
    if not raw:
        return InstallMode.GOINSTALL
    try:
        return InstallMode(raw.lower())
    except ValueError as exc:
        choices = ", ".join(mode.value for mode in InstallMode)
        raise ConfigError(f"install-mode must be one of {choices}, got {raw!r}") from exc


def _parse_debug(raw: str) -> frozenset[str]:
    return frozenset(flag.strip() for flag in raw.split(",") if flag.strip())


def _parse_args(raw: str) -> tuple[str, ...]:
    try:
        return tuple(shlex.split(raw))
    except ValueError as exc:
        raise ConfigError(f"args could not be parsed: {exc}") from exc


def _parse_timeout(raw: str) -> float | None:
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigError(f"timeout must be a number of seconds, got {raw!r}") from exc


def load_inputs(env: Mapping[str, str] | None = None) -> ActionInputs:
    """Build validated inputs from the runner environment.

    Args:
        env: Environment mapping, defaults to :data:`os.environ`.

    Returns:
        ActionInputs: Validated inputs for the run.

    Raises:
        ConfigError: If any input is missing or malformed.
    """

    source = os.environ if env is None else env
    working_directory = get_input("working-directory", source)
    payload: dict[str, object] = {
        "only_new_issues": get_boolean_input("only-new-issues", source, required=True),
        "install_mode": _parse_install_mode(get_input("install-mode", source)),
        "github_token": get_input("github-token", source),
        "debug": _parse_debug(get_input("debug", source)),
        "problem_matchers": get_boolean_input("problem-matchers", source),
        "working_directory": Path(working_directory) if working_directory else None,
        "args": _parse_args(get_input("args", source)),
        "skip_cache": get_boolean_input("skip-cache", source),
        "timeout": _parse_timeout(get_input("timeout", source)),
    }
    if version := get_input("version", source):
        payload["version"] = version
    if repository := get_input("source-repository", source):
        payload["source_repository"] = repository
    try:
        return ActionInputs.model_validate(payload)
    except ValidationError as exc:
        details = "; ".join(error["msg"] for error in exc.errors())
        raise ConfigError(f"invalid inputs: {details}") from exc


__all__ = [
    "get_boolean_input",
    "get_input",
    "input_variable",
    "load_inputs",
]
