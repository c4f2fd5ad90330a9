# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Normalise action inputs supplied through ``INPUT_*`` environment variables."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Final

from pydantic import BaseModel, ConfigDict, Field

from .errors import ConfigError

INPUT_PREFIX: Final[str] = "INPUT_"
TRUTHY: Final[frozenset[str]] = frozenset({"true", "True", "TRUE"})
FALSY: Final[frozenset[str]] = frozenset({"false", "False", "FALSE"})
DEPRECATED_LINT_INPUTS: Final[tuple[str, ...]] = ("allow", "deny", "forbid", "warn")


def input_env_name(name: str) -> str:
    """Return the environment variable the runner uses for input ``name``."""

    return f"{INPUT_PREFIX}{name.replace(' ', '_').upper()}"


def get_input(name: str, env: Mapping[str, str]) -> str:
    """Return the trimmed value of input ``name``, or an empty string."""

    return env.get(input_env_name(name), "").strip()


def parse_boolean(name: str, value: str) -> bool:
    """Interpret ``value`` using the YAML 1.2 core schema boolean spellings.

    Args:
        name: Input name used in error messages.
        value: Raw input value; an empty string is ``False``.

    Returns:
        bool: Parsed boolean.

    Raises:
        ConfigError: If ``value`` is not a recognised boolean spelling.
    """

    if not value:
        return False
    if value in TRUTHY:
        return True
    if value in FALSY:
        return False
    raise ConfigError(
        f'Value of key [{name}] didn\'t meet the Yaml 1.2 "Core Schema" specification (received: [{value}])'
    )


def split_list(value: str, sep: str) -> tuple[str, ...]:
    """Split ``value`` on ``sep`` and drop blank items."""

    return tuple(item.strip() for item in value.split(sep) if item.strip())


class ActionInputs(BaseModel):
    """Inputs controlling how clippy is invoked."""

    model_config = ConfigDict(frozen=True)

    working_directory: Path | None = None
    token: str | None = None
    all_features: bool = False
    check_args: tuple[str, ...] = ()
    args: tuple[str, ...] = ()
    allow: tuple[str, ...] = ()
    deny: tuple[str, ...] = ()
    forbid: tuple[str, ...] = ()
    warn: tuple[str, ...] = ()


class InputLoadResult(BaseModel):
    """Resolved inputs along with any deprecation warnings."""

    model_config = ConfigDict(frozen=True)

    inputs: ActionInputs
    warnings: tuple[str, ...] = Field(default_factory=tuple)


def load_inputs(env: Mapping[str, str] | None = None) -> InputLoadResult:
    """Read :class:`ActionInputs` from the runner's environment.

    Args:
        env: Environment mapping; defaults to :data:`os.environ`.

    Returns:
        InputLoadResult: Parsed inputs and deprecation warnings.

    Raises:
        ConfigError: If a boolean input is malformed.
    """

    source = os.environ if env is None else env
    warnings: list[str] = []
    lint_levels: dict[str, tuple[str, ...]] = {}
    for name in DEPRECATED_LINT_INPUTS:
        values = split_list(get_input(name, source), ",")
        if values:
            warnings.append(
                f"The `{name}` input is deprecated in v1.4 and can be used within the `check-args` input"
            )
        lint_levels[name] = values
    working_directory = get_input("working-directory", source)
    inputs = ActionInputs(
        working_directory=Path(working_directory) if working_directory else None,
        token=get_input("token", source) or None,
        all_features=parse_boolean("all-features", get_input("all-features", source)),
        check_args=split_list(get_input("check-args", source), " "),
        args=split_list(get_input("args", source), " "),
        **lint_levels,
    )
    return InputLoadResult(inputs=inputs, warnings=tuple(warnings))


__all__ = [
    "ActionInputs",
    "InputLoadResult",
    "get_input",
    "input_env_name",
    "load_inputs",
    "parse_boolean",
    "split_list",
]
