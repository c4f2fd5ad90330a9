# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Run ``cargo clippy`` and stream its JSON output through the diagnostic pipeline."""

from __future__ import annotations

import logging
import shutil

# Bandit: subprocess usage is intentional; commands are argument lists and never use ``shell=True``.
import subprocess  # nosec B404
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path
from subprocess import CompletedProcess
from typing import Final

from ..config import ActionInputs
from ..diagnostics.pipeline import DiagnosticPipeline, PipelineResult
from ..errors import StreamReadFailure, ToolchainNotFound

LOGGER = logging.getLogger(__name__)

MESSAGE_FORMAT_FLAG: Final[str] = "--message-format=json"
ALL_FEATURES_FLAG: Final[str] = "--all-features"
LINT_LEVEL_FLAGS: Final[tuple[tuple[str, str], ...]] = (
    ("allow", "-A"),
    ("warn", "-W"),
    ("deny", "-D"),
    ("forbid", "-F"),
)

Spawner = Callable[..., "subprocess.Popen[str]"]


def _normalize_args(args: Sequence[str]) -> list[str]:
    """Resolve the executable of ``args`` on ``PATH``.

    Raises:
        ValueError: If no arguments are provided.
        FileNotFoundError: If the executable cannot be resolved.
    """

    if not args:
        raise ValueError("subprocess command requires at least one argument")
    head, *rest = args
    if Path(head).is_absolute():
        return [head, *rest]
    resolved = shutil.which(head)
    if resolved is None:
        raise FileNotFoundError(f"Executable '{head}' was not found on PATH")
    return [resolved, *rest]


def run_command(args: Sequence[str], *, cwd: Path | None = None) -> CompletedProcess[str]:
    """Execute ``args`` and capture its text output without raising on failure.

    Args:
        args: Command and argument sequence to execute.
        cwd: Optional working directory.

    Returns:
        CompletedProcess[str]: Subprocess execution metadata.

    Raises:
        FileNotFoundError: If the executable cannot be resolved on ``PATH``.
    """

    normalized = _normalize_args(args)
    return subprocess.run(  # nosec B603 - argument list, no shell
        normalized,
        cwd=str(cwd) if cwd is not None else None,
        check=False,
        capture_output=True,
        text=True,
        stdin=subprocess.DEVNULL,
    )


def build_clippy_command(inputs: ActionInputs, *, cargo: Path | str = "cargo") -> list[str]:
    """Return the ``cargo clippy`` argument list for ``inputs``.

    Lint level inputs and extra ``args`` are passed to clippy itself after a
    ``--`` separator, which is omitted when there is nothing to forward.

    Args:
        inputs: Normalised action inputs.
        cargo: Path or name of the cargo executable.

    Returns:
        list[str]: Full command line.
    """

    command = [str(cargo), "clippy", MESSAGE_FORMAT_FLAG]
    if inputs.all_features:
        command.append(ALL_FEATURES_FLAG)
    command.extend(inputs.check_args)
    forwarded: list[str] = []
    for field_name, flag in LINT_LEVEL_FLAGS:
        for lint in getattr(inputs, field_name):
            forwarded.extend((flag, lint))
    forwarded.extend(inputs.args)
    if forwarded:
        command.append("--")
        command.extend(forwarded)
    return command


@dataclass(frozen=True, slots=True)
class ClippyRun:
    """Exit status and pipeline output of a clippy invocation."""

    command: tuple[str, ...]
    exit_code: int
    outcome: PipelineResult


def run_clippy(
    inputs: ActionInputs,
    *,
    cargo: Path | str = "cargo",
    spawn: Spawner = subprocess.Popen,
) -> ClippyRun:
    """Run clippy and feed its stdout line by line into a :class:`DiagnosticPipeline`.

    stderr is inherited so cargo's progress output reaches the console
    unchanged. The exit code is reported as-is; deciding whether the run
    failed is left to the caller.

    Args:
        inputs: Normalised action inputs.
        cargo: Path or name of the cargo executable.
        spawn: Process factory, replaceable in tests.

    Returns:
        ClippyRun: Exit code and rendered diagnostics.

    Raises:
        ToolchainNotFound: If cargo cannot be started.
        StreamReadFailure: If reading cargo's stdout fails.
    """

    command = build_clippy_command(inputs, cargo=cargo)
    LOGGER.debug("running %s in %s", " ".join(command), inputs.working_directory or Path.cwd())
    pipeline = DiagnosticPipeline()
    try:
        process = spawn(  # nosec B603 - argument list, no shell
            command,
            cwd=str(inputs.working_directory) if inputs.working_directory is not None else None,
            stdout=subprocess.PIPE,
            stdin=subprocess.DEVNULL,
            text=True,
            encoding="utf-8",
            errors="replace",
        )
    except FileNotFoundError as exc:
        raise ToolchainNotFound(f"Unable to start {command[0]}: {exc}") from exc
    with process:
        if process.stdout is None:
            raise StreamReadFailure("cargo stdout is not available", lines_read=0, records_decoded=0)
        try:
            outcome = pipeline.run(process.stdout)
        except StreamReadFailure:
            process.kill()
            raise
        exit_code = process.wait()
    LOGGER.debug(
        "clippy exited with %s after %d line(s), %d record(s), %d duplicate(s)",
        exit_code,
        outcome.stats.lines_read,
        outcome.stats.records,
        outcome.duplicates,
    )
    return ClippyRun(command=tuple(command), exit_code=exit_code, outcome=outcome)


__all__ = ["ClippyRun", "build_clippy_command", "run_clippy", "run_command"]
