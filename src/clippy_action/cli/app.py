# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring the ``run`` and ``report`` commands."""

from __future__ import annotations

import logging
import sys
import time
from collections.abc import Iterator
from datetime import UTC, datetime
from pathlib import Path
from typing import Final, TextIO

import typer
from rich.console import Console
from rich.logging import RichHandler

from ..config import ActionInputs, load_inputs, split_list
from ..core.logging import ActionLog
from ..core.serialization import dump_json
from ..diagnostics.pipeline import DiagnosticPipeline, PipelineResult
from ..errors import ClippyActionError, StreamReadFailure
from ..reporting.checks import build_check_output, build_check_run_update, check_run_name
from ..reporting.console import ConsoleStyle, emit_blocks
from ..runtime.process import run_clippy
from ..runtime.toolchain import detect_toolchain, find_cargo, host_arch, host_os
from .options import (
    ALL_FEATURES_OPTION,
    ANNOTATIONS_JSON_OPTION,
    ARGS_OPTION,
    CHECK_ARGS_OPTION,
    CHECK_OUTPUT_OPTION,
    COLOR_OPTION,
    EMOJI_OPTION,
    SOURCE_ARGUMENT,
    STYLE_OPTION,
    VERBOSE_OPTION,
    WORKING_DIRECTORY_OPTION,
)

STDIN_MARKER: Final[str] = "-"
READ_CHUNK_SIZE: Final[int] = 64 * 1024

app = typer.Typer(
    name="clippy-action",
    help="Run cargo clippy and turn its diagnostics into a grouped report and annotations.",
    no_args_is_help=True,
    add_completion=False,
)


def _configure_logging(verbose: bool) -> None:
    """Route library logging through rich, at debug level when ``verbose``."""

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _apply_overrides(
    inputs: ActionInputs,
    *,
    working_directory: Path | None,
    all_features: bool | None,
    check_args: str | None,
    args: str | None,
) -> ActionInputs:
    """Return ``inputs`` with any CLI-supplied values taking precedence."""

    update: dict[str, object] = {}
    if working_directory is not None:
        update["working_directory"] = working_directory
    if all_features is not None:
        update["all_features"] = all_features
    if check_args is not None:
        update["check_args"] = split_list(check_args, " ")
    if args is not None:
        update["args"] = split_list(args, " ")
    return inputs.model_copy(update=update) if update else inputs


def _summarise(outcome: PipelineResult, log: ActionLog) -> None:
    annotations = outcome.result.annotations
    files = sum(1 for group in outcome.groups if group.file is not None)
    message = f"{len(annotations)} annotation(s) across {files} file(s)"
    if outcome.duplicates:
        message = f"{message}; {outcome.duplicates} duplicate(s) dropped"
    if outcome.stats.unknown_severities:
        labels = ", ".join(sorted(outcome.stats.unknown_severities))
        message = f"{message}; unknown level(s) reported as notes: {labels}"
    log.info(message)


def _write_annotations(outcome: PipelineResult, destination: Path | None, log: ActionLog) -> None:
    if destination is None:
        return
    dump_json(outcome.result.annotations, destination)
    log.ok(f"Wrote {len(outcome.result.annotations)} annotation(s) to {destination}")


@app.command("run")
def run_command(
    working_directory: WORKING_DIRECTORY_OPTION = None,
    all_features: ALL_FEATURES_OPTION = None,
    check_args: CHECK_ARGS_OPTION = None,
    args: ARGS_OPTION = None,
    annotations_json: ANNOTATIONS_JSON_OPTION = None,
    check_output: CHECK_OUTPUT_OPTION = None,
    style: STYLE_OPTION = ConsoleStyle.GITHUB,
    color: COLOR_OPTION = None,
    emoji: EMOJI_OPTION = True,
    verbose: VERBOSE_OPTION = False,
) -> None:
    """Run cargo clippy, print the grouped report, and exit with cargo's status."""

    _configure_logging(verbose)
    log = ActionLog(style=style, color=color, emoji=emoji)
    try:
        loaded = load_inputs()
        for message in loaded.warnings:
            log.warn(message)
        inputs = _apply_overrides(
            loaded.inputs,
            working_directory=working_directory,
            all_features=all_features,
            check_args=check_args,
            args=args,
        )
        if check_output is not None and not inputs.token:
            log.warn("No `token` input set; the check-run payload will be written but not published")
        with log.group("Check if `cargo` exists"):
            cargo = find_cargo()
            log.info(f"Found `cargo` binary in path [{cargo}]")
        with log.group("Collecting rustc information..."):
            toolchain = detect_toolchain()
            log.info(f"Using Rust {toolchain.channel.value} {toolchain.version}")
        started_at = datetime.now(UTC)
        started = time.monotonic()
        run = run_clippy(inputs, cargo=cargo)
    except StreamReadFailure as exc:
        if exc.partial is not None:
            emit_blocks(exc.partial.result.blocks, style=style, use_color=color)
        log.fail(str(exc))
        raise typer.Exit(code=1) from exc
    except ClippyActionError as exc:
        log.fail(str(exc))
        raise typer.Exit(code=1) from exc

    elapsed_ms = int((time.monotonic() - started) * 1000)
    emit_blocks(run.outcome.result.blocks, style=style, use_color=color)
    _summarise(run.outcome, log)
    _write_annotations(run.outcome, annotations_json, log)
    if check_output is not None:
        output = build_check_output(
            exit_code=run.exit_code,
            annotations=run.outcome.result.annotations,
            toolchain=toolchain,
            os_name=host_os(),
            arch=host_arch(),
            elapsed_ms=elapsed_ms,
            working_directory=inputs.working_directory,
        )
        payload = build_check_run_update(
            output,
            exit_code=run.exit_code,
            started_at=started_at,
            completed_at=datetime.now(UTC),
        )
        dump_json({"name": check_run_name(toolchain, inputs.working_directory), **payload}, check_output)
        log.ok(f"Wrote check-run payload to {check_output}")
    log.info(f"Clippy exited with code {run.exit_code}")
    raise typer.Exit(code=run.exit_code)


def _iter_chunks(handle: TextIO) -> Iterator[str]:
    while chunk := handle.read(READ_CHUNK_SIZE):
        yield chunk


def _read_report(source: Path) -> PipelineResult:
    """Push the contents of ``source`` through a fresh pipeline.

    Raises:
        StreamReadFailure: If ``source`` cannot be read.
    """

    pipeline = DiagnosticPipeline()
    try:
        if str(source) == STDIN_MARKER:
            for chunk in _iter_chunks(sys.stdin):
                pipeline.feed(chunk)
        else:
            with source.open(encoding="utf-8", errors="replace") as handle:
                for chunk in _iter_chunks(handle):
                    pipeline.feed(chunk)
    except OSError as exc:
        failure = StreamReadFailure(
            f"failed to read {source}: {exc}",
            lines_read=pipeline.decoder.stats.lines_read,
            records_decoded=pipeline.decoder.stats.records,
        )
        failure.partial = pipeline.finish()
        raise failure from exc
    return pipeline.finish()


@app.command("report")
def report_command(
    source: SOURCE_ARGUMENT = Path(STDIN_MARKER),
    annotations_json: ANNOTATIONS_JSON_OPTION = None,
    style: STYLE_OPTION = ConsoleStyle.PLAIN,
    color: COLOR_OPTION = None,
    emoji: EMOJI_OPTION = True,
    verbose: VERBOSE_OPTION = False,
) -> None:
    """Render a saved `cargo clippy --message-format=json` stream."""

    _configure_logging(verbose)
    log = ActionLog(style=style, color=color, emoji=emoji)
    try:
        outcome = _read_report(source)
    except StreamReadFailure as exc:
        if exc.partial is not None:
            emit_blocks(exc.partial.result.blocks, style=style, use_color=color)
        log.fail(str(exc))
        raise typer.Exit(code=1) from exc
    emit_blocks(outcome.result.blocks, style=style, use_color=color)
    _summarise(outcome, log)
    _write_annotations(outcome, annotations_json, log)


def main() -> None:
    """Console script entry point."""

    app()


__all__ = ["app", "main"]
