# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Typer option declarations shared by the clippy-action commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from ..reporting.console import ConsoleStyle

WORKING_DIRECTORY_OPTION = Annotated[
    Path | None,
    typer.Option(
        "--working-directory",
        "-C",
        help="Directory to run cargo clippy in (overrides INPUT_WORKING-DIRECTORY).",
        show_default=False,
    ),
]
ALL_FEATURES_OPTION = Annotated[
    bool | None,
    typer.Option(
        "--all-features/--no-all-features",
        help="Pass --all-features to cargo (overrides INPUT_ALL-FEATURES).",
        show_default=False,
    ),
]
CHECK_ARGS_OPTION = Annotated[
    str | None,
    typer.Option("--check-args", help="Space separated arguments passed to `cargo clippy`.", show_default=False),
]
ARGS_OPTION = Annotated[
    str | None,
    typer.Option("--args", help="Space separated arguments forwarded to clippy after `--`.", show_default=False),
]
ANNOTATIONS_JSON_OPTION = Annotated[
    Path | None,
    typer.Option("--annotations-json", help="Write every annotation to this JSON file.", show_default=False),
]
CHECK_OUTPUT_OPTION = Annotated[
    Path | None,
    typer.Option("--check-output", help="Write the check-run completion payload to this JSON file.", show_default=False),
]
STYLE_OPTION = Annotated[
    ConsoleStyle,
    typer.Option("--style", help="Console report style.", case_sensitive=False),
]
COLOR_OPTION = Annotated[
    bool | None,
    typer.Option("--color/--no-color", help="Force colour output on or off.", show_default=False),
]
EMOJI_OPTION = Annotated[
    bool,
    typer.Option("--emoji/--no-emoji", help="Toggle emoji output."),
]
VERBOSE_OPTION = Annotated[
    bool,
    typer.Option("--verbose", "-v", help="Enable debug logging."),
]
SOURCE_ARGUMENT = Annotated[
    Path,
    typer.Argument(help="File holding cargo JSON output, or '-' for stdin.", show_default=False),
]

__all__ = [
    "ALL_FEATURES_OPTION",
    "ANNOTATIONS_JSON_OPTION",
    "ARGS_OPTION",
    "CHECK_ARGS_OPTION",
    "CHECK_OUTPUT_OPTION",
    "COLOR_OPTION",
    "EMOJI_OPTION",
    "SOURCE_ARGUMENT",
    "STYLE_OPTION",
    "VERBOSE_OPTION",
    "WORKING_DIRECTORY_OPTION",
]
