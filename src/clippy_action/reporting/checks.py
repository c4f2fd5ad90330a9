# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shape annotations into check-run request payloads.

Only the payloads are built here; sending them is left to the caller.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Final

from pydantic import BaseModel, ConfigDict, Field

from clippy_action.core.models import Annotation
from clippy_action.core.serialization import JsonValue, jsonify
from clippy_action.core.severity import AnnotationLevel
from clippy_action.runtime.toolchain import RustToolchain

SUCCESS_SUMMARY: Final[str] = "Clippy was successful!"
FAILURE_SUMMARY: Final[str] = "Clippy failed."
DEFAULT_WORKING_DIRECTORY: Final[str] = "repository directory"


class CheckRunConclusion(str, Enum):
    """Conclusions reported when the check run completes."""

    SUCCESS = "success"
    FAILURE = "failure"


class CheckAnnotation(BaseModel):
    """Annotation entry in the check-run ``output.annotations`` array."""

    model_config = ConfigDict(frozen=True)

    path: str
    start_line: int
    end_line: int
    start_column: int | None = None
    end_column: int | None = None
    annotation_level: AnnotationLevel
    raw_details: str
    message: str

    @classmethod
    def from_annotation(cls, annotation: Annotation) -> CheckAnnotation:
        """Convert a file-scoped :class:`Annotation`.

        Columns are only kept for single-line ranges, which is the only case
        the check-run API accepts them.

        Raises:
            ValueError: If ``annotation`` has no file.
        """

        if not annotation.file:
            raise ValueError("check-run annotations require a file path")
        single_line = annotation.start_line == annotation.end_line
        return cls(
            path=annotation.file,
            start_line=annotation.start_line,
            end_line=annotation.end_line,
            start_column=annotation.start_column if single_line else None,
            end_column=annotation.end_column if single_line else None,
            annotation_level=annotation.level,
            raw_details=annotation.raw_details,
            message=annotation.message,
        )


class CheckRunOutput(BaseModel):
    """The ``output`` object of a check-run update."""

    model_config = ConfigDict(frozen=True)

    title: str
    summary: str
    text: str
    annotations: tuple[CheckAnnotation, ...] = Field(default_factory=tuple)

    def to_payload(self) -> JsonValue:
        """Return the JSON payload, omitting unset column fields."""

        return jsonify(self.model_dump(mode="json", exclude_none=True))


def conclusion_for_exit_code(exit_code: int) -> CheckRunConclusion:
    """Return ``success`` for a zero exit code, ``failure`` otherwise."""

    return CheckRunConclusion.SUCCESS if exit_code == 0 else CheckRunConclusion.FAILURE


def check_annotations(annotations: Iterable[Annotation]) -> tuple[CheckAnnotation, ...]:
    """Convert the file-scoped subset of ``annotations``, preserving order."""

    return tuple(CheckAnnotation.from_annotation(item) for item in annotations if item.is_file_scoped)


def check_run_name(toolchain: RustToolchain, working_directory: Path | None = None) -> str:
    """Return the check-run name, e.g. ``Clippy: Rust Stable 1.79.0``."""

    name = f"Clippy: Rust {toolchain.channel.value} {toolchain.version}"
    if working_directory is not None:
        name = f"{name} in {working_directory}"
    return name


def build_check_output(
    *,
    exit_code: int,
    annotations: Iterable[Annotation],
    toolchain: RustToolchain,
    os_name: str,
    arch: str,
    elapsed_ms: int,
    working_directory: Path | None = None,
) -> CheckRunOutput:
    """Build the ``output`` object describing a completed clippy run.

    Args:
        exit_code: Exit status reported by cargo.
        annotations: Annotations in render order; file-less entries are dropped.
        toolchain: Active Rust toolchain.
        os_name: Host operating system label.
        arch: Host architecture label.
        elapsed_ms: Wall-clock duration of the run in milliseconds.
        working_directory: Directory clippy ran in, when not the repository root.

    Returns:
        CheckRunOutput: Title, summary, text and annotations.
    """

    summary = SUCCESS_SUMMARY if exit_code == 0 else FAILURE_SUMMARY
    text = "\n".join(
        [
            f"Running `cargo clippy` took roughly ~{elapsed_ms}ms to complete",
            "",
            f"* Working Directory: {working_directory or DEFAULT_WORKING_DIRECTORY}",
        ]
    )
    return CheckRunOutput(
        title=f"Clippy ({toolchain.channel.value} ~ {os_name}/{arch})",
        summary=summary,
        text=text,
        annotations=check_annotations(annotations),
    )


def build_check_run_update(
    output: CheckRunOutput,
    *,
    exit_code: int,
    started_at: datetime,
    completed_at: datetime,
) -> dict[str, JsonValue]:
    """Return the body of the request that completes a check run."""

    return {
        "status": "completed",
        "conclusion": conclusion_for_exit_code(exit_code).value,
        "started_at": started_at.isoformat(),
        "completed_at": completed_at.isoformat(),
        "output": output.to_payload(),
    }


__all__ = [
    "CheckAnnotation",
    "CheckRunConclusion",
    "CheckRunOutput",
    "build_check_output",
    "build_check_run_update",
    "check_annotations",
    "check_run_name",
    "conclusion_for_exit_code",
]
