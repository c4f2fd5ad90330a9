# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Core data models shared across the clippy_action package."""

from __future__ import annotations

from typing import TypeAlias

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from clippy_action.core.severity import AnnotationLevel, Severity, severity_to_level

GENERAL_GROUP_HEADER = "general"

SpanKey: TypeAlias = tuple[str, int, int, int, int, Severity, str]
FilelessKey: TypeAlias = tuple[None, Severity, str, str]
AggregationKey: TypeAlias = SpanKey | FilelessKey


class Span(BaseModel):
    """Describe a source range attached to a diagnostic.

    Line and column numbers are 1-based and kept exactly as reported.
    """

    model_config = ConfigDict(frozen=True)

    file: str
    start_line: int = Field(ge=0)
    end_line: int = Field(ge=0)
    start_column: int = Field(ge=0)
    end_column: int = Field(ge=0)
    is_primary: bool = False
    label: str | None = None

    @property
    def location(self) -> str:
        """Return ``file:line:column`` for console output."""

        return f"{self.file}:{self.start_line}:{self.start_column}"


class DiagnosticRecord(BaseModel):
    """Capture one decoded compiler diagnostic."""

    model_config = ConfigDict(frozen=True)

    severity: Severity
    title: str
    rendered: str
    code: str | None = None
    spans: tuple[Span, ...] = ()
    primary_span_index: int | None = None

    @field_validator("title", "rendered")
    @classmethod
    def _require_text(cls, value: str) -> str:
        """Reject empty titles and rendered payloads.

        Args:
            value: Candidate text value.

        Returns:
            str: The unchanged value when it is non-empty.

        Raises:
            ValueError: If ``value`` is empty.
        """

        if not value:
            raise ValueError("diagnostic text must not be empty")
        return value

    @model_validator(mode="after")
    def _check_primary_index(self) -> DiagnosticRecord:
        """Ensure ``primary_span_index`` points into ``spans``.

        Returns:
            DiagnosticRecord: The validated record.

        Raises:
            ValueError: If the index is out of range or set without spans.
        """

        index = self.primary_span_index
        if index is not None and not 0 <= index < len(self.spans):
            raise ValueError(f"primary_span_index {index} is out of range for {len(self.spans)} span(s)")
        return self

    @property
    def primary_span(self) -> Span | None:
        """Return the designated primary span, if any."""

        if self.primary_span_index is None:
            return None
        return self.spans[self.primary_span_index]

    @property
    def file(self) -> str | None:
        """Return the file of the primary span, or ``None`` for file-less records."""

        span = self.primary_span
        return span.file if span is not None else None

    @property
    def aggregation_key(self) -> AggregationKey:
        """Return the identity used to detect duplicate diagnostics."""

        span = self.primary_span
        if span is None:
            return (None, self.severity, self.title, self.rendered)
        return (
            span.file,
            span.start_line,
            span.end_line,
            span.start_column,
            span.end_column,
            self.severity,
            self.title,
        )


class Group(BaseModel):
    """Diagnostics sharing a primary file, in first-seen order."""

    model_config = ConfigDict(frozen=True)

    file: str | None
    records: tuple[DiagnosticRecord, ...] = ()

    @property
    def header(self) -> str:
        """Return the heading shown for this group in console output."""

        return self.file if self.file is not None else GENERAL_GROUP_HEADER


class Annotation(BaseModel):
    """Read-only projection of a diagnostic for the check-run surface."""

    model_config = ConfigDict(frozen=True)

    file: str | None = None
    start_line: int = 0
    end_line: int = 0
    start_column: int | None = None
    end_column: int | None = None
    level: AnnotationLevel
    raw_details: str
    message: str

    @property
    def is_file_scoped(self) -> bool:
        """Return ``True`` when the annotation can be attached to a file."""

        return bool(self.file)

    @classmethod
    def from_record(cls, record: DiagnosticRecord) -> Annotation:
        """Project ``record`` onto an :class:`Annotation`.

        Args:
            record: Decoded diagnostic to project.

        Returns:
            Annotation: Annotation carrying the primary span location when present.
        """

        span = record.primary_span
        level = severity_to_level(record.severity)
        if span is None:
            return cls(level=level, raw_details=record.rendered, message=record.title)
        return cls(
            file=span.file,
            start_line=span.start_line,
            end_line=span.end_line,
            start_column=span.start_column,
            end_column=span.end_column,
            level=level,
            raw_details=record.rendered,
            message=record.title,
        )


__all__ = [
    "AggregationKey",
    "Annotation",
    "DiagnosticRecord",
    "GENERAL_GROUP_HEADER",
    "Group",
    "Span",
]
