# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Decode cargo's line-delimited JSON message stream into diagnostic records.

Every line is treated as a self-contained JSON message. Lines that are not
JSON, that describe something other than a compiler diagnostic, or that carry
an empty message are skipped and counted; they never abort the stream. The
only fatal condition is the line source itself failing, which surfaces as
:class:`~clippy_action.errors.StreamReadFailure`.
"""

from __future__ import annotations

import json
import logging
from collections import Counter
from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Final

from pydantic import ValidationError

from clippy_action.core.models import DiagnosticRecord, Span
from clippy_action.core.serialization import (
    JsonValue,
    coerce_optional_int,
    coerce_optional_str,
    first_mapping,
    mapping_sequence,
)
from clippy_action.core.severity import is_known_severity, parse_severity
from clippy_action.errors import StreamReadFailure

LOGGER = logging.getLogger(__name__)

REASON_KEY: Final[str] = "reason"
COMPILER_MESSAGE_REASON: Final[str] = "compiler-message"
COMPILER_ARTIFACT_REASON: Final[str] = "compiler-artifact"
BUILD_SCRIPT_EXECUTED_REASON: Final[str] = "build-script-executed"
BUILD_FINISHED_REASON: Final[str] = "build-finished"
_SKIP_PREVIEW_LENGTH: Final[int] = 80


class SkipReason(str, Enum):
    """Enumerate why a line did not produce a diagnostic record."""

    BLANK = "blank"
    NOT_JSON = "not-json"
    NOT_OBJECT = "not-object"
    UNKNOWN_REASON = "unknown-reason"
    NON_DIAGNOSTIC = "non-diagnostic"
    EMPTY_MESSAGE = "empty-message"
    INVALID = "invalid"


@dataclass(frozen=True, slots=True)
class CompilerMessage:
    """A diagnostic emitted by rustc or clippy."""

    package_id: str | None
    message: Mapping[str, JsonValue]


@dataclass(frozen=True, slots=True)
class CompilerArtifact:
    """Notice that a build target finished compiling."""

    package_id: str | None


@dataclass(frozen=True, slots=True)
class BuildScriptExecuted:
    """Notice that a build script ran."""

    package_id: str | None


@dataclass(frozen=True, slots=True)
class BuildFinished:
    """Final status line emitted once the build completes."""

    success: bool | None


CargoMessage = CompilerMessage | CompilerArtifact | BuildScriptExecuted | BuildFinished


def _build_compiler_message(payload: Mapping[str, JsonValue]) -> CargoMessage:
    return CompilerMessage(
        package_id=coerce_optional_str(payload.get("package_id")),
        message=first_mapping(payload.get("message")),
    )


def _build_compiler_artifact(payload: Mapping[str, JsonValue]) -> CargoMessage:
    return CompilerArtifact(package_id=coerce_optional_str(payload.get("package_id")))


def _build_script_executed(payload: Mapping[str, JsonValue]) -> CargoMessage:
    return BuildScriptExecuted(package_id=coerce_optional_str(payload.get("package_id")))


def _build_finished(payload: Mapping[str, JsonValue]) -> CargoMessage:
    success = payload.get("success")
    return BuildFinished(success=success if isinstance(success, bool) else None)


MESSAGE_KINDS: Final[Mapping[str, Callable[[Mapping[str, JsonValue]], CargoMessage]]] = {
    COMPILER_MESSAGE_REASON: _build_compiler_message,
    COMPILER_ARTIFACT_REASON: _build_compiler_artifact,
    BUILD_SCRIPT_EXECUTED_REASON: _build_script_executed,
    BUILD_FINISHED_REASON: _build_finished,
}


def parse_cargo_message(payload: Mapping[str, JsonValue]) -> CargoMessage | None:
    """Return the message variant selected by the ``reason`` discriminator.

    Args:
        payload: Decoded JSON object for a single line.

    Returns:
        CargoMessage | None: Typed message, or ``None`` when the tag is unrecognised.
    """

    reason = payload.get(REASON_KEY)
    if not isinstance(reason, str):
        return None
    factory = MESSAGE_KINDS.get(reason)
    if factory is None:
        return None
    return factory(payload)


def _parse_span(raw: Mapping[str, JsonValue]) -> Span | None:
    """Build a :class:`Span` from a protocol span object.

    Args:
        raw: Span mapping taken from ``message.spans``.

    Returns:
        Span | None: Parsed span, or ``None`` when the file or start line is missing.
    """

    file_name = coerce_optional_str(raw.get("file_name"))
    start_line = coerce_optional_int(raw.get("line_start"))
    if not file_name or start_line is None:
        return None
    end_line = coerce_optional_int(raw.get("line_end"))
    start_column = coerce_optional_int(raw.get("column_start"))
    end_column = coerce_optional_int(raw.get("column_end"))
    return Span(
        file=file_name,
        start_line=start_line,
        end_line=end_line if end_line is not None else start_line,
        start_column=start_column if start_column is not None else 0,
        end_column=end_column if end_column is not None else (start_column or 0),
        is_primary=raw.get("is_primary") is True,
        label=coerce_optional_str(raw.get("label")),
    )


def _primary_index(spans: tuple[Span, ...]) -> int | None:
    """Return the index of the first primary span, else of the first span."""

    for index, span in enumerate(spans):
        if span.is_primary:
            return index
    return 0 if spans else None


def _preview(line: str) -> str:
    return line if len(line) <= _SKIP_PREVIEW_LENGTH else f"{line[:_SKIP_PREVIEW_LENGTH]}..."


@dataclass(frozen=True, slots=True)
class LineResult:
    """Outcome of decoding one line: a record, or the reason it was skipped."""

    record: DiagnosticRecord | None = None
    skipped: SkipReason | None = None


@dataclass(slots=True)
class DecodeStats:
    """Counters describing what the decoder has consumed so far."""

    lines_read: int = 0
    records: int = 0
    skipped: Counter[SkipReason] = field(default_factory=Counter)
    unknown_severities: Counter[str] = field(default_factory=Counter)

    @property
    def skipped_total(self) -> int:
        """Return the number of lines that produced no record."""

        return sum(self.skipped.values())


class StreamDecoder:
    """Turn cargo JSON lines into :class:`DiagnosticRecord` instances."""

    def __init__(self) -> None:
        """Initialise the decoder with empty statistics."""

        self.stats = DecodeStats()

    def decode_line(self, line: str) -> DiagnosticRecord | None:
        """Decode ``line`` and return its diagnostic record, if any.

        Args:
            line: Raw line of process output, with or without a trailing newline.

        Returns:
            DiagnosticRecord | None: Decoded record, or ``None`` when the line is skipped.
        """

        self.stats.lines_read += 1
        result = self._classify(line)
        if result.skipped is not None:
            self.stats.skipped[result.skipped] += 1
            LOGGER.debug("skipped line (%s): %s", result.skipped.value, _preview(line.strip()))
            return None
        self.stats.records += 1
        return result.record

    def iter_records(self, lines: Iterable[str]) -> Iterator[DiagnosticRecord]:
        """Lazily decode ``lines`` and yield every diagnostic record.

        Consuming the iterator exhausts ``lines``.

        Args:
            lines: Pull-based line source such as a file object or process pipe.

        Yields:
            DiagnosticRecord: Records in stream order.

        Raises:
            StreamReadFailure: If reading from ``lines`` fails.
        """

        source = iter(lines)
        while True:
            try:
                line = next(source)
            except StopIteration:
                return
            except (OSError, UnicodeDecodeError) as exc:
                raise StreamReadFailure(
                    f"failed to read diagnostic stream: {exc}",
                    lines_read=self.stats.lines_read,
                    records_decoded=self.stats.records,
                ) from exc
            record = self.decode_line(line)
            if record is not None:
                yield record

    def _classify(self, line: str) -> LineResult:
        text = line.strip()
        if not text:
            return LineResult(skipped=SkipReason.BLANK)
        try:
            payload = json.loads(text)
        except (ValueError, RecursionError):
            return LineResult(skipped=SkipReason.NOT_JSON)
        if not isinstance(payload, dict):
            return LineResult(skipped=SkipReason.NOT_OBJECT)
        match parse_cargo_message(payload):
            case CompilerMessage(message=message):
                return self._classify_diagnostic(message)
            case None:
                return LineResult(skipped=SkipReason.UNKNOWN_REASON)
            case _:
                return LineResult(skipped=SkipReason.NON_DIAGNOSTIC)

    def _classify_diagnostic(self, message: Mapping[str, JsonValue]) -> LineResult:
        title = coerce_optional_str(message.get("message")) or ""
        if not title:
            return LineResult(skipped=SkipReason.EMPTY_MESSAGE)
        level = message.get("level")
        if not is_known_severity(level):
            self.stats.unknown_severities[str(level)] += 1
        severity = parse_severity(level)
        rendered = coerce_optional_str(message.get("rendered")) or ""
        if not rendered:
            rendered = f"{severity.value}: {title}"
        code = coerce_optional_str(first_mapping(message.get("code")).get("code"))
        try:
            spans = tuple(span for raw in mapping_sequence(message.get("spans")) if (span := _parse_span(raw)))
            record = DiagnosticRecord(
                severity=severity,
                title=title,
                rendered=rendered,
                code=code,
                spans=spans,
                primary_span_index=_primary_index(spans),
            )
        except ValidationError as exc:
            LOGGER.debug("discarding diagnostic %r: %s", title, exc)
            return LineResult(skipped=SkipReason.INVALID)
        return LineResult(record=record)


class PushDecoder:
    """Accept output chunks as they arrive and decode complete lines.

    Chunks may split lines anywhere; the trailing partial line is buffered
    until the next newline or :meth:`close`.
    """

    def __init__(self, decoder: StreamDecoder | None = None) -> None:
        """Initialise the push adapter.

        Args:
            decoder: Decoder receiving complete lines; a new one is created when omitted.
        """

        self.decoder = decoder or StreamDecoder()
        self._pending = ""
        self._closed = False

    def feed(self, chunk: str) -> list[DiagnosticRecord]:
        """Buffer ``chunk`` and decode every line it completes.

        Args:
            chunk: Text delivered by the process driver.

        Returns:
            list[DiagnosticRecord]: Records decoded from completed lines.

        Raises:
            ValueError: If the decoder has already been closed.
        """

        if self._closed:
            raise ValueError("cannot feed a closed PushDecoder")
        *complete, self._pending = (self._pending + chunk).split("\n")
        return [record for line in complete if (record := self.decoder.decode_line(line)) is not None]

    def feed_line(self, line: str) -> DiagnosticRecord | None:
        """Decode a line delivered without its newline terminator.

        Raises:
            ValueError: If ``line`` contains an embedded newline.
        """

        if "\n" in line:
            raise ValueError("feed_line expects a single line; use feed() for multi-line chunks")
        records = self.feed(line + "\n")
        return records[0] if records else None

    def close(self) -> list[DiagnosticRecord]:
        """Flush the buffered partial line and stop accepting input.

        Returns:
            list[DiagnosticRecord]: Record decoded from the flushed tail, if any.
        """

        if self._closed:
            return []
        self._closed = True
        tail, self._pending = self._pending, ""
        if not tail:
            return []
        record = self.decoder.decode_line(tail)
        return [record] if record is not None else []


def decode_lines(lines: Iterable[str]) -> list[DiagnosticRecord]:
    """Decode every diagnostic in ``lines`` using a fresh :class:`StreamDecoder`."""

    return list(StreamDecoder().iter_records(lines))


__all__ = [
    "BuildFinished",
    "BuildScriptExecuted",
    "CargoMessage",
    "CompilerArtifact",
    "CompilerMessage",
    "DecodeStats",
    "LineResult",
    "MESSAGE_KINDS",
    "PushDecoder",
    "SkipReason",
    "StreamDecoder",
    "decode_lines",
    "parse_cargo_message",
]
