# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the cargo JSON stream decoder."""

from __future__ import annotations

import json
from collections.abc import Iterator

import pytest

from clippy_action.core.severity import Severity
from clippy_action.diagnostics.decoder import (
    BuildFinished,
    CompilerArtifact,
    CompilerMessage,
    PushDecoder,
    SkipReason,
    StreamDecoder,
    decode_lines,
    parse_cargo_message,
)
from clippy_action.errors import StreamReadFailure


def test_decode_cargo_clippy_message(compiler_line) -> None:
    line = compiler_line(level="error", message="issue", file="src/lib.rs", line_start=2, column_start=1, code="E0001")

    record = StreamDecoder().decode_line(line)

    assert record is not None
    assert record.file == "src/lib.rs"
    assert record.code == "E0001"
    assert record.severity is Severity.ERROR
    assert record.title == "issue"
    assert record.rendered.startswith("error: issue")


def test_spans_are_passed_through_unchanged(compiler_line) -> None:
    line = compiler_line(line_start=4, line_end=6, column_start=9, column_end=2)

    record = StreamDecoder().decode_line(line)

    assert record is not None
    span = record.primary_span
    assert span is not None
    assert (span.start_line, span.end_line, span.start_column, span.end_column) == (4, 6, 9, 2)


def test_primary_span_marked_explicitly(compiler_line) -> None:
    spans = [
        {"file_name": "src/a.rs", "line_start": 1, "line_end": 1, "column_start": 1, "column_end": 2, "is_primary": False},
        {"file_name": "src/b.rs", "line_start": 5, "line_end": 5, "column_start": 3, "column_end": 8, "is_primary": True},
        {"file_name": "src/c.rs", "line_start": 9, "line_end": 9, "column_start": 1, "column_end": 2, "is_primary": True},
    ]

    record = StreamDecoder().decode_line(compiler_line(spans=spans))

    assert record is not None
    assert len(record.spans) == 3
    assert record.primary_span_index == 1
    assert record.file == "src/b.rs"


def test_first_span_is_primary_when_none_marked(compiler_line) -> None:
    spans = [
        {"file_name": "src/x.rs", "line_start": 2, "line_end": 2, "column_start": 1, "column_end": 2},
        {"file_name": "src/y.rs", "line_start": 3, "line_end": 3, "column_start": 1, "column_end": 2},
    ]

    record = StreamDecoder().decode_line(compiler_line(spans=spans))

    assert record is not None
    assert record.primary_span_index == 0
    assert record.file == "src/x.rs"


def test_message_without_spans_has_no_primary(compiler_line) -> None:
    record = StreamDecoder().decode_line(compiler_line(message="deprecated attribute", spans=[]))

    assert record is not None
    assert record.spans == ()
    assert record.primary_span is None
    assert record.file is None


def test_unknown_level_maps_to_note_and_is_counted(compiler_line) -> None:
    decoder = StreamDecoder()

    record = decoder.decode_line(compiler_line(level="Error"))

    assert record is not None
    assert record.severity is Severity.NOTE
    assert decoder.stats.unknown_severities == {"Error": 1}


def test_missing_rendered_falls_back_to_level_and_title(compiler_line) -> None:
    payload = json.loads(compiler_line(level="warning", message="unused import"))
    payload["message"]["rendered"] = None

    record = StreamDecoder().decode_line(json.dumps(payload))

    assert record is not None
    assert record.rendered == "warning: unused import"


@pytest.mark.parametrize(
    ("line", "reason"),
    [
        ("", SkipReason.BLANK),
        ("   Compiling demo v0.1.0 (/work/demo)", SkipReason.NOT_JSON),
        ('{"reason": "compiler-message", "message": {"lev', SkipReason.NOT_JSON),
        ("[1, 2, 3]", SkipReason.NOT_OBJECT),
        ('{"reason": "something-new"}', SkipReason.UNKNOWN_REASON),
        ('{"no_reason": true}', SkipReason.UNKNOWN_REASON),
        ('{"reason": "build-finished", "success": true}', SkipReason.NON_DIAGNOSTIC),
        ('{"reason": "build-script-executed", "package_id": "x"}', SkipReason.NON_DIAGNOSTIC),
    ],
)
def test_non_diagnostic_lines_are_skipped(line: str, reason: SkipReason) -> None:
    decoder = StreamDecoder()

    assert decoder.decode_line(line) is None
    assert decoder.stats.skipped[reason] == 1
    assert decoder.stats.records == 0


def test_artifact_lines_are_skipped(artifact_line: str) -> None:
    decoder = StreamDecoder()

    assert decoder.decode_line(artifact_line) is None
    assert decoder.stats.skipped[SkipReason.NON_DIAGNOSTIC] == 1


def test_empty_message_is_skipped(compiler_line) -> None:
    decoder = StreamDecoder()

    assert decoder.decode_line(compiler_line(message="")) is None
    assert decoder.stats.skipped[SkipReason.EMPTY_MESSAGE] == 1


def test_title_is_kept_as_given(compiler_line) -> None:
    record = StreamDecoder().decode_line(compiler_line(message="  padded title "))

    assert record is not None
    assert record.title == "  padded title "


@pytest.mark.parametrize(
    "line",
    [
        '{"reason": "compiler-message", "n": ' + "9" * 5000 + "}",
        "[" * 100_000,
    ],
    ids=["oversized-integer", "deep-nesting"],
)
def test_lines_that_break_the_json_parser_are_skipped(line: str) -> None:
    decoder = StreamDecoder()

    assert decoder.decode_line(line) is None
    assert decoder.stats.skipped[SkipReason.NOT_JSON] == 1


def test_negative_line_numbers_are_discarded(compiler_line) -> None:
    decoder = StreamDecoder()

    assert decoder.decode_line(compiler_line(line_start=-1, line_end=-1)) is None
    assert decoder.stats.skipped[SkipReason.INVALID] == 1


def test_parse_cargo_message_discriminates_reason() -> None:
    assert isinstance(parse_cargo_message({"reason": "compiler-message", "message": {}}), CompilerMessage)
    assert isinstance(parse_cargo_message({"reason": "compiler-artifact"}), CompilerArtifact)
    finished = parse_cargo_message({"reason": "build-finished", "success": True})
    assert isinstance(finished, BuildFinished)
    assert finished.success is True
    assert parse_cargo_message({"reason": "unknown"}) is None
    assert parse_cargo_message({"reason": 1}) is None


def test_iter_records_is_lazy_and_counts(compiler_line, artifact_line: str, finished_line: str) -> None:
    lines = [artifact_line, compiler_line(message="a"), "noise", compiler_line(message="b"), finished_line]
    decoder = StreamDecoder()

    iterator = decoder.iter_records(lines)
    first = next(iterator)

    assert first.title == "a"
    assert decoder.stats.lines_read == 2
    assert [record.title for record in iterator] == ["b"]
    assert decoder.stats.lines_read == 5
    assert decoder.stats.records == 2
    assert decoder.stats.skipped_total == 3


def test_iter_records_wraps_read_failures(compiler_line) -> None:
    def source() -> Iterator[str]:
        yield compiler_line(message="before failure")
        raise OSError("pipe closed")

    decoder = StreamDecoder()
    received = []

    with pytest.raises(StreamReadFailure) as excinfo:
        for record in decoder.iter_records(source()):
            received.append(record)

    assert [record.title for record in received] == ["before failure"]
    assert excinfo.value.records_decoded == 1
    assert excinfo.value.lines_read == 1
    assert isinstance(excinfo.value.__cause__, OSError)


def test_iter_records_wraps_decode_failures(compiler_line) -> None:
    def source() -> Iterator[str]:
        yield compiler_line(message="readable")
        raise UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte")

    decoder = StreamDecoder()
    received = []

    with pytest.raises(StreamReadFailure) as excinfo:
        for record in decoder.iter_records(source()):
            received.append(record)

    assert [record.title for record in received] == ["readable"]
    assert excinfo.value.records_decoded == 1
    assert isinstance(excinfo.value.__cause__, UnicodeDecodeError)


def test_push_decoder_reassembles_split_chunks(compiler_line) -> None:
    text = "\n".join([compiler_line(message="one"), "Compiling demo", compiler_line(message="two")])
    push = PushDecoder()
    records = []

    for start in range(0, len(text), 7):
        records.extend(push.feed(text[start : start + 7]))
    records.extend(push.close())

    assert [record.title for record in records] == ["one", "two"]
    assert push.decoder.stats.lines_read == 3


def test_push_decoder_matches_pull_decoding(compiler_line, artifact_line: str) -> None:
    lines = [compiler_line(message="x"), artifact_line, compiler_line(message="y", level="error")]
    push = PushDecoder()

    pushed = [record for line in lines if (record := push.feed_line(line)) is not None]
    pushed.extend(push.close())

    assert pushed == decode_lines(lines)


def test_push_decoder_rejects_feed_after_close() -> None:
    push = PushDecoder()
    push.close()

    with pytest.raises(ValueError):
        push.feed("{}\n")
    assert push.close() == []


def test_push_decoder_feed_line_rejects_embedded_newlines(compiler_line) -> None:
    push = PushDecoder()

    with pytest.raises(ValueError):
        push.feed_line(compiler_line(message="a") + "\n" + compiler_line(message="b"))
    assert push.decoder.stats.lines_read == 0
