# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for render blocks and annotation projection."""

from __future__ import annotations

from clippy_action.core.models import DiagnosticRecord, Group, Span
from clippy_action.core.severity import AnnotationLevel, Severity
from clippy_action.reporting.render import build_annotations, publishable, render, render_blocks


def _record(title: str, file: str | None, severity: Severity, *, line: int = 1) -> DiagnosticRecord:
    spans = () if file is None else (Span(file=file, start_line=line, end_line=line + 1, start_column=3, end_column=7),)
    return DiagnosticRecord(
        severity=severity,
        title=title,
        rendered=f"{severity.value}: {title}\n",
        code="clippy::demo" if file else None,
        spans=spans,
        primary_span_index=0 if spans else None,
    )


def _groups() -> tuple[Group, ...]:
    return (
        Group(
            file="src/main.rs",
            records=(
                _record("note first", "src/main.rs", Severity.NOTE, line=9),
                _record("error second", "src/main.rs", Severity.ERROR, line=2),
            ),
        ),
        Group(file=None, records=(_record("deprecated attribute", None, Severity.WARNING),)),
        Group(file="src/lib.rs", records=(_record("warn", "src/lib.rs", Severity.WARNING),)),
    )


def test_render_blocks_keep_group_and_record_order() -> None:
    blocks = render_blocks(_groups())

    assert [block.header for block in blocks] == ["src/main.rs", "general", "src/lib.rs"]
    assert [entry.title for entry in blocks[0].entries] == ["note first", "error second"]
    assert blocks[0].entries[0].location == "src/main.rs:9:3"
    assert blocks[1].entries[0].location is None


def test_block_text_contains_tag_title_and_detail() -> None:
    block = render_blocks(_groups())[0]

    text = block.as_text()

    assert text.splitlines()[0] == "src/main.rs"
    assert "[note] note first (clippy::demo)" in text
    assert "error: error second" in text


def test_annotations_flatten_in_group_order() -> None:
    annotations = build_annotations(_groups())

    assert [annotation.message for annotation in annotations] == [
        "note first",
        "error second",
        "deprecated attribute",
        "warn",
    ]
    assert [annotation.level for annotation in annotations] == [
        AnnotationLevel.NOTICE,
        AnnotationLevel.FAILURE,
        AnnotationLevel.WARNING,
        AnnotationLevel.WARNING,
    ]
    assert annotations[0].start_line == 9
    assert annotations[0].end_line == 10
    assert annotations[2].file is None


def test_publishable_excludes_fileless_annotations() -> None:
    result = render(_groups())

    assert len(result.annotations) == 4
    assert [annotation.file for annotation in result.publishable] == ["src/main.rs", "src/main.rs", "src/lib.rs"]
    assert publishable(result.annotations) == result.publishable


def test_render_is_idempotent_and_does_not_mutate_groups() -> None:
    groups = _groups()
    before = [group.model_dump() for group in groups]

    first = render(groups)
    second = render(groups)

    assert first == second
    assert [block.as_text() for block in first.blocks] == [block.as_text() for block in second.blocks]
    assert [group.model_dump() for group in groups] == before


def test_render_empty_input() -> None:
    result = render(())

    assert result.blocks == ()
    assert result.annotations == ()
