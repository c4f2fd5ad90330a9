# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for diagnostic deduplication and grouping."""

from __future__ import annotations

import pytest

from clippy_action.core.models import DiagnosticRecord, Span
from clippy_action.core.severity import Severity
from clippy_action.diagnostics.aggregate import DiagnosticAggregator, OrderedIndex, aggregate


def _record(
    title: str,
    *,
    file: str | None = "src/lib.rs",
    line: int = 1,
    severity: Severity = Severity.WARNING,
    rendered: str | None = None,
) -> DiagnosticRecord:
    spans = () if file is None else (Span(file=file, start_line=line, end_line=line, start_column=1, end_column=2),)
    return DiagnosticRecord(
        severity=severity,
        title=title,
        rendered=rendered or f"{severity.value}: {title}",
        spans=spans,
        primary_span_index=0 if spans else None,
    )


def test_ordered_index_preserves_insertion_order() -> None:
    index: OrderedIndex[str, int] = OrderedIndex()
    for key, value in (("b", 1), ("a", 2), ("c", 3)):
        index.insert(key, value)

    assert list(index.items()) == [("b", 1), ("a", 2), ("c", 3)]
    assert "a" in index
    assert index.get("missing") is None
    assert len(index) == 3
    with pytest.raises(KeyError):
        index.insert("a", 9)


def test_identical_records_are_deduplicated() -> None:
    first = _record("unused variable: `x`", line=10)
    duplicate = _record("unused variable: `x`", line=10)

    groups = aggregate([first, duplicate])

    assert len(groups) == 1
    assert groups[0].records == (first,)
    assert groups[0].records[0] is first


def test_first_occurrence_wins_with_divergent_rendered_text() -> None:
    first = _record("needless return", rendered="warning: needless return (target a)")
    second = _record("needless return", rendered="warning: needless return (target b)")
    aggregator = DiagnosticAggregator()

    assert aggregator.add(first) is True
    assert aggregator.add(second) is False

    (group,) = aggregator.groups()
    assert group.records[0].rendered.endswith("(target a)")
    assert aggregator.received == 2
    assert aggregator.dropped == 1
    assert aggregator.kept == 1


def test_different_severity_is_not_a_duplicate() -> None:
    groups = aggregate([_record("x", severity=Severity.WARNING), _record("x", severity=Severity.ERROR)])

    assert len(groups[0].records) == 2


def test_groups_follow_first_seen_file_order() -> None:
    records = [
        _record("z1", file="src/z.rs"),
        _record("a1", file="src/a.rs"),
        _record("z2", file="src/z.rs", line=2),
        _record("m1", file="src/m.rs"),
        _record("a2", file="src/a.rs", line=5),
    ]

    groups = aggregate(records)

    assert [group.file for group in groups] == ["src/z.rs", "src/a.rs", "src/m.rs"]
    assert [record.title for record in groups[0].records] == ["z1", "z2"]
    assert [record.title for record in groups[1].records] == ["a1", "a2"]


def test_fileless_records_share_general_group_and_dedupe_on_rendered() -> None:
    records = [
        _record("deprecated attribute", file=None, rendered="warning: deprecated attribute"),
        _record("deprecated attribute", file=None, rendered="warning: deprecated attribute"),
        _record("deprecated attribute", file=None, rendered="warning: deprecated attribute\nnote: other"),
        _record("lib", file="src/lib.rs"),
    ]

    groups = aggregate(records)

    assert [group.file for group in groups] == [None, "src/lib.rs"]
    assert len(groups[0].records) == 2
    assert groups[0].header == "general"


def test_hundred_duplicates_collapse_to_one() -> None:
    records = [_record("unused variable: `x`", line=10, severity=Severity.ERROR) for _ in range(100)]
    aggregator = DiagnosticAggregator()

    aggregator.extend(records)

    groups = aggregator.groups()
    assert sum(len(group.records) for group in groups) == 1
    assert aggregator.dropped == 99


def test_groups_snapshot_is_not_affected_by_later_adds() -> None:
    aggregator = DiagnosticAggregator()
    aggregator.add(_record("one"))
    snapshot = aggregator.groups()

    aggregator.add(_record("two", line=2))

    assert len(snapshot[0].records) == 1
    assert len(aggregator.groups()[0].records) == 2
