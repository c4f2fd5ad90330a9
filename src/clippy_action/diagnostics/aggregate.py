# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Deduplicate decoded diagnostics and group them by primary file."""

from __future__ import annotations

import logging
from collections.abc import Hashable, Iterable, Iterator
from typing import Generic, TypeVar

from clippy_action.core.models import AggregationKey, DiagnosticRecord, Group

LOGGER = logging.getLogger(__name__)

KeyT = TypeVar("KeyT", bound=Hashable)
ValueT = TypeVar("ValueT")


class OrderedIndex(Generic[KeyT, ValueT]):
    """Insertion-ordered mapping backed by a key list and a lookup dict."""

    def __init__(self) -> None:
        """Initialise an empty index."""

        self._order: list[KeyT] = []
        self._lookup: dict[KeyT, ValueT] = {}

    def __contains__(self, key: object) -> bool:
        return key in self._lookup

    def __len__(self) -> int:
        return len(self._order)

    def get(self, key: KeyT) -> ValueT | None:
        """Return the value stored for ``key`` or ``None``."""

        return self._lookup.get(key)

    def insert(self, key: KeyT, value: ValueT) -> None:
        """Store ``value`` under a new ``key``.

        Args:
            key: Key that must not already be present.
            value: Value associated with ``key``.

        Raises:
            KeyError: If ``key`` is already present.
        """

        if key in self._lookup:
            raise KeyError(key)
        self._order.append(key)
        self._lookup[key] = value

    def items(self) -> Iterator[tuple[KeyT, ValueT]]:
        """Yield ``(key, value)`` pairs in insertion order."""

        for key in self._order:
            yield key, self._lookup[key]


class DiagnosticAggregator:
    """Accumulate records, drop duplicates, and group survivors by file.

    The first record seen for an :data:`AggregationKey` wins. Later records
    with the same key are dropped even when their rendered text differs.
    """

    def __init__(self) -> None:
        """Initialise empty dedupe and grouping indexes."""

        self._seen: OrderedIndex[AggregationKey, DiagnosticRecord] = OrderedIndex()
        self._groups: OrderedIndex[str | None, list[DiagnosticRecord]] = OrderedIndex()
        self.received = 0
        self.dropped = 0

    def add(self, record: DiagnosticRecord) -> bool:
        """Add ``record`` unless an equivalent record was already seen.

        Args:
            record: Decoded diagnostic record.

        Returns:
            bool: ``True`` when the record was kept, ``False`` when dropped as a duplicate.
        """

        self.received += 1
        key = record.aggregation_key
        if key in self._seen:
            self.dropped += 1
            LOGGER.debug("dropping duplicate diagnostic %r in %s", record.title, record.file or "<general>")
            return False
        self._seen.insert(key, record)
        bucket = self._groups.get(record.file)
        if bucket is None:
            bucket = []
            self._groups.insert(record.file, bucket)
        bucket.append(record)
        return True

    def extend(self, records: Iterable[DiagnosticRecord]) -> None:
        """Add every record from ``records`` in order."""

        for record in records:
            self.add(record)

    @property
    def kept(self) -> int:
        """Return the number of records that survived deduplication."""

        return len(self._seen)

    def groups(self) -> tuple[Group, ...]:
        """Return an immutable snapshot of the groups in first-seen order."""

        return tuple(Group(file=file, records=tuple(records)) for file, records in self._groups.items())


def aggregate(records: Iterable[DiagnosticRecord]) -> tuple[Group, ...]:
    """Deduplicate and group ``records`` in a single pass.

    Args:
        records: Records in stream order.

    Returns:
        tuple[Group, ...]: Groups ordered by first appearance of their file.
    """

    aggregator = DiagnosticAggregator()
    aggregator.extend(records)
    return aggregator.groups()


__all__ = ["DiagnosticAggregator", "OrderedIndex", "aggregate"]
