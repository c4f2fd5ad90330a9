# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Composable decode, aggregate and render pipeline."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from ..core.models import Group
from ..errors import StreamReadFailure
from ..reporting.render import RenderResult, render
from .aggregate import DiagnosticAggregator
from .decoder import DecodeStats, PushDecoder, StreamDecoder


@dataclass(frozen=True, slots=True)
class PipelineResult:
    """Final output of a pipeline run.

    Attributes:
        groups: Deduplicated groups in first-seen order.
        result: Render blocks and annotations derived from ``groups``.
        stats: Decoder counters for the consumed stream.
        duplicates: Number of records dropped by deduplication.
    """

    groups: tuple[Group, ...]
    result: RenderResult
    stats: DecodeStats
    duplicates: int = 0


@dataclass(slots=True)
class DiagnosticPipeline:
    """Run decoder, aggregator and renderer sequentially over one line source.

    The pipeline is single use: each stage accumulates state for exactly one
    stream. Lines may be pulled from an iterable with :meth:`run` or pushed
    with :meth:`feed` followed by :meth:`finish`.
    """

    decoder: StreamDecoder = field(default_factory=StreamDecoder)
    aggregator: DiagnosticAggregator = field(default_factory=DiagnosticAggregator)
    _push: PushDecoder | None = field(default=None, init=False, repr=False)

    def run(self, lines: Iterable[str]) -> PipelineResult:
        """Pull every line from ``lines`` and return the rendered result.

        Args:
            lines: Pull-based line source.

        Returns:
            PipelineResult: Groups, render output and decode statistics.

        Raises:
            StreamReadFailure: If ``lines`` fails; ``partial`` holds the result
                built from the records decoded before the failure.
        """

        try:
            self.aggregator.extend(self.decoder.iter_records(lines))
        except StreamReadFailure as exc:
            exc.partial = self.snapshot()
            raise
        return self.snapshot()

    def feed(self, chunk: str) -> None:
        """Push a chunk of process output into the pipeline."""

        if self._push is None:
            self._push = PushDecoder(self.decoder)
        self.aggregator.extend(self._push.feed(chunk))

    def finish(self) -> PipelineResult:
        """Flush any buffered partial line and return the rendered result."""

        if self._push is not None:
            self.aggregator.extend(self._push.close())
        return self.snapshot()

    def snapshot(self) -> PipelineResult:
        """Return the result for everything consumed so far."""

        groups = self.aggregator.groups()
        return PipelineResult(
            groups=groups,
            result=render(groups),
            stats=self.decoder.stats,
            duplicates=self.aggregator.dropped,
        )


def run_pipeline(lines: Iterable[str]) -> PipelineResult:
    """Decode, aggregate and render ``lines`` with a fresh pipeline."""

    return DiagnosticPipeline().run(lines)


__all__ = ["DiagnosticPipeline", "PipelineResult", "run_pipeline"]
