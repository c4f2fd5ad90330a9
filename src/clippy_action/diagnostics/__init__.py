# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Diagnostics package exposing decoding, deduplication and pipeline helpers."""

from __future__ import annotations

from .aggregate import DiagnosticAggregator, OrderedIndex, aggregate
from .decoder import DecodeStats, PushDecoder, SkipReason, StreamDecoder, decode_lines
from .pipeline import DiagnosticPipeline, PipelineResult, run_pipeline

__all__ = (
    "DecodeStats",
    "DiagnosticAggregator",
    "DiagnosticPipeline",
    "OrderedIndex",
    "PipelineResult",
    "PushDecoder",
    "SkipReason",
    "StreamDecoder",
    "aggregate",
    "decode_lines",
    "run_pipeline",
)
