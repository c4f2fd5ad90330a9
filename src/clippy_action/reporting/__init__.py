# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Reporting helpers: render projections, console output and check-run payloads."""

from __future__ import annotations

from .render import (
    RenderBlock,
    RenderEntry,
    RenderResult,
    build_annotations,
    publishable,
    render,
    render_blocks,
)

__all__ = (
    "RenderBlock",
    "RenderEntry",
    "RenderResult",
    "build_annotations",
    "publishable",
    "render",
    "render_blocks",
)
