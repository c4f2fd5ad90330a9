# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Custom exceptions raised while running clippy and decoding its output."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .diagnostics.pipeline import PipelineResult


class ClippyActionError(RuntimeError):
    """Base class for failures surfaced to the caller."""


class ConfigError(ClippyActionError):
    """Raised when action inputs cannot be normalised."""


class ToolchainNotFound(ClippyActionError):
    """Raised when the ``cargo`` executable cannot be located."""


class StreamReadFailure(ClippyActionError):
    """Raised when the underlying line source fails while it is being read."""

    def __init__(self, message: str, *, lines_read: int, records_decoded: int) -> None:
        """Initialise the failure with the progress reached before the read error.

        Args:
            message: Human readable description of the read failure.
            lines_read: Number of lines consumed before the failure.
            records_decoded: Number of diagnostic records yielded before the failure.
        """

        super().__init__(message)
        self.lines_read = lines_read
        self.records_decoded = records_decoded
        self.partial: PipelineResult | None = None


__all__ = ["ClippyActionError", "ConfigError", "StreamReadFailure", "ToolchainNotFound"]
