# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Project aggregated diagnostic groups into console blocks and annotations.

Everything here is a pure projection of :class:`~clippy_action.core.models.Group`
data: nothing is reordered, mutated, or cached, so rendering the same groups
twice yields identical output.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from pydantic import BaseModel, ConfigDict

from clippy_action.core.models import Annotation, DiagnosticRecord, Group
from clippy_action.core.severity import Severity


class RenderEntry(BaseModel):
    """One formatted diagnostic within a render block."""

    model_config = ConfigDict(frozen=True)

    severity: Severity
    title: str
    rendered: str
    code: str | None = None
    location: str | None = None

    @classmethod
    def from_record(cls, record: DiagnosticRecord) -> RenderEntry:
        """Build an entry from ``record``."""

        span = record.primary_span
        return cls(
            severity=record.severity,
            title=record.title,
            rendered=record.rendered,
            code=record.code,
            location=span.location if span is not None else None,
        )

    @property
    def tag(self) -> str:
        """Return the bracketed severity tag, e.g. ``[warning]``."""

        return f"[{self.severity.value}]"

    def as_text(self) -> str:
        """Return the entry as plain text: tag and title, then the rendered detail."""

        heading = f"{self.tag} {self.title}"
        if self.code:
            heading = f"{heading} ({self.code})"
        return f"{heading}\n{self.rendered.rstrip()}"


class RenderBlock(BaseModel):
    """Console block for a single group."""

    model_config = ConfigDict(frozen=True)

    header: str
    entries: tuple[RenderEntry, ...] = ()

    def as_text(self) -> str:
        """Return the block as plain text with the header on the first line."""

        return "\n".join([self.header, *(entry.as_text() for entry in self.entries)])


class RenderResult(BaseModel):
    """Bundle of render blocks and the flattened annotation list."""

    model_config = ConfigDict(frozen=True)

    blocks: tuple[RenderBlock, ...] = ()
    annotations: tuple[Annotation, ...] = ()

    @property
    def publishable(self) -> tuple[Annotation, ...]:
        """Return the file-scoped annotations suitable for external publishing."""

        return publishable(self.annotations)


def render_block(group: Group) -> RenderBlock:
    """Return the render block for ``group``."""

    return RenderBlock(
        header=group.header,
        entries=tuple(RenderEntry.from_record(record) for record in group.records),
    )


def render_blocks(groups: Sequence[Group]) -> tuple[RenderBlock, ...]:
    """Return one render block per group, in group order.

    Args:
        groups: Aggregated groups in first-seen order.

    Returns:
        tuple[RenderBlock, ...]: Blocks mirroring the order of ``groups``.
    """

    return tuple(render_block(group) for group in groups)


def build_annotations(groups: Sequence[Group]) -> tuple[Annotation, ...]:
    """Flatten ``groups`` into annotations, in group order then record order.

    Records without a primary span produce annotations without a ``file``.

    Args:
        groups: Aggregated groups in first-seen order.

    Returns:
        tuple[Annotation, ...]: Annotation projections of every record.
    """

    return tuple(Annotation.from_record(record) for group in groups for record in group.records)


def publishable(annotations: Iterable[Annotation]) -> tuple[Annotation, ...]:
    """Return the annotations that carry a file, preserving their order."""

    return tuple(annotation for annotation in annotations if annotation.is_file_scoped)


def render(groups: Sequence[Group]) -> RenderResult:
    """Render ``groups`` into console blocks and annotations."""

    return RenderResult(blocks=render_blocks(groups), annotations=build_annotations(groups))


__all__ = [
    "RenderBlock",
    "RenderEntry",
    "RenderResult",
    "build_annotations",
    "publishable",
    "render",
    "render_block",
    "render_blocks",
]
