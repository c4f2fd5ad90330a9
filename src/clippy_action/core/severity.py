# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Severity related types and helpers."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from enum import Enum
from typing import Final

LOGGER = logging.getLogger(__name__)


class Severity(str, Enum):
    """Severity levels normalising the compiler's diagnostic vocabulary."""

    ERROR = "error"
    WARNING = "warning"
    NOTE = "note"


class AnnotationLevel(str, Enum):
    """Annotation levels understood by the check-run surface."""

    FAILURE = "failure"
    WARNING = "warning"
    NOTICE = "notice"


SEVERITY_LABELS: Final[Mapping[str, Severity]] = {
    "error": Severity.ERROR,
    "error: internal compiler error": Severity.ERROR,
    "warning": Severity.WARNING,
    "note": Severity.NOTE,
    "failure-note": Severity.NOTE,
    "help": Severity.NOTE,
}

_SEVERITY_TO_LEVEL: Final[Mapping[Severity, AnnotationLevel]] = {
    Severity.ERROR: AnnotationLevel.FAILURE,
    Severity.WARNING: AnnotationLevel.WARNING,
    Severity.NOTE: AnnotationLevel.NOTICE,
}


def is_known_severity(label: object) -> bool:
    """Return ``True`` when ``label`` is one of the recognised level strings."""

    return isinstance(label, str) and label in SEVERITY_LABELS


def parse_severity(label: object) -> Severity:
    """Return the :class:`Severity` matching ``label``.

    Matching is case-sensitive. Labels outside :data:`SEVERITY_LABELS`, and
    non-string values, fall back to :attr:`Severity.NOTE`.

    Args:
        label: Level string reported by the compiler.

    Returns:
        Severity: Recognised severity, or ``Severity.NOTE`` when unknown.
    """

    if isinstance(label, str):
        severity = SEVERITY_LABELS.get(label)
        if severity is not None:
            return severity
    LOGGER.debug("unrecognised diagnostic level %r treated as note", label)
    return Severity.NOTE


def severity_to_level(severity: Severity) -> AnnotationLevel:
    """Map :class:`Severity` to the check-run annotation level.

    Args:
        severity: Severity value to translate.

    Returns:
        AnnotationLevel: ``failure``, ``warning`` or ``notice``.
    """

    return _SEVERITY_TO_LEVEL.get(severity, AnnotationLevel.NOTICE)


__all__ = [
    "AnnotationLevel",
    "SEVERITY_LABELS",
    "Severity",
    "is_known_severity",
    "parse_severity",
    "severity_to_level",
]
