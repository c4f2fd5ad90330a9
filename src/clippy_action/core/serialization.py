# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Helpers for coercing decoded JSON and serialising models."""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import TypeAlias, cast

from pydantic import BaseModel

JsonScalar: TypeAlias = str | int | float | bool | None
JsonValue: TypeAlias = "JsonScalar | list[JsonValue] | dict[str, JsonValue]"


def coerce_optional_int(value: JsonValue | None) -> int | None:
    """Return an optional integer parsed from ``value`` when feasible."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def coerce_optional_str(value: JsonValue | None) -> str | None:
    """Return a string representation of ``value`` or ``None`` when unset."""
    if value is None:
        return None
    return str(value)


def first_mapping(value: JsonValue | None) -> dict[str, JsonValue]:
    """Return ``value`` as a string-keyed mapping, or an empty mapping."""

    if isinstance(value, Mapping):
        return {str(key): cast(JsonValue, entry) for key, entry in value.items()}
    return {}


def mapping_sequence(value: JsonValue | None) -> list[dict[str, JsonValue]]:
    """Return the mapping entries of a JSON array, dropping anything else."""

    if not isinstance(value, Sequence) or isinstance(value, (str, bytes, bytearray)):
        return []
    return [first_mapping(item) for item in value if isinstance(item, Mapping)]


def jsonify(value: object) -> JsonValue:
    """Convert ``value`` into a JSON-compatible structure.

    Args:
        value: Model, mapping, sequence or scalar produced by the pipeline.

    Returns:
        JsonValue: Representation that can be serialised by JSON encoders.
    """

    if value is None:
        return None
    if isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, Path):
        return value.as_posix()
    if isinstance(value, BaseModel):
        return jsonify(value.model_dump(mode="json"))
    if isinstance(value, Mapping):
        return {str(key): jsonify(item) for key, item in value.items()}
    if isinstance(value, Sequence) and not isinstance(value, (bytes, bytearray)):
        return [jsonify(item) for item in value]
    return str(value)


def dump_json(value: object, destination: Path) -> None:
    """Write ``value`` to ``destination`` as indented JSON."""

    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_text(json.dumps(jsonify(value), indent=2) + "\n", encoding="utf-8")


__all__ = [
    "JsonValue",
    "coerce_optional_int",
    "coerce_optional_str",
    "dump_json",
    "first_mapping",
    "jsonify",
    "mapping_sequence",
]
