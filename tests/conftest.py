# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping, Sequence
from typing import Any

import pytest

CompilerLine = Callable[..., str]


def _compiler_message(
    *,
    level: str = "warning",
    message: str = "unused variable: `x`",
    file: str = "src/lib.rs",
    line_start: int = 10,
    line_end: int = 10,
    column_start: int = 5,
    column_end: int = 9,
    spans: Sequence[Mapping[str, Any]] | None = None,
    rendered: str | None = None,
    code: str | None = None,
) -> str:
    if spans is None:
        spans = [
            {
                "file_name": file,
                "line_start": line_start,
                "line_end": line_end,
                "column_start": column_start,
                "column_end": column_end,
                "is_primary": True,
                "label": None,
            }
        ]
    if rendered is None:
        rendered = f"{level}: {message}\n  --> {file}:{line_start}:{column_start}\n"
    payload = {
        "reason": "compiler-message",
        "package_id": "demo 0.1.0 (path+file:///work/demo)",
        "manifest_path": "/work/demo/Cargo.toml",
        "message": {
            "message": message,
            "code": {"code": code, "explanation": None} if code else None,
            "level": level,
            "spans": list(spans),
            "children": [],
            "rendered": rendered,
        },
    }
    return json.dumps(payload)


@pytest.fixture
def compiler_line() -> CompilerLine:
    """Return a factory producing one ``compiler-message`` JSON line."""
    return _compiler_message


@pytest.fixture
def artifact_line() -> str:
    """Return a ``compiler-artifact`` JSON line."""
    return json.dumps(
        {
            "reason": "compiler-artifact",
            "package_id": "demo 0.1.0 (path+file:///work/demo)",
            "target": {"name": "demo", "kind": ["lib"]},
            "fresh": False,
        }
    )


@pytest.fixture
def finished_line() -> str:
    """Return the ``build-finished`` JSON line cargo prints last."""
    return json.dumps({"reason": "build-finished", "success": False})
