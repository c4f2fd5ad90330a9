# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Process and toolchain helpers for running clippy."""

from __future__ import annotations

from .process import ClippyRun, build_clippy_command, run_clippy, run_command
from .toolchain import ReleaseChannel, RustToolchain, detect_toolchain, find_cargo, host_arch, host_os, parse_toolchain

__all__ = (
    "ClippyRun",
    "ReleaseChannel",
    "RustToolchain",
    "build_clippy_command",
    "detect_toolchain",
    "find_cargo",
    "host_arch",
    "host_os",
    "parse_toolchain",
    "run_clippy",
    "run_command",
)
