# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Locate cargo and describe the active Rust toolchain and host platform."""

from __future__ import annotations

import platform
import shutil
from collections.abc import Callable, Mapping
from enum import Enum
from pathlib import Path
from typing import Final

from pydantic import BaseModel, ConfigDict

from ..errors import ToolchainNotFound
from .process import run_command

RUSTC_PREFIX: Final[str] = "rustc "
NIGHTLY_SUFFIX: Final[str] = "-nightly"
BETA_SUFFIX: Final[str] = "-beta"

_OS_NAMES: Final[Mapping[str, str]] = {
    "linux": "Linux",
    "darwin": "macOS",
    "windows": "Windows",
}
_ARCH_NAMES: Final[Mapping[str, str]] = {
    "x86_64": "x64",
    "amd64": "x64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "i386": "x86",
    "i686": "x86",
}


class ReleaseChannel(str, Enum):
    """Rust release channels."""

    STABLE = "Stable"
    BETA = "Beta"
    NIGHTLY = "Nightly"


class RustToolchain(BaseModel):
    """Version and channel reported by ``rustc --version``."""

    model_config = ConfigDict(frozen=True)

    version: str
    channel: ReleaseChannel


def find_cargo(which: Callable[[str], str | None] = shutil.which) -> Path:
    """Return the path of the ``cargo`` executable.

    Args:
        which: Lookup function used to resolve executables on ``PATH``.

    Returns:
        Path: Location of ``cargo``.

    Raises:
        ToolchainNotFound: If ``cargo`` is not on ``PATH``.
    """

    located = which("cargo")
    if located is None:
        raise ToolchainNotFound("Cargo tool doesn't exist. Please add a step to install a valid Rust toolchain.")
    return Path(located)


def parse_toolchain(version_output: str) -> RustToolchain:
    """Parse ``rustc --version`` output into a :class:`RustToolchain`.

    The channel is derived from the pre-release tag of the patch component,
    e.g. ``1.80.0-nightly`` is nightly, ``1.81.0-beta.3`` is beta and
    ``1.79.0`` is stable.

    Args:
        version_output: Raw stdout of ``rustc --version``.

    Returns:
        RustToolchain: Parsed version and channel.
    """

    version = version_output.strip().removeprefix(RUSTC_PREFIX)
    release = version.split(" ", 1)[0]
    patch = release.split(".", 2)[-1]
    if NIGHTLY_SUFFIX in patch:
        channel = ReleaseChannel.NIGHTLY
    elif BETA_SUFFIX in patch:
        channel = ReleaseChannel.BETA
    else:
        channel = ReleaseChannel.STABLE
    return RustToolchain(version=version, channel=channel)


def detect_toolchain(rustc: str = "rustc") -> RustToolchain:
    """Run ``rustc --version`` and parse its output.

    Raises:
        ToolchainNotFound: If ``rustc`` cannot be executed.
    """

    try:
        completed = run_command([rustc, "--version"])
    except FileNotFoundError as exc:
        raise ToolchainNotFound(f"Unable to run {rustc}: {exc}") from exc
    return parse_toolchain(completed.stdout)


def host_os() -> str:
    """Return the host operating system name in the runner's vocabulary."""

    system = platform.system().lower()
    return _OS_NAMES.get(system, system or "unknown")


def host_arch() -> str:
    """Return the host CPU architecture name in the runner's vocabulary."""

    machine = platform.machine().lower()
    return _ARCH_NAMES.get(machine, machine or "unknown")


__all__ = [
    "ReleaseChannel",
    "RustToolchain",
    "detect_toolchain",
    "find_cargo",
    "host_arch",
    "host_os",
    "parse_toolchain",
]
