# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Console output for the action's own progress messages.

Output follows one of three styles. ``github`` speaks the Actions runner's
workflow-command dialect: steps fold into ``::group::`` sections and warnings
or failures become ``::warning::``/``::error::`` commands that the runner
lifts into the job summary. ``rich`` and ``plain`` are for local terminals.
"""

from __future__ import annotations

import sys
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Final

from rich.console import Console
from rich.rule import Rule
from rich.text import Text

GROUP_START: Final[str] = "::group::"
GROUP_END: Final[str] = "::endgroup::"
WARNING_COMMAND: Final[str] = "::warning::"
ERROR_COMMAND: Final[str] = "::error::"


class ConsoleStyle(str, Enum):
    """Supported console presentations."""

    GITHUB = "github"
    RICH = "rich"
    PLAIN = "plain"


def escape_command_data(message: str) -> str:
    """Escape ``message`` for use as workflow-command data.

    The runner reads one command per line, so line breaks and the ``%``
    escape character itself must be percent-encoded.
    """

    return message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def stdout_is_terminal() -> bool:
    """Return whether stdout is attached to an interactive terminal."""

    try:
        return sys.stdout.isatty()
    except ValueError:
        # closed stream
        return False


@lru_cache(maxsize=2)
def shared_console(color: bool) -> Console:
    """Return the stdout console shared by every writer with the same colour setting.

    Rich emoji codes stay disabled: titles coming from clippy may contain
    ``:name:`` sequences that must print verbatim.
    """

    return Console(
        color_system="auto" if color else None,
        force_terminal=color or None,
        no_color=not color,
        emoji=False,
        soft_wrap=True,
        highlight=False,
    )


@dataclass(frozen=True, slots=True)
class ActionLog:
    """Progress and status writer for one CLI invocation.

    Attributes:
        style: Presentation style shared with the diagnostic report.
        color: Explicit colour flag; ``None`` follows terminal detection.
        emoji: Prefix status lines with emoji outside ``github`` commands.
        console: Destination override, mainly for tests.
    """

    style: ConsoleStyle = ConsoleStyle.PLAIN
    color: bool | None = None
    emoji: bool = True
    console: Console | None = None

    @property
    def use_color(self) -> bool:
        """Return whether styled output is enabled."""

        return stdout_is_terminal() if self.color is None else self.color

    @property
    def target(self) -> Console:
        """Return the console receiving every line."""

        return self.console or shared_console(self.use_color)

    @contextmanager
    def group(self, title: str) -> Iterator[None]:
        """Print ``title`` as a section and fold the enclosed output under it.

        In ``github`` style the fold is closed even when the body raises, so a
        failing step never swallows the lines printed after it.
        """

        console = self.target
        if self.style is ConsoleStyle.GITHUB:
            console.print(Text(f"{GROUP_START}{title}"))
            try:
                yield
            finally:
                console.print(Text(GROUP_END))
            return
        if self.style is ConsoleStyle.RICH and self.use_color:
            console.print(Rule(Text(title)))
        else:
            console.print(Text(f"--- {title} ---"))
        yield

    def info(self, message: str) -> None:
        self._status(message, symbol="ℹ️ ", color="cyan")

    def ok(self, message: str) -> None:
        self._status(message, symbol="✅ ", color="green")

    def warn(self, message: str) -> None:
        self._status(message, symbol="⚠️ ", color="yellow", command=WARNING_COMMAND)

    def fail(self, message: str) -> None:
        self._status(message, symbol="❌ ", color="red", command=ERROR_COMMAND)

    def _status(self, message: str, *, symbol: str, color: str, command: str | None = None) -> None:
        if command is not None and self.style is ConsoleStyle.GITHUB:
            self.target.print(Text(f"{command}{escape_command_data(message)}"))
            return
        text = Text(f"{symbol if self.emoji else ''}{message}")
        if self.use_color:
            text.stylize(color)
        self.target.print(text)


__all__ = [
    "ERROR_COMMAND",
    "GROUP_END",
    "GROUP_START",
    "WARNING_COMMAND",
    "ActionLog",
    "ConsoleStyle",
    "escape_command_data",
    "shared_console",
    "stdout_is_terminal",
]
