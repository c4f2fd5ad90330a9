# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Print render blocks to the console in one of several styles."""

from __future__ import annotations

from collections.abc import Sequence

from rich.console import Console
from rich.text import Text

from clippy_action.core.logging import GROUP_END, GROUP_START, ActionLog, ConsoleStyle
from clippy_action.core.severity import Severity

from .render import RenderBlock, RenderEntry


def severity_color(severity: Severity) -> str:
    """Return the rich colour name associated with a severity level."""

    return {
        Severity.ERROR: "red",
        Severity.WARNING: "yellow",
        Severity.NOTE: "cyan",
    }.get(severity, "cyan")


def format_entry(entry: RenderEntry, *, color: bool) -> Text:
    """Return ``entry`` as styled text: severity tag, title, then rendered detail.

    Args:
        entry: Render entry to format.
        color: Whether severity tags should be coloured.

    Returns:
        Text: Rich text safe from markup interpretation.
    """

    text = Text()
    tag = Text(entry.tag)
    if color:
        tag.stylize(f"bold {severity_color(entry.severity)}")
    text.append_text(tag)
    text.append(f" {entry.title}")
    if entry.code:
        text.append(f" ({entry.code})", style="dim" if color else "")
    text.append("\n")
    text.append(entry.rendered.rstrip())
    return text


def emit_block(block: RenderBlock, *, log: ActionLog) -> None:
    """Print a single block as a section of ``log``.

    Args:
        block: Render block to print.
        log: Writer carrying the destination console and presentation style.
    """

    color = log.use_color and log.style is ConsoleStyle.RICH
    with log.group(block.header):
        for entry in block.entries:
            log.target.print(format_entry(entry, color=color))


def emit_blocks(
    blocks: Sequence[RenderBlock],
    *,
    style: ConsoleStyle = ConsoleStyle.GITHUB,
    use_color: bool | None = None,
    console: Console | None = None,
) -> None:
    """Print every block in order.

    Args:
        blocks: Render blocks in group order.
        style: Presentation style; ``github`` emits collapsible workflow groups.
        use_color: Optional explicit colour flag overriding TTY detection.
        console: Optional console override used mainly by tests.
    """

    log = ActionLog(style=style, color=use_color, console=console)
    for block in blocks:
        emit_block(block, log=log)


__all__ = ["ConsoleStyle", "GROUP_END", "GROUP_START", "emit_block", "emit_blocks", "format_entry", "severity_color"]
