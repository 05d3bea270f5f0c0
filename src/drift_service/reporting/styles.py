"""Shared Rich theme and console construction for table output."""

from __future__ import annotations

import shutil
from typing import TextIO

from rich import box
from rich.console import Console
from rich.table import Table
from rich.theme import Theme

DEFAULT_TERMINAL_WIDTH = 120

DRIFT_THEME = Theme(
    {
        "title": "bold bright_cyan",
        "heading": "bold bright_cyan",
        "muted": "bright_black",
        "table.border": "bright_cyan",
        "table.header": "bold bright_cyan",
        "status.ok": "green",
        "status.warning": "yellow",
        "status.critical": "bold red",
        "severity.low": "green",
        "severity.medium": "yellow",
        "severity.high": "red",
        "severity.critical": "bold red",
        "action.create": "green",
        "action.delete": "red",
        "action.replace": "yellow",
        "action.update": "cyan",
        "action.read": "blue",
    }
)


def detect_terminal_width() -> int:
    return shutil.get_terminal_size(fallback=(DEFAULT_TERMINAL_WIDTH, 24)).columns


def make_console(file: TextIO, *, use_color: bool, width: int) -> Console:
    """Create a console rendering into ``file``; without colour no ANSI codes are emitted."""

    if use_color:
        return Console(
            file=file,
            width=width,
            theme=DRIFT_THEME,
            color_system="standard",
            force_terminal=True,
            highlight=False,
        )
    return Console(
        file=file,
        width=width,
        theme=DRIFT_THEME,
        color_system=None,
        force_terminal=False,
        highlight=False,
    )


def rounded_table(*headers: str, width: int | None = None, show_header: bool = True) -> Table:
    table = Table(
        box=box.ROUNDED,
        width=width,
        show_header=show_header,
        header_style="table.header",
        border_style="table.border",
    )
    for header in headers:
        table.add_column(header)
    return table


__all__ = [
    "DEFAULT_TERMINAL_WIDTH",
    "DRIFT_THEME",
    "detect_terminal_width",
    "make_console",
    "rounded_table",
]
