"""Rich console formatting utilities.

Provides consistent, classified output for the CLI. Every helper prints to
the console and emits a record on the ``shellsetup.console`` logger, so the
same line also lands, timestamped, in the persistent setup log.
"""

from __future__ import annotations

import logging
import sys

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.theme import Theme

from shellsetup.core.setup_log import CONSOLE_LOGGER_NAME, SUCCESS

_log = logging.getLogger(CONSOLE_LOGGER_NAME)

THEME = Theme(
    {
        "text": "#ffffff",
        "muted": "#b2bec3",
        "header": "#69B9A1",
        "bold_header": "bold #69B9A1",
        "border": "#29526d",
        "success": "#03b971",
        "warning": "#f5b332",
        "error": "bold #f53263",
        "info": "#0ec1c8",
    }
)


def _detect_color_system() -> str | None:
    """Detect the best color system for the current terminal.

    Returns "truecolor" for interactive terminals to enable full hex color support,
    None otherwise to let Rich auto-detect.
    """
    if sys.stdout.isatty():
        return "truecolor"
    return None


# Shared console instances
console = Console(theme=THEME, color_system=_detect_color_system())
err_console = Console(theme=THEME, stderr=True, color_system=_detect_color_system())


def create_table(title: str, *columns: str) -> Table:
    """Create a pre-configured table with the shared header and border styles.

    Args:
        title: Table title.
        *columns: Column headers.

    Returns:
        Rich Table with one column per header.
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    for column in columns:
        table.add_column(column)
    return table


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[info]\\[INFO][/] {escape(message)}")
    _log.info(message)


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]✓[/] {escape(message)}")
    _log.log(SUCCESS, message)


def print_warning(message: str) -> None:
    """Print a warning message."""
    err_console.print(f"[warning]⚠ Warning:[/] {escape(message)}")
    _log.warning(message)


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]✗ Error:[/] {escape(message)}")
    _log.error(message)
