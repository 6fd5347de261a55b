"""Persistent setup log.

Every run writes a fresh ``~/.setup.log`` (the previous one is kept as
``~/.setup.log.prev``). All records on the ``shellsetup`` logger hierarchy
are appended to it with a timestamp and a level name, including the custom
SUCCESS level used for completed steps.
"""

import logging
import os
from datetime import datetime
from pathlib import Path

from rich.logging import RichHandler

# Between INFO (20) and WARNING (30)
SUCCESS = 25
logging.addLevelName(SUCCESS, "SUCCESS")

ROOT_LOGGER_NAME = "shellsetup"
CONSOLE_LOGGER_NAME = "shellsetup.console"

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_FILE_HANDLER_NAME = "shellsetup-file"
_CONSOLE_HANDLER_NAME = "shellsetup-console"

LOG_HEADER = (
    "=" * 80 + "\n"
    "SHELLSETUP: Installation Log\n"
    + "=" * 80 + "\n"
)


def _remove_handler(logger: logging.Logger, name: str) -> None:
    for handler in list(logger.handlers):
        if handler.get_name() == name:
            logger.removeHandler(handler)
            handler.close()


def initialize_log(path: Path) -> Path:
    """Start a new setup log, rotating the previous one.

    Args:
        path: Log file location (usually ~/.setup.log).

    Returns:
        The log file path.

    Raises:
        OSError: If the log file cannot be created.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    if path.exists():
        os.replace(path, path.with_name(path.name + ".prev"))

    path.write_text(LOG_HEADER, encoding="utf-8")

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(logging.DEBUG)
    _remove_handler(logger, _FILE_HANDLER_NAME)

    file_handler = logging.FileHandler(path, mode="a", encoding="utf-8")
    file_handler.set_name(_FILE_HANDLER_NAME)
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT))
    logger.addHandler(file_handler)

    logger.info("Starting setup on %s", datetime.now().strftime("%a %b %d %H:%M:%S %Y"))
    return path


class _SkipConsoleEcho(logging.Filter):
    """Drop records that the console helpers already printed."""

    def filter(self, record: logging.LogRecord) -> bool:
        return not record.name.startswith(CONSOLE_LOGGER_NAME)


def configure_console_logging(verbose: bool = False) -> None:
    """Show diagnostic module logs on the terminal.

    Without ``verbose`` only warnings from module loggers reach the console
    (e.g. retry attempts); with it, debug detail is shown too.

    Args:
        verbose: Lower the console threshold to DEBUG.
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(logging.DEBUG)
    _remove_handler(logger, _CONSOLE_HANDLER_NAME)

    handler = RichHandler(show_path=False, rich_tracebacks=True)
    handler.set_name(_CONSOLE_HANDLER_NAME)
    handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    handler.addFilter(_SkipConsoleEcho())
    logger.addHandler(handler)


def close_log() -> None:
    """Detach and close the file and console handlers."""
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    _remove_handler(logger, _FILE_HANDLER_NAME)
    _remove_handler(logger, _CONSOLE_HANDLER_NAME)
