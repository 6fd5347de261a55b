"""Unit tests for the console helpers and their log records."""

import logging

import pytest

from shellsetup.core.setup_log import CONSOLE_LOGGER_NAME, SUCCESS
from shellsetup.utils.formatting import (
    create_table,
    print_error,
    print_info,
    print_success,
    print_warning,
)


class TestConsoleHelpers:
    """Every console line is also a log record with the matching level."""

    @pytest.mark.parametrize(
        ("helper", "level"),
        [
            (print_info, logging.INFO),
            (print_success, SUCCESS),
            (print_warning, logging.WARNING),
            (print_error, logging.ERROR),
        ],
    )
    def test_helper_logs_at_level(
        self, helper, level: int, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.DEBUG, logger=CONSOLE_LOGGER_NAME):
            helper("zsh installed")

        records = [r for r in caplog.records if r.name == CONSOLE_LOGGER_NAME]
        assert len(records) == 1
        assert records[0].levelno == level
        assert records[0].getMessage() == "zsh installed"

    def test_success_level_name(self) -> None:
        assert logging.getLevelName(SUCCESS) == "SUCCESS"

    def test_markup_is_escaped(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Brackets in messages are printed literally."""
        print_info("[not markup]")

        assert "[not markup]" in capsys.readouterr().out


class TestCreateTable:
    def test_columns(self) -> None:
        table = create_table("Components", "Component", "Status")

        assert table.title == "Components"
        assert [c.header for c in table.columns] == ["Component", "Status"]
