"""Unit tests for post-install verification."""

import logging
import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from shellsetup.core.setup_log import CONSOLE_LOGGER_NAME
from shellsetup.core.verify import parse_version, verify, version_at_least
from shellsetup.models.component import ComponentSpec
from shellsetup.utils.shell import CommandResult


def _spec(name: str, present: bool = True, **kwargs) -> ComponentSpec:
    return ComponentSpec(name=name, probe=lambda: present, install=lambda: None, **kwargs)


def _version_output(text: str) -> CommandResult:
    return CommandResult(stdout=text, stderr="", returncode=0)


class TestParseVersion:
    @pytest.mark.parametrize(
        ("output", "expected"),
        [
            ("zsh 5.9 (x86_64-apple-darwin23.0)", (5, 9)),
            ("tmux 3.3a", (3, 3)),
            ("starship 1.17.1\nbranch:", (1, 17, 1)),
            ("no version here", None),
        ],
    )
    def test_parse(self, output: str, expected: tuple[int, ...] | None) -> None:
        assert parse_version(output) == expected

    def test_comparison_pads(self) -> None:
        assert version_at_least((5, 8), "5.8.0")
        assert version_at_least((3, 0, 1), "3.0")
        assert not version_at_least((2, 9), "3.0")


class TestVerify:
    def test_all_passing(self, tmp_path: Path) -> None:
        target = tmp_path / ".zshrc"
        target.write_text("")

        report = verify([_spec("fzf"), _spec("zoxide", required=False)], [target])

        assert report.checks_total == 3
        assert report.all_passed

    def test_missing_component_and_file(self, tmp_path: Path) -> None:
        report = verify([_spec("Ghostty", present=False, required=False)], [tmp_path / "gone"])

        assert report.checks_passed == 0
        assert [item.detail for item in report.failed] == ["not found", "missing"]

    def test_minimum_version_met(self) -> None:
        spec = _spec("zsh", min_version="5.8", version_args=["zsh", "--version"])

        with patch(
            "shellsetup.core.verify.run_command",
            return_value=_version_output("zsh 5.9 (x86_64-ubuntu-linux-gnu)"),
        ):
            report = verify([spec], [])

        assert report.all_passed
        assert report.items[0].detail == "5.9"

    def test_minimum_version_not_met(self) -> None:
        spec = _spec("tmux", min_version="3.0", version_args=["tmux", "-V"])

        with patch("shellsetup.core.verify.run_command", return_value=_version_output("tmux 2.6")):
            report = verify([spec], [])

        assert not report.all_passed
        assert report.items[0].detail == "2.6 < 3.0"

    def test_version_query_failure_never_raises(self) -> None:
        spec = _spec("tmux", min_version="3.0", version_args=["tmux", "-V"])

        with patch(
            "shellsetup.core.verify.run_command",
            side_effect=subprocess.TimeoutExpired(cmd="tmux", timeout=10),
        ):
            report = verify([spec], [])

        assert report.items[0].passed is False
        assert report.items[0].detail == "version unknown"

    def test_probe_error_counts_as_missing(self) -> None:
        def probe() -> bool:
            raise OSError("permission denied")

        spec = ComponentSpec(name="fd", probe=probe, install=lambda: None)

        report = verify([spec], [])

        assert report.items[0].passed is False

    def test_unexpected_check_error_never_raises(self) -> None:
        def probe() -> bool:
            raise ValueError("unexpected probe output")

        spec = ComponentSpec(name="starship", probe=probe, install=lambda: None)

        report = verify([spec, _spec("fzf")], [])

        assert [item.passed for item in report.items] == [False, True]
        assert report.items[0].detail == "not found"

    def test_each_failed_check_is_a_warning(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        present = tmp_path / ".zshrc"
        present.write_text("")
        missing = tmp_path / "missing.conf"

        with caplog.at_level(logging.WARNING, logger=CONSOLE_LOGGER_NAME):
            verify([_spec("tmux", present=False), _spec("fzf")], [present, missing])

        warnings = [
            r.getMessage()
            for r in caplog.records
            if r.name == CONSOLE_LOGGER_NAME and r.levelno == logging.WARNING
        ]
        assert warnings == ["tmux not found", f"{missing} missing"]
