"""Unit tests for command execution and the retry wrapper."""

import subprocess
from unittest.mock import MagicMock, patch

import pytest

from shellsetup.core.errors import RetryExhaustedError
from shellsetup.utils.shell import (
    CommandResult,
    RetryPolicy,
    command_exists,
    run_command,
    run_with_retry,
)

FAIL = CommandResult(stdout="", stderr="Could not resolve host", returncode=6)
OK = CommandResult(stdout="done", stderr="", returncode=0)


class TestRunCommand:
    """Tests for run_command."""

    @patch("shellsetup.utils.shell.subprocess.run")
    def test_captures_output(self, mock_run: MagicMock) -> None:
        """stdout, stderr and the exit code are returned."""
        mock_run.return_value = MagicMock(stdout="out", stderr="err", returncode=2)

        result = run_command(["false"])

        assert result == CommandResult(stdout="out", stderr="err", returncode=2)
        assert not result.success

    @patch("shellsetup.utils.shell.subprocess.run")
    def test_env_is_merged(self, mock_run: MagicMock) -> None:
        """Extra variables are merged into the inherited environment."""
        mock_run.return_value = MagicMock(stdout="", stderr="", returncode=0)

        run_command(["env"], env={"DEBIAN_FRONTEND": "noninteractive"})

        env = mock_run.call_args.kwargs["env"]
        assert env["DEBIAN_FRONTEND"] == "noninteractive"
        assert "PATH" in env

    @patch("shellsetup.utils.shell.subprocess.run")
    def test_no_env_inherits(self, mock_run: MagicMock) -> None:
        """Without extra variables the environment is inherited as-is."""
        mock_run.return_value = MagicMock(stdout="", stderr="", returncode=0)

        run_command(["true"])

        assert mock_run.call_args.kwargs["env"] is None


class TestRunWithRetry:
    """Tests for run_with_retry."""

    @patch("shellsetup.utils.shell.time.sleep")
    @patch("shellsetup.utils.shell.run_command")
    def test_first_success_returns_immediately(
        self, mock_run: MagicMock, mock_sleep: MagicMock
    ) -> None:
        mock_run.return_value = OK

        result = run_with_retry(["git", "clone", "x"], max_attempts=3, delay_seconds=5)

        assert result is OK
        assert mock_run.call_count == 1
        mock_sleep.assert_not_called()

    @patch("shellsetup.utils.shell.time.sleep")
    @patch("shellsetup.utils.shell.run_command")
    def test_always_failing_runs_exactly_max_attempts(
        self, mock_run: MagicMock, mock_sleep: MagicMock
    ) -> None:
        """Three attempts, two delays, no delay after the last attempt."""
        mock_run.return_value = FAIL

        with pytest.raises(RetryExhaustedError) as exc_info:
            run_with_retry(["curl", "-fsSL", "url"], max_attempts=3, delay_seconds=5)

        assert mock_run.call_count == 3
        assert mock_sleep.call_count == 2
        assert all(call.args == (5,) for call in mock_sleep.call_args_list)
        assert exc_info.value.attempts == 3
        assert exc_info.value.args_ == ["curl", "-fsSL", "url"]
        assert "Could not resolve host" in str(exc_info.value)

    @patch("shellsetup.utils.shell.time.sleep")
    @patch("shellsetup.utils.shell.run_command")
    def test_recovers_after_transient_failure(
        self, mock_run: MagicMock, mock_sleep: MagicMock
    ) -> None:
        mock_run.side_effect = [FAIL, OK]

        result = run_with_retry(["apt-get", "update"], max_attempts=3, delay_seconds=1.5)

        assert result is OK
        mock_sleep.assert_called_once_with(1.5)

    @patch("shellsetup.utils.shell.time.sleep")
    @patch("shellsetup.utils.shell.run_command")
    def test_timeout_counts_as_failed_attempt(
        self, mock_run: MagicMock, mock_sleep: MagicMock
    ) -> None:
        mock_run.side_effect = subprocess.TimeoutExpired(cmd="git", timeout=1)

        with pytest.raises(RetryExhaustedError, match="timed out"):
            run_with_retry(["git", "clone", "x"], max_attempts=2, delay_seconds=0, timeout=1)

        assert mock_run.call_count == 2

    @patch("shellsetup.utils.shell.time.sleep")
    @patch("shellsetup.utils.shell.run_command")
    def test_single_attempt_never_sleeps(self, mock_run: MagicMock, mock_sleep: MagicMock) -> None:
        mock_run.return_value = FAIL

        with pytest.raises(RetryExhaustedError):
            run_with_retry(["git"], max_attempts=1)

        mock_sleep.assert_not_called()

    @patch("shellsetup.utils.shell.run_command")
    def test_missing_executable_is_not_retried(self, mock_run: MagicMock) -> None:
        mock_run.side_effect = FileNotFoundError("curl")

        with pytest.raises(FileNotFoundError):
            run_with_retry(["curl"], max_attempts=3, delay_seconds=0)

        assert mock_run.call_count == 1

    def test_rejects_zero_attempts(self) -> None:
        with pytest.raises(ValueError):
            run_with_retry(["true"], max_attempts=0)


class TestRetryPolicy:
    """Tests for RetryPolicy."""

    @patch("shellsetup.utils.shell.run_with_retry")
    def test_run_passes_bounds(self, mock_retry: MagicMock) -> None:
        mock_retry.return_value = OK
        policy = RetryPolicy(max_attempts=5, delay_seconds=2.0)

        policy.run(["git", "clone", "url"], timeout=30.0, env={"A": "1"})

        mock_retry.assert_called_once_with(
            ["git", "clone", "url"],
            max_attempts=5,
            delay_seconds=2.0,
            timeout=30.0,
            cwd=None,
            env={"A": "1"},
        )


class TestCommandExists:
    """Tests for command_exists."""

    def test_found(self) -> None:
        with patch("shellsetup.utils.shell.shutil.which", return_value="/usr/bin/git"):
            assert command_exists("git") is True

    def test_missing(self) -> None:
        with patch("shellsetup.utils.shell.shutil.which", return_value=None):
            assert command_exists("git") is False
