"""Unit tests for run_interactive (used for the chsh password prompt)."""

from unittest.mock import MagicMock, patch

from shellsetup.utils.shell import run_interactive


class TestRunInteractive:
    @patch("shellsetup.utils.shell.subprocess.run")
    def test_returns_exit_code(self, mock_run: MagicMock) -> None:
        mock_run.return_value = MagicMock(returncode=1)

        assert run_interactive(["chsh", "-s", "/bin/zsh"]) == 1

    @patch("shellsetup.utils.shell.subprocess.run")
    def test_inherits_the_terminal(self, mock_run: MagicMock) -> None:
        """Output is not captured so the password prompt reaches the user."""
        mock_run.return_value = MagicMock(returncode=0)

        run_interactive(["chsh", "-s", "/bin/zsh"])

        kwargs = mock_run.call_args.kwargs
        assert "capture_output" not in kwargs
        assert "stdout" not in kwargs
        assert "stdin" not in kwargs

    @patch("shellsetup.utils.shell.subprocess.run")
    def test_merges_env(self, mock_run: MagicMock) -> None:
        mock_run.return_value = MagicMock(returncode=0)

        run_interactive(["true"], env={"LC_ALL": "C"})

        env = mock_run.call_args.kwargs["env"]
        assert env["LC_ALL"] == "C"
        assert "PATH" in env
