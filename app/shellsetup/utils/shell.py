"""Shell execution utilities.

Provides subprocess execution with proper error handling and a bounded
retry wrapper for network-bound commands.
"""

import logging
import os
import shutil
import subprocess
import time
from dataclasses import dataclass

from shellsetup.core.errors import RetryExhaustedError

logger = logging.getLogger(__name__)

# Defaults for network-bound commands
DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_RETRY_DELAY = 5.0


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Result of a shell command execution.

    Attributes:
        stdout: Standard output from the command.
        stderr: Standard error from the command.
        returncode: Exit code of the command.
    """

    stdout: str
    stderr: str
    returncode: int

    @property
    def success(self) -> bool:
        """Check if command executed successfully."""
        return self.returncode == 0


def run_command(
    args: list[str],
    *,
    check: bool = False,
    timeout: float | None = 60.0,
    cwd: str | None = None,
    env: dict[str, str] | None = None,
) -> CommandResult:
    """Execute a shell command and return the result.

    Args:
        args: Command and arguments to execute.
        check: If True, raise CalledProcessError on non-zero exit.
        timeout: Maximum time in seconds to wait for command.
        cwd: Working directory for the command. If None, uses current directory.
        env: Additional environment variables (merged with current env).

    Returns:
        CommandResult with stdout, stderr, and returncode.

    Raises:
        subprocess.CalledProcessError: If check=True and command fails.
        subprocess.TimeoutExpired: If command exceeds timeout.
        FileNotFoundError: If command executable is not found.
    """
    logger.debug("Running: %s", " ".join(args))
    result = subprocess.run(
        args,
        capture_output=True,
        text=True,
        check=check,
        timeout=timeout,
        cwd=cwd,
        env={**os.environ, **env} if env else None,
    )
    return CommandResult(
        stdout=result.stdout,
        stderr=result.stderr,
        returncode=result.returncode,
    )


def run_with_retry(
    args: list[str],
    *,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    delay_seconds: float = DEFAULT_RETRY_DELAY,
    timeout: float | None = 300.0,
    cwd: str | None = None,
    env: dict[str, str] | None = None,
) -> CommandResult:
    """Execute a network-bound command, retrying on failure.

    Attempts are strictly sequential with a fixed delay between them. There
    is no delay after the final attempt. A timed-out attempt counts as a
    failed attempt.

    Args:
        args: Command and arguments to execute.
        max_attempts: Total number of attempts (>= 1).
        delay_seconds: Fixed sleep between attempts.
        timeout: Per-attempt timeout in seconds.
        cwd: Working directory for the command.
        env: Additional environment variables.

    Returns:
        CommandResult of the first successful attempt.

    Raises:
        ValueError: If max_attempts is less than 1.
        RetryExhaustedError: If every attempt failed.
        FileNotFoundError: If the executable does not exist (not retried).
    """
    if max_attempts < 1:
        msg = f"max_attempts must be at least 1, got {max_attempts}"
        raise ValueError(msg)

    stderr = ""
    for attempt in range(1, max_attempts + 1):
        try:
            result = run_command(args, timeout=timeout, cwd=cwd, env=env)
        except subprocess.TimeoutExpired:
            stderr = f"timed out after {timeout}s"
        else:
            if result.success:
                return result
            stderr = result.stderr.strip()

        logger.warning(
            "Attempt %d/%d failed: %s%s",
            attempt,
            max_attempts,
            " ".join(args),
            f" ({stderr})" if stderr else "",
        )
        if attempt < max_attempts:
            time.sleep(delay_seconds)

    raise RetryExhaustedError(args, max_attempts, stderr)


def command_exists(name: str) -> bool:
    """Check if a command exists in the system PATH.

    Args:
        name: Command name to check.

    Returns:
        True if command exists, False otherwise.
    """
    return shutil.which(name) is not None


def command_path(name: str) -> str | None:
    """Return the absolute path of a command on PATH, or None."""
    return shutil.which(name)


def run_interactive(
    args: list[str],
    *,
    cwd: str | None = None,
    env: dict[str, str] | None = None,
) -> int:
    """Execute a command interactively, inheriting the terminal.

    Unlike run_command(), this does NOT capture stdout/stderr, allowing the
    subprocess to prompt the user directly (e.g. ``chsh`` asking for a
    password).

    Args:
        args: Command and arguments to execute.
        cwd: Working directory for the command.
        env: Additional environment variables (merged with current env).

    Returns:
        Exit code of the command.

    Raises:
        FileNotFoundError: If command executable is not found.
        OSError: If command cannot be executed.
    """
    full_env = {**os.environ, **(env or {})}
    result = subprocess.run(
        args,
        check=False,
        cwd=cwd,
        env=full_env,
    )
    return result.returncode


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """Retry bounds shared by every network-bound command of a run.

    Attributes:
        max_attempts: Total number of attempts.
        delay_seconds: Fixed delay between attempts.
    """

    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    delay_seconds: float = DEFAULT_RETRY_DELAY

    def run(
        self,
        args: list[str],
        *,
        timeout: float | None = 300.0,
        cwd: str | None = None,
        env: dict[str, str] | None = None,
    ) -> CommandResult:
        """Run ``args`` through run_with_retry() with this policy's bounds."""
        return run_with_retry(
            args,
            max_attempts=self.max_attempts,
            delay_seconds=self.delay_seconds,
            timeout=timeout,
            cwd=cwd,
            env=env,
        )
