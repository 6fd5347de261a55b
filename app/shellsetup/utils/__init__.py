"""Utility modules for shellsetup.

This module exports commonly used utility functions.
"""

from shellsetup.utils.formatting import (
    console,
    err_console,
    print_error,
    print_info,
    print_success,
    print_warning,
)
from shellsetup.utils.shell import (
    CommandResult,
    RetryPolicy,
    command_exists,
    run_command,
    run_with_retry,
)

__all__ = [
    "CommandResult",
    "RetryPolicy",
    "command_exists",
    "console",
    "err_console",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
    "run_command",
    "run_with_retry",
]
