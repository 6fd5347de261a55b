"""Exception hierarchy for shellsetup.

Every exception that should abort a run derives from SetupError. The CLI
catches SetupError, logs it as an error line and exits non-zero; anything
else is a bug and propagates with a traceback.
"""


class SetupError(Exception):
    """Base exception for fatal provisioning errors."""


class PrerequisiteError(SetupError):
    """Raised when a required host tool (downloader, git) is missing."""


class UnsupportedPlatformError(PrerequisiteError):
    """Raised when the host OS or package manager is not supported."""


class RetryExhaustedError(SetupError):
    """Raised when a network-bound command failed on every attempt.

    Attributes:
        args_: The argv that was attempted.
        attempts: Number of attempts made.
        stderr: Standard error of the final attempt.
    """

    def __init__(self, args: list[str], attempts: int, stderr: str = "") -> None:
        self.args_ = list(args)
        self.attempts = attempts
        self.stderr = stderr
        message = f"Command failed after {attempts} attempt(s): {' '.join(args)}"
        if stderr:
            message = f"{message}: {stderr}"
        super().__init__(message)


class ComponentInstallError(SetupError):
    """Raised when a required component could not be installed."""


class StateInconsistencyError(SetupError):
    """Raised when continuing would risk losing user data."""


class BackupError(StateInconsistencyError):
    """Raised when an existing file could not be backed up."""


class ConfigWriteError(StateInconsistencyError):
    """Raised when a configuration file could not be written."""


class TemplateError(SetupError):
    """Raised when a configuration template has unresolved placeholders."""


class SettingsError(SetupError):
    """Raised when the settings file cannot be read or validated."""


class DownloadError(SetupError):
    """Raised when a download produced no usable file."""
