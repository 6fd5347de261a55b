"""Abstract base class for package manager backends.

This module defines the PackageBackend interface every supported package
manager implements. The backend is selected once from PlatformInfo and
then used for every package-manager interaction of the run.
"""

import logging
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass

from shellsetup.core.errors import RetryExhaustedError
from shellsetup.models.platform import PackageManagerKind
from shellsetup.utils.shell import RetryPolicy, command_exists

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class BackendResult:
    """Result of installing a package through a backend.

    Attributes:
        package: Package name that was installed.
        success: Whether the package manager reported success.
        error: Error message if the install failed, None otherwise.
    """

    package: str
    success: bool
    error: str | None = None


class PackageBackend(ABC):
    """Abstract base class for all package manager backends.

    Attributes:
        policy: Retry policy for network-bound commands.

    Example:
        >>> backend = AptBackend()
        >>> if backend.is_available():
        ...     backend.prepare()
        ...     if not backend.is_installed("tmux"):
        ...         result = backend.install("tmux")
    """

    # Timeout for a single package-manager invocation (10 minutes)
    _TIMEOUT: float = 600.0

    def __init__(self, policy: RetryPolicy | None = None) -> None:
        """Initialize the backend.

        Args:
            policy: Retry policy for network-bound commands.
        """
        self.policy = policy or RetryPolicy()

    @property
    @abstractmethod
    def kind(self) -> PackageManagerKind:
        """Return the package manager family this backend drives."""

    @property
    @abstractmethod
    def executable(self) -> str:
        """Return the package manager executable name."""

    @abstractmethod
    def prepare(self) -> None:
        """Make the backend ready for installs (bootstrap, index refresh).

        Raises:
            RetryExhaustedError: If a network-bound step kept failing.
        """

    @abstractmethod
    def is_installed(self, package: str) -> bool:
        """Check if a package is installed according to the package manager.

        Args:
            package: Package name.

        Returns:
            True if the package is installed.
        """

    @abstractmethod
    def install_args(self, package: str) -> list[str]:
        """Return the argv that installs ``package``."""

    def install_env(self) -> dict[str, str] | None:
        """Extra environment for install commands."""
        return None

    def is_available(self) -> bool:
        """Check if the package manager executable is on PATH."""
        return command_exists(self.executable)

    def install(self, package: str) -> BackendResult:
        """Install a package, retrying transient failures.

        Args:
            package: Package name.

        Returns:
            BackendResult describing the outcome.

        Raises:
            RuntimeError: If the package manager is not available.
        """
        if not self.is_available():
            msg = f"{self.kind.value} package manager is not available on this system"
            raise RuntimeError(msg)

        logger.info("Installing %s via %s", package, self.kind.value)
        try:
            self.policy.run(
                self.install_args(package),
                timeout=self._TIMEOUT,
                env=self.install_env(),
            )
        except RetryExhaustedError as e:
            return BackendResult(package=package, success=False, error=str(e))
        return BackendResult(package=package, success=True)


def privileged(args: list[str]) -> list[str]:
    """Prefix ``args`` with sudo unless already running as root."""
    if os.geteuid() == 0:
        return list(args)
    return ["sudo", *args]
