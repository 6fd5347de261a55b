"""Host platform detection.

Determines the operating system family, CPU architecture and the one
package manager backend used for the rest of the run.
"""

import logging
import platform as _platform

from shellsetup.core.errors import UnsupportedPlatformError
from shellsetup.models.platform import Arch, OsFamily, PackageManagerKind, PlatformInfo
from shellsetup.utils.shell import command_exists

logger = logging.getLogger(__name__)

# Linux package managers in priority order: first binary found wins.
LINUX_PACKAGE_MANAGERS: tuple[tuple[str, PackageManagerKind], ...] = (
    ("apt-get", PackageManagerKind.APT),
    ("dnf", PackageManagerKind.DNF),
    ("pacman", PackageManagerKind.PACMAN),
)

_ARCH_ALIASES: dict[str, Arch] = {
    "x86_64": Arch.X86_64,
    "amd64": Arch.X86_64,
    "arm64": Arch.AARCH64,
    "aarch64": Arch.AARCH64,
}


def _parse_os(system: str) -> OsFamily:
    if system.startswith("Darwin"):
        return OsFamily.MACOS
    if system.startswith("Linux"):
        return OsFamily.LINUX
    msg = f"Unsupported operating system: {system or 'unknown'}"
    raise UnsupportedPlatformError(msg)


def _parse_arch(machine: str) -> Arch:
    try:
        return _ARCH_ALIASES[machine.lower()]
    except KeyError:
        msg = f"Unsupported architecture: {machine or 'unknown'}"
        raise UnsupportedPlatformError(msg) from None


def _select_package_manager(os_family: OsFamily) -> PackageManagerKind:
    if os_family == OsFamily.MACOS:
        # Homebrew is bootstrapped later if it is missing
        return PackageManagerKind.BREW

    for binary, kind in LINUX_PACKAGE_MANAGERS:
        if command_exists(binary):
            return kind

    names = ", ".join(binary for binary, _ in LINUX_PACKAGE_MANAGERS)
    msg = f"No supported package manager found (looked for {names})"
    raise UnsupportedPlatformError(msg)


class PlatformDetector:
    """Detects the host platform from the kernel name and machine type.

    The kernel and machine names default to the values reported by the
    ``platform`` module; tests pass them explicitly.
    """

    def __init__(self, system: str | None = None, machine: str | None = None) -> None:
        self._system = system
        self._machine = machine

    def detect(self) -> PlatformInfo:
        """Detect the current platform.

        Returns:
            PlatformInfo for this run.

        Raises:
            UnsupportedPlatformError: If the OS, architecture or package
                manager is not supported.
        """
        system = self._system if self._system is not None else _platform.system()
        machine = self._machine if self._machine is not None else _platform.machine()

        os_family = _parse_os(system)
        arch = _parse_arch(machine)
        package_manager = _select_package_manager(os_family)

        info = PlatformInfo(os_family=os_family, arch=arch, package_manager=package_manager)
        logger.debug("Detected platform: %s", info.describe())
        return info


def detect_platform() -> PlatformInfo:
    """Detect the current host platform.

    Raises:
        UnsupportedPlatformError: If the host is not supported.
    """
    return PlatformDetector().detect()
