"""Platform facts detected once per run."""

from dataclasses import dataclass
from enum import Enum


class OsFamily(str, Enum):
    """Supported operating system families."""

    MACOS = "macos"
    LINUX = "linux"


class Arch(str, Enum):
    """Supported CPU architectures."""

    X86_64 = "x86_64"
    AARCH64 = "aarch64"


class PackageManagerKind(str, Enum):
    """Package manager families the installer can drive.

    Attributes:
        BREW: Homebrew (macOS).
        APT: apt-get/dpkg (Debian, Ubuntu, Pop!_OS).
        DNF: dnf/rpm (Fedora, RHEL).
        PACMAN: pacman (Arch).
    """

    BREW = "brew"
    APT = "apt"
    DNF = "dnf"
    PACMAN = "pacman"


@dataclass(frozen=True, slots=True)
class PlatformInfo:
    """Immutable description of the host platform.

    Attributes:
        os_family: Operating system family.
        arch: CPU architecture.
        package_manager: The single package manager selected for this run.
    """

    os_family: OsFamily
    arch: Arch
    package_manager: PackageManagerKind

    @property
    def is_macos(self) -> bool:
        """Check if the host runs macOS."""
        return self.os_family == OsFamily.MACOS

    @property
    def is_linux(self) -> bool:
        """Check if the host runs Linux."""
        return self.os_family == OsFamily.LINUX

    def describe(self) -> str:
        """Return a short human-readable summary, e.g. ``linux (x86_64, apt)``."""
        return f"{self.os_family.value} ({self.arch.value}, {self.package_manager.value})"
