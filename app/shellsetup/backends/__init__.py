"""Package manager backends.

One implementation per package manager family; get_backend() picks the
one matching the detected platform.
"""

from shellsetup.backends.apt import AptBackend
from shellsetup.backends.base import BackendResult, PackageBackend
from shellsetup.backends.brew import BrewBackend
from shellsetup.backends.dnf import DnfBackend
from shellsetup.backends.pacman import PacmanBackend
from shellsetup.models.platform import PackageManagerKind, PlatformInfo
from shellsetup.utils.shell import RetryPolicy


def get_backend(platform: PlatformInfo, policy: RetryPolicy | None = None) -> PackageBackend:
    """Create the backend for the platform's package manager.

    Args:
        platform: Detected platform.
        policy: Retry policy for network-bound commands.

    Returns:
        PackageBackend instance.
    """
    kind = platform.package_manager
    if kind == PackageManagerKind.BREW:
        return BrewBackend(arch=platform.arch, policy=policy)
    if kind == PackageManagerKind.APT:
        return AptBackend(policy=policy)
    if kind == PackageManagerKind.DNF:
        return DnfBackend(policy=policy)
    return PacmanBackend(policy=policy)


__all__ = [
    "AptBackend",
    "BackendResult",
    "BrewBackend",
    "DnfBackend",
    "PackageBackend",
    "PacmanBackend",
    "get_backend",
]
