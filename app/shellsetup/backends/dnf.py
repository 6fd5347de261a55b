"""DNF backend implementation (Fedora, RHEL and derivatives)."""

from shellsetup.backends.base import PackageBackend, privileged
from shellsetup.models.platform import PackageManagerKind
from shellsetup.utils.formatting import print_info, print_success
from shellsetup.utils.shell import run_command


class DnfBackend(PackageBackend):
    """Backend for dnf/rpm packages."""

    @property
    def kind(self) -> PackageManagerKind:
        """Return DNF as the package manager family."""
        return PackageManagerKind.DNF

    @property
    def executable(self) -> str:
        return "dnf"

    def prepare(self) -> None:
        """Refresh repository metadata."""
        print_info("Refreshing dnf metadata...")
        self.policy.run(privileged(["dnf", "makecache", "-q"]), timeout=self._TIMEOUT)
        print_success("dnf ready")

    def is_installed(self, package: str) -> bool:
        return run_command(["rpm", "-q", package]).success

    def install_args(self, package: str) -> list[str]:
        return privileged(["dnf", "install", "-y", "-q", package])
