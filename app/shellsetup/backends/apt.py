"""APT backend implementation.

Installs packages with apt-get and queries dpkg for presence.
"""

from shellsetup.backends.base import PackageBackend, privileged
from shellsetup.models.platform import PackageManagerKind
from shellsetup.utils.formatting import print_info, print_success
from shellsetup.utils.shell import run_command


class AptBackend(PackageBackend):
    """Backend for APT/dpkg packages (Debian, Ubuntu, Pop!_OS)."""

    @property
    def kind(self) -> PackageManagerKind:
        """Return APT as the package manager family."""
        return PackageManagerKind.APT

    @property
    def executable(self) -> str:
        return "apt-get"

    def prepare(self) -> None:
        """Refresh the package index."""
        print_info("Running apt update...")
        self.policy.run(privileged(["apt-get", "update", "-qq"]), timeout=self._TIMEOUT)
        print_success("apt ready")

    def is_installed(self, package: str) -> bool:
        """Check dpkg status for ``install ok installed``."""
        result = run_command(["dpkg-query", "-W", "-f=${Status}", package])
        return result.success and result.stdout.strip() == "install ok installed"

    def install_args(self, package: str) -> list[str]:
        return privileged(["apt-get", "install", "-y", "-qq", package])

    def install_env(self) -> dict[str, str]:
        return {"DEBIAN_FRONTEND": "noninteractive"}
