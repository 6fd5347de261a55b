"""Pacman backend implementation (Arch Linux and derivatives)."""

from shellsetup.backends.base import PackageBackend, privileged
from shellsetup.models.platform import PackageManagerKind
from shellsetup.utils.formatting import print_info, print_success
from shellsetup.utils.shell import run_command


class PacmanBackend(PackageBackend):
    """Backend for pacman packages."""

    @property
    def kind(self) -> PackageManagerKind:
        """Return PACMAN as the package manager family."""
        return PackageManagerKind.PACMAN

    @property
    def executable(self) -> str:
        return "pacman"

    def prepare(self) -> None:
        """Synchronise the package databases."""
        print_info("Synchronising pacman databases...")
        self.policy.run(privileged(["pacman", "-Sy", "--noconfirm"]), timeout=self._TIMEOUT)
        print_success("pacman ready")

    def is_installed(self, package: str) -> bool:
        return run_command(["pacman", "-Q", package]).success

    def install_args(self, package: str) -> list[str]:
        # --needed keeps re-runs from reinstalling up-to-date packages
        return privileged(["pacman", "-S", "--needed", "--noconfirm", package])
