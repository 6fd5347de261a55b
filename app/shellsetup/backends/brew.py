"""Homebrew backend implementation.

Bootstraps Homebrew itself when it is missing, which is the one backend
whose package manager is not guaranteed to ship with the OS.
"""

import os
import tempfile
from pathlib import Path

from shellsetup.backends.base import PackageBackend
from shellsetup.models.platform import Arch, PackageManagerKind
from shellsetup.utils.download import download_file
from shellsetup.utils.formatting import print_info, print_success
from shellsetup.utils.shell import RetryPolicy, run_command

HOMEBREW_INSTALL_URL = "https://raw.githubusercontent.com/Homebrew/install/HEAD/install.sh"
APPLE_SILICON_PREFIX = "/opt/homebrew/bin"


class BrewBackend(PackageBackend):
    """Backend for Homebrew formulae and casks.

    Attributes:
        arch: CPU architecture, used to locate the Apple Silicon prefix.
    """

    def __init__(self, arch: Arch = Arch.X86_64, policy: RetryPolicy | None = None) -> None:
        super().__init__(policy)
        self.arch = arch

    @property
    def kind(self) -> PackageManagerKind:
        """Return BREW as the package manager family."""
        return PackageManagerKind.BREW

    @property
    def executable(self) -> str:
        return "brew"

    def _ensure_on_path(self) -> None:
        if self.arch != Arch.AARCH64:
            return
        path = os.environ.get("PATH", "")
        if APPLE_SILICON_PREFIX not in path.split(os.pathsep):
            os.environ["PATH"] = os.pathsep.join(p for p in (APPLE_SILICON_PREFIX, path) if p)

    def prepare(self) -> None:
        """Install Homebrew if missing and put it on PATH."""
        self._ensure_on_path()
        if self.is_available():
            print_success("Homebrew already available")
            return

        print_info("Installing Homebrew...")
        with tempfile.TemporaryDirectory(prefix="shellsetup-brew-") as scratch:
            script = download_file(HOMEBREW_INSTALL_URL, Path(scratch) / "install.sh", self.policy)
            self.policy.run(
                ["/bin/bash", str(script)],
                timeout=self._TIMEOUT,
                env={"NONINTERACTIVE": "1"},
            )
        self._ensure_on_path()
        print_success("Homebrew installed")

    def is_installed(self, package: str) -> bool:
        """Check ``brew list --versions`` for the package."""
        result = run_command(["brew", "list", "--versions", package])
        return result.success and bool(result.stdout.strip())

    def install_args(self, package: str) -> list[str]:
        return ["brew", "install", package]
