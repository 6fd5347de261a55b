"""The fixed table of components shellsetup provisions.

Each group matches one step of the setup sequence. Package names differ per
package manager and sometimes differ from the command they install
(``ripgrep`` installs ``rg``; Debian's ``fd-find`` installs ``fdfind``), so
every packaged component declares both.
"""

import logging
import os
import tempfile
from pathlib import Path

from shellsetup.backends.base import PackageBackend, privileged
from shellsetup.components.fonts import FONT_NAME, FontInstaller
from shellsetup.core.errors import ComponentInstallError
from shellsetup.core.paths import SetupPaths
from shellsetup.core.settings import SetupSettings
from shellsetup.models.component import ComponentSpec
from shellsetup.models.platform import PackageManagerKind, PlatformInfo
from shellsetup.utils.download import download_file
from shellsetup.utils.shell import RetryPolicy, command_exists, command_path

logger = logging.getLogger(__name__)

BREW = PackageManagerKind.BREW
APT = PackageManagerKind.APT
DNF = PackageManagerKind.DNF
PACMAN = PackageManagerKind.PACMAN
ALL_MANAGERS = (BREW, APT, DNF, PACMAN)
LINUX_MANAGERS = (APT, DNF, PACMAN)

STARSHIP_INSTALL_URL = "https://starship.rs/install.sh"
NVM_INSTALL_URL = "https://raw.githubusercontent.com/nvm-sh/nvm/{version}/install.sh"

MIN_ZSH_VERSION = "5.8"
MIN_TMUX_VERSION = "3.0"


def _same_name(
    package: str,
    managers: tuple[PackageManagerKind, ...] = ALL_MANAGERS,
) -> dict[PackageManagerKind, str]:
    return dict.fromkeys(managers, package)


def ensure_fd_shim(local_bin: Path) -> Path | None:
    """Expose Debian's ``fdfind`` under the canonical ``fd`` name.

    Args:
        local_bin: Directory for user executables (~/.local/bin).

    Returns:
        The symlink path, or None if ``fd`` already resolves.

    Raises:
        ComponentInstallError: If ``fdfind`` is not installed.
    """
    if command_exists("fd"):
        return None
    target = command_path("fdfind")
    if target is None:
        msg = "fdfind not found on PATH"
        raise ComponentInstallError(msg)

    link = local_bin / "fd"
    if link.is_symlink() or link.exists():
        return link
    local_bin.mkdir(parents=True, exist_ok=True)
    link.symlink_to(target)
    logger.info("Linked %s -> %s", link, target)
    return link


class ComponentCatalog:
    """Builds the component table for one platform.

    Attributes:
        platform: Detected platform.
        backend: Package manager backend for the platform.
        paths: Filesystem layout for the run.
        settings: Run settings (pinned versions, retry policy).
    """

    def __init__(
        self,
        platform: PlatformInfo,
        backend: PackageBackend,
        paths: SetupPaths,
        settings: SetupSettings | None = None,
    ) -> None:
        self.platform = platform
        self.backend = backend
        self.paths = paths
        self.settings = settings or SetupSettings()
        self.policy = RetryPolicy(
            max_attempts=self.settings.retry_attempts,
            delay_seconds=self.settings.retry_delay_seconds,
        )

    @property
    def _manager(self) -> PackageManagerKind:
        return self.platform.package_manager

    # -------------------------------------------------------------------------
    # Builders
    # -------------------------------------------------------------------------

    def _install_package(self, package: str) -> None:
        result = self.backend.install(package)
        if not result.success:
            raise ComponentInstallError(result.error or f"{package} install failed")

    def _package_present(self, command: str, package: str) -> bool:
        # The package manager may know a package whose binary is not on PATH yet
        return command_exists(command) or self.backend.is_installed(package)

    def packaged(
        self,
        name: str,
        command: str,
        packages: dict[PackageManagerKind, str],
        *,
        required: bool = True,
        min_version: str | None = None,
        version_args: list[str] | None = None,
    ) -> ComponentSpec | None:
        """Build a component installed through the platform's package manager.

        Returns:
            ComponentSpec, or None if the platform has no package for it.
        """
        package = packages.get(self._manager)
        if package is None:
            return None
        return ComponentSpec(
            name=name,
            probe=lambda: self._package_present(command, package),
            install=lambda: self._install_package(package),
            required=required,
            command=command,
            min_version=min_version,
            version_args=version_args or [],
        )

    def _run_installer_script(
        self,
        url: str,
        interpreter: str,
        *args: str,
        env: dict[str, str] | None = None,
    ) -> None:
        with tempfile.TemporaryDirectory(prefix="shellsetup-") as scratch:
            script = download_file(url, Path(scratch) / "install.sh", self.policy)
            self.policy.run([interpreter, str(script), *args], timeout=900.0, env=env)

    # -------------------------------------------------------------------------
    # Component groups, in setup order
    # -------------------------------------------------------------------------

    def core_tools(self) -> list[ComponentSpec]:
        """Shell, multiplexer, fuzzy finder, directory indexer and search tools."""
        specs = [
            self.packaged(
                "zsh",
                "zsh",
                _same_name("zsh"),
                min_version=MIN_ZSH_VERSION,
                version_args=["zsh", "--version"],
            ),
            self.packaged(
                "tmux",
                "tmux",
                _same_name("tmux"),
                min_version=MIN_TMUX_VERSION,
                version_args=["tmux", "-V"],
            ),
            self.packaged("fzf", "fzf", _same_name("fzf")),
            self.packaged("zoxide", "zoxide", _same_name("zoxide"), required=False),
            self.packaged("ripgrep", "rg", _same_name("ripgrep"), required=False),
            self._fd(),
            self.packaged(
                "fontconfig",
                "fc-cache",
                _same_name("fontconfig", LINUX_MANAGERS),
                required=False,
            ),
        ]
        return [spec for spec in specs if spec is not None]

    def _fd(self) -> ComponentSpec | None:
        if self._manager != APT:
            return self.packaged(
                "fd",
                "fd",
                {BREW: "fd", DNF: "fd-find", PACMAN: "fd"},
                required=False,
            )

        def probe() -> bool:
            return command_exists("fdfind") and (
                command_exists("fd") or (self.paths.local_bin / "fd").exists()
            )

        def install() -> None:
            if not command_exists("fdfind"):
                self._install_package("fd-find")
            ensure_fd_shim(self.paths.local_bin)

        return ComponentSpec(
            name="fd",
            probe=probe,
            install=install,
            required=False,
            command="fdfind",
        )

    def prompt_renderer(self) -> list[ComponentSpec]:
        """Starship, via the package manager where packaged, else its installer."""
        if self._manager in (BREW, PACMAN):
            spec = self.packaged(
                "Starship",
                "starship",
                _same_name("starship"),
                version_args=["starship", "--version"],
            )
            return [spec] if spec else []

        return [
            ComponentSpec(
                name="Starship",
                probe=lambda: command_exists("starship"),
                install=lambda: self._run_installer_script(STARSHIP_INSTALL_URL, "sh", "-y"),
                command="starship",
                version_args=["starship", "--version"],
            )
        ]

    def terminal_emulator(self) -> list[ComponentSpec]:
        """Ghostty. Optional: a failure only produces a warning."""
        if self._manager in (BREW, PACMAN):
            spec = self.packaged("Ghostty", "ghostty", _same_name("ghostty"), required=False)
            return [spec] if spec else []

        def install_snap() -> None:
            if not command_exists("snap"):
                msg = "snap not found. Please install snapd, then re-run"
                raise ComponentInstallError(msg)
            self.policy.run(privileged(["snap", "install", "ghostty", "--classic"]), timeout=900.0)

        return [
            ComponentSpec(
                name="Ghostty",
                probe=lambda: command_exists("ghostty"),
                install=install_snap,
                required=False,
                command="ghostty",
            )
        ]

    def clipboard_helper(self) -> list[ComponentSpec]:
        """Clipboard tool for tmux-yank on Linux, chosen by display server."""
        if not self.platform.is_linux:
            return []
        if os.environ.get("WAYLAND_DISPLAY"):
            name, command = "wl-clipboard", "wl-copy"
        else:
            name, command = "xclip", "xclip"
        spec = self.packaged(name, command, _same_name(name, LINUX_MANAGERS), required=False)
        return [spec] if spec else []

    def fonts(self) -> list[ComponentSpec]:
        """JetBrains Mono from the upstream release archive."""
        installer = self.font_installer()
        return [
            ComponentSpec(
                name=FONT_NAME,
                probe=installer.is_installed,
                install=installer.install,
                required=False,
            )
        ]

    def font_installer(self) -> FontInstaller:
        return FontInstaller(
            self.paths.font_dir,
            self.settings.font_version,
            refresh_cache=self.platform.is_linux,
            policy=self.policy,
        )

    def version_manager(self) -> list[ComponentSpec]:
        """nvm and the current Node.js LTS release."""
        nvm_dir = self.paths.nvm_dir
        nvm_env = {"NVM_DIR": str(nvm_dir), "PROFILE": os.devnull}

        def install_nvm() -> None:
            url = NVM_INSTALL_URL.format(version=self.settings.nvm_version)
            self._run_installer_script(url, "bash", env=nvm_env)

        def node_installed() -> bool:
            versions = nvm_dir / "versions" / "node"
            return versions.is_dir() and any(versions.iterdir())

        def install_node() -> None:
            script = '. "$NVM_DIR/nvm.sh" && nvm install --lts && nvm alias default "lts/*"'
            self.policy.run(["bash", "-c", script], timeout=900.0, env=nvm_env)

        return [
            ComponentSpec(
                name="nvm",
                probe=lambda: (nvm_dir / "nvm.sh").is_file(),
                install=install_nvm,
                required=False,
            ),
            ComponentSpec(
                name="Node.js LTS",
                probe=node_installed,
                install=install_node,
                required=False,
            ),
        ]

    def all(self) -> list[ComponentSpec]:
        """Every component, in setup order."""
        return [
            *self.core_tools(),
            *self.prompt_renderer(),
            *self.terminal_emulator(),
            *self.clipboard_helper(),
            *self.fonts(),
            *self.version_manager(),
        ]
