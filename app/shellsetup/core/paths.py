"""Path management for shellsetup.

All locations the installer reads or writes are rooted at the user's home
directory and collected in a single SetupPaths value, so tests can point a
whole run at a temporary directory.

Layout:
- Log: ~/.setup.log (previous run kept as ~/.setup.log.prev)
- Backups: ~/.backup/
- Settings: ~/.config/shellsetup/settings.toml
- State: ~/.local/state/shellsetup/
"""

import os
from dataclasses import dataclass
from pathlib import Path

from shellsetup.models.platform import PlatformInfo

# Application identifier for directory naming
APP_NAME = "shellsetup"


def _get_xdg_dir(home: Path, env_var: str, default_subdir: str) -> Path:
    """Get XDG directory respecting environment variable override.

    Args:
        home: Home directory used when the variable is unset.
        env_var: XDG environment variable name (e.g., "XDG_STATE_HOME").
        default_subdir: Default subdirectory under home (e.g., ".local/state").

    Returns:
        Path to the application-specific directory.
    """
    base = os.environ.get(env_var)
    if base:
        return Path(base) / APP_NAME
    return home / default_subdir / APP_NAME


def get_log_path(home: Path) -> Path:
    """Get the setup log path (the previous run is kept beside it as .prev)."""
    return home / ".setup.log"


def get_settings_path(home: Path | None = None) -> Path:
    """Get the settings file path.

    Returns:
        Path to ~/.config/shellsetup/settings.toml.
    """
    return _get_xdg_dir(home or Path.home(), "XDG_CONFIG_HOME", ".config") / "settings.toml"


@dataclass(frozen=True, slots=True)
class SetupPaths:
    """Every filesystem location touched by a run.

    Attributes:
        home: The user's home directory.
        font_dir: Platform-specific user font directory.
    """

    home: Path
    font_dir: Path

    @classmethod
    def for_platform(cls, platform: PlatformInfo, home: Path | None = None) -> "SetupPaths":
        """Build paths for a platform.

        Args:
            platform: Detected platform.
            home: Home directory override. Defaults to ``Path.home()``.

        Returns:
            SetupPaths rooted at ``home``.
        """
        root = home if home is not None else Path.home()
        if platform.is_macos:
            font_dir = root / "Library" / "Fonts"
        else:
            font_dir = root / ".local" / "share" / "fonts"
        return cls(home=root, font_dir=font_dir)

    # -------------------------------------------------------------------------
    # Run artifacts
    # -------------------------------------------------------------------------

    @property
    def log_file(self) -> Path:
        return get_log_path(self.home)

    @property
    def backup_dir(self) -> Path:
        return self.home / ".backup"

    @property
    def state_dir(self) -> Path:
        return _get_xdg_dir(self.home, "XDG_STATE_HOME", ".local/state")

    @property
    def update_marker(self) -> Path:
        """Timestamp marker shared with the scheduled plugin update job."""
        return self.state_dir / "last-plugin-update"

    @property
    def env_file(self) -> Path:
        return self.home / ".env"

    @property
    def local_bin(self) -> Path:
        return self.home / ".local" / "bin"

    # -------------------------------------------------------------------------
    # Deployed configuration
    # -------------------------------------------------------------------------

    @property
    def zshrc(self) -> Path:
        return self.home / ".zshrc"

    @property
    def tmux_conf(self) -> Path:
        return self.home / ".tmux.conf"

    @property
    def ghostty_config(self) -> Path:
        return self.home / ".config" / "ghostty" / "config"

    @property
    def starship_config(self) -> Path:
        return self.home / ".config" / "starship.toml"

    @property
    def gcof_function(self) -> Path:
        return self.home / ".zsh" / "gcof.zsh"

    @property
    def config_targets(self) -> list[Path]:
        """All deployed configuration files, in deployment order."""
        return [
            self.zshrc,
            self.tmux_conf,
            self.ghostty_config,
            self.starship_config,
            self.gcof_function,
        ]

    # -------------------------------------------------------------------------
    # Runtimes and plugin managers
    # -------------------------------------------------------------------------

    @property
    def nvm_dir(self) -> Path:
        return self.home / ".nvm"

    @property
    def zinit_home(self) -> Path:
        return self.home / ".local" / "share" / "zinit"

    @property
    def zinit_repo(self) -> Path:
        return self.zinit_home / "zinit.git"

    @property
    def tmux_plugins_dir(self) -> Path:
        return self.home / ".tmux" / "plugins"

    @property
    def tpm_dir(self) -> Path:
        return self.tmux_plugins_dir / "tpm"

    # -------------------------------------------------------------------------
    # Periodic update schedule
    # -------------------------------------------------------------------------

    @property
    def launch_agent(self) -> Path:
        return self.home / "Library" / "LaunchAgents" / "com.shellsetup.zinit-update.plist"

    @property
    def systemd_user_dir(self) -> Path:
        return self.home / ".config" / "systemd" / "user"
