"""Configuration file templates.

Starship and Ghostty configuration are typed models serialised by a fixed
writer, so a rendered file is always syntactically valid. The zsh and tmux
bodies are bundled with the package and carry ``@@NAME@@`` placeholders
filled in at deploy time.
"""

from dataclasses import dataclass, field
from importlib import resources
from pathlib import Path
from typing import Annotated

import tomli_w
from pydantic import BaseModel, ConfigDict, Field

from shellsetup.configs.deployer import PRIVATE_MODE
from shellsetup.core.paths import SetupPaths
from shellsetup.core.settings import SetupSettings
from shellsetup.models.platform import PlatformInfo
from shellsetup.plugins.catalog import (
    TMUX_PLUGINS,
    ZINIT_PLUGINS,
    render_tpm_block,
    render_zinit_block,
)
from shellsetup.utils.shell import command_path

DATA_PACKAGE = "shellsetup.data"


def load_template(name: str) -> str:
    """Read a bundled template from ``shellsetup.data``."""
    return resources.files(DATA_PACKAGE).joinpath(name).read_text(encoding="utf-8")


# =============================================================================
# Starship
# =============================================================================


class DirectoryModule(BaseModel):
    model_config = ConfigDict(extra="forbid")

    truncate_to_repo: bool = True
    format: str = "[ $path ]($style)"
    style: str = "bold blue"


class CharacterModule(BaseModel):
    model_config = ConfigDict(extra="forbid")

    success_symbol: str = "[❯](bold green)"
    error_symbol: str = "[❯](bold red)"


class StarshipConfig(BaseModel):
    """Minimal Starship prompt: directory and status character.

    Attributes:
        add_newline: Print a blank line before the prompt.
        command_timeout: Milliseconds Starship waits for external commands.
        format: Prompt layout.
    """

    model_config = ConfigDict(extra="forbid")

    add_newline: bool = False
    command_timeout: Annotated[int, Field(gt=0)] = 2000
    format: str = "$directory$character\n"
    directory: DirectoryModule = Field(default_factory=DirectoryModule)
    character: CharacterModule = Field(default_factory=CharacterModule)

    def to_toml(self) -> str:
        return tomli_w.dumps(self.model_dump())


# =============================================================================
# Ghostty
# =============================================================================


class GhosttyConfig(BaseModel):
    """Ghostty terminal configuration.

    Field names map to Ghostty keys with underscores turned into hyphens.
    Every keybind becomes its own ``keybind = ...`` line.
    """

    model_config = ConfigDict(extra="forbid")

    font_family: str = "JetBrains Mono"
    font_size: Annotated[float, Field(gt=0)] = 13.5
    font_feature: str = "+calt"
    window_save_state: str = "always"
    shell_integration: str = "detect"
    font_thicken: bool = True
    keybind: list[str] = Field(default_factory=list)

    @classmethod
    def for_platform(cls, platform: PlatformInfo, font_size: float = 13.5) -> "GhosttyConfig":
        modifier = "cmd" if platform.is_macos else "alt"
        return cls(font_size=font_size, keybind=[f"{modifier}+shift+f=toggle_fullscreen"])

    def render(self) -> str:
        """Render as ``key = value`` lines."""
        lines = ["# Ghostty configuration, deployed by shellsetup"]
        for name, value in self.model_dump().items():
            key = name.replace("_", "-")
            values = value if isinstance(value, list) else [value]
            lines.extend(f"{key} = {_ghostty_value(v)}" for v in values)
        return "\n".join(lines) + "\n"


def _ghostty_value(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return f"{value:g}"
    return str(value)


# =============================================================================
# Deployable files
# =============================================================================


@dataclass(frozen=True, slots=True)
class ConfigFile:
    """One file to deploy.

    Attributes:
        target: Destination path.
        body: Content, possibly with placeholders.
        substitutions: Placeholder values for ``body``.
        mode: Permissions to apply. None keeps the mode of the replaced
            file, or the umask default for a new one.
    """

    target: Path
    body: str
    substitutions: dict[str, str] = field(default_factory=dict)
    mode: int | None = None


def pnpm_home(platform: PlatformInfo, paths: SetupPaths) -> Path:
    if platform.is_macos:
        return paths.home / "Library" / "pnpm"
    return paths.home / ".local" / "share" / "pnpm"


def build_config_files(
    platform: PlatformInfo,
    paths: SetupPaths,
    settings: SetupSettings | None = None,
) -> list[ConfigFile]:
    """Build every configuration file, in deployment order.

    Args:
        platform: Detected platform.
        paths: Filesystem layout for the run.
        settings: Run settings (terminal font size).

    Returns:
        ConfigFile list: zshrc, tmux, ghostty, starship, gcof.
    """
    settings = settings or SetupSettings()
    ghostty = GhosttyConfig.for_platform(platform, settings.terminal_font_size)

    return [
        ConfigFile(
            target=paths.zshrc,
            body=load_template("zshrc"),
            substitutions={
                "ZINIT_PLUGINS": render_zinit_block(ZINIT_PLUGINS),
                "PNPM_HOME": str(pnpm_home(platform, paths)),
            },
            mode=PRIVATE_MODE,
        ),
        ConfigFile(
            target=paths.tmux_conf,
            body=load_template("tmux.conf"),
            substitutions={
                "ZSH_PATH": command_path("zsh") or "/bin/zsh",
                "TMUX_PLUGINS": render_tpm_block(TMUX_PLUGINS),
            },
        ),
        ConfigFile(target=paths.ghostty_config, body=ghostty.render()),
        ConfigFile(target=paths.starship_config, body=StarshipConfig().to_toml()),
        ConfigFile(target=paths.gcof_function, body=load_template("gcof.zsh")),
    ]
