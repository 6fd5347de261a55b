"""Unit tests for configuration templates."""

import tomllib
from pathlib import Path
from unittest.mock import patch

import pytest

from shellsetup.configs.deployer import PLACEHOLDER, PRIVATE_MODE, render
from shellsetup.configs.templates import (
    GhosttyConfig,
    StarshipConfig,
    build_config_files,
    load_template,
)
from shellsetup.core.paths import SetupPaths
from shellsetup.core.settings import SetupSettings
from shellsetup.models.platform import PlatformInfo


class TestStarshipConfig:
    def test_renders_valid_toml(self) -> None:
        data = tomllib.loads(StarshipConfig().to_toml())

        assert data["add_newline"] is False
        assert data["command_timeout"] == 2000
        assert data["format"] == "$directory$character\n"
        assert data["directory"]["truncate_to_repo"] is True
        assert data["character"]["success_symbol"] == "[❯](bold green)"


class TestGhosttyConfig:
    def test_macos_keybind(self, macos_platform: PlatformInfo) -> None:
        text = GhosttyConfig.for_platform(macos_platform).render()

        assert "keybind = cmd+shift+f=toggle_fullscreen" in text
        assert "font-family = JetBrains Mono" in text
        assert "font-size = 13.5" in text
        assert "font-thicken = true" in text
        assert "window-save-state = always" in text

    def test_linux_keybind_and_font_size(self, linux_platform: PlatformInfo) -> None:
        text = GhosttyConfig.for_platform(linux_platform, font_size=12.0).render()

        assert "keybind = alt+shift+f=toggle_fullscreen" in text
        assert "font-size = 12" in text


class TestBundledTemplates:
    @pytest.mark.parametrize("name", ["zshrc", "tmux.conf", "gcof.zsh"])
    def test_template_loads(self, name: str) -> None:
        assert load_template(name).strip()

    def test_tpm_init_is_last_line(self) -> None:
        assert load_template("tmux.conf").rstrip().splitlines()[-1] == (
            "run '~/.tmux/plugins/tpm/tpm'"
        )


class TestBuildConfigFiles:
    @pytest.fixture
    def files(self, linux_platform: PlatformInfo, linux_paths: SetupPaths):
        with patch("shellsetup.configs.templates.command_path", return_value="/usr/bin/zsh"):
            return build_config_files(linux_platform, linux_paths, SetupSettings())

    def test_targets_in_order(self, files, linux_paths: SetupPaths) -> None:
        assert [f.target for f in files] == linux_paths.config_targets

    def test_every_template_renders(self, files) -> None:
        """No placeholder is left over in any deployed file."""
        for config in files:
            rendered = render(config.body, config.substitutions)
            assert PLACEHOLDER.search(rendered) is None

    def test_zshrc_contents(self, files, home: Path) -> None:
        zshrc = render(files[0].body, files[0].substitutions)

        assert files[0].mode == PRIVATE_MODE
        assert f'export PNPM_HOME="{home}/.local/share/pnpm"' in zshrc
        assert "zinit light zsh-users/zsh-autosuggestions" in zshrc
        assert "zinit snippet OMZP::git" in zshrc
        assert "zsh-users/zsh-history-substring-search" in zshrc
        assert "[[ -f ~/.zsh/gcof.zsh ]] && source ~/.zsh/gcof.zsh" in zshrc

    def test_tmux_conf_contents(self, files) -> None:
        tmux = render(files[1].body, files[1].substitutions)

        assert "set-option -g default-shell /usr/bin/zsh" in tmux
        assert "set -g @plugin 'tmux-plugins/tpm'" in tmux
        assert "set -g @plugin 'tmux-plugins/tmux-yank'" in tmux
        assert "set -g prefix C-a" in tmux

    def test_macos_pnpm_home(self, macos_platform: PlatformInfo, home: Path) -> None:
        paths = SetupPaths.for_platform(macos_platform, home)

        zshrc = build_config_files(macos_platform, paths)[0]

        assert zshrc.substitutions["PNPM_HOME"] == str(home / "Library" / "pnpm")
