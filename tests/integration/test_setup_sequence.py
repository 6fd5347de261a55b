"""Integration tests for the provisioning sequence.

A whole run is pointed at a temporary home directory with fake components,
a no-op package backend and a plugin bootstrapper that only creates
directories. Configuration rendering, backups, deployment and verification
run for real.
"""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from shellsetup.core.errors import ComponentInstallError, PrerequisiteError
from shellsetup.core.sequencer import Sequencer, SetupStage, SetupSummary
from shellsetup.models.component import ComponentSpec, InstallOutcome
from shellsetup.models.platform import PlatformInfo
from shellsetup.plugins.bootstrap import BootstrapResult, PluginManager


class FakeDetector:
    def __init__(self, platform: PlatformInfo) -> None:
        self.platform = platform

    def detect(self) -> PlatformInfo:
        return self.platform


class FakeBootstrapper:
    """Pretends every plugin manager clones instantly."""

    def __init__(self) -> None:
        self.envs: list[dict[str, str] | None] = []

    def bootstrap(
        self, manager: PluginManager, env: dict[str, str] | None = None
    ) -> BootstrapResult:
        self.envs.append(env)
        already = manager.marker.exists()
        manager.install_dir.mkdir(parents=True, exist_ok=True)
        manager.marker.touch()
        return BootstrapResult(manager.name, already_installed=already, plugins_ready=True)


class FakeScheduler:
    def __init__(self, platform: PlatformInfo, paths, hour: int = 2) -> None:
        self.hour = hour

    def install(self) -> bool:
        return True

    def run_update_if_due(self) -> bool:
        return False


class FakeCatalog:
    """Component table backed by a set of installed names."""

    def __init__(self, installed: set[str], broken: set[str]) -> None:
        self.installed = installed
        self.broken = broken

    def __call__(self, platform, backend, paths, settings) -> "FakeCatalog":
        return self

    def _spec(self, name: str, required: bool = True) -> ComponentSpec:
        def install() -> None:
            if name in self.broken:
                raise RuntimeError(f"{name} download failed")
            self.installed.add(name)

        return ComponentSpec(
            name=name,
            probe=lambda: name in self.installed,
            install=install,
            required=required,
        )

    def core_tools(self) -> list[ComponentSpec]:
        return [
            self._spec("zsh"),
            self._spec("tmux"),
            self._spec("ripgrep", required=False),
        ]

    def prompt_renderer(self) -> list[ComponentSpec]:
        return [self._spec("Starship")]

    def terminal_emulator(self) -> list[ComponentSpec]:
        return [self._spec("Ghostty", required=False)]

    def clipboard_helper(self) -> list[ComponentSpec]:
        return [self._spec("xclip", required=False)]

    def fonts(self) -> list[ComponentSpec]:
        return [self._spec("JetBrains Mono", required=False)]

    def version_manager(self) -> list[ComponentSpec]:
        return [self._spec("nvm", required=False)]

    def all(self) -> list[ComponentSpec]:
        return [
            *self.core_tools(),
            *self.prompt_renderer(),
            *self.terminal_emulator(),
            *self.clipboard_helper(),
            *self.fonts(),
            *self.version_manager(),
        ]


@pytest.fixture
def installed() -> set[str]:
    return set()


@pytest.fixture
def host_tools():
    """Downloader and git present; zsh path resolution left to the host."""
    with (
        patch("shellsetup.core.sequencer.downloader_available", return_value=True),
        patch("shellsetup.core.sequencer.command_exists", return_value=True) as mock_exists,
    ):
        yield mock_exists


def _sequencer(
    home: Path,
    platform: PlatformInfo,
    installed: set[str],
    broken: set[str] | None = None,
    environ: dict[str, str] | None = None,
) -> Sequencer:
    backend = MagicMock()
    return Sequencer(
        home=home,
        interactive=False,
        detector=FakeDetector(platform),
        backend_factory=lambda platform, policy: backend,
        catalog_factory=FakeCatalog(installed, broken or set()),
        bootstrapper=FakeBootstrapper(),
        scheduler_factory=FakeScheduler,
        environ=environ if environ is not None else {"SHELL": "/bin/bash"},
    )


@pytest.mark.usefixtures("host_tools")
class TestSetupSequence:
    def test_fresh_machine(
        self, home: Path, linux_platform: PlatformInfo, installed: set[str]
    ) -> None:
        summary = _sequencer(home, linux_platform, installed).run()

        assert summary.stage == SetupStage.DONE
        assert {r.outcome for r in summary.results} == {InstallOutcome.INSTALLED}
        assert summary.backups == []
        assert len(summary.deployed) == 5
        assert all(path.is_file() for path in summary.deployed)
        assert summary.report is not None
        assert summary.report.all_passed
        assert all(result.ok for result in summary.plugins)
        assert summary.auto_update_scheduled
        assert not summary.default_shell_changed

    def test_deployed_configs_are_rendered(
        self, home: Path, linux_platform: PlatformInfo, installed: set[str]
    ) -> None:
        _sequencer(home, linux_platform, installed).run()

        zshrc = (home / ".zshrc").read_text()
        assert "@@" not in zshrc
        assert "zinit light zsh-users/zsh-autosuggestions" in zshrc
        assert (home / ".zshrc").stat().st_mode & 0o777 == 0o600
        assert "set -g @plugin 'tmux-plugins/tmux-resurrect'" in (home / ".tmux.conf").read_text()

    def test_second_run_is_idempotent(
        self, home: Path, linux_platform: PlatformInfo, installed: set[str]
    ) -> None:
        _sequencer(home, linux_platform, installed).run()
        first_zshrc = (home / ".zshrc").read_text()

        summary = _sequencer(home, linux_platform, installed).run()

        assert summary.stage == SetupStage.DONE
        assert {r.outcome for r in summary.results} == {InstallOutcome.ALREADY_PRESENT}
        assert len(summary.backups) == 5
        assert all(b.backup_path.read_text() for b in summary.backups)
        assert (home / ".zshrc").read_text() == first_zshrc
        assert all(result.already_installed for result in summary.plugins)

    def test_log_is_written(
        self, home: Path, linux_platform: PlatformInfo, installed: set[str]
    ) -> None:
        summary = _sequencer(home, linux_platform, installed).run()

        assert summary.log_file == home / ".setup.log"
        log = summary.log_file.read_text()
        assert "[SUCCESS] Setup complete" in log
        assert "[INFO] Skipping default shell change (non-interactive)" in log

    def test_macos_skips_clipboard_helper(
        self, home: Path, macos_platform: PlatformInfo, installed: set[str]
    ) -> None:
        summary = _sequencer(home, macos_platform, installed).run()

        clipboard = [r for r in summary.results if r.component == "Clipboard helper"]
        assert clipboard[0].outcome == InstallOutcome.SKIPPED
        assert "xclip" not in installed

    def test_optional_failure_does_not_stop_the_run(
        self, home: Path, linux_platform: PlatformInfo, installed: set[str]
    ) -> None:
        summary = _sequencer(home, linux_platform, installed, {"Ghostty"}).run()

        assert summary.stage == SetupStage.DONE
        failed = summary.outcomes(InstallOutcome.FAILED)
        assert [r.component for r in failed] == ["Ghostty"]
        assert "JetBrains Mono" in installed
        assert summary.report is not None
        assert [item.name for item in summary.report.failed] == ["Ghostty"]

    def test_env_file_only_reaches_plugin_commands(
        self, home: Path, linux_platform: PlatformInfo, installed: set[str]
    ) -> None:
        (home / ".env").write_text("GITHUB_TOKEN=ghp_x\nPATH=/tmp/evil\nnot a line\n")
        environ = {"SHELL": "/bin/bash", "PATH": "/usr/bin"}
        sequencer = _sequencer(home, linux_platform, installed, environ=environ)

        sequencer.run()

        assert environ == {"SHELL": "/bin/bash", "PATH": "/usr/bin"}
        assert sequencer.bootstrapper.envs == [
            {"GITHUB_TOKEN": "ghp_x", "PATH": "/tmp/evil"},
            {"GITHUB_TOKEN": "ghp_x", "PATH": "/tmp/evil"},
        ]

    def test_required_failure_is_fatal(
        self, home: Path, linux_platform: PlatformInfo, installed: set[str]
    ) -> None:
        summary = SetupSummary()

        with pytest.raises(ComponentInstallError, match="Starship"):
            _sequencer(home, linux_platform, installed, {"Starship"}).run(summary)

        assert summary.stage == SetupStage.PREREQS_OK
        assert summary.results[-1].outcome == InstallOutcome.FAILED
        assert not (home / ".zshrc").exists()


def test_missing_git_stops_before_installing(
    home: Path, linux_platform: PlatformInfo, installed: set[str]
) -> None:
    summary = SetupSummary()

    with (
        patch("shellsetup.core.sequencer.downloader_available", return_value=True),
        patch("shellsetup.core.sequencer.command_exists", return_value=False),
        pytest.raises(PrerequisiteError, match="git"),
    ):
        _sequencer(home, linux_platform, installed).run(summary)

    assert summary.stage == SetupStage.PLATFORM_KNOWN
    assert summary.results == []
    assert installed == set()
