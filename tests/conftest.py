"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

from pathlib import Path

import pytest

from shellsetup.core.paths import SetupPaths
from shellsetup.core.setup_log import close_log
from shellsetup.models.platform import Arch, OsFamily, PackageManagerKind, PlatformInfo
from shellsetup.utils.shell import CommandResult


@pytest.fixture(autouse=True)
def _detach_log_handlers():
    """Never leak the setup log handlers between tests."""
    yield
    close_log()


@pytest.fixture
def home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Throwaway home directory with XDG overrides cleared."""
    home_dir = tmp_path / "home"
    home_dir.mkdir()
    monkeypatch.setenv("HOME", str(home_dir))
    for var in ("XDG_CONFIG_HOME", "XDG_STATE_HOME", "XDG_DATA_HOME"):
        monkeypatch.delenv(var, raising=False)
    return home_dir


@pytest.fixture
def linux_platform() -> PlatformInfo:
    """Ubuntu on x86_64."""
    return PlatformInfo(OsFamily.LINUX, Arch.X86_64, PackageManagerKind.APT)


@pytest.fixture
def macos_platform() -> PlatformInfo:
    """macOS on Apple Silicon."""
    return PlatformInfo(OsFamily.MACOS, Arch.AARCH64, PackageManagerKind.BREW)


@pytest.fixture
def linux_paths(home: Path, linux_platform: PlatformInfo) -> SetupPaths:
    return SetupPaths.for_platform(linux_platform, home)


@pytest.fixture
def ok() -> CommandResult:
    """Successful command result with no output."""
    return CommandResult(stdout="", stderr="", returncode=0)


@pytest.fixture
def failed() -> CommandResult:
    """Failed command result."""
    return CommandResult(stdout="", stderr="network unreachable", returncode=1)
