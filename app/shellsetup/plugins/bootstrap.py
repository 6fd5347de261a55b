"""Plugin manager bootstrapping for zinit and tpm.

Both managers install their plugins asynchronously from the point of view
of the caller: the install command returns, but plugin directories may
appear later. bootstrap() therefore polls for every plugin directory with a
bounded wait and falls back to the manager's "update all" command when the
wait times out. Nothing here is fatal; problems are reported as warnings.
"""

import logging
import shutil
import subprocess
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from shellsetup.core.errors import SetupError
from shellsetup.core.paths import SetupPaths
from shellsetup.plugins.catalog import (
    TMUX_PLUGINS,
    ZINIT_PLUGINS,
    tpm_plugin_dirs,
    zinit_plugin_dirs,
)
from shellsetup.utils.formatting import print_info, print_success, print_warning
from shellsetup.utils.shell import RetryPolicy, run_command

logger = logging.getLogger(__name__)

ZINIT_REPO_URL = "https://github.com/zdharma-continuum/zinit"
TPM_REPO_URL = "https://github.com/tmux-plugins/tpm"

# Plugin installs clone several repositories
PLUGIN_COMMAND_TIMEOUT = 600.0

BOOTSTRAP_ERRORS = (SetupError, OSError, subprocess.SubprocessError)


@dataclass(frozen=True, slots=True)
class PluginManager:
    """A plugin manager and the plugins it is expected to install.

    Attributes:
        name: Display name ("zinit", "tpm").
        repo_url: Git URL of the manager itself.
        install_dir: Clone destination for the manager.
        marker: File whose presence means the manager is installed.
        plugin_root: Directory plugins are installed into.
        plugins: Directory names expected under ``plugin_root``.
        install_command: Command that installs all plugins.
        update_command: Fallback command that updates (and installs) all plugins.
    """

    name: str
    repo_url: str
    install_dir: Path
    marker: Path
    plugin_root: Path
    plugins: list[str] = field(default_factory=list)
    install_command: list[str] = field(default_factory=list)
    update_command: list[str] = field(default_factory=list)

    def missing_plugins(self) -> list[str]:
        return [name for name in self.plugins if not (self.plugin_root / name).is_dir()]


@dataclass(frozen=True, slots=True)
class BootstrapResult:
    """Outcome of bootstrapping one plugin manager.

    Attributes:
        manager: Manager name.
        already_installed: The manager was present before this run.
        plugins_ready: Every expected plugin directory exists.
        fallback_used: The "update all" fallback ran after a timeout.
        error: Description of the failure, if any.
    """

    manager: str
    already_installed: bool = False
    plugins_ready: bool = False
    fallback_used: bool = False
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.plugins_ready


def wait_for(
    predicate: Callable[[], bool],
    timeout: float,
    interval: float,
    *,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
) -> bool:
    """Poll ``predicate`` until it holds or ``timeout`` seconds pass.

    The predicate is checked once more when the deadline is reached, so a
    zero timeout still performs a single check.

    Args:
        predicate: Condition to wait for.
        timeout: Maximum seconds to wait.
        interval: Seconds between checks.
        clock: Monotonic clock, injectable for tests.
        sleep: Sleep function, injectable for tests.

    Returns:
        True if the predicate held before the deadline.
    """
    deadline = clock() + timeout
    while True:
        if predicate():
            return True
        remaining = deadline - clock()
        if remaining <= 0:
            return False
        sleep(min(interval, remaining))


def zinit_manager(paths: SetupPaths) -> PluginManager:
    light = " ".join(p.source for p in ZINIT_PLUGINS if not p.snippet)
    return PluginManager(
        name="zinit",
        repo_url=ZINIT_REPO_URL,
        install_dir=paths.zinit_repo,
        marker=paths.zinit_repo / "zinit.zsh",
        plugin_root=paths.zinit_home / "plugins",
        plugins=zinit_plugin_dirs(ZINIT_PLUGINS),
        install_command=["zsh", "-i", "-c", f"zinit light-mode for {light}"],
        update_command=["zsh", "-i", "-c", "zinit update --all --parallel -q"],
    )


def tpm_manager(paths: SetupPaths) -> PluginManager:
    bin_dir = paths.tpm_dir / "bin"
    return PluginManager(
        name="tpm",
        repo_url=TPM_REPO_URL,
        install_dir=paths.tpm_dir,
        marker=paths.tpm_dir / "tpm",
        plugin_root=paths.tmux_plugins_dir,
        plugins=tpm_plugin_dirs(TMUX_PLUGINS),
        install_command=[str(bin_dir / "install_plugins")],
        update_command=[str(bin_dir / "update_plugins"), "all"],
    )


class PluginBootstrapper:
    """Installs plugin managers and waits for their plugins.

    Attributes:
        policy: Retry policy for cloning.
        timeout: Seconds to wait for plugin directories.
        interval: Poll interval in seconds.
    """

    def __init__(
        self,
        policy: RetryPolicy | None = None,
        timeout: float = 15.0,
        interval: float = 1.0,
        *,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.policy = policy or RetryPolicy()
        self.timeout = timeout
        self.interval = interval
        self._sleep = sleep
        self._clock = clock

    def bootstrap(
        self, manager: PluginManager, env: dict[str, str] | None = None
    ) -> BootstrapResult:
        """Install ``manager`` if needed and make sure its plugins exist.

        Args:
            manager: Plugin manager to bootstrap.
            env: Extra environment for the install and update commands
                (variables from ~/.env).

        Returns:
            BootstrapResult. Never raises for command or filesystem failures.
        """
        already_installed = manager.marker.exists()
        if already_installed:
            logger.debug("%s already installed at %s", manager.name, manager.install_dir)
        else:
            try:
                self._clone(manager)
            except BOOTSTRAP_ERRORS as e:
                print_warning(f"{manager.name} could not be installed: {e}")
                return BootstrapResult(manager.name, error=str(e))

        if not manager.missing_plugins():
            print_success(f"{manager.name} plugins ready")
            return BootstrapResult(manager.name, already_installed, plugins_ready=True)

        print_info(f"Installing {manager.name} plugins...")
        self._run_best_effort(manager.install_command, env)

        if self._wait_for_plugins(manager):
            print_success(f"{manager.name} plugins installed")
            return BootstrapResult(manager.name, already_installed, plugins_ready=True)

        print_warning(
            f"{manager.name} plugins not ready after {self.timeout:g}s, running full update"
        )
        self._run_best_effort(manager.update_command, env)

        missing = manager.missing_plugins()
        if missing:
            detail = f"missing plugins: {', '.join(missing)}"
            print_warning(f"{manager.name} {detail}. They will install on next shell start")
            return BootstrapResult(
                manager.name, already_installed, fallback_used=True, error=detail
            )

        print_success(f"{manager.name} plugins installed")
        return BootstrapResult(
            manager.name, already_installed, plugins_ready=True, fallback_used=True
        )

    def _clone(self, manager: PluginManager) -> None:
        if manager.install_dir.exists():
            # Leftover from an interrupted clone
            logger.info("Removing incomplete %s checkout at %s", manager.name, manager.install_dir)
            shutil.rmtree(manager.install_dir)
        manager.install_dir.parent.mkdir(parents=True, exist_ok=True)

        print_info(f"Installing {manager.name}...")
        self.policy.run(
            ["git", "clone", "--depth", "1", manager.repo_url, str(manager.install_dir)]
        )
        if not manager.marker.exists():
            msg = f"{manager.marker} missing after clone"
            raise SetupError(msg)
        print_success(f"{manager.name} installed")

    def _wait_for_plugins(self, manager: PluginManager) -> bool:
        return wait_for(
            lambda: not manager.missing_plugins(),
            self.timeout,
            self.interval,
            clock=self._clock,
            sleep=self._sleep,
        )

    def _run_best_effort(self, args: list[str], env: dict[str, str] | None = None) -> None:
        if not args:
            return
        try:
            result = run_command(args, timeout=PLUGIN_COMMAND_TIMEOUT, env=env)
        except (OSError, subprocess.SubprocessError) as e:
            logger.warning("%s failed: %s", args[0], e)
            return
        if not result.success:
            logger.warning("%s exited %d: %s", args[0], result.returncode, result.stderr.strip())
