"""The provisioning sequence.

Sequencer.run() performs every step in a fixed order. Each step is
idempotent, so re-running over a provisioned machine only redeploys the
configuration files (backing up the previous versions).

Fatal errors surface as SetupError subclasses and stop the run: an
unsupported platform, a missing prerequisite, a required component that
could not be installed, and anything that could lose user data (backup or
config write failures). Everything else is reported as a warning and the
run continues.
"""

import logging
import os
from collections.abc import Callable, MutableMapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from shellsetup.backends import get_backend
from shellsetup.backends.base import PackageBackend
from shellsetup.components.catalog import ComponentCatalog
from shellsetup.components.installer import ComponentInstaller
from shellsetup.configs.deployer import ConfigDeployer
from shellsetup.configs.envfile import load_env_file
from shellsetup.configs.templates import build_config_files
from shellsetup.core.backup import BackupRecord, BackupStore
from shellsetup.core.errors import ComponentInstallError, PrerequisiteError, SetupError
from shellsetup.core.paths import SetupPaths, get_log_path
from shellsetup.core.platform import PlatformDetector
from shellsetup.core.schedule import AutoUpdateScheduler
from shellsetup.core.settings import SetupSettings
from shellsetup.core.setup_log import initialize_log
from shellsetup.core.verify import verify
from shellsetup.models.component import ComponentSpec, InstallOutcome, InstallResult
from shellsetup.models.platform import PlatformInfo
from shellsetup.models.report import VerificationReport
from shellsetup.plugins.bootstrap import (
    BootstrapResult,
    PluginBootstrapper,
    PluginManager,
    tpm_manager,
    zinit_manager,
)
from shellsetup.utils.download import downloader_available
from shellsetup.utils.formatting import print_info, print_success, print_warning
from shellsetup.utils.shell import RetryPolicy, command_exists, command_path, run_interactive

logger = logging.getLogger(__name__)


class SetupStage(str, Enum):
    """How far a run got. Stages only ever advance."""

    INIT = "init"
    PLATFORM_KNOWN = "platform_known"
    PREREQS_OK = "prereqs_ok"
    TOOLS_INSTALLED = "tools_installed"
    CONFIGS_DEPLOYED = "configs_deployed"
    PLUGINS_BOOTSTRAPPED = "plugins_bootstrapped"
    VERIFIED = "verified"
    DONE = "done"


@dataclass(slots=True)
class SetupSummary:
    """Everything a run did, for the closing summary.

    Attributes:
        stage: Last stage reached.
        platform: Detected platform, once known.
        log_file: Setup log location.
        results: One result per component, in setup order.
        backups: Configuration files backed up before being replaced.
        deployed: Configuration files written.
        plugins: One result per plugin manager.
        default_shell_changed: Whether zsh is now the login shell.
        auto_update_scheduled: Whether the daily update job is active.
        report: Verification report.
    """

    stage: SetupStage = SetupStage.INIT
    platform: PlatformInfo | None = None
    log_file: Path | None = None
    results: list[InstallResult] = field(default_factory=list)
    backups: list[BackupRecord] = field(default_factory=list)
    deployed: list[Path] = field(default_factory=list)
    plugins: list[BootstrapResult] = field(default_factory=list)
    default_shell_changed: bool = False
    auto_update_scheduled: bool = False
    report: VerificationReport | None = None

    def outcomes(self, outcome: InstallOutcome) -> list[InstallResult]:
        return [result for result in self.results if result.outcome == outcome]


def default_plugin_managers(paths: SetupPaths) -> list[PluginManager]:
    return [zinit_manager(paths), tpm_manager(paths)]


def check_prerequisites() -> None:
    """Make sure the tools every later step relies on are present.

    Raises:
        PrerequisiteError: If neither curl nor wget is installed, or git is missing.
    """
    if not downloader_available():
        msg = "Neither curl nor wget found. Please install one of them and re-run"
        raise PrerequisiteError(msg)
    if not command_exists("git"):
        msg = "git not found. Please install git and re-run"
        raise PrerequisiteError(msg)
    print_success("Prerequisites available (downloader, git)")


class Sequencer:
    """Runs the provisioning steps in order.

    Collaborators are injectable so a whole run can be pointed at a
    temporary home directory with fake components.

    Attributes:
        settings: Run settings.
        home: Home directory every path is rooted at.
        interactive: Whether the user can answer prompts (chsh password).
    """

    def __init__(
        self,
        settings: SetupSettings | None = None,
        *,
        home: Path | None = None,
        interactive: bool = True,
        detector: PlatformDetector | None = None,
        backend_factory: Callable[[PlatformInfo, RetryPolicy], PackageBackend] = get_backend,
        catalog_factory: Callable[..., ComponentCatalog] = ComponentCatalog,
        bootstrapper: PluginBootstrapper | None = None,
        managers_factory: Callable[[SetupPaths], list[PluginManager]] = default_plugin_managers,
        scheduler_factory: Callable[..., AutoUpdateScheduler] = AutoUpdateScheduler,
        environ: MutableMapping[str, str] | None = None,
    ) -> None:
        self.settings = settings or SetupSettings()
        self.home = home if home is not None else Path.home()
        self.interactive = interactive
        self.detector = detector or PlatformDetector()
        self.policy = RetryPolicy(
            max_attempts=self.settings.retry_attempts,
            delay_seconds=self.settings.retry_delay_seconds,
        )
        self.backend_factory = backend_factory
        self.catalog_factory = catalog_factory
        self.bootstrapper = bootstrapper or PluginBootstrapper(
            self.policy,
            timeout=self.settings.plugin_poll_timeout_seconds,
            interval=self.settings.plugin_poll_interval_seconds,
        )
        self.managers_factory = managers_factory
        self.scheduler_factory = scheduler_factory
        self.environ = environ if environ is not None else os.environ
        self.installer = ComponentInstaller()

    def run(self, summary: SetupSummary | None = None) -> SetupSummary:
        """Run every step.

        Args:
            summary: Summary to fill in. Passing one lets a caller inspect
                partial progress after a fatal error.

        Returns:
            The filled-in SetupSummary.

        Raises:
            SetupError: On any fatal error.
        """
        summary = summary if summary is not None else SetupSummary()

        summary.log_file = self._initialize_log()

        platform = self.detector.detect()
        summary.platform = platform
        summary.stage = SetupStage.PLATFORM_KNOWN
        print_info(f"Detected {platform.describe()}")
        paths = SetupPaths.for_platform(platform, self.home)

        check_prerequisites()
        backend = self.backend_factory(platform, self.policy)
        backend.prepare()
        summary.stage = SetupStage.PREREQS_OK

        catalog = self.catalog_factory(platform, backend, paths, self.settings)
        self._install(catalog.core_tools(), summary)
        self._install(catalog.prompt_renderer(), summary)
        self._install(catalog.terminal_emulator(), summary)
        if platform.is_linux:
            self._install(catalog.clipboard_helper(), summary)
        else:
            summary.results.append(
                InstallResult("Clipboard helper", InstallOutcome.SKIPPED, "built into macOS")
            )
        self._install(catalog.fonts(), summary)
        summary.stage = SetupStage.TOOLS_INSTALLED

        self._deploy_configs(platform, paths, summary)
        summary.stage = SetupStage.CONFIGS_DEPLOYED

        summary.default_shell_changed = self._set_default_shell()
        self._install(catalog.version_manager(), summary)

        shell_env = load_env_file(paths.env_file)
        managers = self.managers_factory(paths)
        for manager in managers:
            summary.plugins.append(self.bootstrapper.bootstrap(manager, shell_env))
        scheduler = self.scheduler_factory(platform, paths, self.settings.update_hour)
        summary.auto_update_scheduled = scheduler.install()
        scheduler.run_update_if_due()
        summary.stage = SetupStage.PLUGINS_BOOTSTRAPPED

        checked_paths = [*paths.config_targets, *(m.install_dir for m in managers)]
        summary.report = verify(catalog.all(), checked_paths)
        summary.stage = SetupStage.VERIFIED

        print_success("Setup complete")
        summary.stage = SetupStage.DONE
        return summary

    # -------------------------------------------------------------------------
    # Steps
    # -------------------------------------------------------------------------

    def _initialize_log(self) -> Path:
        path = get_log_path(self.home)
        try:
            return initialize_log(path)
        except OSError as e:
            msg = f"Cannot write setup log {path}: {e}"
            raise SetupError(msg) from e

    def _install(self, specs: list[ComponentSpec], summary: SetupSummary) -> None:
        results = self.installer.ensure_all(specs)
        summary.results.extend(results)

        required = {spec.name for spec in specs if spec.required}
        for result in results:
            if result.component in required and result.outcome == InstallOutcome.FAILED:
                msg = f"{result.component} could not be installed: {result.detail}"
                raise ComponentInstallError(msg)

    def _deploy_configs(
        self, platform: PlatformInfo, paths: SetupPaths, summary: SetupSummary
    ) -> None:
        backups = BackupStore(paths.backup_dir)
        deployer = ConfigDeployer(backups)
        try:
            for config in build_config_files(platform, paths, self.settings):
                deployer.deploy(config.target, config.body, config.substitutions, config.mode)
        finally:
            summary.backups.extend(backups.records)
            summary.deployed.extend(result.path for result in deployer.deployed)

    def _set_default_shell(self) -> bool:
        if "zsh" in self.environ.get("SHELL", ""):
            print_success("zsh is already the default shell")
            return True
        if not self.interactive:
            print_info("Skipping default shell change (non-interactive)")
            return False

        zsh = command_path("zsh")
        if zsh is None:
            print_warning("zsh not found on PATH, default shell unchanged")
            return False

        print_info(f"Changing default shell to {zsh}...")
        try:
            returncode = run_interactive(["chsh", "-s", zsh])
        except OSError as e:
            print_warning(f"Could not change default shell: {e}")
            return False
        if returncode != 0:
            print_warning(f"Could not change default shell. Run manually: chsh -s {zsh}")
            return False

        print_success("Default shell set to zsh (takes effect at next login)")
        return True


def exec_shell() -> None:
    """Replace the current process with a login zsh."""
    zsh = command_path("zsh")
    if zsh is None:
        print_warning("zsh not found on PATH, open a new terminal instead")
        return
    logging.shutdown()
    os.execv(zsh, [zsh, "-l"])
