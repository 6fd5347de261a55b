"""Idempotent component installation.

ensure_installed() probes first and only installs what is missing, so a
second run over a provisioned machine performs no installs at all.
Whether a failure is fatal is left to the caller: the installer reports
FAILED and prints a warning for optional components.
"""

import logging
import subprocess

from shellsetup.core.errors import SetupError
from shellsetup.models.component import ComponentSpec, InstallOutcome, InstallResult
from shellsetup.utils.formatting import print_info, print_success, print_warning

logger = logging.getLogger(__name__)

# Errors an install action may raise that mean "this component failed"
INSTALL_ERRORS = (SetupError, OSError, RuntimeError, subprocess.SubprocessError)


def _probe(spec: ComponentSpec) -> bool:
    try:
        return spec.probe()
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug("Probe for %s failed: %s", spec.name, e)
        return False


class ComponentInstaller:
    """Ensures components are present, installing them when absent."""

    def ensure_installed(self, spec: ComponentSpec) -> InstallResult:
        """Ensure a single component is installed.

        Args:
            spec: Component to ensure.

        Returns:
            InstallResult with ALREADY_PRESENT, INSTALLED or FAILED.
        """
        if _probe(spec):
            print_success(f"{spec.name} already installed")
            return InstallResult(spec.name, InstallOutcome.ALREADY_PRESENT)

        print_info(f"Installing {spec.name}...")
        try:
            spec.install()
        except INSTALL_ERRORS as e:
            return self._failed(spec, str(e))

        if not _probe(spec):
            return self._failed(spec, "not found after installation")

        print_success(f"{spec.name} installed")
        return InstallResult(spec.name, InstallOutcome.INSTALLED)

    def ensure_all(self, specs: list[ComponentSpec]) -> list[InstallResult]:
        """Ensure every component in order.

        Stops at the first failed required component; the caller turns that
        result into a fatal error.

        Args:
            specs: Components to ensure.

        Returns:
            One InstallResult per attempted component.
        """
        results: list[InstallResult] = []
        for spec in specs:
            result = self.ensure_installed(spec)
            results.append(result)
            if spec.required and result.outcome == InstallOutcome.FAILED:
                break
        return results

    def _failed(self, spec: ComponentSpec, detail: str) -> InstallResult:
        if spec.required:
            logger.debug("Required component %s failed: %s", spec.name, detail)
        else:
            print_warning(f"{spec.name} could not be installed: {detail}")
        return InstallResult(spec.name, InstallOutcome.FAILED, detail)
