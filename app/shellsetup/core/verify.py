"""Post-install verification.

Verification re-probes every component and checks every deployed file. It
is informational only: each failed check prints a warning, the report is
shown in the summary, and nothing here turns into a failure exit.
"""

import logging
import re
import subprocess
from collections.abc import Iterable
from pathlib import Path

from shellsetup.models.component import ComponentSpec
from shellsetup.models.report import VerificationReport
from shellsetup.utils.formatting import print_warning
from shellsetup.utils.shell import run_command

logger = logging.getLogger(__name__)

_VERSION_PATTERN = re.compile(r"(\d+(?:\.\d+)+)")


def parse_version(output: str) -> tuple[int, ...] | None:
    """Extract the first dotted version number from command output.

    ``"zsh 5.9 (x86_64-apple-darwin23.0)"`` gives ``(5, 9)`` and
    ``"tmux 3.3a"`` gives ``(3, 3)``.

    Returns:
        Version as a tuple of ints, or None if no version was found.
    """
    match = _VERSION_PATTERN.search(output)
    if match is None:
        return None
    return tuple(int(part) for part in match.group(1).split("."))


def version_at_least(found: tuple[int, ...], minimum: str) -> bool:
    required = tuple(int(part) for part in minimum.split("."))
    width = max(len(found), len(required))
    padded_found = found + (0,) * (width - len(found))
    padded_required = required + (0,) * (width - len(required))
    return padded_found >= padded_required


def _read_version(args: list[str]) -> str | None:
    try:
        result = run_command(args, timeout=10.0)
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug("Version query %s failed: %s", args, e)
        return None
    output = result.stdout.strip() or result.stderr.strip()
    return output.splitlines()[0] if output else None


def _fail(report: VerificationReport, name: str, detail: str) -> None:
    report.add(name, False, detail)
    print_warning(f"{name} {detail}")


def _check_component(spec: ComponentSpec, report: VerificationReport) -> None:
    try:
        present = spec.probe()
    except Exception as e:
        # Verification is informational: a check that raises has failed
        logger.debug("Presence check for %s failed: %r", spec.name, e)
        present = False

    if not present:
        _fail(report, spec.name, "not found")
        return
    if not spec.version_args:
        report.add(spec.name, True)
        return

    line = _read_version(spec.version_args)
    version = parse_version(line) if line else None
    if spec.min_version is None:
        report.add(spec.name, True, line or "")
        return
    if version is None:
        _fail(report, spec.name, "version unknown")
        return

    shown = ".".join(str(part) for part in version)
    if version_at_least(version, spec.min_version):
        report.add(spec.name, True, shown)
    else:
        _fail(report, spec.name, f"{shown} < {spec.min_version}")


def verify(specs: Iterable[ComponentSpec], paths: Iterable[Path]) -> VerificationReport:
    """Re-probe components and check that files exist.

    Args:
        specs: Components to probe (required and optional).
        paths: Deployed files and plugin manager directories.

    Returns:
        VerificationReport with one item per component and per path.
    """
    report = VerificationReport()
    for spec in specs:
        _check_component(spec, report)
    for path in paths:
        if path.exists():
            report.add(str(path), True)
        else:
            _fail(report, str(path), "missing")

    logger.info("Verification: %d/%d checks passed", report.checks_passed, report.checks_total)
    return report
