"""Rich display functions for the closing summary.

Provides the install results table, the verification table and the
quick-start panel printed at the end of a run.
"""

from pathlib import Path

from rich.panel import Panel
from rich.table import Table

from shellsetup.core.sequencer import SetupSummary
from shellsetup.models.component import InstallOutcome, InstallResult
from shellsetup.models.report import VerificationReport
from shellsetup.utils.formatting import console, create_table, print_success, print_warning

_OUTCOME_LABELS = {
    InstallOutcome.ALREADY_PRESENT: "[muted]present[/muted]",
    InstallOutcome.INSTALLED: "[success]installed[/success]",
    InstallOutcome.FAILED: "[error]failed[/error]",
    InstallOutcome.SKIPPED: "[muted]skipped[/muted]",
}


def create_install_table(results: list[InstallResult]) -> Table:
    """Create a table of component outcomes.

    Args:
        results: One result per component, in setup order.

    Returns:
        Rich Table with Component, Status and Detail columns.
    """
    table = create_table("Components", "Component", "Status", "Detail")
    for result in results:
        table.add_row(
            result.component,
            _OUTCOME_LABELS[result.outcome],
            f"[muted]{result.detail}[/muted]",
        )
    return table


def create_verification_table(report: VerificationReport, home: Path | None = None) -> Table:
    """Create a table of verification checks.

    Args:
        report: Verification report.
        home: Home directory, shown as ``~`` in paths.

    Returns:
        Rich Table with Check, Result and Detail columns.
    """
    table = create_table("Verification", "Check", "Result", "Detail")
    for item in report.items:
        name = item.name
        if home is not None and name.startswith(str(home)):
            name = "~" + name[len(str(home)) :]
        status = "[success]OK[/success]" if item.passed else "[error]FAIL[/error]"
        table.add_row(name, status, f"[muted]{item.detail}[/muted]")
    return table


def _quick_start(summary: SetupSummary) -> str:
    platform = summary.platform
    lines = [
        "[bold_header]Next steps[/bold_header]",
        "  1. Restart your terminal, or run: exec zsh",
        "  2. Open Ghostty: tmux starts automatically",
        "  3. Fuzzy checkout a branch: gcof",
        "",
        "[bold_header]Useful commands[/bold_header]",
        "  zinit plugins        list shell plugins",
        "  zinit update --all   update shell plugins",
        "  prefix + I           install tmux plugins (prefix is Ctrl+a)",
    ]
    if platform is not None and platform.is_macos:
        lines.append("  tail /tmp/zinit-update.log   auto-update log")
    else:
        lines.append("  systemctl --user status zinit-update.timer   auto-update status")
    if summary.log_file is not None:
        lines.extend(["", f"[muted]Log: {summary.log_file}[/muted]"])
    if summary.backups:
        lines.append(f"[muted]Backups: {summary.backups[0].backup_path.parent}[/muted]")
    return "\n".join(lines)


def print_summary(summary: SetupSummary, home: Path | None = None) -> None:
    """Print the closing summary of a run.

    Args:
        summary: Summary returned by the sequencer.
        home: Home directory, shown as ``~`` in paths.
    """
    console.print()
    console.print(create_install_table(summary.results))

    if summary.report is not None:
        console.print(create_verification_table(summary.report, home))
        passed, total = summary.report.checks_passed, summary.report.checks_total
        if summary.report.all_passed:
            print_success(f"Verification: {passed}/{total} checks passed")
        else:
            print_warning(f"Verification: {passed}/{total} checks passed")

    console.print(Panel(_quick_start(summary), title="shellsetup", border_style="border"))
