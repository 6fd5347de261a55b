"""Daily plugin updates.

On macOS a launchd agent runs the zinit update; on Linux a systemd user
timer does. Both jobs touch a shared timestamp marker, which the installer
reads to decide whether an immediate update is worth running. Everything
here is best effort: failures are reported as warnings.
"""

import logging
import os
import plistlib
import shlex
import subprocess
from datetime import datetime, timedelta
from pathlib import Path

from shellsetup.core.paths import SetupPaths
from shellsetup.models.platform import PlatformInfo
from shellsetup.utils.formatting import print_info, print_success, print_warning
from shellsetup.utils.shell import command_exists, command_path, run_command

logger = logging.getLogger(__name__)

LAUNCH_AGENT_LABEL = "com.shellsetup.zinit-update"
SYSTEMD_UNIT = "zinit-update"
UPDATE_INTERVAL = timedelta(hours=24)
UPDATE_TIMEOUT = 600.0

SCHEDULE_ERRORS = (OSError, subprocess.SubprocessError)


def update_script(marker: Path) -> str:
    """zsh snippet that updates all zinit plugins and touches ``marker``."""
    quoted = shlex.quote(str(marker))
    return (
        "source ~/.zshrc && zinit update --all --parallel -q"
        f" && mkdir -p {shlex.quote(str(marker.parent))} && touch {quoted}"
    )


# =============================================================================
# Timestamp marker
# =============================================================================


def is_update_due(marker: Path, now: datetime | None = None) -> bool:
    """Check whether the last plugin update is older than 24 hours.

    Args:
        marker: Timestamp marker file.
        now: Current time, for tests.

    Returns:
        True if the marker is missing, unreadable or stale.
    """
    try:
        mtime = datetime.fromtimestamp(marker.stat().st_mtime)
    except OSError as e:
        logger.debug("Update marker %s unreadable: %s", marker, e)
        return True
    return (now or datetime.now()) - mtime >= UPDATE_INTERVAL


def mark_updated(marker: Path, now: datetime | None = None) -> None:
    marker.parent.mkdir(parents=True, exist_ok=True)
    marker.touch()
    if now is not None:
        stamp = now.timestamp()
        os.utime(marker, (stamp, stamp))


# =============================================================================
# Job definitions
# =============================================================================


def build_launch_agent(marker: Path, hour: int, zsh: str = "/bin/zsh") -> dict:
    """Build the launchd agent definition."""
    return {
        "Label": LAUNCH_AGENT_LABEL,
        "ProgramArguments": [zsh, "-c", update_script(marker)],
        "StartCalendarInterval": {"Hour": hour, "Minute": 0},
        "StandardOutPath": "/tmp/zinit-update.log",
        "StandardErrorPath": "/tmp/zinit-update.err",
    }


def render_systemd_service(marker: Path, zsh: str = "/bin/zsh") -> str:
    script = update_script(marker).replace('"', '\\"')
    return (
        "[Unit]\n"
        "Description=Update Zinit plugins daily\n"
        "After=network-online.target\n"
        "\n"
        "[Service]\n"
        "Type=oneshot\n"
        f'ExecStart={zsh} -c "{script}"\n'
        "StandardOutput=journal\n"
        "StandardError=journal\n"
        "\n"
        "[Install]\n"
        "WantedBy=default.target\n"
    )


def render_systemd_timer(hour: int) -> str:
    return (
        "[Unit]\n"
        "Description=Daily Zinit plugin updates\n"
        f"Requires={SYSTEMD_UNIT}.service\n"
        "\n"
        "[Timer]\n"
        f"OnCalendar=*-*-* {hour:02d}:00:00\n"
        "Persistent=true\n"
        "\n"
        "[Install]\n"
        "WantedBy=timers.target\n"
    )


# =============================================================================
# Scheduler
# =============================================================================


class AutoUpdateScheduler:
    """Installs the daily plugin update job for the current platform.

    Attributes:
        platform: Detected platform.
        paths: Filesystem layout for the run.
        hour: Hour of day the job runs.
    """

    def __init__(self, platform: PlatformInfo, paths: SetupPaths, hour: int = 2) -> None:
        self.platform = platform
        self.paths = paths
        self.hour = hour

    @property
    def zsh(self) -> str:
        return command_path("zsh") or "/bin/zsh"

    def install(self) -> bool:
        """Install and activate the job.

        Returns:
            True if the job is active, False if a step failed.
        """
        try:
            if self.platform.is_macos:
                return self._install_launch_agent()
            return self._install_systemd_timer()
        except SCHEDULE_ERRORS as e:
            print_warning(f"Auto-update could not be scheduled: {e}")
            return False

    def _install_launch_agent(self) -> bool:
        agent = self.paths.launch_agent
        agent.parent.mkdir(parents=True, exist_ok=True)
        with open(agent, "wb") as f:
            plistlib.dump(build_launch_agent(self.paths.update_marker, self.hour, self.zsh), f)

        if not run_command(["launchctl", "load", str(agent)]).success:
            # Already loaded: reload to pick up changes
            run_command(["launchctl", "unload", str(agent)])
            result = run_command(["launchctl", "load", str(agent)])
            if not result.success:
                print_warning(f"launchctl could not load {agent.name}: {result.stderr.strip()}")
                return False

        print_success(f"LaunchAgent for daily plugin updates installed ({self.hour:02d}:00)")
        return True

    def _install_systemd_timer(self) -> bool:
        if not command_exists("systemctl"):
            print_warning("systemctl not found, skipping daily plugin updates")
            return False

        unit_dir = self.paths.systemd_user_dir
        unit_dir.mkdir(parents=True, exist_ok=True)
        (unit_dir / f"{SYSTEMD_UNIT}.service").write_text(
            render_systemd_service(self.paths.update_marker, self.zsh), encoding="utf-8"
        )
        (unit_dir / f"{SYSTEMD_UNIT}.timer").write_text(
            render_systemd_timer(self.hour), encoding="utf-8"
        )

        timer = f"{SYSTEMD_UNIT}.timer"
        for args in (
            ["systemctl", "--user", "daemon-reload"],
            ["systemctl", "--user", "enable", timer],
            ["systemctl", "--user", "start", timer],
        ):
            result = run_command(args)
            if not result.success:
                print_warning(f"{' '.join(args)} failed: {result.stderr.strip()}")
                return False

        print_success(f"systemd timer for daily plugin updates installed ({self.hour:02d}:00)")
        return True

    def run_update_if_due(self, now: datetime | None = None) -> bool:
        """Run the plugin update now if the last one is over 24 hours old.

        Args:
            now: Current time, for tests.

        Returns:
            True if an update ran and succeeded.
        """
        marker = self.paths.update_marker
        if not is_update_due(marker, now):
            logger.debug("Plugin update not due (marker %s)", marker)
            return False
        if not command_exists("zsh"):
            logger.debug("zsh not on PATH, skipping immediate plugin update")
            return False

        print_info("Updating plugins...")
        try:
            result = run_command([self.zsh, "-c", update_script(marker)], timeout=UPDATE_TIMEOUT)
        except SCHEDULE_ERRORS as e:
            print_warning(f"Plugin update failed: {e}")
            return False
        if not result.success:
            print_warning(f"Plugin update failed: {result.stderr.strip() or result.returncode}")
            return False

        print_success("Plugins updated")
        try:
            mark_updated(marker, now)
        except SCHEDULE_ERRORS as e:
            print_warning(f"Could not record plugin update time in {marker}: {e}")
        return True
