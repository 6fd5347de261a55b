"""Backups of user files before they are overwritten.

Each run fixes one timestamp; every existing file that is about to be
replaced is copied to ``<backup_dir>/<basename>.backup.<timestamp>``.
Backups are never pruned.
"""

import logging
import shutil
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from shellsetup.core.errors import BackupError
from shellsetup.utils.formatting import print_success

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"


def make_timestamp(now: datetime | None = None) -> str:
    """Format a backup timestamp (YYYYMMDD_HHMMSS, local time)."""
    return (now or datetime.now()).strftime(TIMESTAMP_FORMAT)


@dataclass(frozen=True, slots=True)
class BackupRecord:
    """A single backup copy made during a run.

    Attributes:
        original_path: The file that was backed up.
        backup_path: Where the copy was written.
        timestamp: Run timestamp embedded in the backup name.
    """

    original_path: Path
    backup_path: Path
    timestamp: str


class BackupStore:
    """Copies files into a timestamped backup directory.

    Attributes:
        backup_dir: Directory receiving backup copies.
        timestamp: Timestamp shared by every backup of this run.
        records: Backups made so far, in order.
    """

    def __init__(self, backup_dir: Path, timestamp: str | None = None) -> None:
        self.backup_dir = backup_dir
        self.timestamp = timestamp or make_timestamp()
        self.records: list[BackupRecord] = []

    def _destination(self, path: Path) -> Path:
        dest = self.backup_dir / f"{path.name}.backup.{self.timestamp}"
        counter = 1
        # Same basename twice within one second: never overwrite a backup
        while dest.exists():
            dest = self.backup_dir / f"{path.name}.backup.{self.timestamp}.{counter}"
            counter += 1
        return dest

    def backup(self, path: Path) -> BackupRecord | None:
        """Back up ``path`` if it exists.

        The original file is left untouched.

        Args:
            path: File about to be overwritten.

        Returns:
            The BackupRecord, or None if there was nothing to back up.

        Raises:
            BackupError: If the backup directory or copy cannot be created.
        """
        if not path.is_file():
            logger.debug("Nothing to back up at %s", path)
            return None

        try:
            self.backup_dir.mkdir(parents=True, exist_ok=True)
            dest = self._destination(path)
            shutil.copy2(path, dest)
        except OSError as e:
            msg = f"Could not back up {path}: {e}"
            raise BackupError(msg) from e

        record = BackupRecord(original_path=path, backup_path=dest, timestamp=self.timestamp)
        self.records.append(record)
        print_success(f"Backed up {path} to {dest}")
        return record
