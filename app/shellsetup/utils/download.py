"""File downloads through curl or wget.

Downloads are network-bound, so they always go through a RetryPolicy.
"""

import logging
from pathlib import Path

from shellsetup.core.errors import DownloadError, PrerequisiteError
from shellsetup.utils.shell import RetryPolicy, command_exists

logger = logging.getLogger(__name__)


def downloader_available() -> bool:
    """Check if curl or wget is on PATH."""
    return command_exists("curl") or command_exists("wget")


def _download_args(url: str, dest: Path) -> list[str]:
    if command_exists("curl"):
        return ["curl", "-fsSL", "-o", str(dest), url]
    if command_exists("wget"):
        return ["wget", "-q", "-O", str(dest), url]
    msg = "Neither curl nor wget found. Please install one of them."
    raise PrerequisiteError(msg)


def download_file(url: str, dest: Path, policy: RetryPolicy | None = None) -> Path:
    """Download ``url`` to ``dest``.

    Args:
        url: Source URL.
        dest: Destination file. Parent directories are created.
        policy: Retry policy. Defaults to RetryPolicy().

    Returns:
        The destination path.

    Raises:
        PrerequisiteError: If no downloader is available.
        RetryExhaustedError: If every attempt failed.
        DownloadError: If the download succeeded but left an empty file.
    """
    dest.parent.mkdir(parents=True, exist_ok=True)
    args = _download_args(url, dest)

    logger.debug("Downloading %s to %s", url, dest)
    (policy or RetryPolicy()).run(args)

    if not dest.is_file() or dest.stat().st_size == 0:
        msg = f"Download of {url} produced an empty file"
        raise DownloadError(msg)
    return dest
