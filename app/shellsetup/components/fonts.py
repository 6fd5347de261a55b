"""JetBrains Mono font installation from the upstream release archive.

Fonts are not packaged consistently across platforms, so the pinned
release zip is downloaded, validated and unpacked into the user font
directory. The scratch directory is removed on every path.
"""

import logging
import shutil
import tempfile
import zipfile
from pathlib import Path

from shellsetup.core.errors import DownloadError
from shellsetup.utils.download import download_file
from shellsetup.utils.formatting import print_info, print_success
from shellsetup.utils.shell import RetryPolicy, command_exists, run_command

logger = logging.getLogger(__name__)

FONT_NAME = "JetBrains Mono"
FONT_FILE_PREFIX = "JetBrainsMono"
RELEASE_URL = (
    "https://github.com/JetBrains/JetBrainsMono/releases/download/"
    "v{version}/JetBrainsMono-{version}.zip"
)


class FontInstaller:
    """Installs JetBrains Mono into a user font directory.

    Attributes:
        font_dir: Destination directory (~/Library/Fonts or ~/.local/share/fonts).
        version: Release version to download.
        refresh_cache: Run ``fc-cache`` after installing (Linux).
    """

    def __init__(
        self,
        font_dir: Path,
        version: str,
        *,
        refresh_cache: bool = False,
        policy: RetryPolicy | None = None,
    ) -> None:
        self.font_dir = font_dir
        self.version = version
        self.refresh_cache = refresh_cache
        self.policy = policy or RetryPolicy()

    @property
    def url(self) -> str:
        return RELEASE_URL.format(version=self.version)

    def installed_files(self) -> list[Path]:
        """Return installed JetBrains Mono font files."""
        if not self.font_dir.is_dir():
            return []
        return sorted(
            path
            for pattern in (f"{FONT_FILE_PREFIX}*.ttf", f"{FONT_FILE_PREFIX}*.otf")
            for path in self.font_dir.glob(pattern)
        )

    def is_installed(self) -> bool:
        return bool(self.installed_files())

    def install(self) -> list[Path]:
        """Download, extract and install the font files.

        Returns:
            Paths of the installed font files.

        Raises:
            PrerequisiteError: If no downloader is available.
            RetryExhaustedError: If the download kept failing.
            DownloadError: If the archive is empty, corrupt or has no fonts.
            OSError: If the font directory cannot be written.
        """
        self.font_dir.mkdir(parents=True, exist_ok=True)

        with tempfile.TemporaryDirectory(prefix="shellsetup-fonts-") as scratch:
            scratch_dir = Path(scratch)
            archive = scratch_dir / "jetbrains-mono.zip"

            print_info(f"Downloading {FONT_NAME} {self.version}...")
            download_file(self.url, archive, self.policy)

            if not zipfile.is_zipfile(archive):
                msg = f"Downloaded file from {self.url} is not a zip archive"
                raise DownloadError(msg)

            print_info("Extracting fonts...")
            extract_dir = scratch_dir / "extracted"
            try:
                with zipfile.ZipFile(archive) as zf:
                    zf.extractall(extract_dir)
            except zipfile.BadZipFile as e:
                msg = f"Corrupt font archive: {e}"
                raise DownloadError(msg) from e

            installed: list[Path] = []
            for font in sorted(extract_dir.rglob(f"{FONT_FILE_PREFIX}-*.ttf")):
                dest = self.font_dir / font.name
                shutil.copy2(font, dest)
                installed.append(dest)

        if not installed:
            msg = f"No {FONT_NAME} .ttf files found in the release archive"
            raise DownloadError(msg)

        print_success(f"{FONT_NAME} installed to {self.font_dir}")

        if self.refresh_cache and command_exists("fc-cache"):
            print_info("Refreshing font cache...")
            result = run_command(["fc-cache", "-f", str(self.font_dir)], timeout=120.0)
            if result.success:
                print_success("Font cache refreshed")
            else:
                logger.warning("fc-cache failed: %s", result.stderr.strip())

        return installed
