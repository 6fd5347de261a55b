"""Configuration file deployment.

Every deploy backs up the existing file, resolves ``@@NAME@@``
placeholders and writes the result atomically. Placeholders use a token
shape that cannot occur in zsh, tmux or TOML syntax, and any token left
unresolved is an error, raised before the target is touched.
"""

import logging
import os
import re
import stat
from dataclasses import dataclass
from pathlib import Path
from tempfile import NamedTemporaryFile

from shellsetup.core.backup import BackupRecord, BackupStore
from shellsetup.core.errors import ConfigWriteError, TemplateError
from shellsetup.utils.formatting import print_success

logger = logging.getLogger(__name__)

PLACEHOLDER = re.compile(r"@@([A-Z][A-Z0-9_]*)@@")

# For files that load environment content
PRIVATE_MODE = 0o600


@dataclass(frozen=True, slots=True)
class DeployResult:
    """Result of deploying one configuration file.

    Attributes:
        path: Target file.
        backup: Backup made before overwriting, None if the file was new.
    """

    path: Path
    backup: BackupRecord | None = None


def render(body: str, substitutions: dict[str, str] | None = None) -> str:
    """Replace ``@@NAME@@`` tokens with their values.

    Args:
        body: Template text.
        substitutions: Mapping of placeholder name (without @@) to value.

    Returns:
        Rendered text.

    Raises:
        TemplateError: If a token has no value or a value is never used.
    """
    values = substitutions or {}
    missing = sorted({name for name in PLACEHOLDER.findall(body) if name not in values})
    if missing:
        msg = f"Unresolved placeholder(s): {', '.join(missing)}"
        raise TemplateError(msg)

    unused = sorted(name for name in values if f"@@{name}@@" not in body)
    if unused:
        msg = f"Substitution(s) not used by template: {', '.join(unused)}"
        raise TemplateError(msg)

    return PLACEHOLDER.sub(lambda m: values[m.group(1)], body)


def _default_mode(target: Path) -> int:
    """Mode of the file being replaced, else the umask default for new files."""
    if target.is_file():
        return stat.S_IMODE(target.stat().st_mode)
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


class ConfigDeployer:
    """Writes configuration files, backing up what they replace."""

    def __init__(self, backups: BackupStore) -> None:
        self.backups = backups
        self.deployed: list[DeployResult] = []

    def deploy(
        self,
        target: Path,
        body: str,
        substitutions: dict[str, str] | None = None,
        mode: int | None = None,
    ) -> DeployResult:
        """Deploy ``body`` to ``target``.

        Args:
            target: Destination file.
            body: File content, possibly with placeholders.
            substitutions: Placeholder values.
            mode: File permissions to apply (e.g. PRIVATE_MODE). None keeps the
                mode of the replaced file, or the umask default for a new one.

        Returns:
            DeployResult with the backup made, if any.

        Raises:
            TemplateError: If placeholders do not match substitutions.
            BackupError: If the existing file could not be backed up.
            ConfigWriteError: If the file could not be written.
        """
        content = render(body, substitutions)
        backup = self.backups.backup(target)

        tmp_path: Path | None = None
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                dir=target.parent,
                prefix=f".{target.name}.",
                suffix=".tmp",
                delete=False,
            ) as f:
                tmp_path = Path(f.name)
                f.write(content)
            os.chmod(tmp_path, mode if mode is not None else _default_mode(target))
            os.replace(tmp_path, target)
        except OSError as e:
            if tmp_path is not None and tmp_path.exists():
                tmp_path.unlink()
            msg = f"Could not write {target}: {e}"
            raise ConfigWriteError(msg) from e

        result = DeployResult(path=target, backup=backup)
        self.deployed.append(result)
        print_success(f"{target.name} deployed")
        return result
