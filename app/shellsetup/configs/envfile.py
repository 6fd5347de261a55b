"""Safe loading of ``~/.env`` style files.

Only ``NAME=value`` lines are honoured. Anything else (comments, blank
lines, lines without ``=``, names that are not valid identifiers) is
skipped, never exported verbatim.
"""

import logging
import re
from pathlib import Path

logger = logging.getLogger(__name__)

ENV_LINE = re.compile(r"^(?:export\s+)?([A-Za-z_][A-Za-z0-9_]*)=(.*)$")


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return value


def parse_env_lines(lines: list[str]) -> dict[str, str]:
    """Parse env-file lines into a mapping.

    Args:
        lines: Raw lines (with or without trailing newlines).

    Returns:
        Mapping of variable name to value, later lines winning.
    """
    parsed: dict[str, str] = {}
    for line_num, raw in enumerate(lines, start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        match = ENV_LINE.match(line)
        if match is None:
            logger.debug("Skipping malformed env line %d", line_num)
            continue
        name, value = match.groups()
        parsed[name] = _unquote(value.strip())
    return parsed


def parse_env_file(path: Path) -> dict[str, str]:
    """Parse an env file. A missing file yields an empty mapping.

    Args:
        path: File to read.

    Returns:
        Mapping of variable name to value.
    """
    if not path.is_file():
        return {}
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Could not read %s: %s", path, e)
        return {}
    return parse_env_lines(text.splitlines())


def load_env_file(path: Path) -> dict[str, str]:
    """Read the variables nested shells should see from ``path``.

    The values are never applied to the installer's own environment; callers
    pass them to child commands through ``env=``.

    Args:
        path: Env file to read.

    Returns:
        Mapping of variable name to value.
    """
    values = parse_env_file(path)
    if values:
        logger.info("Loaded %s from %s", ", ".join(sorted(values)), path)
    return values
