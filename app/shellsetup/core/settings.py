"""User settings for shellsetup.

Settings are optional and live in ~/.config/shellsetup/settings.toml. They
tune the ambient behaviour of a run (retry policy, pinned versions, poll
timeouts); the component table itself is fixed.

Example settings.toml::

    retry_attempts = 5
    retry_delay_seconds = 10
    font_version = "2.304"
"""

import logging
import tomllib
from pathlib import Path
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from shellsetup.core.errors import SettingsError
from shellsetup.core.paths import get_settings_path

logger = logging.getLogger(__name__)


class SetupSettings(BaseModel):
    """Tunable settings for a provisioning run.

    Attributes:
        retry_attempts: Total attempts for every network-bound command.
        retry_delay_seconds: Fixed delay between attempts.
        font_version: JetBrains Mono release to download.
        nvm_version: nvm install script tag.
        plugin_poll_timeout_seconds: How long to wait for plugin managers.
        plugin_poll_interval_seconds: Poll interval while waiting.
        update_hour: Hour of day for the scheduled plugin update.
        terminal_font_size: Font size written to the Ghostty config.
    """

    model_config = ConfigDict(extra="forbid")

    retry_attempts: Annotated[int, Field(ge=1, le=10)] = 3
    retry_delay_seconds: Annotated[float, Field(ge=0, le=120)] = 5.0
    font_version: str = "2.304"
    nvm_version: str = "v0.39.0"
    plugin_poll_timeout_seconds: Annotated[float, Field(ge=0, le=600)] = 15.0
    plugin_poll_interval_seconds: Annotated[float, Field(gt=0, le=60)] = 1.0
    update_hour: Annotated[int, Field(ge=0, le=23)] = 2
    terminal_font_size: Annotated[float, Field(gt=0, le=72)] = 13.5


def load_settings(path: Path | None = None) -> SetupSettings:
    """Load settings from a TOML file.

    A missing file is not an error; defaults are returned instead.

    Args:
        path: Path to the settings file. If None, uses the default path.

    Returns:
        Validated SetupSettings.

    Raises:
        SettingsError: If the file cannot be read, parsed or validated.
    """
    settings_path = path or get_settings_path()

    if not settings_path.exists():
        logger.debug("No settings file at %s, using defaults", settings_path)
        return SetupSettings()

    try:
        with open(settings_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise SettingsError(f"Invalid TOML syntax in {settings_path}: {e}") from e
    except OSError as e:
        raise SettingsError(f"Failed to read settings {settings_path}: {e}") from e

    try:
        return SetupSettings.model_validate(data)
    except ValidationError as e:
        raise SettingsError(f"Invalid settings in {settings_path}: {e}") from e

