"""Configuration file rendering and deployment.

This module provides the typed templates for every deployed file, the
backup-first deployer and the ``~/.env`` loader.
"""

from shellsetup.configs.deployer import ConfigDeployer, DeployResult, render
from shellsetup.configs.envfile import load_env_file, parse_env_file
from shellsetup.configs.templates import (
    ConfigFile,
    GhosttyConfig,
    StarshipConfig,
    build_config_files,
)

__all__ = [
    "ConfigDeployer",
    "ConfigFile",
    "DeployResult",
    "GhosttyConfig",
    "StarshipConfig",
    "build_config_files",
    "load_env_file",
    "parse_env_file",
    "render",
]
