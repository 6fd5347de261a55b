"""Installable components and the installer that ensures them.

This module exports the component table and the idempotent installer.
"""

from shellsetup.components.catalog import ComponentCatalog, ensure_fd_shim
from shellsetup.components.fonts import FontInstaller
from shellsetup.components.installer import ComponentInstaller

__all__ = ["ComponentCatalog", "ComponentInstaller", "FontInstaller", "ensure_fd_shim"]
