"""CLI package for shellsetup.

This package contains the Typer application.
"""

from shellsetup.cli.main import app

__all__ = ["app"]
