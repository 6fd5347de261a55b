"""Data models for shellsetup.

This module exports the core data structures used throughout the application.
"""

from shellsetup.models.component import ComponentSpec, InstallOutcome, InstallResult
from shellsetup.models.platform import Arch, OsFamily, PackageManagerKind, PlatformInfo
from shellsetup.models.report import VerificationItem, VerificationReport

__all__ = [
    "Arch",
    "ComponentSpec",
    "InstallOutcome",
    "InstallResult",
    "OsFamily",
    "PackageManagerKind",
    "PlatformInfo",
    "VerificationItem",
    "VerificationReport",
]
