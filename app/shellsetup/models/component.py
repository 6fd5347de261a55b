"""Component models for installation.

A ComponentSpec couples a presence probe with an install action. The
installer treats both as opaque capabilities, so package-manager installs,
archive downloads and installer scripts share one code path.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum


class InstallOutcome(Enum):
    """Outcome of ensuring one component.

    Attributes:
        ALREADY_PRESENT: The probe succeeded before any install was attempted.
        INSTALLED: The install action ran and the probe now succeeds.
        FAILED: The install action failed or the probe still fails.
        SKIPPED: The component was not attempted on this run.
    """

    ALREADY_PRESENT = "already_present"
    INSTALLED = "installed"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass(frozen=True, slots=True)
class ComponentSpec:
    """Static description of an installable component.

    Attributes:
        name: Display name (e.g. "zsh", "JetBrains Mono").
        probe: Returns True when the component is present.
        install: Installs the component; raises on failure.
        required: If True, a failure aborts the run.
        command: Executable the component provides, if any.
        min_version: Minimum acceptable version, checked during verification.
        version_args: Arguments printing the version (e.g. ["tmux", "-V"]).
    """

    name: str
    probe: Callable[[], bool]
    install: Callable[[], object]
    required: bool = True
    command: str | None = None
    min_version: str | None = None
    version_args: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate component data after initialization."""
        if not self.name:
            msg = "Component name cannot be empty"
            raise ValueError(msg)
        if self.min_version and not self.version_args:
            msg = f"{self.name}: min_version requires version_args"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class InstallResult:
    """Result of ensuring one component.

    Attributes:
        component: Component name.
        outcome: What happened.
        detail: Human-readable detail (error text, version, reason).
    """

    component: str
    outcome: InstallOutcome
    detail: str = ""

    @property
    def ok(self) -> bool:
        """Check if the component is present after this step."""
        return self.outcome in (InstallOutcome.ALREADY_PRESENT, InstallOutcome.INSTALLED)
