"""Verification report models."""

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class VerificationItem:
    """One verification check.

    Attributes:
        name: What was checked (component name or path).
        passed: Whether the check passed.
        detail: Version string, path, or failure reason.
    """

    name: str
    passed: bool
    detail: str = ""


@dataclass(slots=True)
class VerificationReport:
    """Tally of verification checks, informational only.

    Attributes:
        items: Checks in the order they were made.
    """

    items: list[VerificationItem] = field(default_factory=list)

    def add(self, name: str, passed: bool, detail: str = "") -> None:
        """Record a check."""
        self.items.append(VerificationItem(name=name, passed=passed, detail=detail))

    @property
    def checks_total(self) -> int:
        return len(self.items)

    @property
    def checks_passed(self) -> int:
        return sum(1 for item in self.items if item.passed)

    @property
    def all_passed(self) -> bool:
        return self.checks_passed == self.checks_total

    @property
    def failed(self) -> list[VerificationItem]:
        return [item for item in self.items if not item.passed]
