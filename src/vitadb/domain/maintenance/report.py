"""Pass reports produced by the integrity maintenance engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


class PassStatus(StrEnum):
    PASS = "pass"
    FAIL = "fail"
    ERROR = "error"
    CANCELLED = "cancelled"


@dataclass(slots=True)
class PassReport:
    """What one pass found and, for repairing passes, what it fixed."""

    name: str
    status: PassStatus = PassStatus.PASS
    repaired_count: int = 0
    repaired_entries: list[str] = field(default_factory=list[str])
    unresolved_entries: list[str] = field(default_factory=list[str])
    error: str | None = None

    def repaired(self, entry: str) -> None:
        self.status = PassStatus.FAIL
        self.repaired_count += 1
        self.repaired_entries.append(entry)

    def unresolved(self, entries: list[str]) -> None:
        if entries:
            self.status = PassStatus.FAIL
        self.unresolved_entries.extend(entries)

    def found_violations(self) -> None:
        self.status = PassStatus.FAIL

    def cancel(self) -> None:
        self.status = PassStatus.CANCELLED
