"""Severity-tagged findings and the per-scan log that counts them."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Severity(str, Enum):
    CRITICAL = "CRITICAL"
    WARNING = "WARNING"
    INFO = "INFO"


SEVERITY_ORDER = {Severity.CRITICAL: 0, Severity.WARNING: 1, Severity.INFO: 2}


@dataclass(frozen=True)
class Finding:
    """Output of a single rule observation."""

    severity: Severity
    message: str
    remedy: str = ""
    stage: str = ""  # pipeline stage id, e.g. "path"


class FindingLog:
    """Ordered findings plus the three running totals, kept in lockstep.

    One log per scan. Insertion order is report order.
    """

    def __init__(self) -> None:
        self._findings: list[Finding] = []
        self._counts = {Severity.CRITICAL: 0, Severity.WARNING: 0, Severity.INFO: 0}

    def record(self, severity: Severity, message: str, remedy: str = "", stage: str = "") -> Finding:
        severity = Severity(severity)
        finding = Finding(severity=severity, message=message, remedy=remedy or "", stage=stage)
        self._findings.append(finding)
        self._counts[severity] += 1
        return finding

    @property
    def critical_count(self) -> int:
        return self._counts[Severity.CRITICAL]

    @property
    def warning_count(self) -> int:
        return self._counts[Severity.WARNING]

    @property
    def info_count(self) -> int:
        return self._counts[Severity.INFO]

    def summary(self) -> tuple[int, int, int]:
        """(critical, warning, info)."""
        return self.critical_count, self.warning_count, self.info_count

    @property
    def findings(self) -> tuple[Finding, ...]:
        return tuple(self._findings)

    def by_stage(self, stage: str) -> list[Finding]:
        return [f for f in self._findings if f.stage == stage]

    def highest_severity(self) -> Severity | None:
        present = [s for s, n in self._counts.items() if n]
        if not present:
            return None
        return min(present, key=lambda s: SEVERITY_ORDER[s])

    def __len__(self) -> int:
        return len(self._findings)

    def __iter__(self):
        return iter(tuple(self._findings))
