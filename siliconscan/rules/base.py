"""Base types for rules."""

from __future__ import annotations

from dataclasses import dataclass

from ..classifier import BinaryLookup, Classification, classify_path
from ..config import RuleTables, ScanConfig
from ..facts import Section
from ..findings import Finding, FindingLog, Severity
from ..models import Architecture, HostProfile, InspectedItem
from ..scanner.probe import Probe

__all__ = ["StageContext", "Severity", "TEST_MODE_PREFIX"]

TEST_MODE_PREFIX = "[TEST MODE]"


@dataclass
class StageContext:
    """Everything one stage reads and writes."""

    stage: str
    host: HostProfile
    probe: Probe
    log: FindingLog
    section: Section
    config: ScanConfig

    @property
    def tables(self) -> RuleTables:
        return self.config.tables

    @property
    def native_host(self) -> bool:
        return self.host.is_native_arch_host

    def critical(self, message: str, remedy: str = "") -> Finding:
        return self.log.record(Severity.CRITICAL, message, remedy, stage=self.stage)

    def warning(self, message: str, remedy: str = "") -> Finding:
        return self.log.record(Severity.WARNING, message, remedy, stage=self.stage)

    def info(self, message: str, remedy: str = "") -> Finding:
        return self.log.record(Severity.INFO, message, remedy, stage=self.stage)

    def placeholder(self, what: str) -> None:
        """Test mode: record that an intrusive enumeration was skipped."""
        self.section.text(f"{TEST_MODE_PREFIX} Would {what}")

    def classify(self, path: str | None) -> Classification:
        return classify_path(self.probe, path, self.tables)

    def label(self, arch: Architecture) -> str:
        return arch.label(self.tables.native_arch, self.tables.foreign_arch)

    def inspect_tool(self, name: str) -> InspectedItem | None:
        """Resolve, classify and version an executable; None when not installed."""
        path = self.probe.resolve_executable_path(name)
        if not path:
            return None
        result = self.classify(path)
        return InspectedItem(
            name=name,
            path=path,
            architecture=result.architecture,
            version=self.probe.tool_version(name) or "",
            unrecognized=result.lookup is BinaryLookup.UNRECOGNIZED,
        )

    def foreign_on_native(self, item: InspectedItem) -> bool:
        """Host-gated check: a foreign-only (not universal) binary on a native host."""
        return self.native_host and item.architecture is Architecture.FOREIGN
