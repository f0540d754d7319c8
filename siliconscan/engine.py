"""Orchestrator — runs the six stages in fixed order, then renders the report once."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from .config import ScanConfig
from .facts import Section
from .findings import FindingLog, Severity
from .report import Report, render
from .rules import architecture, containers, package_managers, path_order, processes, toolchains
from .rules.base import StageContext
from .scanner.host import inspect_host
from .scanner.probe import Probe

logger = logging.getLogger("siliconscan.engine")

# Pipeline order is report order
STAGES = (
    architecture,
    package_managers,
    path_order,
    processes,
    containers,
    toolchains,
)


@dataclass
class ScanResult:
    report: Report
    exit_severity: Severity | None
    log: FindingLog

    @property
    def exit_code(self) -> int:
        """Non-zero iff a CRITICAL finding exists."""
        return 1 if self.exit_severity is Severity.CRITICAL else 0


def run_scan(config: ScanConfig | None = None, probe: Probe | None = None) -> ScanResult:
    """Run every stage unconditionally; a failing stage keeps what it wrote so far and the scan goes on."""
    config = config or ScanConfig()
    if probe is None:
        from .scanner.macos import MacProbe
        probe = MacProbe(config.tables)

    started = datetime.now()
    log = FindingLog()
    host = inspect_host(probe)
    sections: list[Section] = []

    for stage in STAGES:
        section = Section(stage=stage.STAGE_ID, title=stage.TITLE)
        sections.append(section)
        ctx = StageContext(
            stage=stage.STAGE_ID,
            host=host,
            probe=probe,
            log=log,
            section=section,
            config=config,
        )
        logger.debug("Running stage %s", stage.STAGE_ID)
        try:
            stage.check(ctx)
        except Exception as e:
            logger.warning("Stage %s failed: %s", stage.STAGE_ID, e, exc_info=config.verbose)

    try:
        system = probe.system_description()
    except Exception as e:
        logger.debug("System description unavailable: %s", e)
        system = ""

    report = render(log, sections, host, generated_at=started, system=system)
    return ScanResult(report=report, exit_severity=log.highest_severity(), log=log)
