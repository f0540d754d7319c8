"""Report assembler — final FindingLog + stage facts -> one Markdown document."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from .facts import Entry, Section
from .findings import Finding, FindingLog
from .models import HostProfile

REPORT_TITLE = "Silicon Compatibility Scanner Report"
REPORT_PREFIX = "silicon_compatibility_report_"

HIGH_PRIORITY = "Address all critical issues listed above to ensure compatibility with Apple Silicon."

GENERAL_RECOMMENDATIONS = (
    "**Favor native ARM64 applications** over Rosetta 2 emulation when possible",
    "**Use universal binaries** when available for maximum compatibility",
    "**Check Docker images** for multi-architecture support (arm64/amd64)",
    "**Update development tools** to their latest versions for better Apple Silicon support",
    "**Configure PATH environment** to prioritize Apple Silicon paths on M-series Macs",
)

RESOURCES = (
    ("Apple Silicon Guide for Developers", "https://developer.apple.com/documentation/apple-silicon"),
    ("Homebrew on Apple Silicon", "https://docs.brew.sh/Installation#macos-requirements"),
    ("Docker Desktop for Apple Silicon", "https://docs.docker.com/desktop/mac/apple-silicon/"),
    (
        "Rosetta 2 Translation Environment",
        "https://developer.apple.com/documentation/apple-silicon/about-the-rosetta-translation-environment",
    ),
)


@dataclass
class Recommendations:
    high_priority: str | None
    general: tuple[str, ...] = GENERAL_RECOMMENDATIONS


@dataclass
class Report:
    """Everything the rendered document contains. Built once, after the last stage."""

    title: str
    generated_at: datetime
    system: str
    host: HostProfile
    sections: list[Section]
    findings: list[tuple[Section, list[Finding]]]
    summary: tuple[int, int, int]
    recommendations: Recommendations
    resources: tuple[tuple[str, str], ...] = field(default=RESOURCES)

    @property
    def critical_count(self) -> int:
        return self.summary[0]


def render(
    log: FindingLog,
    sections: list[Section],
    host: HostProfile,
    *,
    generated_at: datetime | None = None,
    system: str = "",
) -> Report:
    """Assemble the report. Deterministic for identical inputs apart from generated_at."""
    summary = log.summary()
    grouped = [(section, log.by_stage(section.stage)) for section in sections]
    return Report(
        title=REPORT_TITLE,
        generated_at=generated_at or datetime.now(),
        system=system,
        host=host,
        sections=list(sections),
        findings=grouped,
        summary=summary,
        recommendations=Recommendations(high_priority=HIGH_PRIORITY if summary[0] > 0 else None),
    )


def _entry_lines(entry: Entry) -> list[str]:
    pad = "  " * entry.indent
    if entry.kind == "field":
        return [f"{pad}- **{entry.label}:** {entry.text}"]
    if entry.kind == "bullet":
        return [f"{pad}- {entry.text}"]
    if entry.kind == "heading":
        return ["", f"### {entry.text}"]
    if entry.kind == "code":
        return [f"```{entry.lang}", *entry.text.splitlines(), "```"]
    return [entry.text]


def _finding_lines(finding: Finding) -> list[str]:
    lines = [f"- **{finding.severity.value}:** {finding.message}"]
    if finding.remedy:
        lines.append(f"  - Solution: {finding.remedy}")
    return lines


def to_markdown(report: Report) -> str:
    lines = [f"# {report.title}", f"Generated on: {report.generated_at.strftime('%Y-%m-%d %H:%M:%S')}"]
    if report.system:
        lines.append(f"System: {report.system}")
    lines.append("")

    for section in report.sections:
        lines.append(f"## {section.title}")
        for entry in section.entries:
            lines.extend(_entry_lines(entry))
        lines.append("")

    lines.append("## Findings")
    any_findings = False
    for section, findings in report.findings:
        if not findings:
            continue
        any_findings = True
        lines.append(f"### {section.title}")
        for finding in findings:
            lines.extend(_finding_lines(finding))
        lines.append("")
    if not any_findings:
        lines.extend(["No compatibility issues found.", ""])

    critical, warning, info = report.summary
    lines.extend([
        "## Summary",
        f"- **Critical issues:** {critical}",
        f"- **Warnings:** {warning}",
        f"- **Information:** {info}",
        "",
        "## Recommendations",
    ])
    if report.recommendations.high_priority:
        lines.extend(["### High Priority", report.recommendations.high_priority])
    lines.append("### General Recommendations")
    for i, rec in enumerate(report.recommendations.general, 1):
        lines.append(f"{i}. {rec}")
    lines.append("")
    lines.append("## Additional Resources")
    for name, url in report.resources:
        lines.append(f"- [{name}]({url})")
    return "\n".join(lines) + "\n"


def to_dict(report: Report) -> dict:
    """JSON-friendly form for --json."""
    critical, warning, info = report.summary
    return {
        "title": report.title,
        "generated_at": report.generated_at.isoformat(),
        "system": report.system,
        "host": {
            "is_native_arch_host": report.host.is_native_arch_host,
            "current_arch": report.host.current_arch,
            "chip_model": report.host.chip_model,
            "os_version": report.host.os_version,
            "emulation_layer_installed": report.host.emulation_layer_installed,
        },
        "sections": [s.to_dict() for s in report.sections],
        "findings": [
            {"severity": f.severity.value, "message": f.message, "remedy": f.remedy, "stage": f.stage}
            for _section, findings in report.findings
            for f in findings
        ],
        "summary": {"critical": critical, "warning": warning, "info": info},
        "recommendations": {
            "high_priority": report.recommendations.high_priority,
            "general": list(report.recommendations.general),
        },
    }


def report_filename(generated_at: datetime) -> str:
    return f"{REPORT_PREFIX}{generated_at.strftime('%Y%m%d_%H%M%S')}.md"


def write_report(report: Report, directory: Path) -> Path:
    """Write the Markdown report; never overwrite an earlier report from the same second."""
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / report_filename(report.generated_at)
    n = 1
    while path.exists():
        path = directory / f"{path.stem.split('-')[0]}-{n}.md"
        n += 1
    path.write_text(to_markdown(report))
    return path
