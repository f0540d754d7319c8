"""Terminal output formatting — colors, wrapping, scan summary."""

import shutil
import textwrap
from pathlib import Path
from typing import List

import click

from . import __version__
from .findings import Finding, Severity
from .report import Report

SEVERITY_COLORS = {
    Severity.CRITICAL: "red",
    Severity.WARNING: "yellow",
    Severity.INFO: "green",
}


MAX_WIDTH = 88


def _terminal_width() -> int:
    return min(MAX_WIDTH, shutil.get_terminal_size((MAX_WIDTH, 24)).columns)


def _wrap(text: str, width: int) -> List[str]:
    """Wrap a finding line; continuation lines hang under the tag."""
    return textwrap.wrap(text, width=width, subsequent_indent="  ", break_on_hyphens=False) or [text]


def format_welcome(test_mode: bool = False) -> str:
    lines = [
        click.style(f"Silicon Compatibility Scanner v{__version__}", bold=True),
        "This tool scans your system for Apple Silicon compatibility issues",
        "and provides actionable recommendations.",
    ]
    if test_mode:
        lines.append("")
        lines.append(click.style("Running in TEST MODE - no package, process or Docker enumeration", fg="yellow"))
    return "\n".join(lines)


def _finding_lines(f: Finding, width: int) -> List[str]:
    tag = f"[{f.severity.value}]"
    wrapped = _wrap(f"{tag} {f.message}", width=width)
    lines = [click.style(tag, fg=SEVERITY_COLORS[f.severity], bold=True) + wrapped[0][len(tag):]]
    lines.extend(wrapped[1:])
    if f.remedy:
        lines.append("   " + click.style("Solution:", bold=True) + " " + f.remedy)
    return lines


def format_human(report: Report, report_path: Path | None = None) -> str:
    """Build the end-of-scan terminal output as a single string."""
    width = _terminal_width()
    lines: List[str] = []

    for section, findings in report.findings:
        if not findings:
            continue
        lines.append("")
        lines.append(click.style(f"=== {section.title} ===", fg="blue", bold=True))
        for f in findings:
            lines.extend(_finding_lines(f, width))

    critical, warning, info = report.summary
    lines.append("")
    lines.append(click.style("=== Scan Complete ===", fg="blue", bold=True))
    lines.append(
        "Found "
        + click.style(f"{critical} critical issues", fg="red")
        + ", "
        + click.style(f"{warning} warnings", fg="yellow")
        + ", and "
        + click.style(f"{info} informational items", fg="green")
    )
    if report_path is not None:
        lines.append(f"See the full report at: {report_path}")

    lines.append("")
    lines.append(click.style("Next Steps:", bold=True))
    lines.append("1. Review the detailed report")
    lines.append("2. Address critical issues first")
    lines.append("3. Follow the specific solution recommendations for each issue")

    if critical == 0 and warning == 0:
        lines.append("")
        lines.append(click.style(
            "Congratulations! Your system appears to be well-configured for Apple Silicon.", fg="green"
        ))
    return "\n".join(lines)
