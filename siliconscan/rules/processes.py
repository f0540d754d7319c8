"""Stage 4: processes running under Rosetta 2 emulation."""

import logging
import posixpath

from ..classifier import arch_from_name
from ..models import Architecture, ProcessEntry
from .base import StageContext

logger = logging.getLogger("siliconscan.rules.processes")

STAGE_ID = "processes"
TITLE = "Processes Running Under Rosetta 2"


def is_dev_tool(name: str, names: frozenset[str], prefixes: tuple[str, ...]) -> bool:
    """Recognized development tool: exact name, or a name prefix such as "python" for python3.11."""
    return name in names or any(name.startswith(p) for p in prefixes)


def native_alternative(ctx: StageContext, command: str) -> str | None:
    """Swap the Intel prefix for the Apple Silicon one and return the path if it exists."""
    foreign = ctx.tables.foreign_prefix.rstrip("/") + "/"
    if not command.startswith(foreign):
        return None
    candidate = ctx.tables.native_prefix.rstrip("/") + "/" + command[len(foreign):]
    return candidate if ctx.probe.is_file(candidate) else None


def check(ctx: StageContext) -> None:
    """Count every emulated process; itemize the development tools among them."""
    s, tables = ctx.section, ctx.tables
    if not ctx.native_host:
        s.text("Skipping Rosetta process check on Intel Mac.")
        return
    if ctx.config.test_mode:
        ctx.placeholder("check for Rosetta processes")
        return

    emulated: list[ProcessEntry] = []
    s.heading("Active Processes Under Rosetta")
    for proc in ctx.probe.list_processes():
        if arch_from_name(proc.arch, tables) is not Architecture.FOREIGN:
            continue
        emulated.append(proc)
        name = posixpath.basename(proc.command) or proc.command
        alternative = native_alternative(ctx, proc.command)
        if is_dev_tool(name, tables.dev_process_names, tables.dev_process_prefixes):
            s.bullet(f"{name} (PID: {proc.pid})")
            if alternative:
                s.bullet(f"Native alternative: {alternative}", indent=1)
            ctx.warning(
                f"Development tool '{name}' (PID: {proc.pid}) is running under Rosetta 2",
                "Consider using the ARM64 native version if available",
            )
        logger.debug("Process %s (PID: %d) is running under Rosetta 2", name, proc.pid)

    if not emulated:
        s.text("No processes detected running under Rosetta 2.")
    else:
        s.fact("Processes under Rosetta 2", len(emulated))
