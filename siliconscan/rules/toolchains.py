"""Stage 6: common development tools and the Xcode toolchain."""

from ..classifier import parse_major
from .base import StageContext

STAGE_ID = "toolchains"
TITLE = "Development Tools"


def check(ctx: StageContext) -> None:
    """Classify each installed tool; a toolchain below its minimum major is CRITICAL whatever its arch."""
    s, tables = ctx.section, ctx.tables
    for name in tables.toolchain_tools:
        tool = ctx.inspect_tool(name)
        if tool is None:
            if ctx.config.verbose:
                s.heading(name)
                s.fact("Status", "Not installed")
            continue

        s.heading(name)
        s.fact("Path", tool.path)
        arch_label = ctx.label(tool.architecture)
        if ctx.config.verbose and tool.unrecognized:
            arch_label += " (unrecognized binary format)"
        s.fact("Architecture", arch_label)
        s.fact("Version", tool.version or "Unknown version")

        if ctx.foreign_on_native(tool):
            ctx.warning(
                f"{name} is running under Rosetta 2 ({ctx.label(tool.architecture)})",
                "Consider installing the ARM64 native version if available",
            )

        minimum = tables.toolchain_minimums.get(name)
        major = parse_major(tool.version)
        if ctx.native_host and minimum is not None and major is not None and major < minimum:
            ctx.critical(
                f"{name} version {tool.version} does not fully support Apple Silicon",
                f"Update {name} to version {minimum} or newer for proper Apple Silicon support",
            )

    _check_command_line_tools(ctx)


def _check_command_line_tools(ctx: StageContext) -> None:
    s = ctx.section
    path = ctx.probe.developer_tools_path()
    s.heading("XCode Command Line Tools")
    if not path:
        s.fact("Status", "Not installed")
        ctx.warning(
            "XCode Command Line Tools not found",
            "Install XCode Command Line Tools with: xcode-select --install",
        )
        return
    s.fact("Path", path)
