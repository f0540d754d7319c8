"""Stage 1: system architecture, OS version, emulation layer."""

import logging

from ..classifier import arch_from_name, parse_major
from ..models import Architecture
from .base import StageContext

logger = logging.getLogger("siliconscan.rules.architecture")

STAGE_ID = "architecture"
TITLE = "System Information"


def check(ctx: StageContext) -> None:
    """Flag an unsupported OS, a missing emulation layer, or a native host running in foreign mode."""
    host, tables = ctx.host, ctx.tables

    if host.is_native_arch_host and not host.emulation_layer_installed:
        ctx.warning(
            "Rosetta 2 is not installed, which may cause issues with Intel-based applications",
            "Install Rosetta 2 by running: softwareupdate --install-rosetta",
        )

    major = parse_major(host.os_version)
    if major is None:
        logger.debug("Unparsable macOS version: %r", host.os_version)
    elif major < tables.min_os_major:
        ctx.critical(
            f"macOS version {host.os_version} is not compatible with Apple Silicon",
            f"Upgrade to macOS {tables.min_os_major} or newer",
        )

    if not host.current_arch or host.current_arch == "unknown":
        logger.debug("Current runtime architecture unavailable")
    elif host.is_native_arch_host and arch_from_name(host.current_arch, tables) is not Architecture.NATIVE:
        ctx.critical(
            f"System is Apple Silicon but running in {host.current_arch} mode",
            f"Restart Terminal in native {tables.native_arch.upper()} mode",
        )

    s = ctx.section
    s.fact("Processor Type", host.chip_model or "unknown")
    s.fact("Architecture", host.current_arch)
    s.fact("macOS Version", host.os_version or "unknown")
    s.fact("Apple Silicon", "Yes" if host.is_native_arch_host else "No")
    s.fact("Rosetta 2", "Installed" if host.emulation_layer_installed else "Not installed")
