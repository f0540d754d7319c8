"""Build the HostProfile once at scan start."""

import logging

from ..models import HostProfile
from .probe import Probe

logger = logging.getLogger("siliconscan.host")


def inspect_host(probe: Probe) -> HostProfile:
    """Query the probe for host facts. A failing probe yields a non-native, unknown profile."""
    try:
        return HostProfile(
            is_native_arch_host=bool(probe.host_arch_flag()),
            current_arch=probe.current_runtime_arch() or "unknown",
            chip_model=probe.chip_model() or "",
            os_version=probe.os_version() or "",
            emulation_layer_installed=bool(probe.emulation_layer_installed()),
        )
    except Exception as e:
        logger.warning("Host inspection failed: %s", e)
        return HostProfile(is_native_arch_host=False, current_arch="unknown")
