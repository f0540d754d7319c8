"""Probes and host inspection."""

from .host import inspect_host
from .macos import MacProbe
from .probe import Probe
from .static import StaticProbe

__all__ = ["inspect_host", "MacProbe", "Probe", "StaticProbe"]
