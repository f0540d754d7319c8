"""Structured profiles for the host and the items the rules inspect."""

from dataclasses import dataclass
from enum import Enum


class Architecture(str, Enum):
    """Compatibility verdict for a binary, process or container."""

    NATIVE = "native"
    FOREIGN = "foreign"
    UNIVERSAL_NATIVE = "universal_native"
    UNIVERSAL_FOREIGN_ONLY = "universal_foreign_only"
    UNKNOWN = "unknown"

    @property
    def runs_emulated(self) -> bool:
        """True when no native slice exists, so the binary needs the emulation layer."""
        return self in (Architecture.FOREIGN, Architecture.UNIVERSAL_FOREIGN_ONLY)

    def label(self, native: str = "arm64", foreign: str = "x86_64") -> str:
        """Human label, e.g. "universal (includes arm64)"."""
        if self is Architecture.NATIVE:
            return native
        if self is Architecture.FOREIGN:
            return foreign
        if self is Architecture.UNIVERSAL_NATIVE:
            return f"universal (includes {native})"
        if self is Architecture.UNIVERSAL_FOREIGN_ONLY:
            return f"universal ({foreign} only)"
        return "unknown"


@dataclass(frozen=True)
class HostProfile:
    """Structured output from host inspection. Read-only for the rest of a scan."""

    is_native_arch_host: bool
    current_arch: str  # "arm64", "x86_64"
    chip_model: str = ""
    os_version: str = ""
    emulation_layer_installed: bool = False


@dataclass
class InspectedItem:
    """A package, tool, runtime or container under evaluation by one stage."""

    name: str
    path: str = ""
    architecture: Architecture = Architecture.UNKNOWN
    version: str = ""
    unrecognized: bool = False  # binary exists but its format was not understood


@dataclass(frozen=True)
class ProcessEntry:
    pid: int
    command: str  # executable path as reported by ps
    arch: str  # runtime arch as reported by ps, e.g. "x86_64"


@dataclass(frozen=True)
class ContainerEntry:
    image: str
    id: str

    def __str__(self) -> str:
        return f"{self.image} ({self.id})"
