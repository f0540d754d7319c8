"""Binary architecture classifier — raw descriptor text in, Architecture out."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from .config import RuleTables
from .models import Architecture

if TYPE_CHECKING:
    from .scanner.probe import Probe

logger = logging.getLogger("siliconscan.classifier")

_THIN_RE = re.compile(r"Mach-O 64-bit executable\s+(?P<arch>[A-Za-z0-9_]+)")
_UNIVERSAL_MARKER = "Mach-O universal binary"
# "[x86_64:Mach-O 64-bit executable x86_64] [arm64]"
_SLICE_RE = re.compile(r"\[(?P<arch>[A-Za-z0-9_]+)")
_MAJOR_RE = re.compile(r"(\d+)")
_WORD_RE = re.compile(r"[A-Za-z0-9_]+")

_DEFAULT_TABLES = RuleTables()


class BinaryLookup(str, Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True)
class Descriptor:
    """Parsed form of a file(1) descriptor: thin, universal, or other."""

    kind: str  # "thin" | "universal" | "other"
    arches: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Classification:
    architecture: Architecture
    lookup: BinaryLookup


def parse_descriptor(text: str | None, tables: RuleTables = _DEFAULT_TABLES) -> Descriptor:
    """Parse descriptor text once so callers never match strings."""
    if not text:
        return Descriptor("other")
    if _UNIVERSAL_MARKER in text:
        slices = tuple(m.group("arch") for m in _SLICE_RE.finditer(text))
        if not slices:
            # No bracketed slice list: take any known arch name in the text
            known = tables.native_aliases | tables.foreign_aliases
            slices = tuple(w for w in _WORD_RE.findall(text) if w.lower() in known)
        return Descriptor("universal", slices)
    m = _THIN_RE.search(text)
    if m:
        return Descriptor("thin", (m.group("arch"),))
    return Descriptor("other")


def arch_from_name(name: str | None, tables: RuleTables = _DEFAULT_TABLES) -> Architecture:
    """Map a runtime arch name (ps, docker inspect) to NATIVE / FOREIGN / UNKNOWN."""
    if not name:
        return Architecture.UNKNOWN
    n = name.strip().lower()
    # "os/arch[/variant]" platform strings, e.g. "linux/amd64/v3"
    if "/" in n:
        parts = n.split("/")
        n = parts[1] if len(parts) >= 2 else parts[0]
    if n in tables.native_aliases or n == tables.native_arch.lower():
        return Architecture.NATIVE
    if n in tables.foreign_aliases or n == tables.foreign_arch.lower():
        return Architecture.FOREIGN
    return Architecture.UNKNOWN


def classify(text: str | None, tables: RuleTables = _DEFAULT_TABLES) -> Architecture:
    """Classify a raw binary descriptor. Pure and total: unknown input is UNKNOWN."""
    desc = parse_descriptor(text, tables)
    if desc.kind == "thin":
        return arch_from_name(desc.arches[0], tables)
    if desc.kind == "universal":
        if any(arch_from_name(a, tables) is Architecture.NATIVE for a in desc.arches):
            return Architecture.UNIVERSAL_NATIVE
        return Architecture.UNIVERSAL_FOREIGN_ONLY
    return Architecture.UNKNOWN


def classify_path(probe: Probe, path: str | None, tables: RuleTables = _DEFAULT_TABLES) -> Classification:
    """Classify the executable at path, telling "not found" apart from "unrecognized"."""
    if not path or not probe.is_file(path):
        logger.debug("Binary not found: %s", path)
        return Classification(Architecture.UNKNOWN, BinaryLookup.NOT_FOUND)
    arch = classify(probe.describe_binary(path), tables)
    if arch is Architecture.UNKNOWN:
        logger.debug("Unrecognized binary format: %s", path)
        return Classification(arch, BinaryLookup.UNRECOGNIZED)
    return Classification(arch, BinaryLookup.FOUND)


def parse_major(version: str | None) -> int | None:
    """Leading major version number: "12.2.1" -> 12, "Xcode 11.7" -> 11, junk -> None."""
    if not version:
        return None
    m = _MAJOR_RE.search(version)
    return int(m.group(1)) if m else None
