"""Rule tables and scan configuration."""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigError

# Development tools itemized when found running under emulation
DEV_PROCESS_NAMES = frozenset({
    "node",
    "npm",
    "java",
    "ruby",
    "perl",
    "gcc",
    "clang",
})

# Toolchains inspected by the development tools stage, in report order
TOOLCHAIN_TOOLS = (
    "git",
    "make",
    "gcc",
    "clang",
    "cmake",
    "java",
    "mvn",
    "gradle",
    "ruby",
    "perl",
    "php",
    "go",
    "rust",
    "cargo",
    "swift",
    "xcodebuild",
)

# Pip packages that ship compiled extensions
NATIVE_PACKAGES = (
    "numpy",
    "scipy",
    "pandas",
    "matplotlib",
    "tensorflow",
    "torch",
    "opencv-python",
    "pillow",
)


@dataclass(frozen=True)
class RuleTables:
    """Every constant the rules compare against. Data, not code."""

    native_arch: str = "arm64"
    foreign_arch: str = "x86_64"
    native_aliases: frozenset[str] = frozenset({"arm64", "aarch64", "arm64e"})
    foreign_aliases: frozenset[str] = frozenset({"x86_64", "amd64", "i386", "x86-64"})
    native_prefix: str = "/opt/homebrew"
    foreign_prefix: str = "/usr/local"
    min_os_major: int = 11
    emulation_layer_path: str = "/Library/Apple/usr/libexec/oah/libRosettaRuntime"
    dev_process_names: frozenset[str] = DEV_PROCESS_NAMES
    dev_process_prefixes: tuple[str, ...] = ("python",)
    toolchain_tools: tuple[str, ...] = TOOLCHAIN_TOOLS
    toolchain_minimums: dict[str, int] = field(default_factory=lambda: {"xcodebuild": 12})
    native_packages: tuple[str, ...] = NATIVE_PACKAGES
    node_project_roots: tuple[str, ...] = ("~/Documents", "~/Projects", "~/repos", "~/src")
    node_project_limit: int = 10

    def __post_init__(self) -> None:
        # PATH entries are compared without trailing slashes
        for name in ("native_prefix", "foreign_prefix"):
            object.__setattr__(self, name, getattr(self, name).rstrip("/") or "/")

    @property
    def native_bin(self) -> str:
        return f"{self.native_prefix.rstrip('/')}/bin"

    @property
    def foreign_bin(self) -> str:
        return f"{self.foreign_prefix.rstrip('/')}/bin"


@dataclass
class ScanConfig:
    """Options for one scan invocation."""

    test_mode: bool = False
    verbose: bool = False
    output_dir: Path = Path(".")
    tables: RuleTables = field(default_factory=RuleTables)


def _coerce(name: str, current: Any, value: Any) -> Any:
    """Match the YAML value to the type of the default it replaces."""
    if isinstance(current, frozenset):
        if not isinstance(value, list):
            raise ConfigError(f"{name}: expected a list")
        return frozenset(str(v) for v in value)
    if isinstance(current, tuple):
        if not isinstance(value, list):
            raise ConfigError(f"{name}: expected a list")
        return tuple(str(v) for v in value)
    if isinstance(current, dict):
        if not isinstance(value, dict):
            raise ConfigError(f"{name}: expected a mapping")
        try:
            return {str(k): int(v) for k, v in value.items()}
        except (TypeError, ValueError):
            raise ConfigError(f"{name}: values must be integers") from None
    if isinstance(current, bool):
        return bool(value)
    if isinstance(current, int):
        try:
            return int(value)
        except (TypeError, ValueError):
            raise ConfigError(f"{name}: expected an integer") from None
    if not isinstance(value, str):
        raise ConfigError(f"{name}: expected a string")
    return value


def tables_from_dict(data: dict[str, Any], base: RuleTables | None = None) -> RuleTables:
    """Override defaults with keys from data. Unknown keys are an error."""
    base = base or RuleTables()
    known = {f.name for f in fields(RuleTables)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"Unknown rule table key(s): {', '.join(unknown)}")
    overrides = {k: _coerce(k, getattr(base, k), v) for k, v in data.items()}
    return replace(base, **overrides)


def load_tables(path: Path | None) -> RuleTables:
    """Load rule tables from a YAML file; no path means defaults."""
    if path is None:
        return RuleTables()
    try:
        data = yaml.safe_load(Path(path).read_text()) or {}
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: expected a mapping at top level")
    if "tables" in data and isinstance(data["tables"], dict):
        data = data["tables"]
    return tables_from_dict(data)
