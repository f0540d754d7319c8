"""Static probe — answers from a facts mapping (YAML/JSON file or dict).

Used to simulate a target host without running any command:

    host:
      arm64_capable: true
      current_arch: arm64
      os_version: "13.4"
    executables:
      node: /usr/local/bin/node
    binaries:
      /usr/local/bin/node: "Mach-O 64-bit executable x86_64"
    path: [/opt/homebrew/bin, /usr/local/bin]
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from ..errors import ConfigError
from ..models import ContainerEntry, ProcessEntry
from .probe import Probe

KNOWN_SECTIONS = {
    "host",
    "package_managers",
    "packages",
    "executables",
    "binaries",
    "versions",
    "package_origins",
    "native_module_projects",
    "processes",
    "path",
    "directories",
    "files",
    "docker",
    "developer_tools",
}


class StaticProbe(Probe):
    """Probe over fabricated facts. Missing facts read as absent."""

    def __init__(self, facts: dict[str, Any] | None = None) -> None:
        self.facts = facts or {}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StaticProbe":
        if not isinstance(data, dict):
            raise ConfigError("Facts must be a mapping")
        unknown = sorted(set(data) - KNOWN_SECTIONS)
        if unknown:
            raise ConfigError(f"Unknown facts section(s): {', '.join(unknown)}")
        return cls(data)

    @classmethod
    def from_file(cls, path: Path) -> "StaticProbe":
        """Load facts from YAML or JSON (YAML is a superset)."""
        try:
            data = yaml.safe_load(Path(path).read_text()) or {}
        except OSError as e:
            raise ConfigError(f"Cannot read {path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid facts file {path}: {e}") from e
        if isinstance(data, dict) and "facts" in data and isinstance(data["facts"], dict):
            data = data["facts"]
        return cls.from_dict(data)

    def _section(self, name: str) -> dict[str, Any]:
        value = self.facts.get(name)
        return value if isinstance(value, dict) else {}

    def _list(self, name: str) -> list[Any]:
        value = self.facts.get(name)
        return list(value) if isinstance(value, (list, tuple)) else []

    # System
    def host_arch_flag(self) -> bool:
        return bool(self._section("host").get("arm64_capable", False))

    def current_runtime_arch(self) -> str:
        return str(self._section("host").get("current_arch", ""))

    def chip_model(self) -> str:
        return str(self._section("host").get("chip_model", ""))

    def os_version(self) -> str:
        return str(self._section("host").get("os_version", ""))

    def emulation_layer_installed(self) -> bool:
        return bool(self._section("host").get("emulation_layer_installed", False))

    def system_description(self) -> str:
        return str(self._section("host").get("system", ""))

    # Packages and executables
    def package_manager_prefix(self, manager: str) -> str | None:
        return self._section("package_managers").get(manager)

    def list_installed_packages(self, manager: str) -> list[str]:
        return [str(p) for p in self._section("packages").get(manager, []) or []]

    def resolve_executable_path(self, name: str) -> str | None:
        return self._section("executables").get(name)

    def describe_binary(self, path: str) -> str | None:
        return self._section("binaries").get(path)

    def tool_version(self, name: str) -> str | None:
        value = self._section("versions").get(name)
        return str(value) if value is not None else None

    def package_origin(self, package: str) -> str | None:
        return self._section("package_origins").get(package)

    def find_native_module_projects(self) -> list[str]:
        return [str(p) for p in self._list("native_module_projects")]

    # Processes and filesystem
    def list_processes(self) -> list[ProcessEntry]:
        entries = []
        for p in self._list("processes"):
            if not isinstance(p, dict) or "pid" not in p:
                continue
            entries.append(ProcessEntry(
                pid=int(p["pid"]),
                command=str(p.get("command", "")),
                arch=str(p.get("arch", "")),
            ))
        return entries

    def get_path_list(self) -> list[str]:
        value = self.facts.get("path")
        if isinstance(value, str):
            return [p for p in value.split(":") if p]
        return [str(p) for p in self._list("path")]

    def is_dir(self, path: str) -> bool:
        return path in {str(d).rstrip("/") for d in self._list("directories")}

    def is_file(self, path: str) -> bool:
        files = {str(f) for f in self._list("files")}
        files.update(self._section("binaries"))
        return path in files

    # Containers
    def container_daemon_running(self) -> bool:
        return bool(self._section("docker").get("running", False))

    def container_daemon_arch(self) -> str | None:
        return self._section("docker").get("arch")

    def _containers(self) -> list[dict[str, Any]]:
        value = self._section("docker").get("containers") or []
        return [c for c in value if isinstance(c, dict) and "id" in c]

    def list_containers(self) -> list[ContainerEntry]:
        return [ContainerEntry(image=str(c.get("image", "")), id=str(c["id"])) for c in self._containers()]

    def inspect_container_arch(self, container_id: str) -> str | None:
        for c in self._containers():
            if str(c["id"]) == container_id:
                return c.get("arch")
        return None

    def read_container_runtime_config(self) -> str | None:
        value = self._section("docker").get("config")
        if isinstance(value, dict):
            return json.dumps(value)
        return value

    # Toolchains
    def developer_tools_path(self) -> str | None:
        return self.facts.get("developer_tools")
