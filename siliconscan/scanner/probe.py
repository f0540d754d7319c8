"""Probe interface — raw facts about the host, queried by the rules."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..models import ContainerEntry, ProcessEntry


class Probe(ABC):
    """Source of raw host facts.

    Implementations never raise for an absent tool or a failed command:
    they return None, an empty list or False instead.
    """

    # System
    @abstractmethod
    def host_arch_flag(self) -> bool:
        """True iff the hardware is arm64-capable."""

    @abstractmethod
    def current_runtime_arch(self) -> str:
        ...

    @abstractmethod
    def chip_model(self) -> str:
        ...

    @abstractmethod
    def os_version(self) -> str:
        ...

    @abstractmethod
    def emulation_layer_installed(self) -> bool:
        ...

    @abstractmethod
    def system_description(self) -> str:
        """One-line kernel/arch description for the report header."""

    # Packages and executables
    @abstractmethod
    def package_manager_prefix(self, manager: str) -> str | None:
        """Install prefix of a package manager, None when it is not installed."""

    @abstractmethod
    def list_installed_packages(self, manager: str) -> list[str]:
        ...

    @abstractmethod
    def resolve_executable_path(self, name: str) -> str | None:
        ...

    @abstractmethod
    def describe_binary(self, path: str) -> str | None:
        """Raw file-introspection descriptor for path."""

    @abstractmethod
    def tool_version(self, name: str) -> str | None:
        ...

    @abstractmethod
    def package_origin(self, package: str) -> str | None:
        """Where the interpreter imports a pip package from."""

    @abstractmethod
    def find_native_module_projects(self) -> list[str]:
        """Names of Node projects whose node_modules carry native addons."""

    # Processes and filesystem
    @abstractmethod
    def list_processes(self) -> list[ProcessEntry]:
        ...

    @abstractmethod
    def get_path_list(self) -> list[str]:
        ...

    @abstractmethod
    def is_dir(self, path: str) -> bool:
        ...

    @abstractmethod
    def is_file(self, path: str) -> bool:
        ...

    # Containers
    @abstractmethod
    def container_daemon_running(self) -> bool:
        ...

    @abstractmethod
    def container_daemon_arch(self) -> str | None:
        ...

    @abstractmethod
    def list_containers(self) -> list[ContainerEntry]:
        ...

    @abstractmethod
    def inspect_container_arch(self, container_id: str) -> str | None:
        ...

    @abstractmethod
    def read_container_runtime_config(self) -> str | None:
        ...

    # Toolchains
    @abstractmethod
    def developer_tools_path(self) -> str | None:
        """Command line developer tools directory, None when not installed."""
