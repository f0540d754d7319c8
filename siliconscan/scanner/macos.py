"""macOS probe — shells out to sysctl, sw_vers, brew, ps, file, docker, xcode-select."""

from __future__ import annotations

import logging
import os
import platform
import shutil
import subprocess
from pathlib import Path

from ..config import RuleTables
from ..models import ContainerEntry, ProcessEntry
from .probe import Probe

logger = logging.getLogger("siliconscan.probe")

# pip distribution name -> import name, where they differ
_IMPORT_NAMES = {
    "opencv-python": "cv2",
    "pillow": "PIL",
}

_SKIP_DIRS = {"node_modules", ".git", ".venv", "venv", "__pycache__", "Library"}


def _run(args: list[str], timeout: float = 5) -> str | None:
    """Run a command and return stripped stdout, or None on any failure."""
    try:
        result = subprocess.run(
            args,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except (FileNotFoundError, subprocess.TimeoutExpired, OSError) as e:
        logger.debug("Probe command failed: %s (%s)", " ".join(args), e)
        return None
    if result.returncode != 0:
        logger.debug("Probe command exited %d: %s", result.returncode, " ".join(args))
        return None
    return (result.stdout or "").strip()


def _first_line(text: str | None) -> str | None:
    if not text:
        return None
    for line in text.splitlines():
        if line.strip():
            return line.strip()
    return None


class MacProbe(Probe):
    """Probe backed by real commands on the local Mac."""

    def __init__(self, tables: RuleTables | None = None, home: Path | None = None) -> None:
        self.tables = tables or RuleTables()
        self.home = home or Path.home()

    # System
    def host_arch_flag(self) -> bool:
        return _run(["sysctl", "-n", "hw.optional.arm64"]) == "1"

    def current_runtime_arch(self) -> str:
        return _run(["uname", "-m"]) or platform.machine()

    def chip_model(self) -> str:
        return _run(["sysctl", "-n", "machdep.cpu.brand_string"]) or ""

    def os_version(self) -> str:
        return _run(["sw_vers", "-productVersion"]) or ""

    def emulation_layer_installed(self) -> bool:
        return os.path.isfile(self.tables.emulation_layer_path)

    def system_description(self) -> str:
        return f"{platform.system()} {platform.release()} {platform.machine()}"

    # Packages and executables
    def package_manager_prefix(self, manager: str) -> str | None:
        if manager != "brew" or not shutil.which("brew"):
            return None
        return _run(["brew", "--prefix"]) or None

    def list_installed_packages(self, manager: str) -> list[str]:
        if manager == "brew":
            out = _run(["brew", "list", "--formula"], timeout=30)
            return out.split() if out else []
        if manager == "pip":
            out = _run(["pip3", "list", "--format=freeze"], timeout=30)
            if not out:
                return []
            return [line.split("==", 1)[0].strip().lower() for line in out.splitlines() if line.strip()]
        return []

    def resolve_executable_path(self, name: str) -> str | None:
        return shutil.which(name)

    def describe_binary(self, path: str) -> str | None:
        return _run(["file", path])

    def tool_version(self, name: str) -> str | None:
        if name == "xcodebuild":
            return _first_line(_run(["xcodebuild", "-version"]))
        for flag in ("--version", "-version"):
            try:
                result = subprocess.run(
                    [name, flag],
                    capture_output=True,
                    text=True,
                    timeout=5,
                )
            except (FileNotFoundError, subprocess.TimeoutExpired, OSError):
                return None
            if result.returncode == 0:
                # python3 --version and java -version print to stderr
                line = _first_line(result.stdout) or _first_line(result.stderr)
                if line:
                    return line
        return None

    def package_origin(self, package: str) -> str | None:
        module = _IMPORT_NAMES.get(package, package.replace("-", "_"))
        code = (
            "import importlib.util, sys\n"
            f"spec = importlib.util.find_spec({module!r})\n"
            "print(spec.origin if spec and spec.origin else '')"
        )
        return _run(["python3", "-c", code], timeout=10) or None

    def find_native_module_projects(self) -> list[str]:
        projects: list[str] = []
        for package_json in self._package_json_files():
            project_dir = package_json.parent
            try:
                text = package_json.read_text(errors="replace")
            except OSError:
                continue
            if '"dependencies"' not in text and '"devDependencies"' not in text:
                continue
            modules = project_dir / "node_modules"
            if modules.is_dir() and _has_native_addon(modules):
                projects.append(project_dir.name)
        return projects

    def _package_json_files(self) -> list[Path]:
        found: list[Path] = []
        limit = self.tables.node_project_limit
        for root in self.tables.node_project_roots:
            base = Path(root.replace("~", str(self.home), 1)) if root.startswith("~") else Path(root)
            if not base.is_dir():
                continue
            for dirpath, dirnames, filenames in os.walk(base):
                dirnames[:] = sorted(d for d in dirnames if d not in _SKIP_DIRS and not d.startswith("."))
                if "package.json" in filenames:
                    found.append(Path(dirpath) / "package.json")
                    if len(found) >= limit:
                        return found
        return found

    # Processes and filesystem
    def list_processes(self) -> list[ProcessEntry]:
        out = _run(["ps", "-A", "-o", "pid=,arch=,comm="], timeout=10)
        if not out:
            return []
        entries = []
        for line in out.splitlines():
            parts = line.split(None, 2)
            if len(parts) < 3:
                continue
            try:
                pid = int(parts[0])
            except ValueError:
                continue
            entries.append(ProcessEntry(pid=pid, command=parts[2].strip(), arch=parts[1]))
        return entries

    def get_path_list(self) -> list[str]:
        return [p for p in os.environ.get("PATH", "").split(os.pathsep) if p]

    def is_dir(self, path: str) -> bool:
        return os.path.isdir(path)

    def is_file(self, path: str) -> bool:
        return os.path.isfile(path)

    # Containers
    def container_daemon_running(self) -> bool:
        return _run(["docker", "info"], timeout=15) is not None

    def container_daemon_arch(self) -> str | None:
        return _run(["docker", "info", "--format", "{{.Architecture}}"], timeout=15) or None

    def list_containers(self) -> list[ContainerEntry]:
        out = _run(["docker", "ps", "--format", "{{.Image}}\t{{.ID}}"], timeout=15)
        if not out:
            return []
        containers = []
        for line in out.splitlines():
            image, _, cid = line.partition("\t")
            if cid.strip():
                containers.append(ContainerEntry(image=image.strip(), id=cid.strip()))
        return containers

    def inspect_container_arch(self, container_id: str) -> str | None:
        image_id = _run(["docker", "inspect", "--format", "{{.Image}}", container_id], timeout=15)
        if not image_id:
            return None
        return _run(["docker", "image", "inspect", "--format", "{{.Architecture}}", image_id], timeout=15) or None

    def read_container_runtime_config(self) -> str | None:
        path = self.home / ".docker" / "config.json"
        try:
            return path.read_text()
        except OSError:
            return None

    # Toolchains
    def developer_tools_path(self) -> str | None:
        return _run(["xcode-select", "-p"]) or None


def _has_native_addon(node_modules: Path) -> bool:
    """binding.gyp or a compiled .node file anywhere under node_modules."""
    for dirpath, _dirnames, filenames in os.walk(node_modules):
        for f in filenames:
            if f == "binding.gyp" or f.endswith(".node"):
                return True
    return False
