"""Stage 5: Docker binary, daemon, running containers, default platform."""

from __future__ import annotations

import json
import logging
from typing import Any

from ..classifier import arch_from_name
from ..models import Architecture
from .base import StageContext

logger = logging.getLogger("siliconscan.rules.containers")

STAGE_ID = "containers"
TITLE = "Docker Configuration"


def platform_settings(config_text: str | None) -> dict[str, str]:
    """Every "*platform*" string setting in the Docker client config, keyed by dotted path.

    Unparsable config reads as no settings.
    """
    if not config_text:
        return {}
    try:
        data = json.loads(config_text)
    except ValueError as e:
        logger.debug("Unparsable Docker config: %s", e)
        return {}
    found: dict[str, str] = {}

    def walk(node: Any, prefix: str) -> None:
        if isinstance(node, dict):
            for key, value in node.items():
                path = f"{prefix}.{key}" if prefix else str(key)
                if "platform" in str(key).lower() and isinstance(value, str):
                    found[path] = value
                else:
                    walk(value, path)
        elif isinstance(node, list):
            for i, value in enumerate(node):
                walk(value, f"{prefix}[{i}]")

    walk(data, "")
    return found


def check(ctx: StageContext) -> None:
    """Emulated containers are INFO; a foreign default platform or daemon is WARNING."""
    s, probe, tables = ctx.section, ctx.probe, ctx.tables
    docker = ctx.inspect_tool("docker")
    if docker is None:
        s.text("Docker is not installed")
        return

    s.text("Docker is installed")
    s.fact("Version", docker.version or "Unknown version")
    s.fact("Binary Architecture", ctx.label(docker.architecture))
    if ctx.foreign_on_native(docker):
        ctx.warning(
            f"Docker is running under Rosetta 2 ({ctx.label(docker.architecture)})",
            "Install the Apple Silicon version of Docker Desktop from https://www.docker.com/products/docker-desktop",
        )

    if ctx.config.test_mode:
        ctx.placeholder("check if Docker is running")
        return

    if not probe.container_daemon_running():
        s.text("Docker is installed but not running")
        ctx.info("Docker is installed but not running", "Start Docker Desktop from the Applications folder")
        return
    s.text("Docker daemon is running")

    daemon_arch = probe.container_daemon_arch()
    if daemon_arch:
        s.fact("Platform", daemon_arch)
        if ctx.native_host and arch_from_name(daemon_arch, tables) is Architecture.FOREIGN:
            ctx.warning(
                f"Docker is not running in native ARM64 mode ({daemon_arch})",
                "Check Docker Desktop settings to enable ARM64 support",
            )

    containers = probe.list_containers()
    if containers:
        s.heading("Running Containers")
        for container in containers:
            s.bullet(str(container))
            arch = probe.inspect_container_arch(container.id)
            if not arch:
                continue
            s.bullet(f"Architecture: {arch}", indent=1)
            if ctx.native_host and arch_from_name(arch, tables) is Architecture.FOREIGN:
                ctx.info(
                    f"Container {container} is running with {arch} architecture on Apple Silicon",
                    "This container is using emulation, which may impact performance",
                )
    else:
        s.text("No running containers")

    settings = platform_settings(probe.read_container_runtime_config())
    if settings:
        s.heading("Docker Platform Configuration")
        s.code(json.dumps(settings, indent=2, sort_keys=True), lang="json")
        foreign = [v for v in settings.values() if arch_from_name(v, tables) is Architecture.FOREIGN]
        if ctx.native_host and foreign:
            ctx.warning(
                f"Docker is configured to use {foreign[0]} platform by default",
                f"Update Docker configuration to use linux/{tables.native_arch} platform for better performance",
            )
