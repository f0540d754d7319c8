"""Stage 2: Homebrew prefix and formulae, Node.js and Python runtimes."""

from ..classifier import BinaryLookup
from ..models import Architecture
from .base import StageContext

STAGE_ID = "package_managers"
TITLE = "Package Managers"

BREW_INSTALL = '/bin/bash -c "$(curl -fsSL https://raw.githubusercontent.com/Homebrew/install/HEAD/install.sh)"'


def check(ctx: StageContext) -> None:
    """Run the Homebrew, Node.js and Python checks in report order."""
    _check_homebrew(ctx)
    _check_node(ctx)
    _check_python(ctx)


def _check_homebrew(ctx: StageContext) -> None:
    s, tables = ctx.section, ctx.tables
    prefix = ctx.probe.package_manager_prefix("brew")
    if not prefix:
        s.fact("Homebrew", "Not installed")
        return
    prefix = prefix.rstrip("/") or "/"
    s.fact("Homebrew", f"Installed at {prefix}")

    if ctx.native_host and prefix == tables.foreign_prefix:
        ctx.warning(
            f"Homebrew is installed in the Intel location ({tables.foreign_prefix}) "
            f"instead of the Apple Silicon location ({tables.native_prefix})",
            f"Consider reinstalling Homebrew for Apple Silicon: {BREW_INSTALL}",
        )
    elif not ctx.native_host and prefix == tables.native_prefix:
        ctx.warning(
            f"Homebrew is installed in the Apple Silicon location ({tables.native_prefix}) on an Intel Mac",
            f"This is unusual. Consider reinstalling Homebrew: {BREW_INSTALL}",
        )

    s.heading("Homebrew Packages")
    if ctx.config.test_mode:
        ctx.placeholder("check Homebrew packages")
        return

    for package in ctx.probe.list_installed_packages("brew"):
        path = ctx.probe.resolve_executable_path(package)
        if not path:
            continue
        result = ctx.classify(path)
        line = f"{package}: {ctx.label(result.architecture)} ({path})"
        if ctx.native_host and result.architecture is Architecture.FOREIGN:
            ctx.warning(
                f"Package '{package}' is Intel-only ({ctx.label(result.architecture)}) and running through Rosetta 2",
                f"Try reinstalling with: brew reinstall {package}",
            )
            s.bullet(line)
        elif ctx.config.verbose:
            if result.lookup is BinaryLookup.UNRECOGNIZED:
                line += " [unrecognized binary format]"
            s.bullet(line)


def _check_node(ctx: StageContext) -> None:
    s = ctx.section
    node = ctx.inspect_tool("node")
    s.heading("Node.js")
    if node is None:
        s.fact("Node.js", "Not installed")
        return
    s.fact("Version", node.version or "Unknown version")
    s.fact("Architecture", ctx.label(node.architecture))

    if ctx.foreign_on_native(node):
        ctx.warning(
            f"Node.js is running under Rosetta 2 ({ctx.label(node.architecture)})",
            "Consider installing the ARM64 version: https://nodejs.org/",
        )

    if not ctx.native_host or not ctx.probe.resolve_executable_path("npm"):
        return
    if ctx.config.test_mode:
        ctx.placeholder("search for package.json files")
        return
    for project in ctx.probe.find_native_module_projects():
        ctx.info(
            f"Project '{project}' contains native modules that might need recompilation for Apple Silicon",
            "Run 'npm rebuild' in the project directory",
        )
        s.bullet(f"Project: {project} contains native modules")


def _check_python(ctx: StageContext) -> None:
    s = ctx.section
    python = ctx.inspect_tool("python3")
    s.heading("Python")
    if python is None:
        s.fact("Python", "Not installed")
        return
    s.fact("Version", python.version or "Unknown version")
    s.fact("Architecture", ctx.label(python.architecture))

    if ctx.foreign_on_native(python):
        ctx.warning(
            f"Python is running under Rosetta 2 ({ctx.label(python.architecture)})",
            "Consider installing the ARM64 version of Python",
        )

    if not ctx.probe.resolve_executable_path("pip3"):
        return
    s.heading("Pip Packages")
    if ctx.config.test_mode:
        ctx.placeholder("check pip packages")
        return

    installed = {p.lower() for p in ctx.probe.list_installed_packages("pip")}
    for package in ctx.tables.native_packages:
        if package.lower() not in installed:
            continue
        origin = ctx.probe.package_origin(package)
        if not origin:
            continue
        s.bullet(f"{package}: {origin}")
        if ctx.native_host and python.architecture.runs_emulated:
            ctx.info(
                f"Python package '{package}' is installed in a Rosetta 2 environment",
                "Consider reinstalling in a native ARM64 Python environment",
            )
