"""Stage 3: PATH presence and ordering of the Homebrew bin directories."""

from .base import StageContext

STAGE_ID = "path"
TITLE = "PATH Environment Variable"


def _normalize(entries: list[str]) -> list[str]:
    return [e.rstrip("/") or "/" for e in entries]


def check(ctx: StageContext) -> None:
    """First match wins on PATH, so a foreign bin dir ahead of the native one shadows native binaries."""
    tables = ctx.tables
    entries = _normalize(ctx.probe.get_path_list())
    ctx.section.code("\n".join(entries))

    native_bin, foreign_bin = tables.native_bin, tables.foreign_bin
    if ctx.native_host:
        if native_bin not in entries and ctx.probe.is_dir(native_bin):
            ctx.warning(
                f"Apple Silicon Homebrew directory ({native_bin}) is not in PATH",
                f"Add 'export PATH={native_bin}:$PATH' to your shell profile",
            )
        if native_bin in entries and foreign_bin in entries and entries.index(foreign_bin) < entries.index(native_bin):
            ctx.warning(
                f"Intel path ({foreign_bin}) appears before Apple Silicon path ({native_bin}) in PATH",
                f"Reorder PATH in your shell profile to put {native_bin} first",
            )
    elif foreign_bin not in entries and ctx.probe.is_dir(foreign_bin):
        ctx.warning(
            f"Intel Homebrew directory ({foreign_bin}) is not in PATH",
            f"Add 'export PATH={foreign_bin}:$PATH' to your shell profile",
        )
