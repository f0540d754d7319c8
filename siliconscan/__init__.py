"""siliconscan — Apple Silicon migration diagnostics."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("siliconscan")
except PackageNotFoundError:
    __version__ = "0.0.0.dev0"
