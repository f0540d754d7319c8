"""Error types raised at startup. Nothing below the orchestrator raises these mid-scan."""


class SiliconScanError(Exception):
    """Base error for siliconscan."""


class ConfigError(SiliconScanError):
    """Invalid rule tables or facts file."""
