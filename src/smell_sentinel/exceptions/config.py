"""Configuration exceptions: settings and input paths.

All of these are fatal and are raised before any file is analyzed.
"""

from pathlib import Path
from typing import Any, Sequence

from .base import SentinelError


class ConfigurationError(SentinelError):
    """Base class for configuration-related errors."""

    pass


class InvalidPathError(ConfigurationError):
    """Raised when a provided path is invalid."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"Invalid path: {path}", details={"path": str(path), "reason": reason})
        self.path = path
        self.reason = reason


class InvalidConfigError(ConfigurationError):
    """Raised when configuration values are invalid."""

    def __init__(self, key: str, value: Any, reason: str):
        super().__init__(
            f"Invalid configuration for {key}: {value}",
            details={"key": key, "value": str(value), "reason": reason},
        )
        self.key = key
        self.value = value
        self.reason = reason


class NoSourcesError(ConfigurationError):
    """Raised when the given paths contain no analyzable source files."""

    def __init__(self, paths: Sequence[Path]):
        super().__init__(
            "No source files found",
            details={"paths": ", ".join(str(p) for p in paths)},
        )
        self.paths = list(paths)
