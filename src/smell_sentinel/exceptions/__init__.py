"""Exception hierarchy for smell-sentinel."""

from .analysis import (
    AnalysisError,
    FileAccessError,
    ParsingError,
    UnsupportedLanguageError,
)
from .base import SentinelError
from .config import (
    ConfigurationError,
    InvalidConfigError,
    InvalidPathError,
    NoSourcesError,
)

__all__ = [
    "SentinelError",
    "AnalysisError",
    "FileAccessError",
    "ParsingError",
    "UnsupportedLanguageError",
    "ConfigurationError",
    "InvalidPathError",
    "InvalidConfigError",
    "NoSourcesError",
]
