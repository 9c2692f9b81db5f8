"""Per-file analysis exceptions: reading and parsing sources.

These never abort a run. The engine converts them into findings in the
reserved ``internal/*`` rule namespace and moves on to the next file.
"""

from pathlib import Path
from typing import List, Optional

from .base import SentinelError


class AnalysisError(SentinelError):
    """Base class for file-local analysis errors."""

    pass


class FileAccessError(AnalysisError):
    """Raised when a source file cannot be accessed or read."""

    def __init__(self, filepath: Path, reason: str):
        super().__init__(
            f"Cannot access file: {filepath}",
            details={"filepath": str(filepath), "reason": reason},
        )
        self.filepath = filepath
        self.reason = reason


class ParsingError(AnalysisError):
    """Raised when a source file has malformed syntax.

    ``line`` and ``column`` are 1-based and point at the first offending
    token; both may be None when the failure has no position (for example
    a nesting depth overflow).
    """

    def __init__(
        self,
        filepath: Path,
        language: str,
        reason: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ):
        details = {"filepath": str(filepath), "language": language, "reason": reason}
        if line is not None:
            details["line"] = str(line)
        if column is not None:
            details["column"] = str(column)
        super().__init__(f"Failed to parse {language} file: {filepath}", details=details)
        self.filepath = filepath
        self.language = language
        self.reason = reason
        self.line = line
        self.column = column


class UnsupportedLanguageError(AnalysisError):
    """Raised when attempting to analyze an unsupported language."""

    def __init__(self, language: str, supported_languages: List[str]):
        super().__init__(
            f"Unsupported language: {language}",
            details={"language": language, "supported": ", ".join(supported_languages)},
        )
        self.language = language
        self.supported_languages = supported_languages
