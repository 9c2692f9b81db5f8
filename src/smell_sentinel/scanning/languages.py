"""Language configurations for source discovery and parsing."""

from dataclasses import dataclass
from pathlib import Path
from typing import Union


@dataclass(frozen=True)
class LanguageConfig:
    """Everything discovery and the parser need to know about a language.

    Attributes:
        name: Language identifier passed to the model builder
        extensions: File extensions, lower case with the leading dot
    """

    name: str
    extensions: tuple[str, ...]


LANGUAGES: dict[str, LanguageConfig] = {
    "java": LanguageConfig(name="java", extensions=(".java",)),
}

# Build output, VCS metadata and dependency caches
SKIP_DIRS = frozenset(
    {
        ".git",
        ".hg",
        ".svn",
        ".gradle",
        ".idea",
        ".mvn",
        "build",
        "target",
        "out",
        "bin",
        "node_modules",
        "__pycache__",
    }
)

_EXTENSION_TO_LANGUAGE = {
    ext: config.name for config in LANGUAGES.values() for ext in config.extensions
}


def get_supported_languages() -> list[str]:
    """Languages the model builder can parse."""
    return sorted(LANGUAGES)


def detect_language(filepath: Union[str, Path]) -> str:
    """Detect language from file extension.

    Returns:
        Language name (e.g., "java") or "unknown"
    """
    return _EXTENSION_TO_LANGUAGE.get(Path(filepath).suffix.lower(), "unknown")
