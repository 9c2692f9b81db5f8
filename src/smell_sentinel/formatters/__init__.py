"""Output formatters for analysis reports."""

from .base import BaseFormatter
from .github_formatter import GithubFormatter
from .json_formatter import JsonFormatter
from .rich_formatter import RichFormatter
from .text_formatter import TextFormatter


def get_formatter(name: str) -> BaseFormatter:
    """Get a formatter instance by name.

    Args:
        name: One of "text", "json", "rich", "github"

    Returns:
        Formatter instance

    Raises:
        ValueError: If name is not recognized
    """
    formatters = {
        "text": TextFormatter,
        "json": JsonFormatter,
        "rich": RichFormatter,
        "github": GithubFormatter,
    }
    cls = formatters.get(name)
    if cls is None:
        choices = ", ".join(sorted(formatters))
        raise ValueError(f"Unknown formatter: {name!r}. Choose from: {choices}")
    return cls()


__all__ = [
    "BaseFormatter",
    "GithubFormatter",
    "JsonFormatter",
    "RichFormatter",
    "TextFormatter",
    "get_formatter",
]
