"""Shared CLI helpers."""

from enum import Enum
from pathlib import Path
from typing import Optional

from rich.console import Console

from ..config import AnalysisConfig, load_config

console = Console()
err_console = Console(stderr=True)


class ReportFormat(str, Enum):
    """Values accepted by ``--format``."""

    TEXT = "text"
    JSON = "json"
    RICH = "rich"
    GITHUB = "github"


def resolve_config(
    config: Optional[Path] = None,
    rules: Optional[str] = None,
    min_severity: Optional[str] = None,
    workers: Optional[int] = None,
    output_format: Optional[str] = None,
) -> AnalysisConfig:
    """Build configuration from CLI options."""
    overrides = {
        "enabled_rules": rules,
        "min_severity": min_severity,
        "workers": workers,
        "output_format": output_format,
    }
    return load_config(config_file=config, **overrides)
