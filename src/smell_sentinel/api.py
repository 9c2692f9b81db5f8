"""Public API for smell-sentinel.

Example:
    >>> from smell_sentinel import analyze
    >>>
    >>> result = analyze("src/main/java")
    >>> for finding in result.findings:
    ...     print(finding.location.file, finding.rule_id, finding.message)
    >>>
    >>> # With customization
    >>> result = analyze("Foo.java", "Bar.java", min_severity="error", workers=2)
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

from .config import load_config
from .engine import AnalysisEngine
from .logging_config import get_logger
from .models import AnalysisResult

logger = get_logger(__name__)


def analyze(
    *paths: Union[str, Path],
    config_file: Optional[Path] = None,
    **overrides,
) -> AnalysisResult:
    """Analyze Java sources and return every finding.

    Args:
        *paths: Files or directories to analyze (default: current directory)
        config_file: Optional explicit config file path
        **overrides: Configuration overrides (e.g. enabled_rules=..., workers=4)

    Returns:
        AnalysisResult with findings sorted by file, line and rule

    Raises:
        ConfigurationError: If configuration is invalid, a path does not
            exist or no source files were found
    """
    config = load_config(config_file=config_file, **overrides)
    targets = list(paths) or ["."]
    logger.debug("Analyzing %s", ", ".join(str(p) for p in targets))
    return AnalysisEngine(config).run(targets)
