"""
smell-sentinel - Static code-smell detection for Java sources

Finds nullable returns without sentinel values, boolean flag parameters that
fork control flow, call chains re-evaluated inside loops, and objects built
through setters that skip a setter every other construction site calls.
"""

__version__ = "0.1.0"

from .api import analyze
from .config import AnalysisConfig, load_config
from .engine import AnalysisEngine
from .models import AnalysisResult, Finding, Location, Severity

__all__ = [
    "analyze",  # Main entry point
    "AnalysisEngine",  # Advanced usage (cancellation, in-memory sources)
    "AnalysisConfig",
    "AnalysisResult",
    "Finding",
    "Location",
    "Severity",
    "load_config",
]
