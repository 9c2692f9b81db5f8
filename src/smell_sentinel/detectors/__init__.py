"""Detector implementations: read a SourceUnit and produce Findings.

Per-file detectors run as soon as a file is parsed. The corpus detector
runs in two passes around a barrier (see incomplete_construction).
"""

from .base import CorpusDetector, Detector, DetectorContext
from .flag_parameter import FlagParameterDetector
from .incomplete_construction import IncompleteConstructionDetector
from .loop_invariant import LoopInvariantDetector
from .naming import NamingAdvisoryDetector
from .nullable_return import NullableReturnDetector


def get_default_detectors() -> list:
    """Return the per-file detectors, in execution order."""
    return [
        NullableReturnDetector(),
        FlagParameterDetector(),
        LoopInvariantDetector(),
        NamingAdvisoryDetector(),
    ]


def get_corpus_detectors() -> list:
    """Return the whole-corpus (two-pass) detectors."""
    return [
        IncompleteConstructionDetector(),
    ]


__all__ = [
    "CorpusDetector",
    "Detector",
    "DetectorContext",
    "FlagParameterDetector",
    "IncompleteConstructionDetector",
    "LoopInvariantDetector",
    "NamingAdvisoryDetector",
    "NullableReturnDetector",
    "get_corpus_detectors",
    "get_default_detectors",
]
