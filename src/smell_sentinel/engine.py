"""AnalysisEngine: drives parsing and detectors over a set of files.

Pipeline:
    discover -> [per file, parallel] read, build, per-file detectors,
    corpus collection -> barrier -> corpus tables -> [per file, parallel]
    corpus re-scan -> filter, sort

Per-file failures (unreadable file, malformed syntax, crashing detector)
become findings in the ``internal/*`` namespace and never stop the run.
Worker tasks only touch shared state through the FindingSink, and only the
main thread merges, so a cancelled task's partial results are never seen.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union

from .config import AnalysisConfig
from .detectors import DetectorContext, get_corpus_detectors, get_default_detectors
from .exceptions import AnalysisError, FileAccessError, ParsingError
from .file_ops import discover_sources, read_source
from .logging_config import get_logger
from .models import AnalysisResult, Finding, Location
from .rules import DETECTOR_FAILURE, IO_FAILURE, PARSE_FAILURE, rule_order
from .scanning import SourceModelBuilder, detect_language

logger = get_logger(__name__)


@dataclass
class FileOutcome:
    """Everything one completed pass-1 task hands back to the main thread."""

    path: str
    findings: list[Finding] = field(default_factory=list)
    facts: dict[str, Any] = field(default_factory=dict)
    failed: bool = False


class FindingSink:
    """Mutex-guarded accumulator for findings from completed tasks."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._findings: list[Finding] = []

    def extend(self, findings: Iterable[Finding]) -> None:
        with self._lock:
            self._findings.extend(findings)

    def snapshot(self) -> list[Finding]:
        with self._lock:
            return list(self._findings)


def sort_key(finding: Finding) -> tuple:
    loc = finding.location
    return (loc.file, loc.line, loc.column, rule_order(finding.rule_id), finding.message)


def _internal_finding(
    context: DetectorContext,
    rule_id: str,
    path: str,
    message: str,
    line: Optional[int] = None,
    column: Optional[int] = None,
) -> Finding:
    line = line or 1
    column = column or 1
    return Finding(
        rule_id=rule_id,
        severity=context.severity_for(rule_id),
        location=Location(path, line, line, column, column),
        message=message,
    )


class AnalysisEngine:
    """Runs the configured detectors over source files.

    Usage:
        engine = AnalysisEngine(load_config())
        result = engine.run([Path("src")])
        engine.cancel()  # from another thread, to stop early

    Attributes:
        config: Validated analysis configuration
        detectors: Per-file detectors
        corpus_detectors: Two-pass whole-corpus detectors
    """

    def __init__(
        self,
        config: Optional[AnalysisConfig] = None,
        detectors: Optional[Sequence[Any]] = None,
        corpus_detectors: Optional[Sequence[Any]] = None,
        builder: Optional[SourceModelBuilder] = None,
    ) -> None:
        self.config = config or AnalysisConfig()
        self.detectors = list(detectors) if detectors is not None else get_default_detectors()
        self.corpus_detectors = (
            list(corpus_detectors) if corpus_detectors is not None else get_corpus_detectors()
        )
        self.builder = builder or SourceModelBuilder()
        self.context = DetectorContext.from_config(self.config)
        self._cancel = threading.Event()

    # -- control --

    def cancel(self) -> None:
        """Ask in-flight tasks to stop at their next detector boundary."""
        self._cancel.set()

    @property
    def cancelled(self) -> bool:
        return self._cancel.is_set()

    def _wanted(self, detector: Any) -> bool:
        return any(self.config.is_enabled(rule_id) for rule_id in detector.rules)

    # -- entry points --

    def run(self, paths: Iterable[Union[str, Path]]) -> AnalysisResult:
        """Discover sources under ``paths`` and analyze them.

        Raises:
            InvalidPathError: If a path does not exist
            NoSourcesError: If no source files were found
        """
        files = discover_sources([Path(p) for p in paths], self.config)
        return self.analyze_files(files)

    def analyze_files(self, files: Sequence[Path]) -> AnalysisResult:
        """Analyze an explicit list of files."""
        result = AnalysisResult()
        sink = FindingSink()
        workers = min(self.config.workers, max(len(files), 1))
        logger.info("Analyzing %d files with %d workers", len(files), workers)

        executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="sentinel")
        try:
            outcomes = self._run_tasks(
                executor, [lambda f=f: self._analyze_file(f) for f in files]
            )
            self._merge(outcomes, sink, result)

            # Barrier: every pass-1 task has been joined above.
            if not self.cancelled:
                pass_two = self._corpus_pass(executor, outcomes)
                for findings in pass_two:
                    sink.extend(findings)
        except KeyboardInterrupt:
            logger.warning("Interrupted, discarding in-flight results")
            self.cancel()
            executor.shutdown(wait=True, cancel_futures=True)
        finally:
            executor.shutdown(wait=True)

        result.cancelled = self.cancelled
        result.findings = self._finalize(sink.snapshot())
        logger.info(
            "Analysis %s: %d findings in %d files (%d failed)",
            "cancelled" if result.cancelled else "complete",
            len(result.findings),
            result.files_analyzed,
            result.files_failed,
        )
        return result

    def analyze_source(self, source: str, path: str = "Source.java") -> AnalysisResult:
        """Analyze in-memory source text as a one-file corpus."""
        result = AnalysisResult()
        sink = FindingSink()
        outcome = self._analyze_text(source, path)
        outcomes = [outcome] if outcome is not None else []
        self._merge(outcomes, sink, result)
        if not self.cancelled:
            tables = self._build_tables(outcomes, sink)
            for outcome in outcomes:
                findings = self._detect_sites(outcome, tables)
                if findings is not None:
                    sink.extend(findings)
        result.cancelled = self.cancelled
        result.findings = self._finalize(sink.snapshot())
        return result

    # -- scheduling --

    def _run_tasks(self, executor: ThreadPoolExecutor, tasks: list[Callable[[], Any]]) -> list:
        """Run tasks and collect non-None results of those that completed.

        Stops collecting as soon as cancellation is requested; results of
        tasks finishing after that are dropped.
        """
        futures = [executor.submit(task) for task in tasks]
        results = []
        for future in as_completed(futures):
            if self.cancelled:
                break
            value = future.result()
            if value is not None:
                results.append(value)
        if self.cancelled:
            for future in futures:
                future.cancel()
        return results

    def _merge(
        self, outcomes: list[FileOutcome], sink: FindingSink, result: AnalysisResult
    ) -> None:
        for outcome in outcomes:
            sink.extend(outcome.findings)
            result.files_analyzed += 1
            if outcome.failed:
                result.files_failed += 1

    def _corpus_pass(
        self, executor: ThreadPoolExecutor, outcomes: list[FileOutcome]
    ) -> list[list[Finding]]:
        if not self.corpus_detectors:
            return []
        sink = FindingSink()
        tables = self._build_tables(outcomes, sink)
        logger.debug("Corpus tables built for %s", ", ".join(sorted(tables)) or "none")
        pass_two = self._run_tasks(
            executor,
            [lambda o=o: self._detect_sites(o, tables) for o in outcomes if o.facts],
        )
        return [sink.snapshot()] + pass_two

    def _build_tables(self, outcomes: list[FileOutcome], sink: FindingSink) -> dict[str, Any]:
        ordered = sorted(outcomes, key=lambda o: o.path)
        tables: dict[str, Any] = {}
        for detector in self.corpus_detectors:
            facts = [o.facts[detector.name] for o in ordered if detector.name in o.facts]
            if not facts:
                continue
            try:
                tables[detector.name] = detector.build_table(facts)
            except Exception as e:
                logger.debug("Table construction failed for %s", detector.name, exc_info=True)
                sink.extend(
                    [
                        _internal_finding(
                            self.context,
                            DETECTOR_FAILURE,
                            ordered[0].path,
                            f"Detector {detector.name} failed building its corpus table: {e}",
                        )
                    ]
                )
        return tables

    # -- per-file work (runs on worker threads) --

    def _analyze_file(self, path: Path) -> Optional[FileOutcome]:
        if self.cancelled:
            return None
        path_str = path.as_posix()
        try:
            source = read_source(path, self.config.max_file_size_bytes)
        except FileAccessError as e:
            logger.warning("Cannot read %s: %s", path_str, e.reason)
            finding = _internal_finding(
                self.context, IO_FAILURE, path_str, f"Cannot read file: {e.reason}"
            )
            return FileOutcome(path_str, [finding], failed=True)
        return self._analyze_text(source, path_str)

    def _analyze_text(self, source: str, path: str) -> Optional[FileOutcome]:
        if self.cancelled:
            return None

        try:
            unit = self.builder.build(source, path, detect_language(path))
        except ParsingError as e:
            logger.warning("Cannot parse %s: %s", path, e.reason)
            return FileOutcome(
                path,
                [
                    _internal_finding(
                        self.context,
                        PARSE_FAILURE,
                        path,
                        f"Malformed syntax: {e.reason}",
                        e.line,
                        e.column,
                    )
                ],
                failed=True,
            )
        except AnalysisError as e:
            logger.warning("Cannot analyze %s: %s", path, e)
            return FileOutcome(
                path,
                [_internal_finding(self.context, PARSE_FAILURE, path, str(e))],
                failed=True,
            )
        except Exception as e:
            logger.warning("Cannot build syntax tree for %s: %s", path, e)
            logger.debug("Builder traceback", exc_info=e)
            message = f"Cannot build syntax tree: {type(e).__name__}: {e}"
            return FileOutcome(
                path,
                [_internal_finding(self.context, PARSE_FAILURE, path, message)],
                failed=True,
            )

        outcome = FileOutcome(path)
        for detector in self.detectors:
            if self.cancelled:
                return None
            if not self._wanted(detector):
                continue
            try:
                outcome.findings.extend(detector.detect(unit, self.context))
            except Exception as e:
                outcome.findings.append(self._detector_failure(detector, path, e))

        for detector in self.corpus_detectors:
            if self.cancelled:
                return None
            if not self._wanted(detector):
                continue
            try:
                outcome.facts[detector.name] = detector.collect(unit, self.context)
            except Exception as e:
                outcome.findings.append(self._detector_failure(detector, path, e))

        if self.cancelled:
            return None
        return outcome

    def _detect_sites(
        self, outcome: FileOutcome, tables: dict[str, Any]
    ) -> Optional[list[Finding]]:
        findings: list[Finding] = []
        for detector in self.corpus_detectors:
            if self.cancelled:
                return None
            facts = outcome.facts.get(detector.name)
            table = tables.get(detector.name)
            if facts is None or table is None:
                continue
            try:
                findings.extend(detector.detect_sites(facts, table, self.context))
            except Exception as e:
                findings.append(self._detector_failure(detector, outcome.path, e))
        return findings

    def _detector_failure(self, detector: Any, path: str, error: Exception) -> Finding:
        logger.warning("Detector %s failed on %s: %s", detector.name, path, error)
        logger.debug("Detector traceback", exc_info=error)
        return _internal_finding(
            self.context,
            DETECTOR_FAILURE,
            path,
            f"Detector {detector.name} failed: {type(error).__name__}: {error}",
        )

    # -- reporting --

    def _finalize(self, findings: list[Finding]) -> list[Finding]:
        kept = [f for f in findings if self.config.is_enabled(f.rule_id)]
        return sorted(kept, key=sort_key)
