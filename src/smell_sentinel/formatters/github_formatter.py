"""GitHub Actions formatter: workflow command annotations."""

from ..models import AnalysisResult, Finding, Severity
from .base import BaseFormatter

_LEVELS = {
    Severity.ERROR: "error",
    Severity.WARNING: "warning",
    Severity.INFO: "notice",
}


def _escape_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def _escape_property(value: str) -> str:
    return _escape_data(value).replace(":", "%3A").replace(",", "%2C")


class GithubFormatter(BaseFormatter):
    """Output ``::error`` / ``::warning`` / ``::notice`` annotations."""

    def render(self, result: AnalysisResult) -> None:
        text = self.format(result)
        if text:
            print(text)

    def format(self, result: AnalysisResult) -> str:
        return "\n".join(self._annotation(f) for f in result.findings)

    def _annotation(self, finding: Finding) -> str:
        loc = finding.location
        props = (
            f"file={_escape_property(loc.file)},line={loc.line},endLine={loc.end_line},"
            f"col={loc.column},title={_escape_property(finding.rule_id)}"
        )
        message = finding.message
        if finding.suggested_fix:
            message = f"{message}\n{finding.suggested_fix}"
        return f"::{_LEVELS[finding.severity]} {props}::{_escape_data(message)}"
