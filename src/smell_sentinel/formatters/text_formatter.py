"""Plain text formatter, one line per finding."""

from ..models import AnalysisResult, Finding
from .base import BaseFormatter


def format_finding(finding: Finding) -> str:
    loc = finding.location
    severity = finding.severity.value
    return f"{loc.file}:{loc.line}: [{severity}] {finding.rule_id}: {finding.message}"


class TextFormatter(BaseFormatter):
    """Render findings as ``file:line: [severity] rule-id: message`` lines."""

    def render(self, result: AnalysisResult) -> None:
        text = self.format(result)
        if text:
            print(text)

    def format(self, result: AnalysisResult) -> str:
        return "\n".join(format_finding(f) for f in result.findings)
