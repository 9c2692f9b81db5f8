"""JSON formatter."""

import json

from ..models import AnalysisResult
from .base import BaseFormatter


class JsonFormatter(BaseFormatter):
    """Render findings as a JSON array of flat records."""

    def render(self, result: AnalysisResult) -> None:
        print(self.format(result))

    def format(self, result: AnalysisResult) -> str:
        data = [f.to_dict() for f in result.findings]
        return json.dumps(data, indent=2)
