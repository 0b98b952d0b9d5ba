"""JSON formatter for Gnarl."""

import json

from ..config import AnalysisConfig
from ..core import RunResult
from ..stats import summarize
from .base import BaseFormatter


class JsonFormatter(BaseFormatter):
    """Render the run as JSON."""

    def format(self, result: RunResult, config: AnalysisConfig) -> str:
        data = {
            "outcome": result.outcome.value,
            "threshold": config.threshold,
            "procedures": [p.to_dict() for p in result.sorted_procedures()],
            "summary": summarize(result).to_dict(),
        }
        return json.dumps(data, indent=2) + "\n"
