"""Base formatter interface for Gnarl output rendering."""

from abc import ABC, abstractmethod

from ..config import AnalysisConfig
from ..core import RunResult


class BaseFormatter(ABC):
    """Abstract base class for output formatters."""

    def render(self, result: RunResult, config: AnalysisConfig) -> None:
        """Write the report to stdout."""
        print(self.format(result, config), end="")

    @abstractmethod
    def format(self, result: RunResult, config: AnalysisConfig) -> str:
        """Return formatted string representation of the run."""
