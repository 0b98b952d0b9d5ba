"""Analysis-related exceptions: file access, preprocessing, scoring bail-out."""

from pathlib import Path
from typing import Sequence

from .base import GnarlError


class AnalysisError(GnarlError):
    """Base class for analysis-related errors."""
    pass


class FileAccessError(AnalysisError):
    """Raised when a source file cannot be accessed or read."""

    def __init__(self, filepath: Path, reason: str):
        super().__init__(
            f"Cannot access file: {filepath}",
            details={"filepath": str(filepath), "reason": reason},
        )
        self.filepath = filepath
        self.reason = reason


class PreprocessorError(AnalysisError):
    """Raised when the preprocessor filter cannot produce a file's text."""

    def __init__(self, filepath: Path, command: Sequence[str], reason: str):
        super().__init__(
            f"Preprocessor filter failed for {filepath}",
            details={
                "filepath": str(filepath),
                "command": " ".join(command),
                "reason": reason,
            },
        )
        self.filepath = filepath
        self.command = list(command)
        self.reason = reason


class ProcedureAborted(AnalysisError):
    """A procedure body ran out before its closing brace was interpreted.

    Raised from deep inside the scoring walk and caught at the top of the
    procedure being scored; it never crosses procedure boundaries.
    """

    def __init__(self, procedure: str, offset: int):
        super().__init__(
            f"Scoring of {procedure}() abandoned",
            details={"procedure": procedure, "offset": str(offset)},
        )
        self.procedure = procedure
        self.offset = offset
