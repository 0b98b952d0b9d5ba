"""Exception hierarchy for Gnarl."""

from .analysis import (
    AnalysisError,
    FileAccessError,
    PreprocessorError,
    ProcedureAborted,
)
from .base import GnarlError
from .config import (
    ConfigurationError,
    ConflictingOptionsError,
    InvalidConfigError,
)

__all__ = [
    "GnarlError",
    "AnalysisError",
    "FileAccessError",
    "PreprocessorError",
    "ProcedureAborted",
    "ConfigurationError",
    "ConflictingOptionsError",
    "InvalidConfigError",
]
