"""
Gnarl - Procedure complexity scoring for C-like source code

Scores every function definition by its control-structure nesting,
operator mixing and length, without parsing: a hand-rolled tokenizer and a
recursive, token-driven scorer stand in for a grammar.
"""

__version__ = "0.1.0"

from .api import score_files, score_source
from .core import ComplexityAnalyzer, RunOutcome, RunResult
from .scoring import MAX_SCORE, ProcedureRecord

__all__ = [
    "score_source",  # One-call entry point
    "score_files",
    "ComplexityAnalyzer",
    "RunOutcome",
    "RunResult",
    "ProcedureRecord",
    "MAX_SCORE",
]
