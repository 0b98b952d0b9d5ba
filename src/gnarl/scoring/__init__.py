"""Procedure scoring: the recursive engine and its result records."""

from .engine import ProcedureScorer
from .models import MAX_SCORE, OperatorMix, ProcedureRecord
from .penalties import MIX_RULES, apply_mix_penalty

__all__ = [
    "MAX_SCORE",
    "MIX_RULES",
    "OperatorMix",
    "ProcedureRecord",
    "ProcedureScorer",
    "apply_mix_penalty",
]
