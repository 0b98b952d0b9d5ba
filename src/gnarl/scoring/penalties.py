"""Operator-mix penalties for parenthesized expressions.

Each expression's operators fall into four categories: logical AND,
logical OR, assignment and comparison. A single category costs nothing
(except assignment, which always costs). Mixes are charged according to
the combination present; comparisons mixed with boolean operators use the
gentler demi-nesting penalty.
"""

from __future__ import annotations

from typing import Callable, Optional

from .models import OperatorMix

AND = 0x01
OR = 0x02
ASSIGN = 0x04
RELOP = 0x08

_Rule = Callable[[OperatorMix, float, float], float]


def _and_or(mix: OperatorMix) -> int:
    return (mix.and_count + 1) * mix.or_count


def _assign_only(mix: OperatorMix, penalty: float, demi: float) -> float:
    return penalty * mix.assign_count


def _and_with_or(mix: OperatorMix, penalty: float, demi: float) -> float:
    return penalty * _and_or(mix)


def _assign_and_or(mix: OperatorMix, penalty: float, demi: float) -> float:
    return penalty * mix.assign_count + penalty * _and_or(mix)


def _assign_with_boolean(mix: OperatorMix, penalty: float, demi: float) -> float:
    return penalty * mix.assign_count + (mix.and_count + mix.or_count)


def _relop_with_boolean(mix: OperatorMix, penalty: float, demi: float) -> float:
    return demi * mix.relop_count


def _relop_and_or(mix: OperatorMix, penalty: float, demi: float) -> float:
    return demi * (mix.relop_count * _and_or(mix))


def _assign_with_relop(mix: OperatorMix, penalty: float, demi: float) -> float:
    return penalty * mix.assign_count + demi * mix.relop_count


def _many(mix: OperatorMix, penalty: float, demi: float) -> float:
    return penalty * (mix.assign_count + mix.relop_count + mix.and_count + mix.or_count)


def _everything(mix: OperatorMix, penalty: float, demi: float) -> float:
    return penalty * (mix.assign_count + mix.relop_count + _and_or(mix))


# which-bitmask -> (rule, description). Absent entries carry no penalty.
MIX_RULES: dict[int, tuple[_Rule, str]] = {
    ASSIGN: (_assign_only, "assignment within expression"),
    AND | OR: (_and_with_or, "AND and OR expressions"),
    AND | OR | ASSIGN: (_assign_and_or, "AND and OR expressions"),
    AND | ASSIGN: (_assign_with_boolean, "assignments and boolean operators"),
    OR | ASSIGN: (_assign_with_boolean, "assignments and boolean operators"),
    AND | RELOP: (_relop_with_boolean, "comparison and boolean operators"),
    OR | RELOP: (_relop_with_boolean, "comparison and boolean operators"),
    AND | OR | RELOP: (_relop_and_or, "AND, OR and comparison operators"),
    ASSIGN | RELOP: (_assign_with_relop, "assignments and comparison operators"),
    AND | ASSIGN | RELOP: (_many, "many kinds of operators"),
    OR | ASSIGN | RELOP: (_many, "many kinds of operators"),
    AND | OR | ASSIGN | RELOP: (_everything, "*ALL* kinds of operators"),
}


def apply_mix_penalty(mix: OperatorMix, penalty: float, demi_penalty: float) -> Optional[str]:
    """Add the penalty for ``mix`` to its result.

    Returns a description of the mix when a penalty applied, else None.
    """
    rule = MIX_RULES.get(mix.which)
    if rule is None:
        return None
    charge, description = rule
    mix.result += charge(mix, penalty, demi_penalty)
    return description
