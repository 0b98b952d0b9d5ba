"""Data models for procedure scoring."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

# Ceiling for every score and the marker for "could not be scored".
MAX_SCORE = 999999


@dataclass
class ProcedureRecord:
    """Scoring state and result for one procedure.

    Created when a definition is found, mutated only while its body is
    scored, then handed over for reporting.

    Attributes:
        name: Procedure name (bounded length)
        filename: Source file the procedure was found in
        start_line: Line holding the procedure name
        end: Offset just past the matching closing brace
        raw_score: Accumulated score before goto charges and scaling
        score: Final reported score, 0..MAX_SCORE
        line_count: Physical lines in the body
        nc_line_count: Body lines holding at least one real token
        goto_count: Number of goto statements seen
        max_depth: Deepest statement-block nesting reached
        colon_need: Ternary "?" still waiting for their ":"
        aborted: True when the body could not be walked to its close
    """

    name: str
    filename: str
    start_line: int
    end: int
    raw_score: float = 0.0
    score: float = 0.0
    line_count: int = 0
    nc_line_count: int = 0
    goto_count: int = 0
    max_depth: int = 0
    colon_need: int = 0
    aborted: bool = False

    @property
    def unscoreable(self) -> bool:
        return self.score >= MAX_SCORE

    @property
    def rounded_score(self) -> int:
        return int(self.score + 0.5)

    @property
    def label(self) -> str:
        """Human-readable "name() in file" label."""
        return f"{self.name}() in {self.filename}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "file": self.filename,
            "line": self.start_line,
            "score": self.rounded_score,
            "line_count": self.line_count,
            "nc_line_count": self.nc_line_count,
            "goto_count": self.goto_count,
            "max_depth": self.max_depth,
        }


@dataclass
class OperatorMix:
    """Operators seen directly inside one parenthesized expression.

    Mixing kinds of operators without extra parentheses is what gets
    penalized; operators inside nested parentheses count for the nested
    expression only.
    """

    and_count: int = 0
    or_count: int = 0
    assign_count: int = 0
    relop_count: int = 0
    result: float = 1.0

    @property
    def which(self) -> int:
        """Bitmask of the operator categories present."""
        return (
            (0x01 if self.and_count else 0)
            | (0x02 if self.or_count else 0)
            | (0x04 if self.assign_count else 0)
            | (0x08 if self.relop_count else 0)
        )
