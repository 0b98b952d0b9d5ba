"""Score distribution statistics: histogram buckets and weighted percentiles.

Every statistic is weighted by non-comment line count, so a long procedure
counts for more than a short one with the same score.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from .core import RunResult
from .scoring import ProcedureRecord

BAR_WIDTH = 60


def hash_score(score: float) -> int:
    """Histogram bucket for a score.

    Buckets are 10 wide below 100, 100 wide below 1000, 1000 wide beyond.
    """
    sc = int(score + 0.5)
    if sc < 10:
        return 0
    if sc < 100:
        return sc // 10
    if sc < 1000:
        return 9 + sc // 100
    return 18 + sc // 1000


def bucket_bounds(index: int) -> tuple[int, int]:
    """Inclusive (low, high) score range of a histogram bucket."""
    if index < 10:
        return index * 10, index * 10 + 9
    if index < 19:
        low = (index - 9) * 100
        return low, low + 99
    low = (index - 18) * 1000
    return low, low + 999


@dataclass(frozen=True)
class HistogramRow:
    """One histogram line.

    Attributes:
        low: Lowest score in the bucket
        high: Highest score in the bucket
        line_count: Non-comment lines of the procedures in the bucket
        width: Bar length, scaled so the fullest bucket gets BAR_WIDTH
        gap_before: Empty buckets were collapsed just before this row
        section_end: Last bucket of a bucket width (90-99 and 900-999)
    """

    low: int
    high: int
    line_count: int
    width: int
    gap_before: bool = False
    section_end: bool = False


def histogram(procedures: Sequence[ProcedureRecord]) -> list[HistogramRow]:
    """Bucket procedures by score, summing non-comment lines per bucket.

    A run of two or more empty buckets is dropped and flagged on the next
    row shown; empty buckets before the first populated one are dropped.
    """
    if not procedures:
        return []

    buckets = np.array([hash_score(p.score) for p in procedures])
    weights = np.array([p.nc_line_count for p in procedures], dtype=float)
    counts = np.bincount(buckets, weights=weights).astype(int)
    max_ct = int(counts.max())

    rows: list[HistogramRow] = []
    skipping = True
    first = True
    for ix, ct in enumerate(counts):
        ct = int(ct)
        if ct == 0:
            next_empty = ix + 1 < len(counts) and counts[ix + 1] == 0
            skipping = skipping or next_empty
            if skipping:
                continue

        gap = skipping and not first
        skipping = first = False

        low, high = bucket_bounds(ix)
        rows.append(
            HistogramRow(
                low=low,
                high=high,
                line_count=ct,
                width=(BAR_WIDTH * ct + max_ct // 2) // max_ct,
                gap_before=gap,
                section_end=low in (90, 900),
            )
        )
    return rows


@dataclass(frozen=True)
class ScoreSummary:
    """Run-wide statistics for the summary block."""

    procedure_count: int
    nc_line_count: int
    average_score: int
    percentiles: tuple[int, int, int]
    high_score: int
    high_label: str
    unscored_count: int

    def to_dict(self) -> dict:
        return {
            "procedure_count": self.procedure_count,
            "nc_line_count": self.nc_line_count,
            "average_score": self.average_score,
            "percentile_25": self.percentiles[0],
            "percentile_50": self.percentiles[1],
            "percentile_75": self.percentiles[2],
            "high_score": self.high_score,
            "high_label": self.high_label,
            "unscored_count": self.unscored_count,
        }


def weighted_percentiles(procedures: Sequence[ProcedureRecord]) -> tuple[int, int, int]:
    """25th, 50th and 75th percentile scores weighted by non-comment lines.

    Each is the score of the first procedure (in score order) at which the
    running line count reaches that quarter of the total.
    """
    if not procedures:
        return (0, 0, 0)

    scores = np.array([p.score for p in procedures])
    lines = np.array([p.nc_line_count for p in procedures])
    cumulative = np.cumsum(lines)
    quarter = int(cumulative[-1]) // 4

    result = []
    for q in (1, 2, 3):
        ix = int(np.searchsorted(cumulative, q * quarter, side="left"))
        ix = min(ix, len(procedures) - 1)
        result.append(int(scores[ix] + 0.5))
    return result[0], result[1], result[2]


def summarize(result: RunResult) -> ScoreSummary:
    """Summary statistics over the reported procedures of a run."""
    procedures = result.sorted_procedures()
    scores = np.array([p.score for p in procedures], dtype=float)
    lines = np.array([p.nc_line_count for p in procedures], dtype=float)

    total = int(lines.sum()) if procedures else 0
    average = float(np.dot(scores, lines) / total) if total else 0.0

    return ScoreSummary(
        procedure_count=len(procedures),
        nc_line_count=total,
        average_score=int(average + 0.5),
        percentiles=weighted_percentiles(procedures),
        high_score=result.high_score,
        high_label=result.high_label,
        unscored_count=result.unscored_count,
    )
