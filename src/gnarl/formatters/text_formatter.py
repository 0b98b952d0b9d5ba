"""Plain-text score table and histogram.

The layout is fixed-width and stable so that reports can be diffed and
post-processed with ordinary text tools.
"""

from typing import List

from ..config import AnalysisConfig
from ..core import RunResult
from ..stats import histogram, summarize
from .base import BaseFormatter

SCORE_HEADER = (
    "Complexity Scores",
    "Score | ln-ct | nc-lns| file-name(line): proc-name",
)
HISTOGRAM_HEADER = (
    "Complexity Histogram",
    "Score-Range  Lin-Ct",
)
GAP_MARKER = "**********"


class TextFormatter(BaseFormatter):
    """Render the score table, and optionally the histogram and summary."""

    def format(self, result: RunResult, config: AnalysisConfig) -> str:
        lines: List[str] = []
        procedures = result.sorted_procedures()

        if config.show_scores:
            if not config.no_header:
                lines.extend(SCORE_HEADER)
            for p in procedures:
                lines.append(
                    "%5d  %6d  %6d   %s(%d): %s"
                    % (p.rounded_score, p.line_count, p.nc_line_count, p.filename, p.start_line, p.name)
                )

        if config.histogram:
            lines.extend(self._histogram(result, config))
            lines.extend(self._summary(result))
        elif not config.no_header:
            lines.append("total nc-lns %8d" % result.total_nc_lines)

        if not lines:
            return ""
        return "\n".join(lines) + "\n"

    def _histogram(self, result: RunResult, config: AnalysisConfig) -> List[str]:
        lines: List[str] = []
        if not config.no_header:
            if config.show_scores:
                lines.append("")
            lines.extend(HISTOGRAM_HEADER)

        for row in histogram(result.sorted_procedures()):
            if row.gap_before:
                lines.append(GAP_MARKER)
            if row.width > 0:
                lines.append("%5d-%-5d %7d %s" % (row.low, row.high, row.line_count, "*" * row.width))
            else:
                lines.append("%5d-%-5d %7d" % (row.low, row.high, row.line_count))
            if row.section_end:
                lines.append("")
        return lines

    def _summary(self, result: RunResult) -> List[str]:
        s = summarize(result)
        p25, p50, p75 = s.percentiles
        lines = [
            "",
            "Scored procedure ct:  %7d" % s.procedure_count,
            "Non-comment line ct:  %7d" % s.nc_line_count,
            "Average line score:   %7d" % s.average_score,
            "25%%-ile score:        %7d (75%% in higher score procs)" % p25,
            "50%%-ile score:        %7d (half in higher score procs)" % p50,
            "75%%-ile score:        %7d (25%% in higher score procs)" % p75,
            "Highest score:        %7d (%s)" % (s.high_score, s.high_label),
        ]
        if s.unscored_count > 0:
            lines.append("Unscored procedures:  %7d" % s.unscored_count)
        return lines
