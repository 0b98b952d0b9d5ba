"""Run orchestrator for Gnarl.

Each buffer is walked procedure by procedure: the boundary finder locates
a definition, its closing brace is found, and the scoring engine walks the
body. Scored procedures then pass through the report filter and are
collected, in discovery order, into a :class:`RunResult`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterable, Optional, TextIO

from .config import AnalysisConfig
from .exceptions import AnalysisError
from .file_ops import read_source
from .logging_config import get_logger
from .scanning import Scanner, find_next_procedure, find_procedure_end
from .scoring import MAX_SCORE, ProcedureRecord, ProcedureScorer

logger = get_logger(__name__)


class RunOutcome(Enum):
    SUCCESS = "success"
    BAD_FILE = "bad_file"
    HORRID_FUNCTION = "horrid_function"


@dataclass
class RunResult:
    """Everything a run produced, ready for reporting.

    Attributes:
        procedures: Reported procedures in discovery order
        unscored_count: Procedures that could not be scored
        high_score: Highest reported score
        high_label: "name() in file" of the highest scoring procedure
        horrid_threshold: Score above which the run fails
        bad_file: The file that could not be read, if any
    """

    procedures: list[ProcedureRecord] = field(default_factory=list)
    unscored_count: int = 0
    high_score: int = 0
    high_label: str = ""
    horrid_threshold: float = 0.0
    bad_file: Optional[Path] = None

    @property
    def outcome(self) -> RunOutcome:
        if self.bad_file is not None:
            return RunOutcome.BAD_FILE
        if self.high_score > self.horrid_threshold:
            return RunOutcome.HORRID_FUNCTION
        return RunOutcome.SUCCESS

    @property
    def total_nc_lines(self) -> int:
        return sum(p.nc_line_count for p in self.procedures)

    def sorted_procedures(self) -> list[ProcedureRecord]:
        """Procedures ordered by score, then non-comment and raw line counts."""
        return sorted(
            self.procedures,
            key=lambda p: (p.score, p.nc_line_count, p.line_count),
        )


class ComplexityAnalyzer:
    """Scores every procedure of one or more source buffers."""

    def __init__(self, config: Optional[AnalysisConfig] = None, trace: Optional[TextIO] = None):
        self.config = config or AnalysisConfig()
        self.trace = trace
        self._ignored = frozenset(self.config.ignore)

    def new_result(self) -> RunResult:
        return RunResult(horrid_threshold=self.config.horrid_threshold)

    def analyze_files(self, paths: Iterable[Path]) -> RunResult:
        """Score each file in turn; stops at the first unreadable file."""
        result = self.new_result()
        for path in paths:
            try:
                text = read_source(
                    path,
                    unifdef_args=self.config.unifdef_args,
                    unifdef_exe=self.config.unifdef_exe,
                )
            except AnalysisError as e:
                logger.error(f"{e.__class__.__name__}: {e}")
                result.bad_file = Path(path)
                break
            self.analyze_source(text, str(path), result)
        return result

    def analyze_source(
        self, text: str, filename: str = "<string>", result: Optional[RunResult] = None
    ) -> RunResult:
        """Score every procedure in ``text``, adding them to ``result``."""
        if result is None:
            result = self.new_result()
        if self.trace is not None:
            self.trace.write(f"\nLoading file {filename}\n")

        scanner = Scanner.from_text(text, filename)
        scorer = ProcedureScorer(scanner, self.config.scoring, trace=self.trace)

        while True:
            start = find_next_procedure(scanner)
            if start is None:
                break

            record = ProcedureRecord(
                name=start.name,
                filename=filename,
                start_line=start.line,
                end=find_procedure_end(scanner.buffer.text, start.body_offset),
            )
            if record.name in self._ignored:
                logger.debug(f"Skipping ignored procedure {record.name}() in {filename}")
                scanner.seek(record.end)
                continue

            scorer.score(record)
            self._add(record, result)

        return result

    def _add(self, record: ProcedureRecord, result: RunResult) -> None:
        """Apply the report filter and keep the running high score."""
        if record.score < self.config.report_threshold:
            return

        if record.score >= MAX_SCORE:
            logger.warning(
                "unscored: %s in %s on line %d",
                record.name,
                record.filename,
                record.start_line,
            )
            result.unscored_count += 1
            return

        value = int(record.score)
        if value > result.high_score:
            result.high_score = value
            result.high_label = record.label

        if record.nc_line_count == 0:
            record.score = 0.0

        result.procedures.append(record)
