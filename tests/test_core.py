"""Tests for the run orchestrator and the public API."""

import io
import logging

from gnarl import score_files, score_source
from gnarl.config import AnalysisConfig, ScoringConfig
from gnarl.core import ComplexityAnalyzer, RunOutcome, RunResult
from gnarl.scoring import ProcedureRecord

TWO_PROCS = """\
int first(int a)
{
    if (a > 1 && a < 10 || a == 42) {
        return 1;
    }
    return 0;
}

static void second(void)
{
    puts("hi");
}
"""


def everything(**kwargs) -> AnalysisConfig:
    return AnalysisConfig(threshold=0, **kwargs)


class TestAnalyzeSource:
    """Test procedure discovery and the report filter."""

    def test_discovery_order(self):
        result = ComplexityAnalyzer(everything()).analyze_source(TWO_PROCS, "two.c")
        assert [p.name for p in result.procedures] == ["first", "second"]
        assert [p.start_line for p in result.procedures] == [1, 9]
        assert all(p.filename == "two.c" for p in result.procedures)

    def test_default_threshold_drops_simple_procedures(self, simple_source):
        result = ComplexityAnalyzer().analyze_source(simple_source)
        assert result.procedures == []
        assert result.outcome is RunOutcome.SUCCESS

    def test_ignored_procedure_skipped(self):
        config = everything(ignore=["first"])
        result = ComplexityAnalyzer(config).analyze_source(TWO_PROCS)
        assert [p.name for p in result.procedures] == ["second"]
        assert result.procedures[0].start_line == 9

    def test_unscoreable_procedure_counted(self, caplog):
        caplog.set_level(logging.WARNING, logger="gnarl")
        source = "int f(void)\n{\n    if (x) {\n        y = 1;\n"
        result = ComplexityAnalyzer(everything()).analyze_source(source, "bad.c")
        assert result.procedures == []
        assert result.unscored_count == 1
        assert "unscored: f in bad.c on line 1" in caplog.text

    def test_result_accumulates(self, simple_source):
        analyzer = ComplexityAnalyzer(everything())
        result = analyzer.analyze_source(simple_source, "a.c")
        analyzer.analyze_source(simple_source, "b.c", result)
        assert [p.filename for p in result.procedures] == ["a.c", "b.c"]

    def test_high_score_tracked(self):
        config = everything(scoring=ScoringConfig(scale=1))
        result = ComplexityAnalyzer(config).analyze_source(TWO_PROCS, "two.c")
        first, second = result.procedures
        assert first.score > second.score
        assert result.high_score == int(first.score)
        assert result.high_label == "first() in two.c"

    def test_horrid_function(self, simple_source):
        config = everything(horrid_threshold=0, scoring=ScoringConfig(scale=1))
        result = ComplexityAnalyzer(config).analyze_source(simple_source)
        assert result.high_score >= 1
        assert result.outcome is RunOutcome.HORRID_FUNCTION

    def test_trace_announces_each_file(self, simple_source):
        sink = io.StringIO()
        ComplexityAnalyzer(everything(), trace=sink).analyze_source(simple_source, "a.c")
        assert "\nLoading file a.c\n" in sink.getvalue()


class TestAnalyzeFiles:
    """Test reading files for a run."""

    def test_files_in_order(self, c_file, simple_source):
        paths = [c_file(simple_source, "one.c"), c_file(TWO_PROCS, "two.c")]
        result = ComplexityAnalyzer(everything()).analyze_files(paths)
        assert [p.name for p in result.procedures] == ["simple", "first", "second"]

    def test_missing_file_stops_the_run(self, c_file, simple_source, tmp_path, caplog):
        caplog.set_level(logging.ERROR, logger="gnarl")
        missing = tmp_path / "missing.c"
        paths = [c_file(simple_source, "one.c"), missing, c_file(TWO_PROCS, "two.c")]
        result = ComplexityAnalyzer(everything()).analyze_files(paths)
        assert result.bad_file == missing
        assert result.outcome is RunOutcome.BAD_FILE
        assert [p.name for p in result.procedures] == ["simple"]
        assert "FileAccessError" in caplog.text


class TestRunResult:
    """Test result ordering and outcome."""

    def test_sorted_by_score_then_lines(self):
        def rec(name, score, nc, lines):
            return ProcedureRecord(name, "t.c", 1, 0, score=score, nc_line_count=nc, line_count=lines)

        result = RunResult(
            procedures=[rec("a", 5, 3, 3), rec("b", 1, 9, 9), rec("c", 5, 2, 8), rec("d", 5, 2, 4)]
        )
        assert [p.name for p in result.sorted_procedures()] == ["b", "d", "c", "a"]
        assert result.total_nc_lines == 16

    def test_bad_file_beats_horrid(self, tmp_path):
        result = RunResult(high_score=500, horrid_threshold=100, bad_file=tmp_path / "x.c")
        assert result.outcome is RunOutcome.BAD_FILE


class TestApi:
    """Test the one-call entry points."""

    def test_score_source(self, simple_source):
        result = score_source(simple_source, threshold=0)
        assert [(p.name, p.score) for p in result.procedures] == [("simple", 0.0)]

    def test_score_source_uses_overrides(self, simple_source):
        result = score_source(simple_source, threshold=0, scale=1)
        assert result.procedures[0].score >= 1

    def test_score_files(self, c_file):
        result = score_files([c_file(TWO_PROCS)], threshold=0)
        assert len(result.procedures) == 2
