"""Tests for report formatting."""

import json

import pytest

from gnarl.config import AnalysisConfig
from gnarl.core import RunResult
from gnarl.formatters import JsonFormatter, TextFormatter, get_formatter
from gnarl.scoring import ProcedureRecord


@pytest.fixture
def result():
    procedures = [
        ProcedureRecord("g", "t.c", 9, 0, score=12, line_count=6, nc_line_count=5),
        ProcedureRecord("f", "t.c", 1, 0, score=3, line_count=4, nc_line_count=2),
    ]
    return RunResult(procedures=procedures, high_score=12, high_label="g() in t.c", horrid_threshold=100)


class TestTextFormatter:
    """Test the fixed-width text report."""

    def test_score_table(self, result):
        out = TextFormatter().format(result, AnalysisConfig()).splitlines()
        assert out == [
            "Complexity Scores",
            "Score | ln-ct | nc-lns| file-name(line): proc-name",
            "    3       4       2   t.c(1): f",
            "   12       6       5   t.c(9): g",
            "total nc-lns        7",
        ]

    def test_no_header(self, result):
        out = TextFormatter().format(result, AnalysisConfig(no_header=True)).splitlines()
        assert out == ["    3       4       2   t.c(1): f", "   12       6       5   t.c(9): g"]

    def test_histogram_only(self, result):
        config = AnalysisConfig(show_scores=False, histogram=True)
        out = TextFormatter().format(result, config).splitlines()
        assert out[:4] == [
            "Complexity Histogram",
            "Score-Range  Lin-Ct",
            "    0-9           2 " + "*" * 24,
            "   10-19          5 " + "*" * 60,
        ]
        assert "Scored procedure ct:        2" in out
        assert "Non-comment line ct:        7" in out
        assert "Highest score:             12 (g() in t.c)" in out
        assert not any(line.startswith("Unscored") for line in out)
        assert not any(line.startswith("total") for line in out)

    def test_histogram_after_scores(self, result):
        config = AnalysisConfig(histogram=True)
        out = TextFormatter().format(result, config).splitlines()
        ix = out.index("Complexity Histogram")
        assert out[ix - 1] == ""
        assert out[ix - 2].endswith("t.c(9): g")

    def test_gap_marker(self):
        procedures = [
            ProcedureRecord("a", "t.c", 1, 0, score=5, nc_line_count=1),
            ProcedureRecord("b", "t.c", 5, 0, score=45, nc_line_count=1),
        ]
        config = AnalysisConfig(show_scores=False, histogram=True, no_header=True)
        out = TextFormatter().format(RunResult(procedures=procedures), config).splitlines()
        assert out[:3] == [
            "    0-9           1 " + "*" * 60,
            "**********",
            "   40-49          1 " + "*" * 60,
        ]

    def test_unscored_line(self, result):
        result.unscored_count = 3
        config = AnalysisConfig(show_scores=False, histogram=True)
        out = TextFormatter().format(result, config).splitlines()
        assert out[-1] == "Unscored procedures:        3"

    def test_nothing_to_show(self):
        config = AnalysisConfig(show_scores=False, no_header=True)
        assert TextFormatter().format(RunResult(), config) == ""


class TestJsonFormatter:
    """Test the JSON report."""

    def test_document(self, result):
        data = json.loads(JsonFormatter().format(result, AnalysisConfig(threshold=0)))
        assert set(data) == {"outcome", "threshold", "procedures", "summary"}
        assert data["outcome"] == "success"
        assert [p["name"] for p in data["procedures"]] == ["f", "g"]
        assert data["procedures"][0]["line"] == 1
        assert data["summary"]["nc_line_count"] == 7
        assert data["summary"]["high_score"] == 12


class TestGetFormatter:
    """Test formatter lookup."""

    def test_known(self):
        assert isinstance(get_formatter("text"), TextFormatter)
        assert isinstance(get_formatter("json"), JsonFormatter)

    def test_unknown(self):
        with pytest.raises(ValueError, match="Unknown formatter"):
            get_formatter("xml")
