"""Shared test fixtures for Gnarl tests."""

import os

import pytest

from gnarl.config import ScoringConfig
from gnarl.scanning import Scanner, find_next_procedure, find_procedure_end
from gnarl.scoring import ProcedureRecord, ProcedureScorer


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep user and project config files and GNARL_* variables out of tests."""
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.chdir(tmp_path)
    for key in list(os.environ):
        if key.startswith("GNARL_"):
            monkeypatch.delenv(key)


@pytest.fixture
def score_first():
    """Score the first procedure found in a source text.

    Returns the scored ProcedureRecord; keyword arguments go to ScoringConfig.
    """

    def _score(source: str, trace=None, **scoring) -> ProcedureRecord:
        scanner = Scanner.from_text(source, "t.c")
        start = find_next_procedure(scanner)
        assert start is not None, "no procedure found"
        record = ProcedureRecord(
            name=start.name,
            filename="t.c",
            start_line=start.line,
            end=find_procedure_end(scanner.buffer.text, start.body_offset),
        )
        return ProcedureScorer(scanner, ScoringConfig(**scoring), trace=trace).score(record)

    return _score


@pytest.fixture
def c_file(tmp_path):
    """Write a C source file and return its path."""

    def _write(source: str, name: str = "sample.c"):
        path = tmp_path / name
        path.write_text(source, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def simple_source():
    """A one-statement procedure."""
    return """\
int simple(void)
{
    return 0;
}
"""


@pytest.fixture
def nested_source():
    """A procedure with nested loops, branches and a switch."""
    return """\
static int
nested(int a, int b)
{
    int total = 0;

    for (int i = 0; i < a; i++) {
        if (i % 2 == 0 && b > 0) {
            while (b-- > 0) {
                total += i;
            }
        } else if (i > 10) {
            total--;
        } else {
            switch (b) {
            case 1:
                total++;
                break;
            default:
                break;
            }
        }
    }
    return total;
}
"""
