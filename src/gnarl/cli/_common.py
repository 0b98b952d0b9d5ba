"""Shared CLI helpers."""

import sys
from enum import IntEnum
from pathlib import Path
from typing import List, Optional

from rich.console import Console

from ..config import AnalysisConfig, load_config
from ..core import RunOutcome
from ..exceptions import FileAccessError
from ..file_ops import read_file_list

console = Console()


class ExitCode(IntEnum):
    SUCCESS = 0
    USAGE = 1
    BAD_FILE = 2
    HORRID_FUNCTION = 5


OUTCOME_EXIT_CODES = {
    RunOutcome.SUCCESS: ExitCode.SUCCESS,
    RunOutcome.BAD_FILE: ExitCode.BAD_FILE,
    RunOutcome.HORRID_FUNCTION: ExitCode.HORRID_FUNCTION,
}


def resolve_config(
    config: Optional[Path] = None,
    threshold: Optional[float] = None,
    scores: Optional[bool] = None,
    histogram: bool = False,
    **overrides,
) -> AnalysisConfig:
    """Build the run configuration from CLI options.

    Without an explicit ``--scores``/``--no-scores`` the score table is shown
    unless a histogram was asked for; a histogram-only run reports every
    procedure unless a threshold was given.
    """
    if scores is None and histogram:
        scores = False
        if threshold is None:
            threshold = 0.0
    return load_config(
        config_file=config,
        threshold=threshold,
        show_scores=scores,
        histogram=histogram or None,
        **overrides,
    )


def read_input_listing(source: str) -> List[Path]:
    """File names listed one per line in ``source`` (``-`` for stdin)."""
    if source == "-":
        return read_file_list(sys.stdin.read())
    path = Path(source)
    try:
        return read_file_list(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise FileAccessError(path, f"OS error: {e}")
