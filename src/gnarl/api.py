"""Public API for Gnarl.

Example:
    >>> from gnarl import score_source
    >>>
    >>> result = score_source("int f(void)\\n{\\n    return 0;\\n}\\n", threshold=0)
    >>> [(p.name, p.score) for p in result.procedures]
    [('f', 0.0)]
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional

from .config import load_config
from .core import ComplexityAnalyzer, RunResult


def score_source(
    text: str,
    filename: str = "<string>",
    config_file: Optional[Path] = None,
    **overrides,
) -> RunResult:
    """Score every procedure in a source text.

    Args:
        text: Decoded source text
        filename: Name reported for the procedures found
        config_file: Optional explicit config file path
        **overrides: Configuration overrides (e.g. threshold=0, penalty=3.0)

    Returns:
        RunResult with the reported procedures in discovery order

    Raises:
        GnarlError: If configuration is invalid
    """
    config = load_config(config_file=config_file, **overrides)
    return ComplexityAnalyzer(config).analyze_source(text, filename)


def score_files(
    paths: Iterable[Path],
    config_file: Optional[Path] = None,
    **overrides,
) -> RunResult:
    """Score every procedure in a sequence of files."""
    config = load_config(config_file=config_file, **overrides)
    return ComplexityAnalyzer(config).analyze_files(paths)
