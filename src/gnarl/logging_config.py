"""
Logging configuration for Gnarl.

Diagnostics (scanner complaints, invalid transitions, procedures that could
not be scored) are logged, never printed, so they always land on stderr via
the rich handler and stay out of the score report.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

LEVELS = {
    "quiet": logging.ERROR,
    "normal": logging.WARNING,
    "verbose": logging.DEBUG,
}


def setup_logging(verbosity: str = "normal") -> logging.Logger:
    """
    Route gnarl diagnostics to a rich handler on stderr.

    Calling it again replaces the handler, so the CLI can set a provisional
    level from its flags and settle it once the configuration is loaded.

    Args:
        verbosity: "quiet" (errors only), "normal" or "verbose" (debug)

    Returns:
        The root gnarl logger
    """
    level = LEVELS[verbosity]
    verbose = level == logging.DEBUG

    handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        tracebacks_show_locals=verbose,
        markup=False,
        show_time=False,
        show_path=verbose,
    )
    logging.basicConfig(level=level, format="%(message)s", handlers=[handler], force=True)

    logger = logging.getLogger("gnarl")
    logger.setLevel(level)
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger for a gnarl module (e.g. 'gnarl.core'); the root gnarl logger if None."""
    if name is None:
        return logging.getLogger("gnarl")

    if not name.startswith("gnarl"):
        name = f"gnarl.{name}"

    return logging.getLogger(name)
