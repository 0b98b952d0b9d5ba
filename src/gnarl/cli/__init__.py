"""CLI entry point."""

import sys

import click
import typer

from ._common import ExitCode

app = typer.Typer(
    name="gnarl",
    help="Gnarl - score the complexity of C procedures",
    add_completion=False,
    rich_markup_mode="rich",
)


# Import the command to register it
from .score import score as _score  # noqa: F401, E402

# Newer typer releases bundle their own click; catch its errors as well as click's.
_CLICK_ERRORS = tuple(
    {click.ClickException}
    | {c for c in typer.BadParameter.__mro__ if c.__name__ == "ClickException"}
)
_ABORTS = tuple({click.exceptions.Abort, typer.Abort})


def main() -> None:
    """Console-script entry point; command-line usage errors exit with 1."""
    try:
        code = app(standalone_mode=False)
    except _CLICK_ERRORS as e:
        e.show()
        sys.exit(ExitCode.USAGE)
    except _ABORTS:
        sys.exit(130)
    sys.exit(code or ExitCode.SUCCESS)
