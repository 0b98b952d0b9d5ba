"""The scoring command: score files, print the report, set the exit code."""

from contextlib import ExitStack
from pathlib import Path
from typing import List, Optional

import click
import typer

from .. import __version__
from ..core import ComplexityAnalyzer
from ..exceptions import AnalysisError, ConflictingOptionsError, GnarlError
from ..formatters import get_formatter
from ..logging_config import setup_logging
from . import app
from ._common import OUTCOME_EXIT_CODES, ExitCode, console, read_input_listing, resolve_config


@app.command()
def score(
    files: Optional[List[Path]] = typer.Argument(
        None,
        help="C source files to score",
        show_default=False,
    ),
    input_list: Optional[str] = typer.Option(
        None,
        "-i",
        "--input",
        help="Read source file names from this file, one per line ('-' for stdin)",
    ),
    threshold: Optional[float] = typer.Option(
        None,
        "-t",
        "--threshold",
        help="Report procedures scoring at least this much (default: 30)",
        min=0,
    ),
    horrid_threshold: Optional[float] = typer.Option(
        None,
        "--horrid-threshold",
        help="Fail with exit status 5 if any procedure scores above this (default: 100)",
        min=0,
    ),
    scale: Optional[float] = typer.Option(
        None,
        "-s",
        "--scale",
        help="Divide raw scores by this factor (default: 20)",
    ),
    nesting_penalty: Optional[float] = typer.Option(
        None,
        "-n",
        "--nesting-penalty",
        help="Score multiplier per level of control-structure nesting (default: 2.0)",
    ),
    demi_nesting_penalty: Optional[float] = typer.Option(
        None,
        "-d",
        "--demi-nesting-penalty",
        help="Multiplier for nested parentheses and mixed comparisons (default: sqrt of the nesting penalty)",
    ),
    histogram: bool = typer.Option(
        False,
        "-H",
        "--histogram",
        help="Print a score histogram and summary statistics",
    ),
    scores: Optional[bool] = typer.Option(
        None,
        "--scores/--no-scores",
        help="Print the per-procedure score table (default: on unless --histogram)",
        show_default=False,
    ),
    no_header: bool = typer.Option(
        False,
        "-N",
        "--no-header",
        help="Omit headings and the trailing line count",
    ),
    ignore: Optional[List[str]] = typer.Option(
        None,
        "-I",
        "--ignore",
        help="Procedure name to skip (repeatable)",
    ),
    unifdef: Optional[List[str]] = typer.Option(
        None,
        "-u",
        "--unifdef",
        help="Argument for the unifdef filter (repeatable); enables filtering",
    ),
    unif_exe: Optional[str] = typer.Option(
        None,
        "--unif-exe",
        help="unifdef executable to run",
    ),
    trace: Optional[Path] = typer.Option(
        None,
        "--trace",
        help="Write per-line score tracing to this file",
        dir_okay=False,
        writable=True,
    ),
    output_format: Optional[str] = typer.Option(
        None,
        "-f",
        "--format",
        help="Report format",
        click_type=click.Choice(["text", "json"], case_sensitive=False),
    ),
    config: Optional[Path] = typer.Option(
        None,
        "-c",
        "--config",
        help="Configuration file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Log errors only",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit",
    ),
):
    """
    Score the complexity of every procedure in C source files.

    Each procedure is scored by its control-structure nesting, operator
    mixing and length. Procedures scoring below the threshold are not
    reported.

    [bold cyan]Examples:[/bold cyan]

      gnarl src/*.c

      gnarl --threshold 0 --histogram src/*.c

      find . -name '*.c' | gnarl --input -
    """
    if version:
        console.print(f"[bold cyan]Gnarl[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit(ExitCode.SUCCESS)

    logger = setup_logging("verbose" if verbose else "quiet" if quiet else "normal")

    try:
        if input_list is not None and files:
            raise ConflictingOptionsError("--input", "FILE arguments")

        settings = resolve_config(
            config=config,
            threshold=threshold,
            scores=scores,
            histogram=histogram,
            horrid_threshold=horrid_threshold,
            scale=scale,
            penalty=nesting_penalty,
            demi_penalty=demi_nesting_penalty,
            no_header=no_header or None,
            ignore=ignore or None,
            unifdef_args=unifdef or None,
            unifdef_exe=unif_exe,
            output_format=output_format.lower() if output_format else None,
            verbose=verbose,
            quiet=quiet,
        )
        setup_logging(settings.verbosity)

        paths = read_input_listing(input_list) if input_list is not None else list(files or [])
        if not paths:
            console.print("[red]Error:[/red] no source files given")
            raise typer.Exit(ExitCode.USAGE)

        with ExitStack() as stack:
            trace_fp = stack.enter_context(open(trace, "w", encoding="utf-8")) if trace else None
            analyzer = ComplexityAnalyzer(settings, trace=trace_fp)
            result = analyzer.analyze_files(paths)

        code = OUTCOME_EXIT_CODES[result.outcome]
        if code is ExitCode.BAD_FILE:
            console.print(f"[red]Error:[/red] cannot read {result.bad_file}")
            raise typer.Exit(code)

        get_formatter(settings.output_format).render(result, settings)
        raise typer.Exit(code)

    except typer.Exit:
        raise

    except AnalysisError as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(ExitCode.BAD_FILE)

    except GnarlError as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(ExitCode.USAGE)

    except KeyboardInterrupt:
        logger.info("Scoring interrupted by user")
        console.print("\n[yellow]Scoring interrupted[/yellow]")
        raise typer.Exit(130)
