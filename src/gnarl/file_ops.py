"""
Source file reading for Gnarl.

Files are read whole, either directly or through an external conditional
compilation filter (``unifdef``) when filter arguments are configured.
"""

import subprocess
from collections.abc import Sequence
from pathlib import Path

from .exceptions import FileAccessError, PreprocessorError
from .logging_config import get_logger

logger = get_logger(__name__)


def read_source(
    filepath: Path,
    unifdef_args: Sequence[str] = (),
    unifdef_exe: str = "unifdef",
    encoding: str = "utf-8",
    errors: str = "replace",
) -> str:
    """
    Read a source file, optionally filtered through unifdef.

    Args:
        filepath: File to read
        unifdef_args: Filter arguments; when empty the file is read directly
        unifdef_exe: Filter executable
        encoding: Text encoding
        errors: How to handle encoding errors

    Returns:
        File contents as string

    Raises:
        FileAccessError: If the file cannot be read
        PreprocessorError: If the filter cannot be run or fails
    """
    filepath = Path(filepath)
    if not filepath.is_file():
        raise FileAccessError(filepath, "No such file")

    if unifdef_args:
        return _read_filtered(filepath, list(unifdef_args), unifdef_exe, encoding, errors)

    try:
        with open(filepath, encoding=encoding, errors=errors, newline="") as f:
            return f.read()
    except OSError as e:
        raise FileAccessError(filepath, f"OS error: {e}")


def _read_filtered(
    filepath: Path, args: list[str], exe: str, encoding: str, errors: str
) -> str:
    command = [exe, *args, str(filepath)]
    logger.debug(f"Running {' '.join(command)}")
    try:
        result = subprocess.run(command, capture_output=True)
    except OSError as e:
        raise PreprocessorError(filepath, command, str(e))

    # unifdef exits 1 when it changed the text, 2 on trouble
    if result.returncode not in (0, 1):
        reason = result.stderr.decode(encoding, errors).strip() or f"exit status {result.returncode}"
        raise PreprocessorError(filepath, command, reason)

    return result.stdout.decode(encoding, errors)


def read_file_list(listing: str) -> list[Path]:
    """Parse a list of file names, one per line, ignoring blank lines."""
    return [Path(line.strip()) for line in listing.splitlines() if line.strip()]
