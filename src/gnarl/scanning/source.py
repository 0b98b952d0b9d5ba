"""In-memory source buffer with cursor and line bookkeeping."""

from __future__ import annotations

from .chartypes import NUL


class SourceBuffer:
    """The full decoded text of one input plus scan position state.

    Attributes:
        filename: Name used in diagnostics
        text: Source text followed by a NUL sentinel
        cursor: Offset of the next character to scan
        line: Current physical line (1-indexed)
        nc_line: Count of lines that produced at least one real token
        bol: True until the first real token on the current line
    """

    def __init__(self, text: str, filename: str = "<string>"):
        self.filename = filename
        self.text = text + NUL
        self.cursor = 0
        self.line = 1
        self.nc_line = 0
        self.bol = True

    def __len__(self) -> int:
        """Length of the source, excluding the sentinel."""
        return len(self.text) - 1

    def char(self, pos: int) -> str:
        """Character at ``pos``, or NUL past the end of the text."""
        if 0 <= pos < len(self.text):
            return self.text[pos]
        return NUL

    def seek(self, offset: int) -> None:
        """Move the cursor to ``offset`` keeping the physical line in step.

        Non-comment line accounting is not replayed; callers use this only
        to skip text that is not being scored.
        """
        offset = max(0, min(offset, len(self)))
        if offset >= self.cursor:
            self.line += self.text.count("\n", self.cursor, offset)
        else:
            self.line -= self.text.count("\n", offset, self.cursor)
        self.cursor = offset

    def __repr__(self) -> str:
        return (
            f"SourceBuffer({self.filename!r}, cursor={self.cursor}, "
            f"line={self.line}, nc_line={self.nc_line})"
        )
