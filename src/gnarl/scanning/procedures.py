"""Locate function definitions in the token stream.

A definition is a name (possibly preceded by return-type names and pointer
stars), a balanced parameter list, and an opening brace. Everything else
at file scope (prototypes, typedefs, initialized data, struct bodies) is
skipped up to the end of its statement.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from .chartypes import NUL
from .lexer import Scanner
from .tokens import Token, TokenKind

# A closing brace at the start of a line ends a multi-line body.
_CLOSE_BRACE_RE = re.compile(r"[\r\n]\}")

MAX_NAME_LENGTH = 255


def truncate_name(name: str, limit: int = MAX_NAME_LENGTH) -> str:
    """Bound a procedure name to ``limit`` characters (longer names are cut)."""
    return name[:limit]


@dataclass(frozen=True)
class ProcedureStart:
    """Where a procedure definition was found.

    Attributes:
        name: Procedure name, bounded to MAX_NAME_LENGTH characters
        name_offset: Offset of the name in the source text
        line: Line on which the name appears
        body_offset: Offset just past the opening brace
        brace_line: Line holding the opening brace
    """

    name: str
    name_offset: int
    line: int
    body_offset: int
    brace_line: int


def _skip_params(scanner: Scanner) -> TokenKind:
    """Consume a parameter list up to its matching close paren."""
    depth = 1
    while True:
        kind = scanner.next_token().kind
        if kind is TokenKind.OPEN_PAREN:
            depth += 1
        elif kind is TokenKind.CLOSE_PAREN:
            depth -= 1
            if depth == 0:
                return kind
        elif kind is TokenKind.EOF:
            return kind


def _skip_statement(scanner: Scanner) -> TokenKind:
    """Skip to a top-level ``;`` or to a ``}`` that starts a line.

    The brace must also close every ``{`` seen since skipping began, which
    tells a body closer in column 1 from an inline initializer's brace.
    """
    depth = 1 if scanner.last_kind is TokenKind.OPEN_BRACE else 0
    buf = scanner.buffer
    while True:
        token = scanner.next_token()
        kind = token.kind
        if kind is TokenKind.OPEN_BRACE:
            depth += 1
        elif kind is TokenKind.CLOSE_BRACE:
            depth -= 1
            if depth == 0 and buf.char(token.offset - 1) == "\n":
                return kind
        elif kind is TokenKind.SEMI:
            if depth == 0:
                return kind
        elif kind is TokenKind.EOF:
            return kind


def find_next_procedure(scanner: Scanner) -> Optional[ProcedureStart]:
    """Scan forward to the next function definition.

    Returns the definition's start with the scanner positioned just after
    its opening brace, or None when the input is exhausted.
    """
    while True:
        token = scanner.next_token()
        if token.kind is TokenKind.EOF:
            return None
        if token.kind is TokenKind.SEMI:
            continue
        if token.kind is not TokenKind.NAME:
            if _skip_statement(scanner) is TokenKind.EOF:
                return None
            continue

        # The last name of a "type * name" chain is the candidate.
        name_token: Token = token
        while token.kind is TokenKind.NAME:
            name_token = token
            token = scanner.next_token()
            while token.kind is TokenKind.ARITH_OP:
                token = scanner.next_token()

        if token.kind is TokenKind.EOF:
            return None
        if token.kind is TokenKind.SEMI:
            continue
        if token.kind is not TokenKind.OPEN_PAREN:
            if _skip_statement(scanner) is TokenKind.EOF:
                return None
            continue

        if _skip_params(scanner) is TokenKind.EOF:
            return None

        token = scanner.next_token()
        if token.kind is TokenKind.OPEN_BRACE:
            return ProcedureStart(
                name=truncate_name(scanner.token_text(name_token)),
                name_offset=name_token.offset,
                line=name_token.line,
                body_offset=scanner.cursor,
                brace_line=scanner.line,
            )
        if token.kind is TokenKind.EOF:
            return None


def find_procedure_end(text: str, body_offset: int) -> int:
    """Return the offset just past a procedure's closing brace.

    A body that closes on the line of its opening brace ends at the brace
    that balances it. Otherwise the body ends at the first ``}`` placed at
    the start of a line. Without one, the end of text is returned and the
    scoring walk runs out of input.
    """
    end_of_text = text.find(NUL)
    if end_of_text < 0:
        end_of_text = len(text)

    depth = 1
    pos = body_offset
    while pos < end_of_text:
        ch = text[pos]
        if ch in "\r\n":
            break
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return pos + 1
        elif ch in "\"'":
            close = _skip_literal(text, pos, end_of_text)
            if close < 0:
                break
            pos = close
        elif ch == "/" and text.startswith("//", pos):
            break
        elif ch == "/" and text.startswith("/*", pos):
            close = text.find("*/", pos + 2, end_of_text)
            if close < 0 or "\n" in text[pos:close]:
                break
            pos = close + 1
        pos += 1

    match = _CLOSE_BRACE_RE.search(text, pos, end_of_text)
    if match is None:
        return end_of_text
    return match.end()


def _skip_literal(text: str, pos: int, limit: int) -> int:
    """Offset of the quote closing the literal opened at ``pos`` (-1 if none on this line)."""
    quote = text[pos]
    pos += 1
    while pos < limit:
        ch = text[pos]
        if ch == "\\":
            pos += 2
            continue
        if ch == quote:
            return pos
        if ch in "\r\n":
            return -1
        pos += 1
    return -1
