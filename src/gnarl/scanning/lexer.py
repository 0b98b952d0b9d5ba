"""Hand-rolled tokenizer for C-like source text.

The scanner produces one token per call, skipping whitespace, comments and
preprocessor directives while keeping two line counters up to date: the
physical line and the count of lines holding at least one real token.

Malformed input (unterminated comments, literals or directives, unknown
characters) is reported as end of input so that the caller can give up on
the current procedure without crashing the run.
"""

from __future__ import annotations

from typing import Callable, Optional

from ..logging_config import get_logger
from .chartypes import (
    NAME,
    NUL,
    SPACE,
    STAR_OR_NL,
    break_chars,
    is_char_type,
    is_name_start,
    span_chars,
)
from .source import SourceBuffer
from .tokens import PUNCTUATION, Token, TokenKind, lookup_keyword

logger = get_logger(__name__)


class Scanner:
    """Tokenizer over a :class:`SourceBuffer` with one token of pushback."""

    def __init__(self, buffer: SourceBuffer):
        self.buffer = buffer
        self.last_kind: TokenKind = TokenKind.EOF
        self.last_token: Optional[Token] = None
        # (token, cursor after it, line after it) while a token is pushed back
        self._pushed: Optional[tuple[Token, int, int]] = None
        self._operators: dict[str, Callable[[], TokenKind]] = {
            "!": self._bang,
            '"': lambda: self._quoted('"'),
            "'": lambda: self._quoted("'"),
            "#": self._directive,
            "%": self._assign_or_arith,
            "&": self._ampersand,
            "*": self._assign_or_arith,
            "+": self._plus,
            "-": self._hyphen,
            "/": self._slash,
            "<": lambda: self._shift_or_relation("<"),
            "=": self._equal,
            ">": lambda: self._shift_or_relation(">"),
            "^": self._caret,
            "|": self._vertical_bar,
            ".": self._dot,
        }

    @classmethod
    def from_text(cls, text: str, filename: str = "<string>") -> "Scanner":
        return cls(SourceBuffer(text, filename))

    # ── Public API ──────────────────────────────────────────────────

    @property
    def filename(self) -> str:
        return self.buffer.filename

    @property
    def cursor(self) -> int:
        return self.buffer.cursor

    @property
    def line(self) -> int:
        return self.buffer.line

    @property
    def nc_line(self) -> int:
        return self.buffer.nc_line

    def next_token(self) -> Token:
        """Scan and return the next token, advancing past it."""
        buf = self.buffer
        if self._pushed is not None:
            token, cursor, line = self._pushed
            self._pushed = None
            buf.cursor = cursor
            buf.line = line
            self.last_token = token
            self.last_kind = token.kind
            return token

        while True:
            if not self._skip_blanks():
                token = Token(TokenKind.EOF, buf.cursor, 0, buf.line)
                self.last_token = token
                self.last_kind = TokenKind.EOF
                return token

            start, start_line = buf.cursor, buf.line
            ch = buf.text[buf.cursor]
            buf.cursor += 1
            kind = self._classify(ch)
            if kind is not TokenKind.EMPTY:
                break

        if buf.bol:
            buf.bol = False
            buf.nc_line += 1

        token = Token(kind, start, buf.cursor - start, start_line)
        self.last_token = token
        self.last_kind = kind
        return token

    def unget_token(self) -> None:
        """Push back the most recent token (one level only).

        The cursor and physical line return to the values recorded at the
        start of that token; the next call to :meth:`next_token` replays it.
        """
        token = self.last_token
        if token is None or self._pushed is not None:
            return
        buf = self.buffer
        self._pushed = (token, buf.cursor, buf.line)
        buf.cursor = token.offset
        buf.line = token.line

    def seek(self, offset: int) -> None:
        """Reposition the cursor, dropping any pushed-back token."""
        self._pushed = None
        self.buffer.seek(offset)

    def token_text(self, token: Token) -> str:
        return token.text(self.buffer.text)

    # ── Whitespace, comments ────────────────────────────────────────

    def _skip_blanks(self) -> bool:
        buf = self.buffer
        text = buf.text
        while True:
            ch = text[buf.cursor] if buf.cursor < len(text) else NUL
            if ch == NUL:
                return False
            if ch == "\n":
                buf.line += 1
                buf.bol = True
            elif not is_char_type(ch, SPACE):
                return True
            buf.cursor += 1

    def _skip_comment(self, pos: int) -> bool:
        """Skip a ``/* */`` comment whose body starts at ``pos``.

        Returns False (cursor left on the NUL) if the comment never ends.
        """
        buf = self.buffer
        text = buf.text
        while True:
            pos = break_chars(text, pos, STAR_OR_NL)
            ch = text[pos]
            if ch == NUL:
                buf.cursor = pos
                return False
            pos += 1
            if ch == "\n":
                buf.line += 1
            elif ch == "*" and text[pos] == "/":
                buf.cursor = pos + 1
                return True

    def _skip_to_eol(self, pos: int) -> bool:
        """Move the cursor to the end of the line containing ``pos``."""
        buf = self.buffer
        text = buf.text
        while text[pos] not in "\n\r\0":
            pos += 1
        buf.cursor = pos
        return text[pos] != NUL

    # ── Token classification ────────────────────────────────────────

    def _classify(self, ch: str) -> TokenKind:
        if "a" <= ch <= "z":
            return self._word()
        if is_name_start(ch):
            self.buffer.cursor = span_chars(self.buffer.text, self.buffer.cursor, NAME)
            return TokenKind.NAME
        if "0" <= ch <= "9":
            self.buffer.cursor = span_chars(self.buffer.text, self.buffer.cursor, NAME)
            return TokenKind.NUMBER

        kind = PUNCTUATION.get(ch)
        if kind is not None:
            return kind

        handler = self._operators.get(ch)
        if handler is not None:
            return handler()

        if ch == "\\":
            return TokenKind.EMPTY
        if ch == "~":
            return TokenKind.ARITH_OP
        return self._unknown(ch)

    def _word(self) -> TokenKind:
        """Lowercase-initial identifier: keyword, ``extern "C" {`` or name."""
        buf = self.buffer
        text = buf.text
        start = buf.cursor - 1
        end = span_chars(text, buf.cursor, NAME)
        kind = lookup_keyword(text[start:end])
        buf.cursor = end

        if kind is TokenKind.KW_EXTERN:
            return self._extern_linkage()
        if kind is not None:
            return kind

        # Fold "ns::name" qualifiers into one name.
        while text[end] == ":" and buf.char(end + 1) == ":" and is_name_start(buf.char(end + 2)):
            end = span_chars(text, end + 2, NAME)
        buf.cursor = end
        return TokenKind.NAME

    def _extern_linkage(self) -> TokenKind:
        """``extern "C" {`` is dropped; any other ``extern`` is a plain name."""
        buf = self.buffer
        text = buf.text
        pos = buf.cursor
        newlines = 0

        def skip_space(p: int) -> int:
            nonlocal newlines
            while text[p] != NUL and is_char_type(text[p], SPACE):
                if text[p] == "\n":
                    newlines += 1
                p += 1
            return p

        pos = skip_space(pos)
        if text[pos : pos + 3] != '"C"':
            return TokenKind.NAME
        pos = skip_space(pos + 3)
        if text[pos] != "{":
            return TokenKind.NAME
        buf.cursor = pos + 1
        buf.line += newlines
        return TokenKind.EMPTY

    def _next_is(self, ch: str) -> bool:
        """Consume the next character if it is ``ch``."""
        buf = self.buffer
        if buf.char(buf.cursor) == ch:
            buf.cursor += 1
            return True
        return False

    def _bang(self) -> TokenKind:
        return TokenKind.REL_OP if self._next_is("=") else TokenKind.ARITH_OP

    def _assign_or_arith(self) -> TokenKind:
        return TokenKind.ASSIGN if self._next_is("=") else TokenKind.ARITH_OP

    def _ampersand(self) -> TokenKind:
        if self._next_is("&"):
            return TokenKind.LOGIC_AND
        return self._assign_or_arith()

    def _vertical_bar(self) -> TokenKind:
        if self._next_is("|"):
            return TokenKind.LOGIC_OR
        return self._assign_or_arith()

    def _plus(self) -> TokenKind:
        if self._next_is("+"):
            return TokenKind.ARITH_OP
        return self._assign_or_arith()

    def _hyphen(self) -> TokenKind:
        if self._next_is(">") or self._next_is("-"):
            return TokenKind.ARITH_OP
        return self._assign_or_arith()

    def _caret(self) -> TokenKind:
        return self._assign_or_arith()

    def _equal(self) -> TokenKind:
        return TokenKind.REL_OP if self._next_is("=") else TokenKind.ASSIGN

    def _shift_or_relation(self, ch: str) -> TokenKind:
        if self._next_is(ch):
            # "<<" / ">>", or the "<<=" / ">>=" assignments
            return TokenKind.ASSIGN if self._next_is("=") else TokenKind.ARITH_OP
        self._next_is("=")
        return TokenKind.REL_OP

    def _dot(self) -> TokenKind:
        buf = self.buffer
        if buf.char(buf.cursor) == "." and buf.char(buf.cursor + 1) == ".":
            buf.cursor += 2
            return TokenKind.ELLIPSIS
        return TokenKind.ARITH_OP

    def _slash(self) -> TokenKind:
        buf = self.buffer
        nxt = buf.char(buf.cursor)
        if nxt == "/":
            self._skip_to_eol(buf.cursor)
            return TokenKind.EMPTY
        if nxt == "*":
            if not self._skip_comment(buf.cursor + 1):
                return TokenKind.EOF
            return TokenKind.EMPTY
        return self._assign_or_arith()

    def _quoted(self, quote: str) -> TokenKind:
        """String or character literal; scans as a name."""
        buf = self.buffer
        text = buf.text
        pos = buf.cursor
        kind = TokenKind.NAME
        while text[pos] != quote:
            ch = text[pos]
            if ch == "\\":
                pos += 1
                ch = text[pos]
            if ch == NUL:
                kind = TokenKind.EOF
                break
            if ch == "\n":
                buf.line += 1
            pos += 1
        buf.cursor = min(pos + 1, len(text) - 1)
        return kind

    def _directive(self) -> TokenKind:
        """Consume a preprocessor line, or scan ``#`` as an operator mid-line."""
        buf = self.buffer
        if not buf.bol:
            return TokenKind.ARITH_OP

        text = buf.text
        pos = buf.cursor
        kind = TokenKind.EMPTY
        while text[pos] != "\n":
            ch = text[pos]
            if ch == NUL:
                kind = TokenKind.EOF
                break
            if ch == "\\":
                pos += 1
                if text[pos] == NUL:
                    kind = TokenKind.EOF
                    break
                if text[pos] == "\n":
                    buf.line += 1
            elif ch == "/":
                nxt = text[pos + 1]
                if nxt == "*":
                    if not self._skip_comment(pos + 2):
                        kind = TokenKind.EOF
                        pos = buf.cursor
                        break
                    pos = buf.cursor
                    continue
                if nxt == "/":
                    if not self._skip_to_eol(pos + 1):
                        kind = TokenKind.EOF
                    pos = buf.cursor
                    break
            pos += 1

        buf.cursor = pos
        buf.bol = True
        return kind

    def _unknown(self, ch: str) -> TokenKind:
        code = ord(ch)
        shown = ch if ch.isprintable() and code < 128 else "?"
        logger.warning(
            "invalid character in %s on line %d: 0x%02X (%s)",
            self.buffer.filename,
            self.buffer.line,
            code,
            shown,
        )
        return TokenKind.EOF
