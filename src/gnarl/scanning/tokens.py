"""Token kinds and the transient token record produced by the scanner."""

from __future__ import annotations

from bisect import bisect_left
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class TokenKind(Enum):
    """Closed set of token kinds the scoring engine dispatches on."""

    EMPTY = "empty"
    EOF = "eof"
    NAME = "name"
    NUMBER = "number"
    REL_OP = "rel_op"
    ARITH_OP = "arith_op"
    LOGIC_AND = "logic_and"
    LOGIC_OR = "logic_or"
    ASSIGN = "assign"
    ELLIPSIS = "ellipsis"

    KW_CASE = "case"
    KW_DEFAULT = "default"
    KW_DO = "do"
    KW_ELSE = "else"
    KW_EXTERN = "extern"
    KW_FOR = "for"
    KW_GOTO = "goto"
    KW_IF = "if"
    KW_SWITCH = "switch"
    KW_WHILE = "while"

    OPEN_PAREN = "("
    CLOSE_PAREN = ")"
    COMMA = ","
    COLON = ":"
    SEMI = ";"
    QUESTION = "?"
    OPEN_BRACKET = "["
    CLOSE_BRACKET = "]"
    OPEN_BRACE = "{"
    CLOSE_BRACE = "}"


# Sorted so the scanner can binary-search it.
KEYWORDS: tuple[str, ...] = (
    "case",
    "default",
    "do",
    "else",
    "extern",
    "for",
    "goto",
    "if",
    "switch",
    "while",
)

_KEYWORD_KINDS: tuple[TokenKind, ...] = tuple(TokenKind(word) for word in KEYWORDS)

PUNCTUATION: dict[str, TokenKind] = {
    "(": TokenKind.OPEN_PAREN,
    ")": TokenKind.CLOSE_PAREN,
    ",": TokenKind.COMMA,
    ":": TokenKind.COLON,
    ";": TokenKind.SEMI,
    "?": TokenKind.QUESTION,
    "[": TokenKind.OPEN_BRACKET,
    "]": TokenKind.CLOSE_BRACKET,
    "{": TokenKind.OPEN_BRACE,
    "}": TokenKind.CLOSE_BRACE,
}

# Control statements that count as a nested construct when used as the body
# of another control statement.
CONTROL_KEYWORDS = frozenset(
    {
        TokenKind.KW_IF,
        TokenKind.KW_DO,
        TokenKind.KW_FOR,
        TokenKind.KW_SWITCH,
        TokenKind.KW_WHILE,
    }
)


def lookup_keyword(word: str) -> Optional[TokenKind]:
    """Binary search the keyword table for an exact whole-word match."""
    ix = bisect_left(KEYWORDS, word)
    if ix < len(KEYWORDS) and KEYWORDS[ix] == word:
        return _KEYWORD_KINDS[ix]
    return None


@dataclass(frozen=True)
class Token:
    """One scanned token.

    Attributes:
        kind: Token classification
        offset: Offset of the first character in the source text
        length: Number of characters spanned
        line: Physical line (1-indexed) on which the token started
    """

    kind: TokenKind
    offset: int
    length: int
    line: int

    @property
    def end(self) -> int:
        return self.offset + self.length

    def text(self, source: str) -> str:
        """Return the source text spanned by this token."""
        return source[self.offset : self.end]
