"""Tests for the C-like tokenizer."""

import logging

import pytest

from gnarl.scanning import Scanner, TokenKind
from gnarl.scanning.tokens import KEYWORDS, lookup_keyword


def kinds(text: str) -> list:
    """All token kinds up to (not including) end of input."""
    scanner = Scanner.from_text(text)
    result = []
    while True:
        token = scanner.next_token()
        if token.kind is TokenKind.EOF:
            return result
        result.append(token.kind)


def tokens(text: str) -> list:
    scanner = Scanner.from_text(text)
    result = []
    while True:
        token = scanner.next_token()
        if token.kind is TokenKind.EOF:
            return result
        result.append((token.kind, scanner.token_text(token)))


class TestKeywords:
    """Test keyword recognition."""

    @pytest.mark.parametrize("word", [w for w in KEYWORDS if w != "extern"])
    def test_keyword_kinds(self, word):
        assert kinds(word) == [TokenKind(word)]

    def test_keyword_prefix_is_a_name(self):
        """default_value is one name, not 'default' followed by '_value'."""
        assert tokens("default_value") == [(TokenKind.NAME, "default_value")]

    def test_keyword_suffix_is_a_name(self):
        assert kinds("ifdef") == [TokenKind.NAME]

    def test_capitalized_keyword_is_a_name(self):
        assert kinds("If") == [TokenKind.NAME]

    def test_lookup_keyword(self):
        assert lookup_keyword("while") is TokenKind.KW_WHILE
        assert lookup_keyword("whilst") is None

    def test_plain_extern_is_a_name(self):
        assert kinds("extern int x;") == [TokenKind.NAME, TokenKind.NAME, TokenKind.NAME, TokenKind.SEMI]

    def test_extern_c_block_is_dropped(self):
        assert kinds('extern "C" {\nint x;') == [TokenKind.NAME, TokenKind.NAME, TokenKind.SEMI]


class TestOperators:
    """Test operator classification."""

    @pytest.mark.parametrize(
        "text,kind",
        [
            ("&&", TokenKind.LOGIC_AND),
            ("||", TokenKind.LOGIC_OR),
            ("==", TokenKind.REL_OP),
            ("!=", TokenKind.REL_OP),
            ("<", TokenKind.REL_OP),
            ("<=", TokenKind.REL_OP),
            (">=", TokenKind.REL_OP),
            ("=", TokenKind.ASSIGN),
            ("+=", TokenKind.ASSIGN),
            ("<<=", TokenKind.ASSIGN),
            ("&=", TokenKind.ASSIGN),
            ("<<", TokenKind.ARITH_OP),
            ("++", TokenKind.ARITH_OP),
            ("->", TokenKind.ARITH_OP),
            ("!", TokenKind.ARITH_OP),
            ("&", TokenKind.ARITH_OP),
            ("~", TokenKind.ARITH_OP),
            (".", TokenKind.ARITH_OP),
            ("...", TokenKind.ELLIPSIS),
            ("?", TokenKind.QUESTION),
            (":", TokenKind.COLON),
        ],
    )
    def test_operator_kind(self, text, kind):
        assert tokens(text) == [(kind, text)]

    def test_division_is_arithmetic(self):
        assert kinds("a / b") == [TokenKind.NAME, TokenKind.ARITH_OP, TokenKind.NAME]

    def test_punctuation(self):
        assert kinds("( ) [ ] { } , ;") == [
            TokenKind.OPEN_PAREN,
            TokenKind.CLOSE_PAREN,
            TokenKind.OPEN_BRACKET,
            TokenKind.CLOSE_BRACKET,
            TokenKind.OPEN_BRACE,
            TokenKind.CLOSE_BRACE,
            TokenKind.COMMA,
            TokenKind.SEMI,
        ]


class TestNamesAndLiterals:
    """Test names, numbers and literals."""

    def test_number_spans_name_characters(self):
        assert tokens("0x1Fu") == [(TokenKind.NUMBER, "0x1Fu")]

    def test_scope_qualified_name_is_one_token(self):
        assert tokens("std::string") == [(TokenKind.NAME, "std::string")]

    def test_string_literal_scans_as_name(self):
        assert tokens('"a \\" b" x') == [(TokenKind.NAME, '"a \\" b"'), (TokenKind.NAME, "x")]

    def test_char_literal_scans_as_name(self):
        assert tokens("'\\'' x") == [(TokenKind.NAME, "'\\''"), (TokenKind.NAME, "x")]

    def test_unterminated_string_ends_input(self):
        assert kinds('x "abc') == [TokenKind.NAME]

    def test_newline_inside_string_is_counted(self):
        scanner = Scanner.from_text('"a\nb" c')
        scanner.next_token()
        token = scanner.next_token()
        assert token.line == 2


class TestCommentsAndDirectives:
    """Test comment, directive and whitespace skipping."""

    def test_block_comment_skipped(self):
        assert kinds("a /* b c */ d") == [TokenKind.NAME, TokenKind.NAME]

    def test_line_comment_skipped(self):
        assert kinds("a // b c\nd") == [TokenKind.NAME, TokenKind.NAME]

    def test_unterminated_comment_ends_input(self):
        assert kinds("a /* b") == [TokenKind.NAME]

    def test_comment_lines_counted_physically_only(self):
        scanner = Scanner.from_text("a /* x\n y */ b\nc")
        lines = [scanner.next_token().line for _ in range(3)]
        assert lines == [1, 2, 3]
        # b shares its line with the comment's tail, so only a and c
        # start non-comment lines
        assert scanner.nc_line == 2

    def test_directive_skipped(self):
        assert tokens("#define X 1\nfoo") == [(TokenKind.NAME, "foo")]

    def test_directive_continuation_skipped(self):
        scanner = Scanner.from_text("#define X \\\n  1\nfoo")
        token = scanner.next_token()
        assert scanner.token_text(token) == "foo"
        assert token.line == 3

    def test_directive_with_multiline_comment(self):
        scanner = Scanner.from_text("#if 0 /* a\n b */\nfoo")
        token = scanner.next_token()
        assert scanner.token_text(token) == "foo"
        assert token.line == 3

    def test_hash_mid_line_is_arithmetic(self):
        assert kinds("a # b") == [TokenKind.NAME, TokenKind.ARITH_OP, TokenKind.NAME]

    def test_indented_directive_skipped(self):
        assert kinds("  #pragma once\nx") == [TokenKind.NAME]

    def test_carriage_returns_are_whitespace(self):
        scanner = Scanner.from_text("a\r\nb // c\r\nd")
        lines = [scanner.next_token().line for _ in range(3)]
        assert lines == [1, 2, 3]

    def test_backslash_is_ignored(self):
        assert kinds("a \\ b") == [TokenKind.NAME, TokenKind.NAME]


class TestLineAccounting:
    """Test physical and non-comment line counters."""

    def test_non_comment_lines(self):
        scanner = Scanner.from_text("a\n\n  b c\n// note\n/* x */\n")
        kinds_seen = [scanner.next_token().kind for _ in range(4)]
        assert kinds_seen[-1] is TokenKind.EOF
        assert scanner.nc_line == 2
        assert scanner.line == 6

    def test_token_line_is_start_line(self):
        scanner = Scanner.from_text("\n\n  x")
        assert scanner.next_token().line == 3


class TestInvalidCharacters:
    """Test handling of characters outside the C alphabet."""

    def test_invalid_character_ends_input(self, caplog):
        caplog.set_level(logging.WARNING, logger="gnarl")
        assert kinds("a @ b") == [TokenKind.NAME]
        assert "invalid character" in caplog.text

    def test_non_ascii_character_ends_input(self, caplog):
        caplog.set_level(logging.WARNING, logger="gnarl")
        assert kinds("a é b") == [TokenKind.NAME]
        assert "0xE9" in caplog.text


class TestPushback:
    """Test one-token pushback."""

    def test_unget_replays_token(self):
        scanner = Scanner.from_text("alpha beta")
        first = scanner.next_token()
        cursor = scanner.cursor
        scanner.unget_token()
        assert scanner.cursor == first.offset
        assert scanner.next_token() == first
        assert scanner.cursor == cursor
        assert scanner.token_text(scanner.next_token()) == "beta"

    def test_unget_restores_line(self):
        scanner = Scanner.from_text("a\n\nb")
        scanner.next_token()
        token = scanner.next_token()
        assert scanner.line == 3
        scanner.unget_token()
        assert scanner.line == 3
        assert scanner.next_token() == token

    def test_replay_sets_last_kind(self):
        scanner = Scanner.from_text("( x")
        scanner.next_token()
        scanner.unget_token()
        scanner.last_kind = TokenKind.SEMI
        scanner.next_token()
        assert scanner.last_kind is TokenKind.OPEN_PAREN

    def test_seek_drops_pushback(self):
        scanner = Scanner.from_text("a b c")
        scanner.next_token()
        scanner.unget_token()
        scanner.seek(4)
        assert scanner.token_text(scanner.next_token()) == "c"


class TestRoundTrip:
    """Re-tokenizing a token's own text yields the same kind."""

    # No "#": mid-line it scans as an operator, but alone it starts a directive.
    SOURCE = """\
static int f(char const *s, ...)
{
    while (*s != '\\0' && s[1] <= 0x7F || !done) {
        count += s->len << 2;
        x = y ? a : b;
        std::vector v;
    }
    return "done";
}
"""

    def test_every_token_round_trips(self):
        scanner = Scanner.from_text(self.SOURCE)
        seen = 0
        while True:
            token = scanner.next_token()
            if token.kind is TokenKind.EOF:
                break
            text = scanner.token_text(token)
            assert kinds(text) == [token.kind], text
            seen += 1
        assert seen > 40

    def test_mid_line_hash_does_not_round_trip(self):
        assert kinds("a # b") == [TokenKind.NAME, TokenKind.ARITH_OP, TokenKind.NAME]
        assert kinds("#") == []
