"""Recursive, token-driven scoring of one procedure body.

The scorer walks the tokens between a procedure's opening brace and its
matching close, dispatching on token kind. Every handler returns the score
of the construct it consumed; scores are summed bottom-up, with control
structure bodies multiplied by the nesting penalty.

If the body runs out (end of input, or the cursor passes the procedure's
recorded end) before the walk is complete, ProcedureAborted unwinds to
:meth:`ProcedureScorer.score`, which marks the procedure unscoreable.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Callable, Optional, TextIO

from ..config import DEFAULT_SCORING, ScoringConfig
from ..exceptions import ProcedureAborted
from ..logging_config import get_logger
from ..scanning.chartypes import NUL, is_end_of_line, is_space
from ..scanning.lexer import Scanner
from ..scanning.tokens import CONTROL_KEYWORDS, TokenKind
from .models import MAX_SCORE, OperatorMix, ProcedureRecord
from .penalties import apply_mix_penalty

logger = get_logger(__name__)

DEPTH_NOTE_LEVEL = 5
DEPTH_REWRITE_LEVEL = 7

_Handler = Callable[[], float]


class ProcedureScorer:
    """Scores procedure bodies read from one scanner.

    One scorer can score every procedure of a file in turn; per-procedure
    state is reset by :meth:`score`.
    """

    def __init__(
        self,
        scanner: Scanner,
        config: ScoringConfig = DEFAULT_SCORING,
        trace: Optional[TextIO] = None,
    ):
        self.scanner = scanner
        self.penalty = config.nesting_penalty
        self.demi_penalty = config.subexpr_penalty
        self.scale = config.scaling_factor
        self.trace = trace
        self.depth = 0
        self._record: Optional[ProcedureRecord] = None
        self._entry_nc: Optional[int] = None

        T = TokenKind
        self._handlers: dict[TokenKind, _Handler] = {
            T.NAME: self._expression,
            T.NUMBER: self._expression,
            T.ARITH_OP: self._expression,
            T.QUESTION: self._expression,
            T.OPEN_PAREN: self._paren_statement,
            T.OPEN_BRACE: self._statement_block,
            T.OPEN_BRACKET: self._array_init,
            T.SEMI: self._semicolon,
            T.COMMA: self._noop,
            T.KW_ELSE: self._noop,
            T.KW_CASE: self._case,
            T.KW_DEFAULT: self._default,
            T.KW_DO: self._do,
            T.KW_IF: self._if,
            T.KW_FOR: self._loop,
            T.KW_WHILE: self._loop,
            T.KW_SWITCH: self._loop,
        }

    # ── Entry point ─────────────────────────────────────────────────

    def score(self, record: ProcedureRecord) -> ProcedureRecord:
        """Score the body starting at the scanner's cursor (just past ``{``)."""
        scanner = self.scanner
        self._record = record
        self._entry_nc = None
        self.depth = 0
        body_line = self._first_body_line()

        try:
            block = self._statement_block()
        except ProcedureAborted:
            logger.warning(
                "end of %s() in %s reached with open control blocks",
                record.name,
                record.filename,
            )
            record.aborted = True
            record.raw_score = float(MAX_SCORE)
            record.score = float(MAX_SCORE)
            record.line_count = max(0, 1 + scanner.line - body_line)
            if self._entry_nc is not None:
                record.nc_line_count = max(0, 1 + scanner.nc_line - self._entry_nc)
            scanner.seek(record.end)
            return record

        raw = block + record.goto_count * self.scale

        if record.max_depth >= DEPTH_NOTE_LEVEL:
            logger.warning(
                "NOTE: proc %s in file %s line %d: nesting depth reached level %d",
                record.name,
                record.filename,
                record.start_line,
                record.max_depth,
            )
            if record.max_depth >= DEPTH_REWRITE_LEVEL:
                logger.warning("==> *seriously consider rewriting the procedure*.")

        if scanner.cursor + 2 <= record.end:
            logger.warning(
                "procedure %s in %s ended before final close bracket",
                record.name,
                record.filename,
            )
            raw += self.penalty

        record.raw_score = raw
        record.score = self._final_score(raw)

        own_line = self._close_on_own_line()
        record.line_count = 1 + scanner.line - body_line - own_line
        record.nc_line_count = 1 + scanner.nc_line - (self._entry_nc or 0) - own_line
        return record

    def _final_score(self, raw: float) -> float:
        """Clamp to 0..MAX_SCORE and divide by the scale, rounding to nearest."""
        if raw < 0:
            return 0.0
        if raw < MAX_SCORE:
            raw = float(int(raw / self.scale + 0.5))
        return float(min(raw, MAX_SCORE))

    def _first_body_line(self) -> int:
        buf = self.scanner.buffer
        pos, line = buf.cursor, buf.line
        while True:
            ch = buf.char(pos)
            if ch == NUL or not is_space(ch):
                return line
            if ch == "\n":
                line += 1
            pos += 1

    def _close_on_own_line(self) -> int:
        buf = self.scanner.buffer
        return 1 if is_end_of_line(buf.char(buf.cursor - 2)) else 0

    # ── Token access ────────────────────────────────────────────────

    def _next(self) -> TokenKind:
        """Next token of the body; bails out past the procedure's end."""
        record = self._record
        token = self.scanner.next_token()
        if token.kind is TokenKind.EOF or self.scanner.cursor > record.end:
            raise ProcedureAborted(record.name, self.scanner.cursor)
        if token.kind is TokenKind.KW_GOTO:
            record.goto_count += 1
            return TokenKind.NAME
        return token.kind

    def _dispatch(self, kind: TokenKind) -> float:
        return self._handlers.get(kind, self._invalid)()

    @contextmanager
    def _nested(self) -> Iterator[None]:
        self.depth += 1
        if self.depth > self._record.max_depth:
            self._record.max_depth = self.depth
        try:
            yield
        finally:
            self.depth -= 1

    def _trace(self, message: str) -> None:
        if self.trace is not None:
            self.trace.write(message + "\n")

    def _trace_score(self, score: float) -> None:
        self._trace("line %5d score %5d" % (self.scanner.line, int(score)))

    # ── Diagnostics ─────────────────────────────────────────────────

    def _invalid(self) -> float:
        record = self._record
        logger.warning(
            "invalid transition in %s() of %s on line %d: unexpected %s",
            record.name,
            record.filename,
            self.scanner.line,
            self.scanner.last_kind.name,
        )
        self.scanner.seek(record.end)
        return float(MAX_SCORE)

    def _bad_token(self, context: str, kind: TokenKind) -> float:
        record = self._record
        logger.warning(
            "error on line %d of %s in file %s: in context %s, token %s is invalid",
            self.scanner.line,
            record.name,
            record.filename,
            context,
            kind.name,
        )
        return float(MAX_SCORE)

    # ── Statements ──────────────────────────────────────────────────

    def _statement_block(self) -> float:
        """``{ ... }`` with the open brace already consumed."""
        kind = self._next()
        if self._entry_nc is None:
            self._entry_nc = self.scanner.nc_line

        with self._nested():
            result = 0.0
            while kind is not TokenKind.CLOSE_BRACE:
                result += self._dispatch(kind)
                kind = self._next()
            self._trace_score(result)
        return min(result, float(MAX_SCORE))

    def _noop(self) -> float:
        return 0.0

    def _semicolon(self) -> float:
        return 1.0

    def _paren_statement(self) -> float:
        self.scanner.unget_token()
        return self._expression()

    def _case(self) -> float:
        """``case V:``, ``case (expr):`` or ``case A ... B:``."""
        score = 1.0
        ellipsis = 0
        while True:
            kind = self._next()
            if kind is TokenKind.OPEN_PAREN:
                value = self._subexpr()
                if value > 0:
                    score += value - 1
            elif kind in (TokenKind.ARITH_OP, TokenKind.REL_OP, TokenKind.NAME, TokenKind.NUMBER):
                continue
            elif kind is TokenKind.COLON:
                return score + ellipsis
            elif kind is TokenKind.ELLIPSIS:
                if ellipsis > 0:
                    return self._bad_token("'case' statement ellipsis", kind)
                ellipsis = 2
            else:
                return self._bad_token("'case' statement", kind)

    def _default(self) -> float:
        kind = self._next()
        if kind is not TokenKind.COLON:
            return self._bad_token("'default' missing colon", kind)
        return 1.0

    def _do(self) -> float:
        """``do BODY while ( expr ) ;``"""
        result = 1.0
        kind = self._next()
        if kind is TokenKind.OPEN_BRACE:
            result += self.penalty * self._statement_block()
        elif kind is TokenKind.OPEN_PAREN:
            result += self._paren_statement()
        elif kind in CONTROL_KEYWORDS:
            result += self.penalty * self._dispatch(kind)
        else:
            result += self._expression()

        kind = self._next()
        if kind is not TokenKind.KW_WHILE:
            return self._bad_token("'do ...' missing 'while'", kind)
        kind = self._next()
        if kind is not TokenKind.OPEN_PAREN:
            return self._bad_token("while loop expression", kind)

        result += max(1, int(self.penalty * self._subexpr()))

        kind = self._next()
        if kind is not TokenKind.SEMI:
            return self._bad_token("do...while() missing semicolon", kind)
        return result

    def _if(self) -> float:
        """``if``, cascading through ``else if`` chains by looping."""
        result = 0.0
        while True:
            kind = self._next()
            if kind is not TokenKind.OPEN_PAREN:
                return self._bad_token("if expression", kind)
            result += self._subexpr() + 1
            result += self._branch(self._next())

            prior = self.scanner.last_kind
            if self._next() is not TokenKind.KW_ELSE:
                # Not ours; the enclosing block needs it.
                self.scanner.unget_token()
                self.scanner.last_kind = prior
                return result

            kind = self._next()
            if kind is not TokenKind.KW_IF:
                return result + self._branch(kind)

    def _branch(self, kind: TokenKind) -> float:
        """Then or else clause of an ``if``."""
        while kind is TokenKind.COMMA:
            kind = self._next()

        if kind is TokenKind.OPEN_BRACE:
            return self.penalty * self._statement_block()
        if kind is TokenKind.SEMI:
            return 0.0
        if kind is TokenKind.OPEN_PAREN:
            return self._subexpr() + self._expression()
        if kind is TokenKind.OPEN_BRACKET:
            return self._bracket() - 1 + self._expression()
        if kind in (TokenKind.ARITH_OP, TokenKind.NAME, TokenKind.NUMBER):
            return self._expression()
        if kind in CONTROL_KEYWORDS:
            return self.penalty * self._dispatch(kind)
        return self._bad_token("bad if block", kind)

    def _loop(self) -> float:
        """``for``, ``while`` and ``switch``."""
        real_for = self.scanner.last_kind is TokenKind.KW_FOR
        kind = self._next()
        if kind is not TokenKind.OPEN_PAREN:
            return self._bad_token("loop expression", kind)

        result = max(1.0, self._subexpr(for_clause=real_for))
        if not real_for:
            result *= self.penalty

        while True:
            kind = self._next()
            if kind is TokenKind.OPEN_BRACE:
                return result + self.penalty * self._statement_block()
            if kind is TokenKind.SEMI:
                return result
            if kind in CONTROL_KEYWORDS:
                return result + self.penalty * self._dispatch(kind)
            if kind is TokenKind.OPEN_PAREN:
                result += self._subexpr()
                continue
            if kind is TokenKind.OPEN_BRACKET:
                result += self._bracket() - 1
            elif kind not in (TokenKind.NAME, TokenKind.NUMBER):
                continue

            result += self._expression()
            last = self.scanner.last_kind
            if last is TokenKind.SEMI:
                return result
            if last is not TokenKind.COMMA:
                return self._bad_token("loop body ended badly", last)

    # ── Expressions ─────────────────────────────────────────────────

    def _expression(self) -> float:
        """An expression statement or operand; costs at least one point.

        Ends at ``;``, at a statement label, or at a closer belonging to
        the caller, which is pushed back.
        """
        scanner = self.scanner
        record = self._record
        result = 1.0
        start_nc = scanner.nc_line
        paren_is_call = True
        brace_needs_semi = False

        while True:
            previous = scanner.last_kind
            kind = self._next()
            next_paren_is_call = False
            next_brace_needs_semi = False

            if kind in (TokenKind.CLOSE_BRACE, TokenKind.CLOSE_BRACKET, TokenKind.CLOSE_PAREN):
                if kind is TokenKind.CLOSE_BRACE:
                    self._trace_score(result)
                scanner.unget_token()
                break
            elif kind is TokenKind.SEMI:
                break
            elif kind is TokenKind.COMMA:
                result += 1
            elif kind is TokenKind.OPEN_PAREN:
                if paren_is_call:
                    # the called name was already counted
                    result += self._parms() - 1
                else:
                    result += self._subexpr()
                    next_paren_is_call = True
            elif kind is TokenKind.NAME:
                next_paren_is_call = True
            elif kind is TokenKind.OPEN_BRACE:
                result += self.penalty * self._statement_block()
                if not brace_needs_semi:
                    # A macro used as a block-structured statement.
                    scanner.last_kind = TokenKind.SEMI
                    break
            elif kind is TokenKind.OPEN_BRACKET:
                result += self._bracket() - 1
            elif kind is TokenKind.ASSIGN:
                next_brace_needs_semi = True
            elif kind is TokenKind.COLON:
                if record.colon_need > 0:
                    record.colon_need -= 1
                elif previous is TokenKind.NAME:
                    break
            elif kind is TokenKind.QUESTION:
                record.colon_need += 1

            paren_is_call = next_paren_is_call
            brace_needs_semi = next_brace_needs_semi

        floor = 1 + (scanner.nc_line - start_nc)
        if result < floor:
            return float(floor)
        return min(result, float(MAX_SCORE))

    def _subexpr(self, for_clause: bool = False) -> float:
        """Parenthesized expression, open paren already consumed.

        ``for`` clauses are exempt from the operator-mix penalty.
        """
        scanner = self.scanner
        mix = OperatorMix()
        saw_name = False
        token_count = 0
        start_nc = scanner.nc_line

        while True:
            kind = self._next()
            token_count += 1

            if kind is TokenKind.CLOSE_PAREN:
                if token_count <= 2:  # "()" or "(name)"
                    return 0.0
                if not for_clause:
                    description = apply_mix_penalty(mix, self.penalty, self.demi_penalty)
                    if description is not None:
                        self._trace(
                            "line %5d expression score adjusted due to mix of %s"
                            % (scanner.line, description)
                        )
                mix.result += scanner.nc_line - start_nc
                if mix.result > 1:
                    mix.result -= 1
                self._trace_score(mix.result)
                return mix.result

            if kind is TokenKind.OPEN_PAREN:
                if saw_name:
                    mix.result += self._parms()
                else:
                    mix.result += self._subexpr() * self.demi_penalty
                    # might yield a function pointer or array
                    kind = TokenKind.NAME
            elif kind is TokenKind.ASSIGN:
                # only assignments inside nested blocks are charged
                if self.depth > 1:
                    mix.assign_count += 1
            elif kind is TokenKind.LOGIC_AND:
                mix.and_count += 1
            elif kind is TokenKind.LOGIC_OR:
                mix.or_count += 1
            elif kind is TokenKind.REL_OP:
                mix.relop_count += 1
            elif kind in (TokenKind.COMMA, TokenKind.SEMI):
                mix.result += 1
            elif kind in (
                TokenKind.NAME,
                TokenKind.NUMBER,
                TokenKind.ARITH_OP,
                TokenKind.COLON,
                TokenKind.QUESTION,
            ):
                pass
            elif kind is TokenKind.OPEN_BRACE:
                mix.result += self.penalty * self._statement_block()
            elif kind is TokenKind.OPEN_BRACKET:
                mix.result += self._bracket()
            else:
                return self._bad_token("parenthesized expression", kind)

            saw_name = kind is TokenKind.NAME

    def _parms(self) -> float:
        """Call arguments: free unless they span lines or nest expressions."""
        scanner = self.scanner
        result = 0.0
        start_nc = scanner.nc_line

        while True:
            kind = self._next()
            if kind is TokenKind.CLOSE_PAREN:
                return (scanner.nc_line - start_nc) + result
            if kind is TokenKind.OPEN_PAREN:
                value = self._subexpr()
                if value > 0:
                    result += value
            elif kind is TokenKind.OPEN_BRACE:
                result += self.penalty * self._statement_block()
            elif kind is TokenKind.OPEN_BRACKET:
                value = self._bracket()
                if value > 1:
                    result += value - 1
            else:
                self._expression()

    def _bracket(self) -> float:
        """``[ ... ]`` with the open bracket consumed."""
        result = 0.0
        while True:
            result += self._expression()
            if self.scanner.last_kind is not TokenKind.COMMA:
                break
            result -= 1

        kind = self._next()
        if kind is not TokenKind.CLOSE_BRACKET:
            return self._bad_token("bracketed block", kind)
        return min(result, float(MAX_SCORE))

    def _array_init(self) -> float:
        """Designated initializer ``[index] = value``."""
        result = self._bracket() - 1
        kind = self._next()
        if kind is not TokenKind.ASSIGN:
            return self._bad_token("array element initializer", kind)
        return result + self._expression()
