"""Lexical scanning of C-like source and procedure discovery."""

from .lexer import Scanner
from .procedures import ProcedureStart, find_next_procedure, find_procedure_end
from .source import SourceBuffer
from .tokens import Token, TokenKind

__all__ = [
    "Scanner",
    "SourceBuffer",
    "Token",
    "TokenKind",
    "ProcedureStart",
    "find_next_procedure",
    "find_procedure_end",
]
