"""Character classification for the C-like scanner.

A fixed 128-entry table maps each 7-bit character to a bitmask of classes.
Characters outside the 7-bit range belong to no class, so scanning loops
stop on them instead of misreading them.
"""

from __future__ import annotations

ALPHA = 0x01
DIGIT = 0x02
NAME_START = 0x05  # alpha + "_$"
NAME = 0x07  # name-start + digit
SPACE = 0x10
END_OF_LINE = 0x20
STAR_OR_NL = 0x60  # "*" + end-of-line

_UNDERSCORE_DOLLAR = 0x04
_STAR = 0x40

NUL = "\0"


def _build_table() -> tuple[int, ...]:
    table = [0] * 128
    for code in range(ord("a"), ord("z") + 1):
        table[code] |= ALPHA
    for code in range(ord("A"), ord("Z") + 1):
        table[code] |= ALPHA
    for code in range(ord("0"), ord("9") + 1):
        table[code] |= DIGIT
    for ch in "_$":
        table[ord(ch)] |= _UNDERSCORE_DOLLAR
    for ch in " \t\b\r\v\f\n":
        table[ord(ch)] |= SPACE
    for ch in "\n\r\0":
        table[ord(ch)] |= END_OF_LINE
    table[ord("*")] |= _STAR
    return tuple(table)


CHAR_TYPE_TABLE = _build_table()


def char_mask(ch: str) -> int:
    """Return the class bitmask for a single character (0 for non-ASCII)."""
    code = ord(ch)
    if code >= 128:
        return 0
    return CHAR_TYPE_TABLE[code]


def is_char_type(ch: str, mask: int) -> bool:
    """True if ``ch`` belongs to any class in ``mask``."""
    return (char_mask(ch) & mask) != 0


def span_chars(text: str, pos: int, mask: int) -> int:
    """Return the first position at or after ``pos`` NOT in ``mask``.

    Scanning stops at a NUL character or at the end of ``text``.
    """
    end = len(text)
    while pos < end:
        ch = text[pos]
        if ch == NUL or not is_char_type(ch, mask):
            break
        pos += 1
    return pos


def break_chars(text: str, pos: int, mask: int) -> int:
    """Return the first position at or after ``pos`` that IS in ``mask``.

    Scanning stops at a NUL character or at the end of ``text``.
    """
    end = len(text)
    while pos < end:
        ch = text[pos]
        if ch == NUL or is_char_type(ch, mask):
            break
        pos += 1
    return pos


def is_name_start(ch: str) -> bool:
    return is_char_type(ch, NAME_START)


def is_name_char(ch: str) -> bool:
    return is_char_type(ch, NAME)


def is_space(ch: str) -> bool:
    return is_char_type(ch, SPACE)


def is_end_of_line(ch: str) -> bool:
    return is_char_type(ch, END_OF_LINE)
