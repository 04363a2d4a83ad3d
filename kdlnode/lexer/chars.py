"""
Character classification for the kdlnode lexer.

Author: xwest
"""

# Characters that can never appear in a bare identifier
NON_IDENTIFIER_CHARS = frozenset('\\/(){}<>;[]=,"')

NEWLINE_CHARS = frozenset('\r\n\u0085\u000c\u2028\u2029')

WHITESPACE_CHARS = frozenset(
    '\u0009\u0020\u00a0\u1680'
    '\u2000\u2001\u2002\u2003\u2004\u2005\u2006\u2007\u2008\u2009\u200a'
    '\u202f\u205f\u3000\ufeff'
)

# Characters allowed to directly follow a complete value
VALUE_TERMINATORS = frozenset(';{}/\\')


def is_whitespace(char: str) -> bool:
    """Check if character is non-newline whitespace."""
    return char in WHITESPACE_CHARS


def is_newline(char: str) -> bool:
    """Check if character is a line break (CRLF is handled by callers)."""
    return char in NEWLINE_CHARS


def is_value_terminator(char: str) -> bool:
    """Check if character may legally follow a value or a bare string argument."""
    return is_whitespace(char) or is_newline(char) or char in VALUE_TERMINATORS


def is_identifier_char(char: str, allow_equals: bool = False) -> bool:
    """Check if character can appear in a bare identifier."""
    if not char or ord(char) <= 0x20:
        return False
    if is_whitespace(char) or is_newline(char):
        return False
    if char == '=':
        return allow_equals
    return char not in NON_IDENTIFIER_CHARS


def is_digit(char: str) -> bool:
    return char != '' and char in '0123456789'


def is_sign(char: str) -> bool:
    return char != '' and char in '+-'


def is_hex_digit(char: str) -> bool:
    return char != '' and char in '0123456789abcdefABCDEF'
