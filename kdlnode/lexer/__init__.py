"""
kdlnode Lexer Package

Low-level reading for node documents: a character cursor, character
classification and on-demand readers for type hints, identifiers and
literal values.

Key Features:
- Line/column tracking for every token and error
- Rewindable checkpoints for identifier-versus-value decisions
- Nested block comments and line continuations
- Decimal, hex, octal and binary numbers; escaped and raw strings

Author: xwest
"""

from .tokens import Token, TokenType, SourceLocation, IdentifierMode
from .reader import Reader
from .lexer import Lexer
from .errors import InvalidSyntaxError, LexerError, EndOfInput, Diagnostic

__all__ = [
    "Lexer",
    "Reader",
    "Token", 
    "TokenType", 
    "SourceLocation",
    "IdentifierMode",
    "InvalidSyntaxError",
    "LexerError",
    "EndOfInput",
    "Diagnostic",
]
