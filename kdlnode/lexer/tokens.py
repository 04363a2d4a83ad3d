"""
Token definitions for the kdlnode lexer.

This module defines the small vocabulary the lexer hands to the parser:
- Token types for identifiers and literal values
- Source locations for diagnostics
- Identifier reading modes
- Fixed two-character markers (comments, slashdash, CRLF)

Author: xwest
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Any


class TokenType(Enum):
    """
    Enumeration of all token types produced by the kdlnode lexer.
    """
    
    # ========================================================================
    # Identifiers
    # ========================================================================
    IDENTIFIER = auto()             # node, my-key, ☃
    
    # ========================================================================
    # Literals
    # ========================================================================
    STRING = auto()                 # "hello\n"
    RAW_STRING = auto()             # r"C:\path", r#"with "quotes""#
    
    INTEGER_DECIMAL = auto()        # 42, -1_000
    INTEGER_BINARY = auto()         # 0b1010
    INTEGER_OCTAL = auto()          # 0o755
    INTEGER_HEXADECIMAL = auto()    # 0xdead_beef
    FLOAT = auto()                  # 3.14, 1e10, -2.5E-3
    
    TRUE = auto()                   # true
    FALSE = auto()                  # false
    NULL = auto()                   # null


class IdentifierMode(Enum):
    """How far a bare identifier extends."""
    FREESTANDING = auto()           # node names, '=' is an ordinary character
    EQUALS = auto()                 # argument/property position, stops before '='


@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in the source document.
    
    Used for error reporting and for tagging parsed nodes and values.
    """
    filename: str
    line: int
    column: int
    offset: int  # Character offset from start of input
    
    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"
    
    def __repr__(self) -> str:
        return f"SourceLocation({self.filename!r}, {self.line}, {self.column}, {self.offset})"


@dataclass(frozen=True)
class Token:
    """
    Represents a lexical token read from the document.
    
    Contains the token type, lexeme (raw text), semantic value
    and source location.
    """
    type: TokenType
    lexeme: str                     # Raw text from source
    value: Any                      # Parsed value (str for strings/identifiers, int, float, bool, None)
    location: SourceLocation
    
    def __str__(self) -> str:
        if self.value is not None and self.value != self.lexeme:
            return f"{self.type.name}({self.lexeme!r} -> {self.value!r})"
        return f"{self.type.name}({self.lexeme!r})"
    
    def __repr__(self) -> str:
        return (f"Token({self.type.name}, {self.lexeme!r}, "
                f"{self.value!r}, {self.location!r})")
    
    @property
    def quoted(self) -> bool:
        """Check if this token was written as a quoted or raw string."""
        return self.type in (TokenType.STRING, TokenType.RAW_STRING)


# Fixed markers recognised with Reader.is_next()
SLASHDASH = "/-"
LINE_COMMENT = "//"
BLOCK_COMMENT_START = "/*"
BLOCK_COMMENT_END = "*/"
CRLF = "\r\n"

# Keyword literals and the values they stand for
KEYWORDS = {
    "true": (TokenType.TRUE, True),
    "false": (TokenType.FALSE, False),
    "null": (TokenType.NULL, None),
}

ESCAPE_SEQUENCES = {
    'n': '\n',
    'r': '\r',
    't': '\t',
    '\\': '\\',
    '/': '/',
    '"': '"',
    'b': '\b',
    'f': '\f',
}
