"""
Error handling for the kdlnode parser.

Structural failures: misplaced terminators and braces, unclosed children
blocks, bare words standing alone and junk after a value.

Author: xwest
"""

from typing import Optional, List

from ..lexer.tokens import Token, SourceLocation
from ..lexer.errors import InvalidSyntaxError, ErrorRecovery


class ParseError(InvalidSyntaxError):
    """
    Exception raised when the parser encounters a structural syntax error.

    Carries the offending token when there is one.
    """

    def __init__(
        self,
        message: str,
        location: SourceLocation,
        token: Optional[Token] = None,
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        super().__init__(
            message,
            location,
            code=code,
            help_text=help_text,
            suggestions=suggestions
        )
        self.token = token


PARSER_ERROR_CODES = {
    "P001": "Unexpected ';' before a node",
    "P002": "Unexpected top-level '}'",
    "P003": "Bare identifier used as a value",
    "P004": "Unterminated children block",
    "P005": "Unexpected token after identifier",
    "P006": "Unexpected token after value",
    "P007": "Unexpected token after property value",
    "P008": "Nesting too deep",
    "P010": "Unexpected end of input",
}


def _describe(char: str) -> str:
    return repr(char) if char else "end of input"


def create_unexpected_semicolon_error(location: SourceLocation) -> ParseError:
    """Create an error for a ';' that does not terminate a node."""
    return ParseError(
        message="Unexpected ';' not terminating a node",
        location=location,
        code="P001",
        help_text="A ';' ends the node before it; it cannot appear on its own.",
        suggestions=["Remove the ';'"]
    )


def create_unexpected_closing_brace_error(location: SourceLocation) -> ParseError:
    """Create an error for a '}' with no open children block."""
    return ParseError(
        message="Unexpected top-level '}'",
        location=location,
        code="P002",
        help_text="There is no open children block for this '}' to close.",
        suggestions=["Remove the '}'", "Check for a missing '{'"]
    )


def create_bare_identifier_error(token: Token) -> ParseError:
    """Create an error for an unquoted word standing alone as an argument."""
    word = token.lexeme
    suggestions = [f'Quote it: "{word}"', f"Make it a property: {word}=..."]
    suggestions.extend(f"Did you mean '{keyword}'?" for keyword in ErrorRecovery.suggest_keyword_corrections(word))
    return ParseError(
        message=f"Unexpected bare identifier '{word}'",
        location=token.location,
        token=token,
        code="P003",
        help_text="Only quoted strings may stand alone as string arguments.",
        suggestions=suggestions
    )


def create_unclosed_block_error(open_location: SourceLocation,
                                current_location: SourceLocation) -> ParseError:
    """Create an error for a children block that reaches end of input."""
    return ParseError(
        message="Unterminated children block",
        location=current_location,
        code="P004",
        help_text=f"The '{{' at {open_location} was never closed.",
        suggestions=["Add a closing '}'", "Check for missing delimiters"]
    )


def create_unexpected_token_after_identifier_error(token: Token, found: str,
                                                   location: SourceLocation) -> ParseError:
    """Create an error for junk following an identifier that is not a property key."""
    return ParseError(
        message=f"Unexpected {_describe(found)} after identifier '{token.lexeme}'",
        location=location,
        token=token,
        code="P005",
        help_text="An identifier in argument position must be followed by '=' or end the argument.",
        suggestions=["Add whitespace between arguments", f"Write a property: {token.lexeme}=..."]
    )


def create_unexpected_token_after_value_error(token: Token, found: str,
                                              location: SourceLocation,
                                              property_name: Optional[str] = None) -> ParseError:
    """Create an error for a value not followed by whitespace, a newline or a terminator."""
    if property_name is not None:
        message = f"Unexpected {_describe(found)} after value of property '{property_name}'"
        code = "P007"
    else:
        message = f"Unexpected {_describe(found)} after value {token.lexeme}"
        code = "P006"
    return ParseError(
        message=message,
        location=location,
        token=token,
        code=code,
        help_text="A value must be followed by whitespace, a newline, ';', '{', '}' or a comment.",
        suggestions=["Add whitespace between arguments"]
    )


def create_nesting_too_deep_error(max_depth: int, location: SourceLocation) -> ParseError:
    """Create an error for children blocks nested past the configured limit."""
    return ParseError(
        message=f"Children blocks nested deeper than {max_depth} levels",
        location=location,
        code="P008",
        help_text="Raise ParserConfig.max_depth if this document is legitimate.",
    )


def create_unexpected_eof_error(expected: str, location: SourceLocation) -> ParseError:
    """Create an error for unexpected end of input."""
    return ParseError(
        message=f"Unexpected end of input, expected {expected}",
        location=location,
        code="P010",
        help_text=f"The parser reached the end of the input while expecting {expected}.",
        suggestions=[f"Add the missing {expected}"]
    )
