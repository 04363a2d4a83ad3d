"""
Error handling for the kdlnode lexer.

Provides error reporting with source location information and
recovery suggestions for malformed literals and identifiers.

Author: xwest
"""

from typing import Optional, List
from dataclasses import dataclass
from .tokens import SourceLocation


@dataclass
class Diagnostic:
    """A single error report with its location and optional hints."""
    message: str
    location: SourceLocation
    severity: str  # "error", "warning"
    code: Optional[str] = None
    help_text: Optional[str] = None
    suggestions: Optional[List[str]] = None
    
    def __str__(self) -> str:
        severity_prefix = self.severity.upper()
        result = f"{severity_prefix}: {self.message}\n"
        result += f"  --> {self.location}\n"
        
        if self.help_text:
            result += f"  help: {self.help_text}\n"
        
        if self.suggestions:
            result += "  suggestions:\n"
            for suggestion in self.suggestions:
                result += f"    - {suggestion}\n"
        
        return result


class InvalidSyntaxError(Exception):
    """
    Base class for every syntax failure raised while reading a document.
    
    Both the lexer and the parser raise subclasses of this, so callers
    can handle "the input is not a valid document" with a single except.
    """
    
    def __init__(
        self, 
        message: str, 
        location: SourceLocation,
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        super().__init__(message)
        self.message = message
        self.diagnostic = Diagnostic(
            message=message,
            location=location, 
            severity="error",
            code=code,
            help_text=help_text,
            suggestions=suggestions
        )
    
    @property
    def location(self) -> SourceLocation:
        return self.diagnostic.location
    
    @property
    def code(self) -> Optional[str]:
        return self.diagnostic.code
    
    def __str__(self) -> str:
        return str(self.diagnostic)


class LexerError(InvalidSyntaxError):
    """Raised when a literal, identifier, type hint or comment is malformed."""


class EndOfInput(EOFError):
    """
    Signal raised by the reader when no characters remain.
    
    Not an error by itself: the parser decides whether running out of
    input at a given point is legitimate.
    """
    
    def __init__(self, location: SourceLocation):
        super().__init__(f"end of input at {location}")
        self.location = location


class ErrorRecovery:
    """Suggestion helpers used when building diagnostics."""
    
    @staticmethod
    def suggest_keyword_corrections(invalid_word: str) -> List[str]:
        """Suggest keywords close to a misspelled word using edit distance."""
        from .tokens import KEYWORDS
        
        suggestions = []
        for keyword in KEYWORDS.keys():
            distance = ErrorRecovery._edit_distance(invalid_word.lower(), keyword)
            if distance <= 2:
                suggestions.append(keyword)
        
        return sorted(suggestions, key=lambda k: ErrorRecovery._edit_distance(invalid_word.lower(), k))[:3]
    
    @staticmethod
    def _edit_distance(s1: str, s2: str) -> int:
        """Calculate Levenshtein distance between two strings."""
        if len(s1) < len(s2):
            return ErrorRecovery._edit_distance(s2, s1)
        
        if len(s2) == 0:
            return len(s1)
        
        previous_row = list(range(len(s2) + 1))
        for i, c1 in enumerate(s1):
            current_row = [i + 1]
            for j, c2 in enumerate(s2):
                insertions = previous_row[j + 1] + 1
                deletions = current_row[j] + 1
                substitutions = previous_row[j] + (c1 != c2)
                current_row.append(min(insertions, deletions, substitutions))
            previous_row = current_row
        
        return previous_row[-1]


ERROR_CODES = {
    "L002": "Unterminated string literal",
    "L003": "Invalid numeric literal",
    "L004": "Invalid Unicode sequence",
    "L005": "Invalid identifier",
    "L006": "Invalid escape sequence",
    "L007": "Invalid type hint",
    "L008": "Invalid value",
    "L009": "Unterminated block comment",
}


def create_unterminated_string_error(quote_type: str, location: SourceLocation) -> LexerError:
    """Create an error for an unterminated string literal."""
    return LexerError(
        message="Unterminated string literal",
        location=location,
        code="L002",
        help_text=f"String literals must be closed with a matching {quote_type}.",
        suggestions=[f"Add a closing {quote_type}", "Check for unescaped quotes in the string"]
    )


def create_invalid_number_error(lexeme: str, location: SourceLocation, reason: str) -> LexerError:
    """Create an error for an invalid numeric literal."""
    return LexerError(
        message=f"Invalid numeric literal: '{lexeme}'",
        location=location,
        code="L003", 
        help_text=reason,
        suggestions=["Check the numeric format", "Underscores may only follow a digit"]
    )


def create_invalid_unicode_error(reason: str, location: SourceLocation) -> LexerError:
    """Create an error for input that is not valid UTF-8."""
    return LexerError(
        message=f"Invalid Unicode sequence: {reason}",
        location=location,
        code="L004",
        help_text="Documents must be encoded as UTF-8.",
        suggestions=["Check the file encoding"]
    )


def create_keyword_identifier_error(word: str, location: SourceLocation) -> LexerError:
    """Create an error for a keyword written where an identifier is required."""
    return LexerError(
        message=f"Keyword '{word}' cannot be used as an identifier",
        location=location,
        code="L005",
        help_text="Quote the name if you mean the string.",
        suggestions=[f'"{word}"']
    )


def create_missing_identifier_error(found: str, location: SourceLocation) -> LexerError:
    """Create an error for a position where an identifier was required but absent."""
    found_str = repr(found) if found else "end of input"
    return LexerError(
        message=f"Expected identifier, found {found_str}",
        location=location,
        code="L005",
        help_text="Node names must be bare identifiers or quoted strings, and may not start with a digit."
    )


def create_invalid_escape_error(sequence: str, location: SourceLocation) -> LexerError:
    """Create an error for an unknown or malformed escape sequence."""
    return LexerError(
        message=f"Invalid escape sequence: '{sequence}'",
        location=location,
        code="L006",
        help_text="Valid escapes are \\n \\r \\t \\\\ \\/ \\\" \\b \\f and \\u{XXXXXX}.",
        suggestions=["Use a raw string r\"...\" to avoid escaping"]
    )


def create_invalid_type_hint_error(reason: str, location: SourceLocation) -> LexerError:
    """Create an error for a malformed (type) annotation."""
    return LexerError(
        message=f"Invalid type hint: {reason}",
        location=location,
        code="L007",
        help_text="Type hints are written as (identifier) directly before a node name or value."
    )


def create_invalid_value_error(lexeme: str, location: SourceLocation) -> LexerError:
    """Create an error for something that is not a literal value."""
    suggestions = ErrorRecovery.suggest_keyword_corrections(lexeme) if lexeme else []
    found_str = f"'{lexeme}'" if lexeme else "end of input"
    return LexerError(
        message=f"Expected a value, found {found_str}",
        location=location,
        code="L008",
        help_text="Values are strings, raw strings, numbers, true, false or null.",
        suggestions=suggestions
    )


def create_unterminated_comment_error(location: SourceLocation) -> LexerError:
    """Create an error for a block comment that never closes."""
    return LexerError(
        message="Unterminated block comment",
        location=location,
        code="L009",
        help_text="Block comments nest; every '/*' needs its own '*/'.",
        suggestions=["Add a closing '*/'"]
    )
