"""
kdlnode Lexer - reads the small lexical units the parser asks for

The parser drives everything; the lexer never runs ahead of it. Each
read_* method starts at the reader's current position, consumes exactly
one unit and returns a Token (or None for optional units).

Also home of the whitespace/comment skipper, since that is the one piece
of lexing every parser routine calls before looking at a character.

xwest
"""

import re
from typing import Optional

from .tokens import (
    Token, TokenType, SourceLocation, IdentifierMode, KEYWORDS, ESCAPE_SEQUENCES,
    LINE_COMMENT, BLOCK_COMMENT_START, BLOCK_COMMENT_END, CRLF
)
from .chars import (
    is_whitespace, is_newline, is_identifier_char, is_digit, is_sign, is_hex_digit
)
from .errors import (
    create_unterminated_string_error, create_invalid_number_error,
    create_keyword_identifier_error, create_missing_identifier_error,
    create_invalid_escape_error, create_invalid_type_hint_error,
    create_invalid_value_error, create_unterminated_comment_error
)
from .reader import Reader


class Lexer:
    """
    On-demand lexical reader for node documents.

    Works directly on a Reader; there is no separate token stream because
    what a run of characters means depends on where the parser is.
    """

    def __init__(self, reader: Reader):
        """
        Initialize the lexer.

        Args:
            reader: Cursor positioned somewhere in the document
        """
        self.reader = reader
        self._compile_patterns()

    def _compile_patterns(self):
        """Compile regex patterns used for numeric literals."""

        self.binary_pattern = re.compile(r'[+-]?0b[01][01_]*')
        self.octal_pattern = re.compile(r'[+-]?0o[0-7][0-7_]*')
        self.hex_pattern = re.compile(r'[+-]?0x[0-9a-fA-F][0-9a-fA-F_]*')
        self.decimal_pattern = re.compile(
            r'[+-]?[0-9][0-9_]*(?:\.[0-9][0-9_]*)?(?:[eE][+-]?[0-9][0-9_]*)?'
        )

        # (pattern, token type, base)
        self.integer_patterns = [
            (self.binary_pattern, TokenType.INTEGER_BINARY, 2),
            (self.octal_pattern, TokenType.INTEGER_OCTAL, 8),
            (self.hex_pattern, TokenType.INTEGER_HEXADECIMAL, 16),
        ]

    # ========================================================================
    # Type hints and identifiers
    # ========================================================================

    def read_type_hint(self) -> Optional[str]:
        """Read an optional ``(identifier)`` annotation."""
        reader = self.reader
        if reader.lookahead() != '(':
            return None

        reader.discard()
        token = self.read_identifier(IdentifierMode.EQUALS)
        if token is None:
            raise create_invalid_type_hint_error(
                "expected an identifier after '('", reader.location()
            )

        if reader.lookahead() != ')':
            raise create_invalid_type_hint_error(
                f"expected ')' after '{token.value}'", reader.location()
            )
        reader.discard()

        return token.value

    def read_identifier(self, mode: IdentifierMode) -> Optional[Token]:
        """
        Read an identifier, quoted or bare.

        Returns None, with nothing consumed, when the input does not have
        the shape of an identifier (so the caller can try a value instead).
        Malformed quoted strings still raise.
        """
        reader = self.reader
        location = reader.location()
        char = reader.lookahead()

        if char == '"':
            return self._read_string(location)
        if self._at_raw_string():
            return self._read_raw_string(location)

        # Numbers are never identifiers
        if is_digit(char) or (is_sign(char) and is_digit(reader.lookahead(1))):
            return None

        allow_equals = mode is IdentifierMode.FREESTANDING
        checkpoint = reader.checkpoint()
        start = reader.pos
        while is_identifier_char(reader.lookahead(), allow_equals):
            reader.discard()

        lexeme = reader.slice_from(start)
        if not lexeme or lexeme in KEYWORDS:
            reader.rewind(checkpoint)
            return None

        return Token(TokenType.IDENTIFIER, lexeme, lexeme, location)

    def expect_identifier(self, mode: IdentifierMode) -> Token:
        """Read an identifier that must be present (node names)."""
        token = self.read_identifier(mode)
        if token is not None:
            return token

        reader = self.reader
        word = self._peek_word()
        if word in KEYWORDS:
            raise create_keyword_identifier_error(word, reader.location())
        raise create_missing_identifier_error(word or reader.lookahead(), reader.location())

    def _peek_word(self) -> str:
        """The run of identifier characters at the cursor, without consuming it."""
        offset = 0
        while is_identifier_char(self.reader.lookahead(offset)):
            offset += 1
        return self.reader.source[self.reader.pos:self.reader.pos + offset]

    # ========================================================================
    # Values
    # ========================================================================

    def read_value(self) -> Token:
        """Read one literal value: string, raw string, number or keyword."""
        reader = self.reader
        location = reader.location()
        char = reader.lookahead()

        if char == '"':
            return self._read_string(location)
        if self._at_raw_string():
            return self._read_raw_string(location)
        if is_digit(char) or (is_sign(char) and is_digit(reader.lookahead(1))):
            return self._read_number(location)

        word = self._peek_word()
        if word in KEYWORDS:
            token_type, value = KEYWORDS[word]
            reader.discard(len(word))
            return Token(token_type, word, value, location)

        raise create_invalid_value_error(word or char, location)

    def _at_raw_string(self) -> bool:
        """Check for r"..." or r#"..."# at the cursor."""
        reader = self.reader
        if reader.lookahead() != 'r':
            return False
        offset = 1
        while reader.lookahead(offset) == '#':
            offset += 1
        return reader.lookahead(offset) == '"'

    def _read_string(self, location: SourceLocation) -> Token:
        """Read an escaped string literal."""
        reader = self.reader
        start = reader.pos
        reader.discard()  # Skip opening quote

        value_parts = []

        while True:
            char = reader.lookahead()
            if char == '':
                raise create_unterminated_string_error('"', location)
            if char == '"':
                break
            if char == '\\':
                value_parts.append(self._handle_escape_sequence(location))
            else:
                value_parts.append(char)
                reader.discard()

        reader.discard()  # Skip closing quote

        return Token(TokenType.STRING, reader.slice_from(start), ''.join(value_parts), location)

    def _read_raw_string(self, location: SourceLocation) -> Token:
        """Read a raw string; no escapes, closed by a quote and the same number of '#'."""
        reader = self.reader
        start = reader.pos
        reader.discard()  # Skip 'r'

        hashes = 0
        while reader.lookahead() == '#':
            hashes += 1
            reader.discard()
        reader.discard()  # Skip opening quote

        terminator = '"' + '#' * hashes
        end = reader.source.find(terminator, reader.pos)
        if end < 0:
            raise create_unterminated_string_error(terminator, location)

        value = reader.source[reader.pos:end]
        reader.discard(end - reader.pos + len(terminator))

        return Token(TokenType.RAW_STRING, reader.slice_from(start), value, location)

    def _handle_escape_sequence(self, string_location: SourceLocation) -> str:
        """Handle one escape sequence; the cursor is on the backslash."""
        reader = self.reader
        location = reader.location()
        reader.discard()  # Skip backslash

        escape_char = reader.lookahead()
        if escape_char == '':
            raise create_unterminated_string_error('"', string_location)

        if escape_char in ESCAPE_SEQUENCES:
            reader.discard()
            return ESCAPE_SEQUENCES[escape_char]

        if escape_char != 'u':
            raise create_invalid_escape_error('\\' + escape_char, location)

        # Unicode escape \u{H} .. \u{HHHHHH}
        reader.discard()
        if reader.lookahead() != '{':
            raise create_invalid_escape_error('\\u', location)
        reader.discard()

        digits_start = reader.pos
        while is_hex_digit(reader.lookahead()):
            reader.discard()
        hex_digits = reader.slice_from(digits_start)

        if reader.lookahead() != '}' or not 1 <= len(hex_digits) <= 6:
            raise create_invalid_escape_error('\\u{' + hex_digits, location)
        reader.discard()

        code_point = int(hex_digits, 16)
        if code_point > 0x10FFFF or 0xD800 <= code_point <= 0xDFFF:
            raise create_invalid_escape_error('\\u{' + hex_digits + '}', location)

        return chr(code_point)

    def _read_number(self, location: SourceLocation) -> Token:
        """Tokenize integer or float literals."""
        reader = self.reader
        start = reader.pos

        # Take the whole run up to a terminator so that junk like 12abc
        # is reported as a bad number rather than as two tokens
        reader.discard()
        while is_identifier_char(reader.lookahead()):
            reader.discard()
        lexeme = reader.slice_from(start)

        for pattern, token_type, base in self.integer_patterns:
            if pattern.fullmatch(lexeme):
                sign = -1 if lexeme[0] == '-' else 1
                digits = lexeme.lstrip('+-')[2:].replace('_', '')
                return Token(token_type, lexeme, sign * int(digits, base), location)

        if not self.decimal_pattern.fullmatch(lexeme):
            raise create_invalid_number_error(lexeme, location, self._number_error_reason(lexeme))

        clean_lexeme = lexeme.replace('_', '')
        if '.' in clean_lexeme or 'e' in clean_lexeme.lower():
            return Token(TokenType.FLOAT, lexeme, float(clean_lexeme), location)
        return Token(TokenType.INTEGER_DECIMAL, lexeme, int(clean_lexeme), location)

    @staticmethod
    def _number_error_reason(lexeme: str) -> str:
        body = lexeme.lstrip('+-')
        if body.startswith('0x'):
            return "Hexadecimal literals contain only 0-9, a-f, A-F and '_' after 0x"
        if body.startswith('0o'):
            return "Octal literals contain only 0-7 and '_' after 0o"
        if body.startswith('0b'):
            return "Binary literals contain only 0, 1 and '_' after 0b"
        return "Decimal literals need a digit after '.' and after the exponent marker"

    # ========================================================================
    # Insignificant content
    # ========================================================================

    def skip_insignificant(self):
        """
        Skip whitespace, line continuations and comments.

        Stops on the first significant character or on a newline; newlines
        are never consumed here because they terminate nodes.

        Raises:
            EndOfInput: If the input runs out first
        """
        reader = self.reader
        while True:
            char = reader.peek()

            if is_whitespace(char):
                reader.discard()
                continue

            # Line continuation splices the next line onto this one
            if char == '\\':
                reader.discard()
                self.skip_until_newline(after_break=True)
                continue

            # Nothing significant can follow a line comment on the same line
            if reader.is_next(LINE_COMMENT):
                reader.discard(2)
                self.skip_until_newline(after_break=False)
                return

            if reader.is_next(BLOCK_COMMENT_START):
                self._skip_block_comment()
                continue

            return

    def skip_until_newline(self, after_break: bool):
        """
        Discard characters up to the next line break.

        With after_break the break itself is consumed too. Without it the
        cursor is left on the break; for CRLF only the LF is left.
        """
        reader = self.reader
        while True:
            if reader.is_next(CRLF):
                reader.discard(2 if after_break else 1)
                return

            char = reader.peek()
            if is_newline(char):
                if after_break:
                    reader.discard()
                return

            reader.discard()

    def _skip_block_comment(self):
        """Skip a block comment; these nest, so an explicit depth is kept."""
        reader = self.reader
        location = reader.location()
        reader.discard(2)

        depth = 1
        while depth > 0:
            if reader.at_end():
                raise create_unterminated_comment_error(location)

            if reader.is_next(BLOCK_COMMENT_START):
                depth += 1
                reader.discard(2)
            elif reader.is_next(BLOCK_COMMENT_END):
                depth -= 1
                reader.discard(2)
            else:
                reader.discard()
