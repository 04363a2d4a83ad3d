"""
Character cursor over a document.

The reader owns the input text, the current position (with line and
column tracking for diagnostics) and the nesting depth counter shared by
the node and children parsers.

Author: xwest
"""

from typing import Tuple, Union

from .tokens import SourceLocation, CRLF
from .chars import is_newline
from .errors import EndOfInput, create_invalid_unicode_error


Checkpoint = Tuple[int, int, int]


class Reader:
    """
    Cursor over decoded document text.

    Every parse gets its own reader; nothing here is shared between
    parses, so independent parses never interfere.
    """

    def __init__(self, source: str, filename: str = "<string>"):
        """
        Initialize the reader.

        Args:
            source: Decoded document text
            filename: Name of source file for error reporting
        """
        self.source = source
        self.filename = filename
        self.pos = 0
        self.line = 1
        self.column = 1
        self.depth = 0

    @classmethod
    def from_bytes(cls, data: Union[bytes, bytearray], filename: str = "<bytes>") -> "Reader":
        """Create a reader from UTF-8 encoded bytes."""
        try:
            text = bytes(data).decode('utf-8')
        except UnicodeDecodeError as e:
            prefix = bytes(data[:e.start]).decode('utf-8')
            line = prefix.count('\n') + 1
            column = len(prefix) - (prefix.rfind('\n') + 1) + 1
            raise create_invalid_unicode_error(
                e.reason,
                SourceLocation(filename, line, column, len(prefix))
            ) from e
        return cls(text, filename)

    def location(self) -> SourceLocation:
        """Current position as a SourceLocation."""
        return SourceLocation(self.filename, self.line, self.column, self.pos)

    def at_end(self) -> bool:
        return self.pos >= len(self.source)

    def peek(self) -> str:
        """
        Return the next character without consuming it.

        Raises:
            EndOfInput: If the input is exhausted
        """
        if self.pos >= len(self.source):
            raise EndOfInput(self.location())
        return self.source[self.pos]

    def lookahead(self, offset: int = 0) -> str:
        """Peek ``offset`` characters ahead; returns '' past the end."""
        peek_pos = self.pos + offset
        if peek_pos < len(self.source):
            return self.source[peek_pos]
        return ''

    def is_next(self, literal: str) -> bool:
        """Check whether ``literal`` starts at the current position."""
        return self.source.startswith(literal, self.pos)

    def discard(self, count: int = 1):
        """Advance by ``count`` characters, updating line/column."""
        for _ in range(count):
            if self.pos >= len(self.source):
                break
            char = self.source[self.pos]
            # The CR of a CRLF pair does not start a new line on its own
            if is_newline(char) and not self.source.startswith(CRLF, self.pos):
                self.line += 1
                self.column = 1
            elif char != '\r':
                self.column += 1
            self.pos += 1

    def checkpoint(self) -> Checkpoint:
        """Capture the position so a failed attempt can be undone."""
        return (self.pos, self.line, self.column)

    def rewind(self, checkpoint: Checkpoint):
        """Return to a position captured with checkpoint()."""
        self.pos, self.line, self.column = checkpoint

    def slice_from(self, start: int) -> str:
        """Text between ``start`` and the current position."""
        return self.source[start:self.pos]
