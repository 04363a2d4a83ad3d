"""
kdlnode Recursive Descent Parser

Builds the node tree straight from the character cursor. Four routines
call each other top-down:

- _read_nodes: a sequence of sibling nodes (the document, or a children block)
- _read_node: one node, up to and including its terminator
- _read_arg_or_prop: one argument or property inside a node
- Lexer.skip_insignificant: whitespace and comments, never newlines

The reader's depth counter is what tells a legitimate end of input at
the top level apart from an unterminated children block.

Author: xwest
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

from ..config import ParserConfig
from ..lexer.tokens import SourceLocation, IdentifierMode, SLASHDASH
from ..lexer.chars import is_newline, is_value_terminator
from ..lexer.reader import Reader
from ..lexer.lexer import Lexer
from ..lexer.errors import EndOfInput
from .nodes import Node, Value
from .errors import (
    create_unexpected_semicolon_error, create_unexpected_closing_brace_error,
    create_bare_identifier_error, create_unclosed_block_error,
    create_unexpected_token_after_identifier_error,
    create_unexpected_token_after_value_error, create_nesting_too_deep_error,
    create_unexpected_eof_error
)


logger = logging.getLogger(__name__)


class Parser:
    """
    Node document parser.

    Parsing is all-or-nothing: the first error is raised and no partial
    tree is returned.
    """

    def __init__(self, reader: Reader, config: Optional[ParserConfig] = None):
        """
        Initialize parser over a reader.

        Args:
            reader: Cursor positioned at the start of the document
            config: Limits for this parse
        """
        self.reader = reader
        self.config = config or ParserConfig(filename=reader.filename)
        self.lexer = Lexer(reader)
        # Where each currently open '{' was written, innermost last
        self._open_blocks: List[SourceLocation] = []

    def parse(self) -> List[Node]:
        """
        Parse the whole document.

        Returns:
            Top-level nodes in document order

        Raises:
            InvalidSyntaxError: LexerError or ParseError for the first problem found
        """
        logger.debug("Parsing %s", self.reader.filename)

        try:
            nodes = self._read_nodes()
        except EndOfInput as e:
            raise create_unexpected_eof_error("the rest of the node", e.location) from e
        except RecursionError as e:
            # max_depth above what the interpreter stack allows
            raise create_nesting_too_deep_error(self.config.max_depth, self.reader.location()) from e

        logger.debug("Parsed %d top-level node(s) from %s", len(nodes), self.reader.filename)
        return nodes

    # ========================================================================
    # Documents and children blocks
    # ========================================================================

    def _read_nodes(self) -> List[Node]:
        """Read sibling nodes until end of input (top level) or an unconsumed '}'."""
        reader = self.reader
        nodes: List[Node] = []

        while True:
            # Blank and comment-only lines between nodes
            while True:
                try:
                    self.lexer.skip_insignificant()
                except EndOfInput as e:
                    if reader.depth == 0:
                        return nodes
                    open_location = self._open_blocks[-1] if self._open_blocks else e.location
                    raise create_unclosed_block_error(open_location, e.location) from e

                char = reader.peek()
                if not is_newline(char):
                    break
                self.lexer.skip_until_newline(after_break=True)

            if char == ';':
                raise create_unexpected_semicolon_error(reader.location())
            if char == '}':
                if reader.depth == 0:
                    raise create_unexpected_closing_brace_error(reader.location())
                # The node that opened this block consumes the brace
                return nodes

            slashdash = self._match_slashdash()
            node = self._read_node()

            if slashdash:
                logger.debug("Discarding slashdashed node %r at %s", node.name, node.location)
            else:
                nodes.append(node)

    def _read_children(self, node: Node, discard: bool = False):
        """Read a '{ ... }' block and attach its nodes to ``node`` unless discarded."""
        reader = self.reader
        open_location = reader.location()

        if reader.depth >= self.config.max_depth:
            raise create_nesting_too_deep_error(self.config.max_depth, open_location)

        reader.discard()  # Skip '{'
        reader.depth += 1
        self._open_blocks.append(open_location)
        logger.debug("Entering children block at %s (depth %d)", open_location, reader.depth)

        children = self._read_nodes()

        self._open_blocks.pop()
        reader.depth -= 1
        reader.discard()  # Skip '}'
        logger.debug("Left children block opened at %s", open_location)

        if discard:
            logger.debug("Discarding slashdashed children block at %s", open_location)
            return

        for child in children:
            node.add_child(child)

    # ========================================================================
    # Nodes
    # ========================================================================

    def _read_node(self) -> Node:
        """Read one node and its terminator (a closing '}' is left in place)."""
        reader = self.reader
        lexer = self.lexer
        location = reader.location()

        type_hint = lexer.read_type_hint()
        name = lexer.expect_identifier(IdentifierMode.FREESTANDING)
        node = Node(name.value, type_hint=type_hint, location=location)

        while True:
            try:
                lexer.skip_insignificant()
            except EndOfInput:
                # Running out of input ends the node; the enclosing
                # _read_nodes decides whether that is acceptable
                return node

            char = reader.peek()

            if is_newline(char):
                lexer.skip_until_newline(after_break=True)
                return node
            elif char == ';':
                reader.discard()
                return node
            elif char == '}':
                return node
            elif char == '{':
                # NOTE: the loop continues after a children block, so
                # `a { } 1 { }` is accepted; the grammar is unclear here
                self._read_children(node)
            else:
                self._read_arg_or_prop(node)

    def _match_slashdash(self) -> bool:
        """Consume a '/-' marker and any same-line space after it."""
        reader = self.reader
        if not reader.is_next(SLASHDASH):
            return False

        reader.discard(2)
        try:
            self.lexer.skip_insignificant()
        except EndOfInput as e:
            if reader.depth > 0:
                raise create_unclosed_block_error(self._open_blocks[-1], e.location) from e
            raise create_unexpected_eof_error("something to comment out after '/-'", e.location) from e
        return True

    # ========================================================================
    # Arguments and properties
    # ========================================================================

    def _read_arg_or_prop(self, node: Node):
        """Read one argument or property and attach it to ``node``."""
        reader = self.reader
        lexer = self.lexer

        slashdash = self._match_slashdash()
        if slashdash and reader.lookahead() == '{':
            self._read_children(node, discard=True)
            return

        type_hint = lexer.read_type_hint()

        # A type hint always introduces a value, never a property key
        if type_hint is None:
            identifier = lexer.read_identifier(IdentifierMode.EQUALS)
            if identifier is not None:
                char = reader.lookahead()

                if char == '' or is_value_terminator(char):
                    if not identifier.quoted:
                        raise create_bare_identifier_error(identifier)
                    self._attach_arg(node, Value(identifier.value, location=identifier.location), slashdash)
                    return

                if char == '=':
                    reader.discard()
                    value = self._read_value(property_name=identifier.value)
                    if slashdash:
                        logger.debug("Discarding slashdashed property %r", identifier.value)
                    else:
                        node.set_prop(identifier.value, value)
                    return

                raise create_unexpected_token_after_identifier_error(identifier, char, reader.location())

            # Not shaped like an identifier: must be a plain value

        token = lexer.read_value()
        self._expect_value_end(token)
        self._attach_arg(node, Value(token.value, type_hint=type_hint, location=token.location), slashdash)

    def _read_value(self, property_name: Optional[str] = None) -> Value:
        """Read an optionally type-hinted value that must end at a terminator."""
        type_hint = self.lexer.read_type_hint()
        token = self.lexer.read_value()
        self._expect_value_end(token, property_name)
        return Value(token.value, type_hint=type_hint, location=token.location)

    def _expect_value_end(self, token, property_name: Optional[str] = None):
        char = self.reader.lookahead()
        if char == '' or is_value_terminator(char):
            return
        raise create_unexpected_token_after_value_error(
            token, char, self.reader.location(), property_name
        )

    def _attach_arg(self, node: Node, value: Value, slashdash: bool):
        if slashdash:
            logger.debug("Discarding slashdashed argument %r", value.value)
            return
        node.add_arg(value)


def parse(source: Union[str, bytes], config: Optional[ParserConfig] = None) -> List[Node]:
    """
    Convenience function to parse a document.

    Args:
        source: Document text, or UTF-8 encoded bytes
        config: Parser settings (filename for diagnostics, depth limit)

    Returns:
        Top-level nodes

    Raises:
        InvalidSyntaxError: If the document is not valid
    """
    config = config or ParserConfig()
    if isinstance(source, (bytes, bytearray)):
        reader = Reader.from_bytes(source, config.filename)
    else:
        reader = Reader(source, config.filename)

    return Parser(reader, config).parse()


def parse_file(filepath: Union[str, Path], config: Optional[ParserConfig] = None) -> List[Node]:
    """
    Convenience function to parse a document file.

    Args:
        filepath: Path to the document
        config: Parser settings; the filename is taken from ``filepath``

    Returns:
        Top-level nodes

    Raises:
        InvalidSyntaxError: If the document is not valid
        IOError: If file cannot be read
    """
    with open(filepath, 'rb') as f:
        data = f.read()

    if config is None:
        config = ParserConfig(filename=str(filepath))
    else:
        config = ParserConfig(max_depth=config.max_depth, filename=str(filepath))

    return parse(data, config)
