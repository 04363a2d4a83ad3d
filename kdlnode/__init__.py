"""
kdlnode

A parser for KDL node documents: names, type hints, arguments,
properties and nested children, read into plain Python objects.

Architecture:
    kdlnode/
    ├── lexer/           # Character cursor, literals, identifiers, comments
    ├── parser/          # Node tree construction
    ├── emitter.py       # Canonical text output
    ├── config.py        # Parser settings
    └── cli.py           # `kdlnode` command

Author: xwest
License: MIT
"""

__version__ = "0.1.0"
__author__ = "xwest"
__license__ = "MIT"

from .config import ParserConfig
from .lexer import InvalidSyntaxError, LexerError, EndOfInput, SourceLocation
from .parser import Parser, Node, Value, ParseError, parse, parse_file
from .emitter import format_document, format_node, format_value

__all__ = [
    # Parsing
    "parse",
    "parse_file",
    "Parser",
    "ParserConfig",
    
    # Document tree
    "Node",
    "Value",
    
    # Output
    "format_document",
    "format_node",
    "format_value",
    
    # Errors
    "InvalidSyntaxError",
    "LexerError",
    "ParseError",
    "EndOfInput",
    "SourceLocation",
    
    # Version info
    "__version__",
    "__author__",
    "__license__",
]
