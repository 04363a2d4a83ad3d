"""
kdlnode Parser Package

Recursive descent parser that turns a node document into a list of Node
objects.

Key Features:
- Arguments, properties and nested children blocks
- Type hints on nodes and values
- Slashdash (/-) suppression of nodes, arguments, properties and children
- Depth-limited nesting with precise unclosed-block diagnostics

Author: xwest
"""

from .nodes import Node, Value
from .parser import Parser, parse, parse_file
from .errors import ParseError

__all__ = [
    # Core parser
    "Parser",
    "parse",
    "parse_file",
    
    # Document tree
    "Node",
    "Value",
    
    # Error handling
    "ParseError",
]
