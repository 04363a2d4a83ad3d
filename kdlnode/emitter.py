"""
Canonical text output for parsed documents.

format_document(parse(text)) produces a document that parses back to an
equal tree: one node per line, arguments before properties, children
indented by four spaces.

Author: xwest
"""

import math
from typing import Any, List, Optional

from .lexer.tokens import KEYWORDS
from .lexer.chars import is_identifier_char, is_digit, is_sign
from .parser.nodes import Node, Value


INDENT = "    "

# Escapes written out by name; other control characters use \u{...}
_ESCAPES = {
    '"': '\\"',
    '\\': '\\\\',
    '\n': '\\n',
    '\r': '\\r',
    '\t': '\\t',
    '\b': '\\b',
    '\f': '\\f',
}


def format_document(nodes: List[Node]) -> str:
    """Render top-level nodes, one per line."""
    return "".join(format_node(node) for node in nodes)


def format_node(node: Node, depth: int = 0) -> str:
    """Render one node and its subtree, terminated by a newline."""
    parts = [_format_type_hint(node.type_hint) + format_identifier(node.name)]
    parts.extend(format_value(arg) for arg in node.args)
    parts.extend(f"{format_identifier(key)}={format_value(value)}" for key, value in node.props.items())

    line = INDENT * depth + " ".join(parts)
    if not node.children:
        return line + "\n"

    body = "".join(format_node(child, depth + 1) for child in node.children)
    return f"{line} {{\n{body}{INDENT * depth}}}\n"


def format_value(value: Value) -> str:
    """Render a value with its type hint."""
    return _format_type_hint(value.type_hint) + _format_literal(value.value)


def format_identifier(name: str) -> str:
    """Render a name bare when it would read back as the same bare identifier."""
    if _is_bare_identifier(name):
        return name
    return format_string(name)


def format_string(text: str) -> str:
    out = []
    for char in text:
        if char in _ESCAPES:
            out.append(_ESCAPES[char])
        elif ord(char) < 0x20 or ord(char) == 0x7F:
            out.append(f"\\u{{{ord(char):x}}}")
        else:
            out.append(char)
    return '"' + "".join(out) + '"'


def _format_type_hint(type_hint: Optional[str]) -> str:
    if type_hint is None:
        return ""
    return f"({format_identifier(type_hint)})"


def _format_literal(literal: Any) -> str:
    if literal is True:
        return "true"
    if literal is False:
        return "false"
    if literal is None:
        return "null"
    if isinstance(literal, str):
        return format_string(literal)
    if isinstance(literal, int):
        return str(literal)
    if isinstance(literal, float):
        if not math.isfinite(literal):
            raise ValueError(f"{literal!r} has no representation in a document")
        return repr(literal)
    raise ValueError(f"Cannot format value of type {type(literal).__name__}")


def _is_bare_identifier(name: str) -> bool:
    if not name or name in KEYWORDS:
        return False
    if is_digit(name[0]) or (is_sign(name[0]) and len(name) > 1 and is_digit(name[1])):
        return False
    return all(is_identifier_char(char) for char in name)
