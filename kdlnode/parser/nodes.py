"""
Document tree definitions for kdlnode.

A parsed document is a plain list of Node objects. Each Node owns its
arguments, property values and children outright; there are no parent
or sibling references.

Author: xwest
"""

from typing import List, Optional, Any, Dict
from dataclasses import dataclass, field

from ..lexer.tokens import SourceLocation


@dataclass
class Value:
    """
    A literal attached to a node as an argument or property.

    ``value`` is a str, int, float, bool or None. Equality compares the
    literal and its type hint; where it was written does not matter.
    """
    value: Any
    type_hint: Optional[str] = None
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)
    
    def __eq__(self, other: object) -> bool:
        # true, 1 and 1.0 are different literals even though Python equates them
        if not isinstance(other, Value):
            return NotImplemented
        return (type(self.value) is type(other.value)
                and self.value == other.value
                and self.type_hint == other.type_hint)
    
    def to_dict(self) -> Dict[str, Any]:
        if self.type_hint is None:
            return {"value": self.value}
        return {"type": self.type_hint, "value": self.value}


@dataclass
class Node:
    """A named node with optional type hint, arguments, properties and children."""
    name: str
    type_hint: Optional[str] = None
    args: List[Value] = field(default_factory=list)
    props: Dict[str, Value] = field(default_factory=dict)
    children: List['Node'] = field(default_factory=list)
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)
    
    def add_arg(self, value: Value):
        """Append a positional argument."""
        self.args.append(value)
    
    def set_prop(self, name: str, value: Value):
        """Set a property; a repeated name replaces the earlier value."""
        self.props[name] = value
    
    def add_child(self, child: 'Node'):
        self.children.append(child)
    
    def to_dict(self) -> Dict[str, Any]:
        """Plain-data form of this node and its subtree (JSON friendly)."""
        result: Dict[str, Any] = {"name": self.name}
        if self.type_hint is not None:
            result["type"] = self.type_hint
        result["args"] = [arg.to_dict() for arg in self.args]
        result["props"] = {key: value.to_dict() for key, value in self.props.items()}
        result["children"] = [child.to_dict() for child in self.children]
        return result
    
    def __str__(self) -> str:
        return f"Node({self.name!r}, args={len(self.args)}, props={len(self.props)}, children={len(self.children)})"
