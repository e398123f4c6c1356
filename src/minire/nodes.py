"""AST node types for the regex compiler.

A compiled pattern is a tuple of nodes matched in sequence. Nodes are
immutable and own their children, so a compiled pattern can be shared
between matchers freely.
"""

from dataclasses import dataclass, fields
from typing import Tuple, Union


@dataclass(frozen=True)
class Node:
    """Base class for all AST nodes."""

    def to_dict(self) -> dict:
        """Convert node to dictionary for testing/serialization."""
        result = {"type": self.__class__.__name__}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, Node):
                result[f.name] = value.to_dict()
            elif isinstance(value, tuple):
                result[f.name] = [
                    v.to_dict() if isinstance(v, Node) else v
                    for v in value
                ]
            else:
                result[f.name] = value
        return result


@dataclass(frozen=True)
class Literal(Node):
    """Literal character."""
    char: str


@dataclass(frozen=True)
class AnyChar(Node):
    """The '.' wildcard: any single character."""
    pass


@dataclass(frozen=True)
class StartAnchor(Node):
    """'^' - start of input."""
    pass


@dataclass(frozen=True)
class EndAnchor(Node):
    """'$' - end of input."""
    pass


@dataclass(frozen=True)
class CharClass(Node):
    """Character class like [a-z] or [^abc]."""
    ranges: Tuple[Tuple[str, str], ...]  # Inclusive (start, end) pairs
    negated: bool = False


@dataclass(frozen=True)
class DigitClass(Node):
    """\\d"""
    pass


@dataclass(frozen=True)
class WordClass(Node):
    """\\w"""
    pass


@dataclass(frozen=True)
class Optional(Node):
    """'?' applied to the preceding node."""
    node: Node


@dataclass(frozen=True)
class OneOrMore(Node):
    """'+' applied to the preceding node."""
    node: Node


@dataclass(frozen=True)
class Group(Node):
    """Capturing group with its parse-time number (1-based)."""
    nodes: Tuple[Node, ...]
    number: int


@dataclass(frozen=True)
class Alternation(Node):
    """Two-way alternation inside a group: (left|right)."""
    left: Tuple[Node, ...]
    right: Tuple[Node, ...]


@dataclass(frozen=True)
class Backreference(Node):
    """Backreference like \\1."""
    number: int


NodeType = Union[Literal, AnyChar, StartAnchor, EndAnchor, CharClass, DigitClass,
                 WordClass, Optional, OneOrMore, Group, Alternation, Backreference]

# A pattern is a concatenation of nodes
Sequence = Tuple[Node, ...]
