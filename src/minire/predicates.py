"""Character predicates shared by the matcher and quantifier logic."""

from typing import Sequence, Tuple

from . import nodes


def is_digit(ch: str) -> bool:
    """ASCII digit 0-9 only."""
    return '0' <= ch <= '9'


def is_word(ch: str) -> bool:
    """Alphanumeric character (letters and digits of any script)."""
    return ch.isalnum()


def in_class(ch: str, ranges: Sequence[Tuple[str, str]], negated: bool = False) -> bool:
    """Membership in inclusive (start, end) ranges, inverted when negated."""
    matched = any(start <= ch <= end for start, end in ranges)
    return matched != negated


def is_single_char(node: nodes.Node) -> bool:
    """True for nodes that consume exactly one character by predicate."""
    return isinstance(node, (nodes.Literal, nodes.AnyChar, nodes.CharClass,
                             nodes.DigitClass, nodes.WordClass))


def matches_char(node: nodes.Node, ch: str) -> bool:
    """
    Test a single character against a single-char node.

    Any other node type never matches a lone character.
    """
    if isinstance(node, nodes.Literal):
        return node.char == ch
    if isinstance(node, nodes.AnyChar):
        return True
    if isinstance(node, nodes.DigitClass):
        return is_digit(ch)
    if isinstance(node, nodes.WordClass):
        return is_word(ch)
    if isinstance(node, nodes.CharClass):
        return in_class(ch, node.ranges, node.negated)
    return False
