"""
Main regex module - public interface.

Compile once with :func:`compile`, then test text with :func:`is_match` or
:func:`find_captures` (or the methods of the returned :class:`Pattern`).
"""

from typing import Dict, Iterable, Optional, Tuple, Union

from . import nodes
from .matcher import Matcher
from .parser import parse


__all__ = ['Pattern', 'compile', 'is_match', 'find_captures']


class Pattern:
    """
    Compiled regular expression.

    Behaves like a read-only sequence of its AST nodes.
    """

    def __init__(self, source: str, step_limit: Optional[int] = Matcher.DEFAULT_STEP_LIMIT):
        """
        Create a new Pattern.

        Args:
            source: The regex pattern string
            step_limit: Maximum backtracking steps per match call

        Raises:
            ParseError: If the pattern is malformed
        """
        self.source = source
        self.nodes, self.group_count = parse(source)
        self._matcher = Matcher(self.nodes, step_limit)

    @property
    def step_limit(self) -> Optional[int]:
        return self._matcher.step_limit

    def is_match(self, text: str) -> bool:
        """
        Test if the pattern matches anywhere in the text.

        Args:
            text: The string to test

        Returns:
            True if there's a match, False otherwise
        """
        return self._matcher.is_match(text)

    def find_captures(self, text: str) -> Tuple[bool, Dict[int, str]]:
        """
        Search the text and report captured groups.

        Args:
            text: The string to search

        Returns:
            (matched, {group number: captured substring})
        """
        return self._matcher.find_captures(text)

    def __iter__(self):
        return iter(self.nodes)

    def __len__(self) -> int:
        return len(self.nodes)

    def __getitem__(self, idx):
        return self.nodes[idx]

    def __eq__(self, other):
        if not isinstance(other, Pattern):
            return NotImplemented
        return self.nodes == other.nodes

    def __hash__(self):
        return hash(self.nodes)

    def __repr__(self):
        return f"Pattern({self.source!r})"


def _matcher_for(ast: Union[Pattern, Iterable[nodes.Node]]) -> Matcher:
    if isinstance(ast, Pattern):
        return ast._matcher
    return Matcher(ast)


def compile(pattern: str, step_limit: Optional[int] = Matcher.DEFAULT_STEP_LIMIT) -> Pattern:
    """
    Compile a pattern string.

    Args:
        pattern: The regex pattern
        step_limit: Optional backtracking budget for later matches

    Returns:
        Compiled Pattern

    Raises:
        ParseError: If the pattern is malformed
    """
    return Pattern(pattern, step_limit)


def is_match(ast: Union[Pattern, Iterable[nodes.Node]], text: str) -> bool:
    """
    Test a compiled pattern (or bare node sequence) against text.

    Args:
        ast: Result of compile(), or a sequence of nodes
        text: The string to test

    Returns:
        True if matches, False otherwise
    """
    return _matcher_for(ast).is_match(text)


def find_captures(ast: Union[Pattern, Iterable[nodes.Node]],
                  text: str) -> Tuple[bool, Dict[int, str]]:
    """
    Like is_match, but also return the captured groups of the match.

    Args:
        ast: Result of compile(), or a sequence of nodes
        text: The string to search

    Returns:
        (matched, captures); captures is empty when there is no match
    """
    return _matcher_for(ast).find_captures(text)
