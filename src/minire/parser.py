"""
Regex pattern parser.

Parses grep-style patterns into a sequence of AST nodes.
Grammar:
    Pattern   ::= Sequence
    Sequence  ::= Term*
    Term      ::= Atom ('?' | '+')*
    Atom      ::= Char | '.' | '^' | '$' | CharClass | Group | Escape
    Group     ::= '(' Sequence ('|' Sequence)? ')'
    CharClass ::= '[' '^'? (Char | Char '-' Char)* ']'
    Escape    ::= '\\d' | '\\w' | '\\\\' | '\\' [1-9]

Alternation only exists inside a group and is binary; a three-way choice
needs an explicit nested group, e.g. (a|(b|c)).
"""

from typing import List, Optional, Tuple

from loguru import logger

from . import nodes
from .errors import (
    DanglingQuantifier,
    IncompleteEscapeAtEndOfPattern,
    InvalidAlternationSyntax,
    UnmatchedParenthesis,
    UnsupportedEscape,
    UnterminatedCharacterClass,
)


class RegexParser:
    """Parser for grep-style regex patterns."""

    def __init__(self, pattern: str):
        self.pattern = pattern
        self.pos = 0
        self.group_count = 0

    def parse(self) -> Tuple[nodes.Sequence, int]:
        """
        Parse the pattern and return (node sequence, group count).
        """
        self.pos = 0
        self.group_count = 0

        sequence = self._parse_sequence()

        ch = self._peek()
        if ch == ')':
            raise UnmatchedParenthesis(self.pattern, self.pos)
        if ch == '|':
            raise InvalidAlternationSyntax(
                "Alternation must be enclosed in a group", self.pattern, self.pos)

        result = tuple(sequence)
        logger.debug("Compiled {!r} into {} node(s), {} group(s)",
                     self.pattern, len(result), self.group_count)
        return result, self.group_count

    def _peek(self) -> Optional[str]:
        """Look at current character without consuming."""
        if self.pos < len(self.pattern):
            return self.pattern[self.pos]
        return None

    def _advance(self) -> Optional[str]:
        """Consume and return current character."""
        if self.pos < len(self.pattern):
            ch = self.pattern[self.pos]
            self.pos += 1
            return ch
        return None

    def _match(self, ch: str) -> bool:
        """Match and consume specific character."""
        if self._peek() == ch:
            self.pos += 1
            return True
        return False

    def _parse_sequence(self) -> List[nodes.Node]:
        """Parse terms up to the end of the pattern, a '|' or a ')'."""
        terms: List[nodes.Node] = []

        while self._peek() is not None and self._peek() not in '|)':
            ch = self._peek()
            if ch in '?+':
                # Quantifiers bind to the single preceding node
                if not terms:
                    raise DanglingQuantifier(ch, self.pattern, self.pos)
                self._advance()
                wrapper = nodes.Optional if ch == '?' else nodes.OneOrMore
                terms.append(wrapper(terms.pop()))
                continue
            terms.append(self._parse_atom())

        return terms

    def _parse_atom(self) -> nodes.Node:
        ch = self._advance()

        if ch == '^':
            return nodes.StartAnchor()
        if ch == '$':
            return nodes.EndAnchor()
        if ch == '.':
            return nodes.AnyChar()
        if ch == '[':
            return self._parse_char_class()
        if ch == '(':
            return self._parse_group()
        if ch == '\\':
            return self._parse_escape()

        return nodes.Literal(ch)

    def _parse_char_class(self) -> nodes.CharClass:
        """Parse character class [...] after the opening bracket."""
        open_pos = self.pos - 1
        negated = self._match('^')
        ranges = []

        while self._peek() is not None and self._peek() != ']':
            start = self._advance()

            if (self._peek() == '-' and self.pos + 1 < len(self.pattern)
                    and self.pattern[self.pos + 1] != ']'):
                self._advance()  # consume '-'
                end = self._advance()
                # A reversed range like z-a contributes nothing
                if start <= end:
                    ranges.append((start, end))
            else:
                ranges.append((start, start))

        if not self._match(']'):
            raise UnterminatedCharacterClass(self.pattern, open_pos)

        return nodes.CharClass(tuple(ranges), negated)

    def _parse_group(self) -> nodes.Group:
        """Parse group (...) or (left|right) after the opening parenthesis."""
        open_pos = self.pos - 1

        # Numbered on open, so outer groups come before the groups they contain
        self.group_count += 1
        number = self.group_count

        left = self._parse_sequence()

        if self._match('|'):
            right = self._parse_sequence()
            if self._peek() == '|':
                raise InvalidAlternationSyntax(
                    "Only one '|' is allowed per group", self.pattern, self.pos)
            body: nodes.Sequence = (nodes.Alternation(tuple(left), tuple(right)),)
        else:
            body = tuple(left)

        if not self._match(')'):
            raise UnmatchedParenthesis(self.pattern, open_pos)

        return nodes.Group(body, number)

    def _parse_escape(self) -> nodes.Node:
        """Parse escape sequence after the backslash."""
        ch = self._peek()

        if ch is None:
            raise IncompleteEscapeAtEndOfPattern(self.pattern, self.pos - 1)

        self._advance()

        if ch == 'd':
            return nodes.DigitClass()
        if ch == 'w':
            return nodes.WordClass()
        if ch == '\\':
            return nodes.Literal('\\')
        if ch in '123456789':
            # Single digit only: \12 is group 1 followed by a literal '2'
            return nodes.Backreference(int(ch))

        raise UnsupportedEscape(ch, self.pattern, self.pos - 2)


def parse(pattern: str) -> Tuple[nodes.Sequence, int]:
    """
    Parse a regex pattern.

    Args:
        pattern: The regex pattern string

    Returns:
        Tuple of (node sequence, group count)
    """
    parser = RegexParser(pattern)
    return parser.parse()
