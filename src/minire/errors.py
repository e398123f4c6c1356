"""Regex error types and exceptions."""

from typing import Optional


class RegexError(Exception):
    """Base class for all regex errors."""

    def __init__(self, message: str = ""):
        self.message = message
        super().__init__(message)


class ParseError(RegexError):
    """Pattern could not be compiled."""

    def __init__(self, message: str = "", pattern: str = "", position: Optional[int] = None):
        self.pattern = pattern
        self.position = position
        # Include position in error message if known
        if position is not None:
            formatted_message = f"{message} at position {position} in {pattern!r}"
        else:
            formatted_message = message
        super().__init__(formatted_message)


class UnsupportedEscape(ParseError):
    """Escape sequence the engine does not understand, like \\s."""

    def __init__(self, char: str, pattern: str = "", position: Optional[int] = None):
        self.char = char
        super().__init__(f"Unsupported escape sequence: \\{char}", pattern, position)


class IncompleteEscapeAtEndOfPattern(ParseError):
    """Pattern ends with a lone backslash."""

    def __init__(self, pattern: str = "", position: Optional[int] = None):
        super().__init__("Pattern ends with an incomplete escape sequence", pattern, position)


class UnterminatedCharacterClass(ParseError):
    """Character class without a closing bracket."""

    def __init__(self, pattern: str = "", position: Optional[int] = None):
        super().__init__("Unterminated character class", pattern, position)


class DanglingQuantifier(ParseError):
    """Quantifier with nothing to repeat."""

    def __init__(self, quantifier: str, pattern: str = "", position: Optional[int] = None):
        self.quantifier = quantifier
        super().__init__(f"Nothing to repeat before '{quantifier}'", pattern, position)


class UnmatchedParenthesis(ParseError):
    """Group opened but never closed, or closed but never opened."""

    def __init__(self, pattern: str = "", position: Optional[int] = None):
        super().__init__("Unmatched parenthesis", pattern, position)


class InvalidAlternationSyntax(ParseError):
    """'|' outside a group, or more than one '|' in the same group."""

    def __init__(self, message: str = "Invalid alternation syntax", pattern: str = "",
                 position: Optional[int] = None):
        super().__init__(message, pattern, position)


class BacktrackLimitError(RegexError):
    """Raised when a match attempt exceeds its backtracking budget."""

    def __init__(self, message: str = "Backtracking limit exceeded"):
        super().__init__(message)
