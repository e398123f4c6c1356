"""
minire - a small backtracking regular expression engine.

Supports literals, '.', '^', '$', character classes with ranges and
negation, \\d and \\w, the '?' and '+' quantifiers, capturing groups with
two-way alternation, and backreferences \\1 to \\9.
"""

__version__ = "0.1.0"

from loguru import logger

from .captures import CaptureStore
from .errors import (
    BacktrackLimitError,
    DanglingQuantifier,
    IncompleteEscapeAtEndOfPattern,
    InvalidAlternationSyntax,
    ParseError,
    RegexError,
    UnmatchedParenthesis,
    UnsupportedEscape,
    UnterminatedCharacterClass,
)
from .matcher import Matcher
from .parser import RegexParser, parse
from .regex import Pattern, compile, find_captures, is_match

# Silent unless an application (like the CLI) opts in
logger.disable("minire")

__all__ = [
    "Pattern",
    "compile",
    "is_match",
    "find_captures",
    "parse",
    "RegexParser",
    "Matcher",
    "CaptureStore",
    "RegexError",
    "ParseError",
    "UnsupportedEscape",
    "UnterminatedCharacterClass",
    "DanglingQuantifier",
    "UnmatchedParenthesis",
    "InvalidAlternationSyntax",
    "IncompleteEscapeAtEndOfPattern",
    "BacktrackLimitError",
]
