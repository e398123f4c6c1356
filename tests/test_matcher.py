"""Tests for the Matcher: search strategy, limits and reuse."""

from concurrent.futures import ThreadPoolExecutor

import pytest
from minire import Matcher, BacktrackLimitError, compile, parse
from minire.matcher import node_width, sequence_width
from minire.nodes import Literal, OneOrMore, Group, Alternation, Backreference


class TestMatcherSearch:
    """Test offsets tried by the matcher."""

    def test_node_sequence(self):
        """A Matcher can be built from hand-written nodes."""
        m = Matcher([Literal("a"), OneOrMore(Literal("b"))])
        assert m.is_match("xabbb") is True
        assert m.is_match("xa") is False

    def test_hand_built_alternation(self):
        """Alternation and backreference nodes built directly."""
        alt = Alternation((Literal("x"),), (Literal("y"),))
        m = Matcher([Group((alt,), 1), Backreference(1)])
        assert m.find_captures("-yy") == (True, {1: "y"})
        assert m.is_match("xy") is False

    def test_match_at(self):
        """match_at only tries the given offset."""
        m = Matcher(parse("ab")[0])
        assert m.match_at("xab", 1) == {}
        assert m.match_at("xab", 0) is None

    def test_match_at_captures(self):
        """match_at reports captures."""
        m = Matcher(parse(r"(\d)")[0])
        assert m.match_at("a1", 1) == {1: "1"}

    def test_match_at_out_of_range(self):
        """Offsets outside the text never match."""
        m = Matcher(parse("")[0])
        assert m.match_at("abc", 3) == {}
        assert m.match_at("abc", 4) is None
        assert m.match_at("abc", -1) is None

    def test_match_at_end_of_text(self):
        """$ can match at the very end."""
        m = Matcher(parse("$")[0])
        assert m.match_at("abc", 3) == {}

    def test_repr(self):
        """repr shows size and limit."""
        assert repr(Matcher(parse("ab")[0], step_limit=5)) == "Matcher(2 nodes, step_limit=5)"

    def test_default_step_limit(self):
        """Unlimited by default."""
        assert Matcher(()).step_limit is None
        assert compile("a").step_limit is None


class TestBacktrackLimits:
    """Test the backtracking budget."""

    def test_step_limit_exceeded(self):
        """Nested quantifiers against a near miss blow the budget."""
        p = compile("^(a+)+b$", step_limit=2000)
        with pytest.raises(BacktrackLimitError):
            p.is_match("a" * 30)

    def test_step_limit_not_reached(self):
        """Ordinary matches stay within a modest budget."""
        p = compile("ca+t", step_limit=1000)
        assert p.is_match("the caaat sat") is True
        assert p.is_match("no match here") is False

    def test_budget_is_per_call(self):
        """Each call starts with a fresh step counter."""
        p = compile("abc", step_limit=50)
        for _ in range(10):
            assert p.is_match("xxabc") is True

    def test_long_group_repetition(self):
        """Repeating a group thousands of times is not a stack problem."""
        p = compile("^(ab)+$")
        assert p.is_match("ab" * 5000) is True
        assert p.is_match("ab" * 5000 + "a") is False
        assert p.find_captures("ab" * 2000) == (True, {1: "ab"})

    def test_long_backreference_repetition(self):
        """Repeated backreferences walk long text iteratively."""
        assert compile(r"^(x)\1+$").is_match("x" * 3000) is True

    def test_long_literal_pattern(self):
        """Literal patterns longer than the recursion limit."""
        p = compile("a" * 1200)
        assert p.is_match("a" * 1200) is True
        assert p.is_match("b" + "a" * 1199) is False


class TestCompoundRepetition:
    """+ on groups and backreferences backtracks over every iteration."""

    def test_body_with_several_lengths(self):
        """An iteration can be retried with a longer body."""
        p = compile("^(a|ab)+c$")
        assert p.is_match("abc") is True
        assert p.is_match("aabac") is True
        assert p.is_match("abbc") is False

    def test_gives_back_iterations(self):
        """Fewer iterations are tried when the remainder needs the text."""
        p = compile("^(ab)+abc$")
        assert p.find_captures("abababc") == (True, {1: "ab"})
        assert p.is_match("abc") is False

    def test_last_iteration_is_captured(self):
        """The capture holds the final iteration."""
        assert compile(r"^(\d)+$").find_captures("123") == (True, {1: "3"})

    def test_zero_width_first_iteration(self):
        """Only the first iteration may match empty text."""
        p = compile("^(a?)+b$")
        assert p.find_captures("b") == (True, {1: ""})
        assert p.is_match("aab") is True


class TestWidthBounds:
    """Test the width analysis used to skip impossible group lengths."""

    def test_fixed_width(self):
        """Literals and classes have a fixed width."""
        assert sequence_width(parse("a.[bc]")[0]) == (3, 3)

    def test_optional_and_anchor(self):
        """? lowers the minimum, anchors are zero width."""
        assert sequence_width(parse("^ab?$")[0]) == (1, 2)

    def test_unbounded(self):
        """+ and backreferences have no maximum."""
        assert sequence_width(parse("a+")[0]) == (1, None)
        assert sequence_width(parse(r"(a)\1")[0]) == (1, None)

    def test_alternation(self):
        """Alternation spans both arms."""
        assert node_width(parse("(a|bcd)")[0][0]) == (1, 3)


class TestMatcherReuse:
    """A matcher holds no state between calls."""

    def test_repeated_calls(self):
        """Captures from one call do not reach the next."""
        p = compile(r"(a|b)\1")
        assert p.find_captures("aa") == (True, {1: "a"})
        assert p.find_captures("bb") == (True, {1: "b"})
        assert p.find_captures("ab") == (False, {})

    def test_concurrent_calls(self):
        """The same pattern can be used from several threads."""
        p = compile(r"^(\w+) and \1$")
        texts = ["cat and cat", "cat and dog", "dog and dog", "x and y"] * 25
        with ThreadPoolExecutor(max_workers=4) as pool:
            results = list(pool.map(p.is_match, texts))
        assert results == [True, False, True, False] * 25
