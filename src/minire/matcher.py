"""
Recursive backtracking matcher.

Executes a compiled node sequence against text. Every node is tried at an
absolute position in the text, inside a window that ends at ``end``: the
whole text at top level, a candidate prefix while matching a group body.

Runs of characters, anchors and backreferences are consumed in a loop, and
repetitions of a compound body keep their iterations on an explicit stack,
so recursion depth follows the nesting of the pattern rather than the
length of the text.

Groups try every prefix length in increasing order, which makes nested
groups and quantifiers exponential in the worst case. An optional step
budget turns runaway backtracking into a BacktrackLimitError.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from loguru import logger

from . import nodes
from .captures import CaptureStore
from .errors import BacktrackLimitError
from .predicates import is_single_char, matches_char

# (shortest, longest) text a node can match; longest is None when unbounded
Width = Tuple[int, Optional[int]]


def node_width(node: nodes.Node) -> Width:
    if is_single_char(node):
        return 1, 1
    if isinstance(node, (nodes.StartAnchor, nodes.EndAnchor)):
        return 0, 0
    if isinstance(node, nodes.Optional):
        return 0, node_width(node.node)[1]
    if isinstance(node, nodes.OneOrMore):
        lo, hi = node_width(node.node)
        return lo, (0 if hi == 0 else None)
    if isinstance(node, nodes.Group):
        return sequence_width(node.nodes)
    if isinstance(node, nodes.Alternation):
        left_lo, left_hi = sequence_width(node.left)
        right_lo, right_hi = sequence_width(node.right)
        if left_hi is None or right_hi is None:
            return min(left_lo, right_lo), None
        return min(left_lo, right_lo), max(left_hi, right_hi)
    # Backreferences repeat whatever was captured
    return 0, None


def sequence_width(seq: Iterable[nodes.Node]) -> Width:
    lo, hi = 0, 0
    for node in seq:
        node_lo, node_hi = node_width(node)
        lo += node_lo
        hi = None if hi is None or node_hi is None else hi + node_hi
    return lo, hi


@dataclass(frozen=True, eq=False)
class _Collect(nodes.Node):
    """Internal marker: records where the preceding nodes ended, then fails."""
    ends: list


class _Backtracker:
    """State for a single top-level call: the text and the step counter."""

    def __init__(self, text: str, step_limit: Optional[int]):
        self.text = text
        self.step_limit = step_limit
        self.steps = 0
        self._widths: Dict[int, Width] = {}

    def _tick(self) -> None:
        self.steps += 1
        if self.step_limit is not None and self.steps > self.step_limit:
            logger.warning("Backtracking budget of {} steps exhausted", self.step_limit)
            raise BacktrackLimitError(
                f"Backtracking limit of {self.step_limit} steps exceeded")

    def match(self, seq: nodes.Sequence, pos: int, end: int,
              store: CaptureStore, whole: bool) -> bool:
        """
        Match ``seq`` at ``pos``.

        With ``whole`` set the sequence must consume the window exactly up to
        ``end``; otherwise it may stop anywhere.
        """
        text = self.text

        # Nodes without a choice point are consumed in place
        i = 0
        while i < len(seq):
            self._tick()
            node = seq[i]
            if isinstance(node, nodes.StartAnchor):
                if pos != 0:
                    return False
            elif isinstance(node, nodes.EndAnchor):
                if pos != len(text):
                    return False
            elif is_single_char(node):
                if pos >= end or not matches_char(node, text[pos]):
                    return False
                pos += 1
            elif isinstance(node, nodes.Backreference):
                captured = store.get(node.number)
                if captured is None or not text.startswith(captured, pos, end):
                    return False
                pos += len(captured)
            else:
                break
            i += 1
        else:
            return pos == end if whole else True

        node, rest = seq[i], seq[i + 1:]

        if isinstance(node, nodes.Optional):
            return self._match_optional(node.node, rest, pos, end, store, whole)

        if isinstance(node, nodes.OneOrMore):
            return self._match_one_or_more(node.node, rest, pos, end, store, whole)

        if isinstance(node, nodes.Group):
            return self._match_group(node, rest, pos, end, store, whole)

        if isinstance(node, nodes.Alternation):
            snapshot = store.snapshot()
            if self.match(node.left + rest, pos, end, store, whole):
                return True
            store.restore(snapshot)
            return self.match(node.right + rest, pos, end, store, whole)

        if isinstance(node, _Collect):
            node.ends.append((pos, store.snapshot()))
            return False

        raise TypeError(f"Unknown node type: {type(node).__name__}")

    def _match_optional(self, inner: nodes.Node, rest: nodes.Sequence, pos: int,
                        end: int, store: CaptureStore, whole: bool) -> bool:
        # Skip first, then consume
        snapshot = store.snapshot()
        if self.match(rest, pos, end, store, whole):
            return True
        store.restore(snapshot)

        if is_single_char(inner):
            if pos < end and matches_char(inner, self.text[pos]):
                return self.match(rest, pos + 1, end, store, whole)
            return False

        return self.match((inner,) + rest, pos, end, store, whole)

    def _match_one_or_more(self, inner: nodes.Node, rest: nodes.Sequence, pos: int,
                           end: int, store: CaptureStore, whole: bool) -> bool:
        if is_single_char(inner):
            run_end = pos
            while run_end < end and matches_char(inner, self.text[run_end]):
                run_end += 1
            if run_end == pos:
                return False

            # Longest run first, giving back one character at a time
            snapshot = store.snapshot()
            for stop in range(run_end, pos, -1):
                if self.match(rest, stop, end, store, whole):
                    return True
                store.restore(snapshot)
            return False

        # Compound body: depth-first over iterations, one stack entry per
        # iteration. Each entry is (end of this iteration, captures after it,
        # untried ends for the next iteration). An entry's remainder is tried
        # only once every longer repetition through it has failed.
        snapshot = store.snapshot()
        stack = [(pos, snapshot, self._iteration_ends(inner, pos, end, store, first=True))]
        while stack:
            candidates = stack[-1][2]
            if candidates:
                stop, captured = candidates.pop(0)
                store.restore(captured)
                stack.append((stop, captured,
                              self._iteration_ends(inner, stop, end, store, first=False)))
                continue
            stop, captured, _ = stack.pop()
            if stack:
                # The bottom entry stands for zero iterations, not a match
                store.restore(captured)
                if self.match(rest, stop, end, store, whole):
                    return True
        store.restore(snapshot)
        return False

    def _iteration_ends(self, inner: nodes.Node, pos: int, end: int,
                        store: CaptureStore, first: bool) -> List[Tuple[int, Dict[int, str]]]:
        """
        Every distinct (end position, captures) one match of ``inner`` can
        reach from ``pos``, in the order the matcher finds them. Only the
        first iteration may match empty text.
        """
        snapshot = store.snapshot()
        found: List[Tuple[int, Dict[int, str]]] = []
        self.match((inner, _Collect(found)), pos, end, store, whole=False)
        store.restore(snapshot)

        ends = []
        seen = set()
        for stop, captured in found:
            key = (stop, tuple(sorted(captured.items())))
            if key in seen or (stop == pos and not first):
                continue
            seen.add(key)
            ends.append((stop, captured))
        return ends

    def _match_group(self, group: nodes.Group, rest: nodes.Sequence, pos: int,
                     end: int, store: CaptureStore, whole: bool) -> bool:
        width = self._widths.get(id(group))
        if width is None:
            width = self._widths[id(group)] = sequence_width(group.nodes)
        lo, hi = width

        # Lengths the body cannot match are skipped
        first = pos + lo
        last = end if hi is None else min(end, pos + hi)
        if whole and not rest:
            first = max(first, end)

        snapshot = store.snapshot()
        for stop in range(first, last + 1):
            if self.match(group.nodes, pos, stop, store, whole=True):
                # Recorded before the remainder so backreferences can see it
                store.record(group.number, self.text[pos:stop])
                if self.match(rest, stop, end, store, whole):
                    return True
            store.restore(snapshot)
        return False


class Matcher:
    """
    Backtracking matcher for a compiled node sequence.

    A Matcher holds no per-match state, so one instance can serve any
    number of calls, including concurrent ones.
    """

    # Default limits
    DEFAULT_STEP_LIMIT: Optional[int] = None  # None means unlimited

    def __init__(self, pattern: Iterable[nodes.Node],
                 step_limit: Optional[int] = DEFAULT_STEP_LIMIT):
        """
        Args:
            pattern: Compiled node sequence
            step_limit: Maximum node visits per call, or None for no limit
        """
        self.nodes: nodes.Sequence = tuple(pattern)
        self.step_limit = step_limit

    def is_match(self, text: str) -> bool:
        """Test if the pattern occurs anywhere in ``text``."""
        matched, _ = self.find_captures(text)
        return matched

    def find_captures(self, text: str) -> Tuple[bool, Dict[int, str]]:
        """
        Search ``text`` and return (matched, captures).

        A pattern starting with '^' is only tried at offset 0; otherwise
        offsets 0..len(text) are tried in order and the first success wins.
        Captures are empty when there is no match.
        """
        if self.nodes and isinstance(self.nodes[0], nodes.StartAnchor):
            starts = range(1)
        else:
            starts = range(len(text) + 1)

        backtracker = _Backtracker(text, self.step_limit)
        for start in starts:
            store = self._attempt(backtracker, start)
            if store is not None:
                return True, store.as_dict()
        return False, {}

    def match_at(self, text: str, pos: int = 0) -> Optional[Dict[int, str]]:
        """
        Try to match at exactly ``pos``.

        Returns:
            Captures if the pattern matches there, None otherwise
        """
        if pos < 0 or pos > len(text):
            return None
        store = self._attempt(_Backtracker(text, self.step_limit), pos)
        return store.as_dict() if store is not None else None

    def _attempt(self, backtracker: _Backtracker, start: int) -> Optional[CaptureStore]:
        store = CaptureStore()
        try:
            matched = backtracker.match(self.nodes, start, len(backtracker.text),
                                        store, whole=False)
        except RecursionError as e:
            logger.warning("Recursion limit hit matching at offset {}", start)
            raise BacktrackLimitError("Pattern nesting too deep for input") from e
        return store if matched else None

    def __repr__(self):
        return f"Matcher({len(self.nodes)} nodes, step_limit={self.step_limit})"
