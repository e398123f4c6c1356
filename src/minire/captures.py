"""Capture group storage with snapshot/restore for backtracking."""

from typing import Dict, Optional


class CaptureStore:
    """
    Group number -> captured substring for one match attempt.

    Each attempt owns its own store. Callers that try several alternatives
    take a snapshot first and restore it before the next alternative, so a
    failed branch leaves nothing behind.
    """

    def __init__(self):
        self._groups: Dict[int, str] = {}

    def get(self, number: int) -> Optional[str]:
        return self._groups.get(number)

    def record(self, number: int, text: str) -> None:
        self._groups[number] = text

    def snapshot(self) -> Dict[int, str]:
        return dict(self._groups)

    def restore(self, snapshot: Dict[int, str]) -> None:
        self._groups = dict(snapshot)

    def clear(self) -> None:
        self._groups.clear()

    def as_dict(self) -> Dict[int, str]:
        return dict(self._groups)

    def __contains__(self, number: int) -> bool:
        return number in self._groups

    def __len__(self) -> int:
        return len(self._groups)

    def __repr__(self):
        return f"CaptureStore({self._groups!r})"
