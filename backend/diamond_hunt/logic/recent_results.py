"""Bounded history of past winners."""
from collections import deque


class RecentResultsLog:
    """Winner display tags, most recent first; oldest entries fall off the end."""

    def __init__(self, limit: int = 8):
        if limit < 1:
            raise ValueError(f"limit must be >= 1, got {limit}")
        self.limit = limit
        self._tags: deque[str] = deque(maxlen=limit)

    def record(self, display_tag: str) -> None:
        self._tags.appendleft(display_tag)

    def entries(self) -> list[str]:
        return list(self._tags)

    def __len__(self) -> int:
        return len(self._tags)
