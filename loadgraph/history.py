"""Fixed-capacity circular history of samples, one per tracked metric."""

from __future__ import annotations


class HistoryBuffer:
    """The last *capacity* samples, oldest overwritten first.

    Storage is a flat list that never changes length plus a write cursor.
    New buffers are filled with 0.0.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self._values: list[float] = [0.0] * capacity
        self._cursor = 0

    def __len__(self) -> int:
        return len(self._values)

    @property
    def capacity(self) -> int:
        return len(self._values)

    @property
    def cursor(self) -> int:
        """Index the next push will write to."""
        return self._cursor

    @property
    def latest(self) -> float:
        """Most recently pushed value (0.0 before any push)."""
        return self._values[self._cursor - 1]

    def push(self, value: float) -> None:
        self._values[self._cursor] = value
        self._cursor = (self._cursor + 1) % len(self._values)

    def ordered_view(self) -> list[float]:
        """All values, oldest to newest."""
        n = len(self._values)
        return [self._values[(self._cursor - n + i) % n] for i in range(n)]
