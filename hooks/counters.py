"""Per-hook dispatch counters."""

from __future__ import annotations

from collections import Counter


class InvocationCounters:
    """Count dispatches per hook name for the lifetime of a request.

    Counts only grow; absent names read as zero.
    """

    def __init__(self) -> None:
        self._counts: Counter[str] = Counter()

    def get(self, name: str) -> int:
        return self._counts[name]

    def increment(self, name: str) -> None:
        self._counts[name] += 1

    def as_dict(self) -> dict[str, int]:
        """Return a copy of all recorded counts."""
        return dict(self._counts)

    def __contains__(self, name: object) -> bool:
        return name in self._counts
