"""Ordered, prioritized callback storage for one hook name."""

from __future__ import annotations

import itertools
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from typing import Any

from core.exceptions import InvalidCallbackError

from .callbacks import Callback, as_callback

DEFAULT_PRIORITY = 10
DEFAULT_ACCEPTED_ARGS = 1


@dataclass(slots=True)
class RegisteredCallback:
    """One registration of a callback on a hook.

    Attributes:
        callback: Wrapped callback.
        priority: Ordering key, lower runs earlier.
        accepted_args: Maximum number of positional arguments delivered.
        sequence: Monotonic insertion number breaking priority ties.
    """

    callback: Callback
    priority: int = DEFAULT_PRIORITY
    accepted_args: int = DEFAULT_ACCEPTED_ARGS
    sequence: int = 0
    _identity: str | None = field(default=None, init=False, repr=False)

    @property
    def identity(self) -> str:
        """Identity of the wrapped callback, resolved on first access."""
        if self._identity is None:
            self._identity = self.callback.identity()
        return self._identity

    def matches(self, identity: str) -> bool:
        """Return whether this entry carries ``identity``.

        Entries whose callback cannot be resolved match nothing.
        """
        try:
            return self.identity == identity
        except InvalidCallbackError:
            return False

    def arguments(self, args: Sequence[Any]) -> tuple[Any, ...]:
        """Return the leading arguments this callback accepts."""
        return tuple(args[: max(1, self.accepted_args)])

    def invoke(self, args: Sequence[Any]) -> Any:
        """Invoke with ``args`` truncated to ``accepted_args``."""
        return self.callback.invoke(self.arguments(args))

    def apply(self, value: Any, args: Sequence[Any]) -> Any:
        """Invoke in filter mode, with ``value`` in the first slot."""
        return self.callback.invoke(self.arguments((value, *args)))


class PrioritizedCallbackList:
    """Callbacks of one hook in ascending priority, then insertion order.

    Sorting is deferred: mutations mark the list dirty and the next read
    re-sorts it. Iteration always yields a point-in-time snapshot, so
    callbacks may add or remove entries while the list is being dispatched.
    """

    def __init__(self) -> None:
        self._entries: list[RegisteredCallback] = []
        self._sequence = itertools.count()
        self._sorted = True

    def add(
        self,
        callback: Any,
        priority: int = DEFAULT_PRIORITY,
        accepted_args: int = DEFAULT_ACCEPTED_ARGS,
    ) -> RegisteredCallback:
        """Append a registration and return it."""
        entry = RegisteredCallback(
            callback=as_callback(callback),
            priority=int(priority),
            accepted_args=int(accepted_args),
            sequence=next(self._sequence),
        )
        self._entries.append(entry)
        self._sorted = False
        return entry

    def remove(self, callback: Any, priority: int = DEFAULT_PRIORITY) -> bool:
        """Remove the first entry with matching identity and exact priority.

        Raises:
            InvalidCallbackError: If ``callback`` itself is not callable.
        """
        identity = as_callback(callback).identity()
        for index, entry in enumerate(self._iter_sorted()):
            if entry.priority == priority and entry.matches(identity):
                del self._entries[index]
                return True
        return False

    def remove_all(self, priority: int | None = None) -> None:
        """Remove every entry at ``priority``, or all entries when omitted."""
        if priority is None:
            self._entries.clear()
            return
        self._entries = [entry for entry in self._entries if entry.priority != priority]

    def has(self, callback: Any = None, priority: int | None = None) -> bool | int:
        """Query registrations.

        Returns:
            Without ``callback``, whether the list is non-empty. With only
            ``callback``, the priority of its first registration or ``False``.
            With both, whether it is registered at exactly ``priority``.
            Compare the result with ``is False`` since priority ``0`` is valid.
        """
        if callback is None:
            return bool(self._entries)

        identity = as_callback(callback).identity()
        for entry in self._iter_sorted():
            if not entry.matches(identity):
                continue
            if priority is None:
                return entry.priority
            if entry.priority == priority:
                return True
        return False

    def sort(self) -> None:
        """Restore ascending priority order, stable on insertion order."""
        if not self._sorted:
            self._entries.sort(key=lambda entry: (entry.priority, entry.sequence))
            self._sorted = True

    def snapshot(self) -> tuple[RegisteredCallback, ...]:
        """Return the current entries in dispatch order."""
        return tuple(self._iter_sorted())

    def _iter_sorted(self) -> list[RegisteredCallback]:
        self.sort()
        return self._entries

    def __iter__(self) -> Iterator[RegisteredCallback]:
        return iter(self.snapshot())

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)

    def __repr__(self) -> str:
        return f"PrioritizedCallbackList({list(self.snapshot())!r})"
