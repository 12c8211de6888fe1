"""Execution stack of dispatching hooks and running callbacks."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

UNKNOWN_BUCKET = "unknown"


class ExecutionStack:
    """Track nested hook dispatches and, per hook, the running callbacks.

    Callback pushes and pops always target the hook on top of the hook stack.
    Callbacks that run while no hook is on the stack are recorded under the
    ``unknown`` bucket.

    One instance belongs to one request or worker; it is not thread-safe.
    """

    def __init__(
        self,
        hooks: list[str] | None = None,
        callbacks: dict[str, list[str]] | None = None,
        unknown_bucket: str = UNKNOWN_BUCKET,
    ) -> None:
        self._hooks: list[str] = list(hooks or [])
        self._callbacks: dict[str, list[str]] = {
            key: list(value) for key, value in (callbacks or {}).items()
        }
        self.unknown_bucket = unknown_bucket

    def push_hook(self, name: str) -> None:
        self._hooks.append(name)

    def pop_hook(self) -> None:
        if self._hooks:
            self._hooks.pop()

    def current_hook(self) -> str | None:
        """Return the innermost dispatching hook, or ``None``."""
        return self._hooks[-1] if self._hooks else None

    def hook_traceback(self) -> list[str]:
        """Return dispatching hooks from outermost to innermost."""
        return list(self._hooks)

    def is_executing(self, name: str | None = None) -> bool:
        """Return whether ``name`` (or any hook when omitted) is on the stack."""
        if name is None:
            return bool(self._hooks)
        return name in self._hooks

    def push_callback(self, identity: str) -> None:
        self._callbacks.setdefault(self._bucket(), []).append(identity)

    def pop_callback(self) -> None:
        callbacks = self._callbacks.get(self._bucket())
        if callbacks:
            callbacks.pop()

    def current_callback(self) -> str | None:
        callbacks = self._callbacks.get(self._bucket())
        return callbacks[-1] if callbacks else None

    def callback_traceback(self) -> list[str]:
        """Return running callback identities of the current hook."""
        return list(self._callbacks.get(self._bucket(), []))

    def all_callback_tracebacks(self) -> dict[str, list[str]]:
        """Return running callback identities for every hook bucket."""
        return {key: list(value) for key, value in self._callbacks.items()}

    @contextmanager
    def hook_frame(self, name: str) -> Iterator[None]:
        """Keep ``name`` on the hook stack for the duration of the block."""
        self.push_hook(name)
        try:
            yield
        finally:
            self.pop_hook()

    @contextmanager
    def callback_frame(self, identity: str) -> Iterator[None]:
        """Keep ``identity`` on the current hook's callback stack."""
        self.push_callback(identity)
        try:
            yield
        finally:
            self.pop_callback()

    def _bucket(self) -> str:
        return self._hooks[-1] if self._hooks else self.unknown_bucket

    def __repr__(self) -> str:
        return f"ExecutionStack(hooks={self._hooks!r})"
