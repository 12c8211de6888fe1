"""Hook registry mapping hook names to prioritized callback lists."""

from __future__ import annotations

from collections.abc import Callable
from contextlib import AbstractContextManager, nullcontext
from typing import Any

from core.logger import get_logger

from .callback_list import (
    DEFAULT_ACCEPTED_ARGS,
    DEFAULT_PRIORITY,
    PrioritizedCallbackList,
    RegisteredCallback,
)
from .names import HookNameLike, hook_name

logger = get_logger(__name__)

EntryScope = Callable[[RegisteredCallback], AbstractContextManager[Any]]


class HookRegistry:
    """Store callbacks per hook name and run them in priority order.

    Lists are created on first registration and pruned once empty, so an
    unknown hook behaves exactly like a hook with no callbacks.
    """

    def __init__(self) -> None:
        self._hooks: dict[str, PrioritizedCallbackList] = {}

    def add(
        self,
        name: HookNameLike,
        callback: Any,
        priority: int = DEFAULT_PRIORITY,
        accepted_args: int = DEFAULT_ACCEPTED_ARGS,
    ) -> RegisteredCallback:
        """Register ``callback`` on hook ``name``."""
        key = hook_name(name)
        callbacks = self._hooks.get(key)
        if callbacks is None:
            callbacks = self._hooks[key] = PrioritizedCallbackList()
        entry = callbacks.add(callback, priority, accepted_args)
        logger.debug(
            "Registered callback on %s (priority=%s, accepted_args=%s)",
            key,
            entry.priority,
            entry.accepted_args,
        )
        return entry

    def remove(
        self,
        name: HookNameLike,
        callback: Any,
        priority: int = DEFAULT_PRIORITY,
    ) -> bool:
        """Remove ``callback`` registered at exactly ``priority``."""
        key = hook_name(name)
        callbacks = self._hooks.get(key)
        if callbacks is None:
            return False
        removed = callbacks.remove(callback, priority)
        if removed:
            logger.debug("Removed callback from %s (priority=%s)", key, priority)
        self._prune(key)
        return removed

    def remove_all(self, name: HookNameLike, priority: int | None = None) -> None:
        """Remove all callbacks of a hook, or only those at ``priority``."""
        key = hook_name(name)
        callbacks = self._hooks.get(key)
        if callbacks is None:
            return
        callbacks.remove_all(priority)
        self._prune(key)

    def has_callbacks(
        self,
        name: HookNameLike,
        callback: Any = None,
        priority: int | None = None,
    ) -> bool | int:
        """Query a hook, see :meth:`PrioritizedCallbackList.has`."""
        callbacks = self._hooks.get(hook_name(name)) or PrioritizedCallbackList()
        return callbacks.has(callback, priority)

    def callbacks(self, name: HookNameLike) -> tuple[RegisteredCallback, ...]:
        """Return a snapshot of a hook's registrations in dispatch order."""
        callbacks = self._hooks.get(hook_name(name))
        if callbacks is None:
            return ()
        return callbacks.snapshot()

    def hook_names(self) -> list[str]:
        """Return names of hooks that currently have callbacks."""
        return [key for key, callbacks in self._hooks.items() if callbacks]

    def dispatch(
        self,
        name: HookNameLike,
        *args: Any,
        scope: EntryScope | None = None,
    ) -> None:
        """Invoke every callback of ``name`` for side effects only.

        ``scope`` wraps each callback invocation, e.g. in an execution frame.
        """
        entries = self.callbacks(name)
        logger.debug("Dispatching action %s to %d callbacks", hook_name(name), len(entries))
        for entry in entries:
            with _enter(scope, entry):
                entry.invoke(args)

    def filter(
        self,
        name: HookNameLike,
        value: Any,
        *args: Any,
        scope: EntryScope | None = None,
    ) -> Any:
        """Thread ``value`` through every callback of ``name``.

        Returns:
            The last callback's return value, or ``value`` when the hook has
            no callbacks.
        """
        entries = self.callbacks(name)
        logger.debug("Applying filter %s with %d callbacks", hook_name(name), len(entries))
        for entry in entries:
            with _enter(scope, entry):
                value = entry.apply(value, args)
        return value

    def _prune(self, key: str) -> None:
        callbacks = self._hooks.get(key)
        if callbacks is not None and not callbacks:
            del self._hooks[key]

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        return bool(self._hooks.get(name))

    def __len__(self) -> int:
        return len(self.hook_names())


def _enter(scope: EntryScope | None, entry: RegisteredCallback) -> AbstractContextManager[Any]:
    return nullcontext() if scope is None else scope(entry)
