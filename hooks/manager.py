"""Action and filter dispatch over a hook registry.

:class:`HookManager` is the entry point applications use. It composes a
:class:`~hooks.registry.HookRegistry` with the bookkeeping that surrounds each
dispatch:

1. the hook's action or filter counter is incremented;
2. callbacks registered on the ``all`` hook run with the full argument
   vector, before the hook is pushed on the stack;
3. the hook name is pushed on the :class:`~hooks.execution.ExecutionStack`;
4. each callback of a point-in-time snapshot runs inside its own callback
   frame, receiving at most ``accepted_args`` arguments;
5. the hook name is popped, whether the callbacks returned or raised.

Callback exceptions propagate unchanged and abort the remaining callbacks.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from contextlib import AbstractContextManager
from typing import Any, TypeVar

from core.config import EngineConfig
from core.container import MANAGER, NOTICE_SINK, build_container
from core.logger import get_logger

from .callback_list import RegisteredCallback
from .counters import InvocationCounters
from .deprecation import DeprecatedHookNotifier, NoticeSink
from .execution import ExecutionStack
from .names import HookNameLike, hook_name
from .registry import HookRegistry

F = TypeVar("F", bound=Callable[..., Any])

ALL_HOOK = "all"


class HookManager:
    """Register callbacks and dispatch actions and filters.

    All collaborators are injected; omitted ones are created empty. One manager
    (with its registry, stack and counters) serves one request or worker.
    """

    def __init__(
        self,
        registry: HookRegistry | None = None,
        stack: ExecutionStack | None = None,
        action_counters: InvocationCounters | None = None,
        filter_counters: InvocationCounters | None = None,
        notifier: DeprecatedHookNotifier | None = None,
        *,
        all_hook: str = ALL_HOOK,
        default_priority: int = 10,
        default_accepted_args: int = 1,
        logger: logging.Logger | None = None,
    ) -> None:
        self.registry = registry if registry is not None else HookRegistry()
        self.stack = stack if stack is not None else ExecutionStack()
        self.action_counters = action_counters if action_counters is not None else InvocationCounters()
        self.filter_counters = filter_counters if filter_counters is not None else InvocationCounters()
        self.notifier = notifier if notifier is not None else DeprecatedHookNotifier(self.registry)
        self.all_hook = all_hook
        self.default_priority = default_priority
        self.default_accepted_args = default_accepted_args
        self.logger = logger or get_logger(__name__)

    @classmethod
    def from_config(
        cls,
        config: EngineConfig,
        sink: NoticeSink | None = None,
    ) -> HookManager:
        """Build a manager and its collaborators from engine configuration."""
        container = build_container(config)
        if sink is not None:
            container.add(NOTICE_SINK, lambda c: sink)
        return container.get(MANAGER)

    # Registration

    def add_callback(
        self,
        name: HookNameLike,
        callback: Any,
        priority: int | None = None,
        accepted_args: int | None = None,
    ) -> bool:
        """Register ``callback`` on ``name``. Always returns ``True``."""
        self.registry.add(
            name,
            callback,
            self.default_priority if priority is None else priority,
            self.default_accepted_args if accepted_args is None else accepted_args,
        )
        return True

    add_action = add_callback
    add_filter = add_callback

    def action(
        self,
        name: HookNameLike,
        priority: int | None = None,
        accepted_args: int | None = None,
    ) -> Callable[[F], F]:
        """Decorator form of :meth:`add_callback`.

        The decorated function is registered and returned unchanged.
        """

        def decorator(func: F) -> F:
            self.add_callback(name, func, priority, accepted_args)
            return func

        return decorator

    filter = action

    def remove_callback(
        self,
        name: HookNameLike,
        callback: Any,
        priority: int | None = None,
    ) -> bool:
        """Remove ``callback`` registered at exactly ``priority``."""
        return self.registry.remove(
            name,
            callback,
            self.default_priority if priority is None else priority,
        )

    def remove_all_callbacks(self, name: HookNameLike, priority: int | None = None) -> bool:
        """Remove all callbacks of ``name``, or those at ``priority``.

        Always returns ``True``.
        """
        self.registry.remove_all(name, priority)
        return True

    # Queries

    def has_callbacks(
        self,
        name: HookNameLike,
        callback: Any = None,
        priority: int | None = None,
    ) -> bool | int:
        """See :meth:`hooks.callback_list.PrioritizedCallbackList.has`."""
        return self.registry.has_callbacks(name, callback, priority)

    def current_hook(self) -> str | None:
        """Return the innermost hook being dispatched, or ``None``."""
        return self.stack.current_hook()

    def is_hook_executing(self, name: HookNameLike | None = None) -> bool:
        """Return whether ``name`` is anywhere on the stack.

        Without ``name``, whether any hook is being dispatched.
        """
        return self.stack.is_executing(None if name is None else hook_name(name))

    current_action = current_filter = current_hook
    doing_action = doing_filter = is_hook_executing

    def did_action(self, name: HookNameLike) -> int:
        """Return how many times ``name`` was dispatched as an action."""
        return self.action_counters.get(hook_name(name))

    def did_filter(self, name: HookNameLike) -> int:
        """Return how many times ``name`` was dispatched as a filter."""
        return self.filter_counters.get(hook_name(name))

    def invocation_count(self, name: HookNameLike) -> int:
        """Return action and filter dispatches of ``name`` combined."""
        return self.did_action(name) + self.did_filter(name)

    # Dispatch

    def dispatch_action(self, name: HookNameLike, *args: Any) -> None:
        """Run every callback of ``name`` for side effects."""
        key = hook_name(name)
        self.action_counters.increment(key)
        self._call_all_hook(key, args)

        with self.stack.hook_frame(key):
            self.registry.dispatch(key, *args, scope=self._callback_frame)

    def dispatch_filter(self, name: HookNameLike, value: Any, *args: Any) -> Any:
        """Thread ``value`` through every callback of ``name`` and return it."""
        key = hook_name(name)
        self.filter_counters.increment(key)
        self._call_all_hook(key, (value, *args))

        with self.stack.hook_frame(key):
            return self.registry.filter(key, value, *args, scope=self._callback_frame)

    def dispatch_action_array(self, name: HookNameLike, args: Sequence[Any]) -> None:
        """:meth:`dispatch_action` with arguments given as a sequence."""
        self.dispatch_action(name, *args)

    def dispatch_filter_array(self, name: HookNameLike, args: Sequence[Any]) -> Any:
        """:meth:`dispatch_filter` with the value as first item of ``args``.

        An empty ``args`` filters ``None``.
        """
        value, *rest = args or (None,)
        return self.dispatch_filter(name, value, *rest)

    def dispatch_deprecated_action(
        self,
        name: HookNameLike,
        args: Sequence[Any],
        version: str,
        replacement: str = "",
        message: str = "",
    ) -> None:
        """Dispatch a deprecated action, noticing only when it has callbacks.

        A deprecated action with no callbacks is neither noticed nor
        dispatched.
        """
        if not self.notifier.notify_if_registered(name, version, replacement, message):
            return
        self.dispatch_action_array(name, args)

    def dispatch_deprecated_filter(
        self,
        name: HookNameLike,
        args: Sequence[Any],
        version: str,
        replacement: str = "",
        message: str = "",
    ) -> Any:
        """Apply a deprecated filter, noticing only when it has callbacks.

        Without callbacks the first item of ``args`` is returned unchanged.
        """
        if not self.notifier.notify_if_registered(name, version, replacement, message):
            return args[0] if args else None
        return self.dispatch_filter_array(name, args)

    def _call_all_hook(self, key: str, args: Sequence[Any]) -> None:
        """Fan a dispatch of ``key`` out to the ``all`` hook's callbacks.

        The fan-out is counted as an action of ``all`` even when it has no
        callbacks. Callbacks get the dispatch arguments untruncated.
        """
        if key == self.all_hook:
            return
        self.action_counters.increment(self.all_hook)

        entries = self.registry.callbacks(self.all_hook)
        if entries:
            self.logger.debug("Fanning out %s to %d %s callbacks", key, len(entries), self.all_hook)
        for entry in entries:
            with self._callback_frame(entry):
                entry.callback.invoke(args)

    def _callback_frame(self, entry: RegisteredCallback) -> AbstractContextManager[None]:
        return self.stack.callback_frame(entry.identity)
