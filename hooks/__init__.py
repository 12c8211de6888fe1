"""Prioritized hook registry with action and filter dispatch."""

from .callback_list import PrioritizedCallbackList, RegisteredCallback
from .callbacks import (
    Callback,
    FunctionCallback,
    MethodCallback,
    ObjectCallback,
    as_callback,
    callback_identity,
)
from .counters import InvocationCounters
from .deprecation import (
    DeprecatedHookNotifier,
    DeprecationNotice,
    LoggingNotifier,
    NoticeSink,
    RecordingNotifier,
)
from .execution import ExecutionStack
from .manager import HookManager
from .names import HookName, hook_name
from .registry import HookRegistry

__all__ = [
    "Callback",
    "FunctionCallback",
    "MethodCallback",
    "ObjectCallback",
    "as_callback",
    "callback_identity",
    "RegisteredCallback",
    "PrioritizedCallbackList",
    "HookRegistry",
    "ExecutionStack",
    "InvocationCounters",
    "DeprecationNotice",
    "NoticeSink",
    "LoggingNotifier",
    "RecordingNotifier",
    "DeprecatedHookNotifier",
    "HookManager",
    "HookName",
    "hook_name",
]
