"""Request-scoped hook context.

Hook state (registry, execution stack, counters) must not be shared across
concurrent requests. A :class:`HookContext` bundles one request's manager with
its config and logger, and a ``ContextVar`` tracks the current context, which
is safe for threads and async coroutines.
"""

from __future__ import annotations

import contextvars
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from .config import EngineConfig
from .container import MANAGER, build_container
from .logger import get_logger

if TYPE_CHECKING:
    from hooks.manager import HookManager

_current_context: contextvars.ContextVar[HookContext | None] = contextvars.ContextVar(
    "current_hook_context",
    default=None,
)


@dataclass(slots=True)
class HookContext:
    """Hook state of one request or worker.

    Attributes:
        config: Engine configuration.
        manager: Hook manager owning this request's registry and stack.
        logger: Logger for request-level messages.
        data: Mutable custom storage for user-defined values.
    """

    config: EngineConfig
    manager: HookManager
    logger: logging.Logger
    data: dict[str, Any] = field(default_factory=dict)
    _tokens: list[contextvars.Token[HookContext | None]] = field(
        default_factory=list,
        init=False,
        repr=False,
    )

    @classmethod
    def create(cls, config: EngineConfig | None = None) -> HookContext:
        """Build a context with fresh hook state."""
        engine_config = config or EngineConfig()
        container = build_container(engine_config)
        return cls(
            config=engine_config,
            manager=container.get(MANAGER),
            logger=get_logger(engine_config.app.name),
        )

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self.data[key] = value

    def __enter__(self) -> HookContext:
        """Set this context as current and return itself."""
        token = _current_context.set(self)
        self._tokens.append(token)
        return self

    def __exit__(self, exc_type: object, exc: object, tb: object) -> None:
        """Restore the previous current context."""
        _ = (exc_type, exc, tb)
        token = self._tokens.pop()
        _current_context.reset(token)


def get_current_context() -> HookContext | None:
    """Get current hook context for this execution flow."""
    return _current_context.get()


def set_current_context(ctx: HookContext | None) -> None:
    """Set current hook context for this execution flow.

    Args:
        ctx: Context instance to set, or ``None`` to clear.
    """
    _current_context.set(ctx)
