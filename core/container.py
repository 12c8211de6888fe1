"""Service container wiring engine components together.

Services are registered as factories under string keys and built lazily on
first lookup; the instance is cached for the life of the container. A
container is an explicit object, normally one per request or worker.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from .config import EngineConfig
from .exceptions import UnknownServiceError

ServiceFactory = Callable[["ServiceContainer"], Any]

CONFIG = "config"
REGISTRY = "hooks.registry"
STACK = "hooks.stack"
ACTION_COUNTERS = "hooks.action_counters"
FILTER_COUNTERS = "hooks.filter_counters"
NOTICE_SINK = "hooks.notice_sink"
NOTIFIER = "hooks.notifier"
MANAGER = "hooks.manager"


class ServiceContainer:
    """Lazily built, cached services looked up by key."""

    def __init__(self) -> None:
        self._factories: dict[str, ServiceFactory] = {}
        self._instances: dict[str, Any] = {}

    def add(self, key: str, factory: ServiceFactory) -> ServiceContainer:
        """Register ``factory`` for ``key``, replacing any cached instance."""
        self._factories[key] = factory
        self._instances.pop(key, None)
        return self

    def remove(self, key: str) -> ServiceContainer:
        """Unregister ``key``. Unknown keys are ignored."""
        self._factories.pop(key, None)
        self._instances.pop(key, None)
        return self

    def has(self, key: str) -> bool:
        return key in self._factories

    def get(self, key: str) -> Any:
        """Return the service for ``key``, building it on first use.

        Raises:
            UnknownServiceError: If no factory is registered for ``key``.
        """
        if key not in self._factories:
            raise UnknownServiceError(
                f"Service {key} is not registered",
                context={"service": key},
            )
        if key not in self._instances:
            self._instances[key] = self._factories[key](self)
        return self._instances[key]


def build_container(config: EngineConfig | None = None) -> ServiceContainer:
    """Return a container with the default engine services registered."""
    # Imported here: the hooks package depends on core, not the reverse.
    from hooks.counters import InvocationCounters
    from hooks.deprecation import DeprecatedHookNotifier, LoggingNotifier
    from hooks.execution import ExecutionStack
    from hooks.manager import HookManager
    from hooks.registry import HookRegistry

    from .logger import parse_level

    engine_config = config or EngineConfig()
    container = ServiceContainer()

    container.add(CONFIG, lambda c: engine_config)
    container.add(REGISTRY, lambda c: HookRegistry())
    container.add(
        STACK,
        lambda c: ExecutionStack(unknown_bucket=c.get(CONFIG).hooks.unknown_bucket),
    )
    container.add(ACTION_COUNTERS, lambda c: InvocationCounters())
    container.add(FILTER_COUNTERS, lambda c: InvocationCounters())
    container.add(
        NOTICE_SINK,
        lambda c: LoggingNotifier(
            emit_warnings=c.get(CONFIG).deprecation.emit_warnings,
            level=parse_level(c.get(CONFIG).deprecation.log_level),
        ),
    )
    container.add(
        NOTIFIER,
        lambda c: DeprecatedHookNotifier(
            c.get(REGISTRY),
            c.get(NOTICE_SINK),
            enabled=c.get(CONFIG).deprecation.enabled,
        ),
    )
    container.add(
        MANAGER,
        lambda c: HookManager(
            registry=c.get(REGISTRY),
            stack=c.get(STACK),
            action_counters=c.get(ACTION_COUNTERS),
            filter_counters=c.get(FILTER_COUNTERS),
            notifier=c.get(NOTIFIER),
            all_hook=c.get(CONFIG).hooks.all_hook,
            default_priority=c.get(CONFIG).hooks.default_priority,
            default_accepted_args=c.get(CONFIG).hooks.default_accepted_args,
        ),
    )
    return container
