"""Unit tests for the service container."""

from __future__ import annotations

import pytest

from core import container as services
from core.config import EngineConfig, HooksConfig
from core.container import ServiceContainer, build_container
from core.exceptions import UnknownServiceError
from hooks.manager import HookManager


def test_get_builds_and_caches_service() -> None:
    """Factories should run once and their result be cached."""
    calls: list[int] = []
    container = ServiceContainer()

    def factory(_c: ServiceContainer) -> object:
        calls.append(1)
        return object()

    container.add("svc", factory)

    first = container.get("svc")
    second = container.get("svc")

    assert first is second
    assert calls == [1]


def test_factory_receives_container() -> None:
    """Factories should be able to resolve other services."""
    container = ServiceContainer()
    container.add("base", lambda c: 2)
    container.add("derived", lambda c: c.get("base") * 10)

    assert container.get("derived") == 20


def test_unknown_service_raises() -> None:
    """Looking up an unregistered key should raise UnknownServiceError."""
    container = ServiceContainer()

    with pytest.raises(UnknownServiceError, match="missing is not registered"):
        container.get("missing")


def test_add_and_remove_support_chaining() -> None:
    """add/remove should return the container itself."""
    container = ServiceContainer()

    assert container.add("a", lambda c: 1).add("b", lambda c: 2) is container
    assert container.remove("a") is container
    assert container.has("b") is True
    assert container.has("a") is False

    with pytest.raises(UnknownServiceError):
        container.get("a")


def test_readding_replaces_cached_instance() -> None:
    """Re-registering a key should drop the previously built instance."""
    container = ServiceContainer()
    container.add("value", lambda c: "old")
    assert container.get("value") == "old"

    container.add("value", lambda c: "new")

    assert container.get("value") == "new"


def test_build_container_wires_manager_from_config() -> None:
    """The default container should share collaborators with the manager."""
    config = EngineConfig(hooks=HooksConfig(default_priority=3, all_hook="*"))
    container = build_container(config)

    manager = container.get(services.MANAGER)

    assert isinstance(manager, HookManager)
    assert manager.registry is container.get(services.REGISTRY)
    assert manager.stack is container.get(services.STACK)
    assert manager.default_priority == 3
    assert manager.all_hook == "*"


def test_separate_containers_do_not_share_state() -> None:
    """Each container should build its own registry."""
    first = build_container().get(services.MANAGER)
    second = build_container().get(services.MANAGER)

    first.add_callback("init", print)

    assert first.has_callbacks("init") is True
    assert second.has_callbacks("init") is False
