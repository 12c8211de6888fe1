"""Unit tests for request-scoped hook contexts."""

from __future__ import annotations

import contextvars

from core.config import AppConfig, EngineConfig
from core.context import HookContext, get_current_context, set_current_context
from hooks.manager import HookManager


def test_create_context_has_fresh_manager() -> None:
    """HookContext.create should build a new manager with empty state."""
    ctx = HookContext.create()

    assert isinstance(ctx.manager, HookManager)
    assert ctx.manager.registry.hook_names() == []
    assert ctx.data == {}


def test_logger_is_named_after_app() -> None:
    """The context logger should use the configured app name."""
    ctx = HookContext.create(EngineConfig(app=AppConfig(name="shop")))

    assert ctx.logger.name == "shop"


def test_context_data_get_set() -> None:
    """Custom values should be stored in context data."""
    ctx = HookContext.create()

    ctx.set("request_id", "r-1")

    assert ctx.get("request_id") == "r-1"
    assert ctx.get("missing", 7) == 7


def test_context_manager_sets_and_restores_current() -> None:
    """Entering a context should make it current until exit."""
    set_current_context(None)
    ctx = HookContext.create()

    with ctx as entered:
        assert entered is ctx
        assert get_current_context() is ctx

    assert get_current_context() is None


def test_nested_contexts_restore_parent() -> None:
    """Nested context managers should restore the outer context."""
    set_current_context(None)
    outer = HookContext.create()
    inner = HookContext.create()

    with outer:
        with inner:
            assert get_current_context() is inner
        assert get_current_context() is outer


def test_contexts_isolate_hook_state() -> None:
    """Two requests should not see each other's callbacks or counters."""
    first = HookContext.create()
    second = HookContext.create()

    first.manager.add_callback("save", print)
    first.manager.dispatch_action("tick")

    assert second.manager.has_callbacks("save") is False
    assert second.manager.invocation_count("tick") == 0


def test_current_context_is_isolated_per_copied_context() -> None:
    """A copied contextvars context should not leak assignments back."""
    set_current_context(None)
    ctx = HookContext.create()

    def run() -> HookContext | None:
        set_current_context(ctx)
        return get_current_context()

    assert contextvars.copy_context().run(run) is ctx
    assert get_current_context() is None
