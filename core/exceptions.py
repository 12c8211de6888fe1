"""Exception hierarchy and helpers for the hook engine.

This module provides a consistent exception model used by core components:

- ``HookError`` as the base class with error code, context and root cause.
- Subclasses for invalid callbacks, unknown services and configuration.
- Utility helpers to wrap external exceptions and to format errors.

Exceptions raised by registered callbacks are never converted into these
types; they propagate to the dispatch caller unchanged.
"""

from __future__ import annotations

from typing import Any, Mapping, TypeVar

THookError = TypeVar("THookError", bound="HookError")


class HookError(Exception):
    """Base exception for all engine-level errors.

    Attributes:
        message: Human-readable error message.
        code: Stable error code for programmatic processing.
        context: Extra metadata useful for debugging and logging.
        cause: Original exception that triggered this error.
    """

    def __init__(
        self,
        message: str,
        code: str = "HOOK_ERROR",
        context: Mapping[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.message: str = message
        self.code: str = code
        self.context: dict[str, Any] = dict(context) if context is not None else {}
        self.cause: Exception | None = cause

        super().__init__(message)

        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        """Return a formatted, readable exception string."""
        return format_exception(self)


class InvalidCallbackError(HookError, TypeError):
    """A registered value is not callable.

    Raised when the identity or the invocation of such a value is requested,
    never when it is registered.
    """

    def __init__(
        self,
        message: str = "Hook callback is not callable",
        code: str = "INVALID_CALLBACK",
        context: Mapping[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message=message, code=code, context=context, cause=cause)


class UnknownServiceError(HookError, LookupError):
    """Service container lookup for an unregistered key."""

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_SERVICE",
        context: Mapping[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message=message, code=code, context=context, cause=cause)


class ConfigError(HookError):
    """Configuration related error."""

    def __init__(
        self,
        message: str,
        code: str = "CONFIG_ERROR",
        context: Mapping[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message=message, code=code, context=context, cause=cause)


def wrap_exception(
    exc: Exception,
    error_class: type[THookError],
    message: str,
    *,
    code: str | None = None,
    context: Mapping[str, Any] | None = None,
) -> THookError:
    """Wrap an external exception with an engine exception class.

    Args:
        exc: Original exception raised by external dependency or lower layer.
        error_class: Target ``HookError`` subclass to construct.
        message: Message for the wrapped exception.
        code: Optional explicit error code overriding class default.
        context: Optional context payload.

    Returns:
        An instance of ``error_class`` that chains ``exc`` as its cause.
    """
    kwargs: dict[str, Any] = {"context": context, "cause": exc}
    if code is not None:
        kwargs["code"] = code
    return error_class(message, **kwargs)


def format_exception(exc: BaseException) -> str:
    """Format exception into a readable one-line text.

    For ``HookError`` it includes code, message, context and cause.
    For generic exceptions, it returns ``<Type>: <message>``.
    """
    if isinstance(exc, HookError):
        base = f"[{exc.code}] {exc.message}"
        context_part = ""
        if exc.context:
            context_items = ", ".join(
                f"{key}={value!r}" for key, value in sorted(exc.context.items())
            )
            context_part = f" | context: {context_items}"

        cause_part = ""
        if exc.cause is not None:
            cause_part = f" | cause: {type(exc.cause).__name__}: {exc.cause}"

        return f"{base}{context_part}{cause_part}"

    return f"{type(exc).__name__}: {exc}"


__all__ = [
    "HookError",
    "InvalidCallbackError",
    "UnknownServiceError",
    "ConfigError",
    "wrap_exception",
    "format_exception",
]
