"""Callback wrappers and identity derivation.

Every value registered on a hook is wrapped in one of three variants, chosen
once by :func:`as_callback`:

- ``FunctionCallback``: a module-level function, or a dotted import path
  string resolved on first use. Identity is ``module.QualName``; a path
  string is identified by the object it resolves to.
- ``MethodCallback``: a ``(target, method_name)`` pair or a bound method.
  Identity is ``<object token>::<method>`` for instances and
  ``<ClassName>::<method>`` for classes.
- ``ObjectCallback``: closures, lambdas and invokable objects. Identity is a
  process-unique object token, suffixed with ``::__call__`` for invokable
  objects that are not plain functions.

Callability is checked lazily: wrapping never fails, but :meth:`identity` and
:meth:`invoke` raise :class:`~core.exceptions.InvalidCallbackError` when the
underlying value cannot be called.
"""

from __future__ import annotations

import builtins
import inspect
import pkgutil
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from types import BuiltinFunctionType, FunctionType
from typing import Any

from core.exceptions import InvalidCallbackError


def object_token(obj: object) -> str:
    """Return a process-unique token for a live object."""
    return f"{id(obj):032x}"


def function_name(func: Callable[..., Any]) -> str:
    """Return ``module.QualName`` for a named function."""
    module = getattr(func, "__module__", None) or "builtins"
    return f"{module}.{func.__qualname__}"


class Callback(ABC):
    """A hook callback with a stable identity."""

    __slots__ = ()

    @abstractmethod
    def identity(self) -> str:
        """Return the identity string used for duplicate and removal matching."""

    @abstractmethod
    def resolve(self) -> Callable[..., Any]:
        """Return the underlying callable."""

    def invoke(self, args: Sequence[Any]) -> Any:
        """Call the underlying callable with positional ``args``."""
        return self.resolve()(*args)

    def __call__(self, *args: Any) -> Any:
        return self.invoke(args)


class FunctionCallback(Callback):
    """A free function, given directly or as an import path."""

    __slots__ = ("_target", "_resolved")

    def __init__(self, target: Callable[..., Any] | str) -> None:
        self._target = target
        self._resolved: Callable[..., Any] | None = None

    def identity(self) -> str:
        func = self.resolve()
        if isinstance(self._target, str):
            # Same identity as registering the resolved object directly.
            return as_callback(func).identity()
        return function_name(func)

    def resolve(self) -> Callable[..., Any]:
        if self._resolved is not None:
            return self._resolved

        target = self._target
        if isinstance(target, str):
            target = _import_callable(target)
        if not callable(target):
            raise InvalidCallbackError(context={"callback": repr(self._target)})

        self._resolved = target
        return target

    def __repr__(self) -> str:
        return f"FunctionCallback({self._target!r})"


class MethodCallback(Callback):
    """A method looked up by name on an instance or a class."""

    __slots__ = ("target", "method")

    def __init__(self, target: object, method: str) -> None:
        self.target = target
        self.method = method

    def identity(self) -> str:
        self.resolve()
        if isinstance(self.target, type):
            return f"{self.target.__qualname__}::{self.method}"
        return f"{object_token(self.target)}::{self.method}"

    def resolve(self) -> Callable[..., Any]:
        bound = getattr(self.target, self.method, None)
        if not callable(bound):
            raise InvalidCallbackError(
                context={"target": repr(self.target), "method": self.method}
            )
        return bound

    def __repr__(self) -> str:
        return f"MethodCallback({self.target!r}, {self.method!r})"


class ObjectCallback(Callback):
    """A closure, lambda or invokable object identified by object identity."""

    __slots__ = ("value",)

    def __init__(self, value: object) -> None:
        self.value = value

    def identity(self) -> str:
        self.resolve()
        token = object_token(self.value)
        if isinstance(self.value, (FunctionType, BuiltinFunctionType)):
            return token
        return f"{token}::__call__"

    def resolve(self) -> Callable[..., Any]:
        if not callable(self.value):
            raise InvalidCallbackError(context={"callback": repr(self.value)})
        return self.value

    def __repr__(self) -> str:
        return f"ObjectCallback({self.value!r})"


def as_callback(value: Any) -> Callback:
    """Wrap ``value`` in the callback variant matching its shape.

    Never raises: invalid values are wrapped and rejected on first use.
    """
    if isinstance(value, Callback):
        return value
    if isinstance(value, str):
        return FunctionCallback(value)
    if isinstance(value, (tuple, list)) and len(value) == 2 and isinstance(value[1], str):
        return MethodCallback(value[0], value[1])
    if inspect.ismethod(value):
        return MethodCallback(value.__self__, value.__name__)
    if isinstance(value, BuiltinFunctionType):
        owner = value.__self__
        if owner is None or inspect.ismodule(owner):
            return FunctionCallback(value)
        return MethodCallback(owner, value.__name__)
    if isinstance(value, FunctionType) and _is_named_function(value):
        return FunctionCallback(value)
    return ObjectCallback(value)


def callback_identity(value: Any) -> str:
    """Return the identity string of any callback-like value."""
    return as_callback(value).identity()


def _is_named_function(func: FunctionType) -> bool:
    # Closures share a qualname across instances, so only module-level
    # and class-level functions are identified by name.
    return func.__name__ != "<lambda>" and "<locals>" not in func.__qualname__


def _import_callable(path: str) -> Any:
    if "." not in path and ":" not in path:
        if hasattr(builtins, path):
            return getattr(builtins, path)
        raise InvalidCallbackError(f"Unknown callback name: {path}", context={"callback": path})

    try:
        return pkgutil.resolve_name(path)
    except (ImportError, AttributeError, ValueError) as exc:
        raise InvalidCallbackError(
            f"Cannot resolve callback: {path}",
            context={"callback": path},
            cause=exc,
        ) from exc
