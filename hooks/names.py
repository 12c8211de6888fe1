"""Hook name value objects."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True, slots=True)
class HookName:
    """Immutable hook identifier compared by exact string value."""

    name: str

    @classmethod
    def of_class(cls, target: type) -> HookName:
        """Build a structured name ``module.QualName`` from a class."""
        return cls(f"{target.__module__}.{target.__qualname__}")

    def __str__(self) -> str:
        return self.name


HookNameLike = Union[str, HookName, type]


def hook_name(value: HookNameLike) -> str:
    """Normalize a hook name argument to its string key.

    Raises:
        TypeError: If ``value`` is not a string, ``HookName`` or class.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, HookName):
        return value.name
    if isinstance(value, type):
        return HookName.of_class(value).name
    raise TypeError(f"Unsupported hook name: {value!r}")
