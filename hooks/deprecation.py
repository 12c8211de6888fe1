"""Deprecated hook notices.

:class:`DeprecatedHookNotifier` decides whether a deprecated hook deserves a
notice (only when something is still registered on it) and hands the notice
to a sink. Sinks are fire-and-forget; anything with a matching ``notify``
method satisfies :class:`NoticeSink`.
"""

from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from core.logger import get_logger

from .names import HookNameLike, hook_name
from .registry import HookRegistry


@dataclass(frozen=True, slots=True)
class DeprecationNotice:
    """One deprecated hook usage."""

    hook: str
    version: str
    replacement: str = ""
    message: str = ""

    def render(self) -> str:
        """Return the human-readable notice text."""
        if self.replacement:
            text = (
                f"Hook {self.hook} is deprecated since version {self.version}! "
                f"Use {self.replacement} instead."
            )
        else:
            text = (
                f"Hook {self.hook} is deprecated since version {self.version} "
                "with no alternative available."
            )
        if self.message:
            text = f"{text} {self.message}"
        return text


@runtime_checkable
class NoticeSink(Protocol):
    """Receiver of deprecated hook notices."""

    def notify(
        self,
        hook: str,
        version: str,
        replacement: str = "",
        message: str = "",
    ) -> None:
        """Report one deprecated hook usage."""


class LoggingNotifier:
    """Log notices and optionally emit a ``DeprecationWarning``."""

    def __init__(
        self,
        logger: logging.Logger | None = None,
        *,
        emit_warnings: bool = True,
        level: int = logging.WARNING,
    ) -> None:
        self.logger = logger or get_logger(__name__)
        self.emit_warnings = emit_warnings
        self.level = level

    def notify(
        self,
        hook: str,
        version: str,
        replacement: str = "",
        message: str = "",
    ) -> None:
        notice = DeprecationNotice(hook, version, replacement, message)
        text = notice.render()
        self.logger.log(
            self.level,
            text,
            extra={"hook": hook, "deprecated_since": version},
        )
        if self.emit_warnings:
            warnings.warn(text, DeprecationWarning, stacklevel=4)


@dataclass(slots=True)
class RecordingNotifier:
    """Collect notices in memory."""

    notices: list[DeprecationNotice] = field(default_factory=list)

    def notify(
        self,
        hook: str,
        version: str,
        replacement: str = "",
        message: str = "",
    ) -> None:
        self.notices.append(DeprecationNotice(hook, version, replacement, message))


class DeprecatedHookNotifier:
    """Emit deprecation notices for hooks that still have callbacks."""

    def __init__(
        self,
        registry: HookRegistry,
        sink: NoticeSink | None = None,
        *,
        enabled: bool = True,
    ) -> None:
        self._registry = registry
        self.sink: NoticeSink = sink if sink is not None else LoggingNotifier()
        self.enabled = enabled

    def notify_if_registered(
        self,
        name: HookNameLike,
        version: str,
        replacement: str = "",
        message: str = "",
    ) -> bool:
        """Notify the sink when ``name`` has callbacks.

        Returns:
            Whether the hook has callbacks, independent of ``enabled``.
        """
        key = hook_name(name)
        if not self._registry.has_callbacks(key):
            return False
        if self.enabled:
            self.sink.notify(key, version, replacement, message)
        return True
