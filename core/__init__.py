"""
Hook engine infrastructure: configuration, errors, logging and wiring.
"""

__version__ = "0.1.0"

from core.config import ConfigManager, EngineConfig
from core.exceptions import HookError, InvalidCallbackError, UnknownServiceError

__all__ = [
    "ConfigManager",
    "EngineConfig",
    "HookError",
    "InvalidCallbackError",
    "UnknownServiceError",
]
