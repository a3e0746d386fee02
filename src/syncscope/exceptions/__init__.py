"""Exception hierarchy for SyncScope."""

from .base import SyncScopeError
from .config import (
    ConfigurationError,
    InvalidConfigError,
    InvalidPathError,
)
from .scene import (
    ReflectionError,
    SceneError,
    SceneLoadError,
    UnknownScriptError,
)

__all__ = [
    "SyncScopeError",
    "SceneError",
    "SceneLoadError",
    "ReflectionError",
    "UnknownScriptError",
    "ConfigurationError",
    "InvalidPathError",
    "InvalidConfigError",
]
