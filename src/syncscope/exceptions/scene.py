"""Scene-related exceptions: loading, reflection, script lookup."""

from pathlib import Path
from typing import Optional

from .base import SyncScopeError


class SceneError(SyncScopeError):
    """Base class for scene-related errors."""
    pass


class SceneLoadError(SceneError):
    """Raised when a scene document cannot be read or is malformed."""

    def __init__(self, reason: str, source: Optional[Path] = None):
        details = {"reason": reason}
        if source is not None:
            details["source"] = str(source)

        super().__init__("Cannot load scene document", details=details)
        self.reason = reason
        self.source = source


class ReflectionError(SceneError):
    """Raised by a host when a component property cannot be read or written."""

    def __init__(self, component: str, prop: str, reason: str):
        super().__init__(
            f"Reflection failed on {component}.{prop}",
            details={"component": component, "property": prop, "reason": reason},
        )
        self.component = component
        self.prop = prop
        self.reason = reason


class UnknownScriptError(SceneError):
    """Raised when a script key is not present in the current by-script view."""

    def __init__(self, key: str):
        super().__init__(f"No script group with key: {key}", details={"key": key})
        self.key = key
