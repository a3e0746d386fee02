"""Sync-mode and synced-variable classification."""

from .classifier import Classification, SyncClassifier
from .strategies import (
    DiscoveryScanStrategy,
    ModeStrategy,
    NamedSelectorStrategy,
    SerializedArrayStrategy,
    TaggedFieldStrategy,
    VariableStrategy,
)
from .types import friendly_type_name

__all__ = [
    "Classification",
    "SyncClassifier",
    "ModeStrategy",
    "VariableStrategy",
    "NamedSelectorStrategy",
    "DiscoveryScanStrategy",
    "TaggedFieldStrategy",
    "SerializedArrayStrategy",
    "friendly_type_name",
]
