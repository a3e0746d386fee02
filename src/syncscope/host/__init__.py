"""Host boundary: collaborator contracts and the in-memory host."""

from .loader import dump_scene_document, load_scene, load_scene_document, save_scene
from .memory import (
    MemoryAsset,
    MemoryComponent,
    MemoryField,
    MemoryHost,
    MemoryObject,
    MemoryScene,
)
from .protocols import (
    ArrayProperty,
    ComponentHandle,
    DeclaredType,
    EditTracker,
    EnumProperty,
    Host,
    Property,
    PropertyKind,
    ReferenceProperty,
    ReflectiveAccessor,
    SceneObjectHandle,
    SceneSource,
    StringProperty,
    TagAccessor,
    TaggedField,
)

__all__ = [
    "Host",
    "SceneSource",
    "ReflectiveAccessor",
    "TagAccessor",
    "EditTracker",
    "ComponentHandle",
    "SceneObjectHandle",
    "Property",
    "PropertyKind",
    "EnumProperty",
    "ArrayProperty",
    "StringProperty",
    "ReferenceProperty",
    "DeclaredType",
    "TaggedField",
    "MemoryHost",
    "MemoryScene",
    "MemoryObject",
    "MemoryComponent",
    "MemoryField",
    "MemoryAsset",
    "load_scene",
    "load_scene_document",
    "dump_scene_document",
    "save_scene",
]
