"""Boundary contracts between the analysis core and a host editor.

The core never talks to a host directly. It reads components through four
collaborators:

- SceneSource: the live, already-filtered component list
- ReflectiveAccessor: typed read/write access to component properties
- TagAccessor: proxy discovery and tagged-field lookup
- EditTracker: undoable edit scopes that mark the owning scene modified

Property values are plain dataclasses (one variant per property kind) so any
host can produce them. ``binding`` is opaque to the core and lets a host tie
a property back to its storage for writes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import (
    Any,
    ContextManager,
    Hashable,
    Iterator,
    NamedTuple,
    Optional,
    Protocol,
    Sequence,
    runtime_checkable,
)


class PropertyKind(Enum):
    """Kind of a reflected property."""

    ENUM = "enum"
    ARRAY = "array"
    STRING = "string"
    OBJECT_REFERENCE = "reference"
    OTHER = "other"


@dataclass
class Property:
    """A reflected property of unspecified kind."""

    name: str
    kind: PropertyKind = PropertyKind.OTHER
    visible: bool = True
    binding: Any = field(default=None, repr=False, compare=False)


@dataclass
class EnumProperty(Property):
    """Enumerated property: display labels plus the selected index."""

    kind: PropertyKind = PropertyKind.ENUM
    labels: tuple[str, ...] = ()
    index: int = -1

    @property
    def selected_label(self) -> Optional[str]:
        """Label at ``index``, or None when the index is out of range."""
        if 0 <= self.index < len(self.labels):
            return self.labels[self.index]
        return None


@dataclass
class ArrayProperty(Property):
    """Array property with indexed element access."""

    kind: PropertyKind = PropertyKind.ARRAY
    elements: tuple[Property, ...] = ()

    @property
    def length(self) -> int:
        return len(self.elements)

    def element(self, index: int) -> Property:
        return self.elements[index]


@dataclass
class StringProperty(Property):
    kind: PropertyKind = PropertyKind.STRING
    value: str = ""


@dataclass
class ReferenceProperty(Property):
    """Object reference; ``value`` is a host asset or None."""

    kind: PropertyKind = PropertyKind.OBJECT_REFERENCE
    value: Any = None


@dataclass(frozen=True)
class DeclaredType:
    """Declared type of a field.

    ``name`` may carry a generic arity suffix (``List`1``); ``args`` holds the
    generic arguments in order.
    """

    name: str
    args: tuple[DeclaredType, ...] = ()


class TaggedField(NamedTuple):
    name: str
    declared_type: Optional[DeclaredType]


@runtime_checkable
class AssetHandle(Protocol):
    """A persisted asset (e.g. a behaviour's program source)."""

    asset_id: Hashable
    name: str


@runtime_checkable
class SceneObjectHandle(Protocol):
    """A live object in the scene graph."""

    name: str

    @property
    def handle(self) -> Hashable: ...

    @property
    def parent(self) -> Optional[SceneObjectHandle]: ...


@runtime_checkable
class ComponentHandle(Protocol):
    """A live component attached to a scene object."""

    type_name: str
    namespace: Optional[str]

    @property
    def qualified_type_name(self) -> str: ...

    @property
    def owner(self) -> Optional[SceneObjectHandle]: ...

    @property
    def is_live(self) -> bool: ...


class SceneSource(ABC):
    """Supplies the components of every loaded scene.

    The list must already be filtered to live, editable, visible components
    belonging to a loaded scene.
    """

    @abstractmethod
    def list_components(self) -> list[ComponentHandle]:
        """Return every eligible component in discovery order."""


class ReflectiveAccessor(ABC):
    """Typed property access on a component."""

    @abstractmethod
    def get_named_property(
        self, component: ComponentHandle, names: Sequence[str]
    ) -> Optional[Property]:
        """Return the first property present among ``names``, or None."""

    @abstractmethod
    def enumerate_properties(self, component: ComponentHandle) -> Iterator[Property]:
        """Yield the component's visible top-level properties.

        Each call returns a fresh iterator.
        """

    @abstractmethod
    def set_enumerated_value(self, prop: EnumProperty, index: int) -> None:
        """Stage a new selected index on an enumerated property."""

    @abstractmethod
    def commit(self, component: ComponentHandle) -> bool:
        """Apply staged writes. Returns True when anything changed."""

    def asset_path(self, asset: Any) -> str:
        """Persisted path of an asset, or empty string when unknown."""
        return ""


class TagAccessor(ABC):
    """Proxy discovery and tagged-field lookup."""

    @abstractmethod
    def find_proxy(self, component: ComponentHandle, base_type: str) -> Optional[ComponentHandle]:
        """First sibling component on the same object deriving from ``base_type``."""

    @abstractmethod
    def find_tagged_fields(self, instance: ComponentHandle, tag: str) -> list[TaggedField]:
        """Fields of ``instance`` carrying ``tag``, in declaration order."""


class EditTracker(ABC):
    """Undoable edit scopes."""

    @abstractmethod
    def reversible_edit(self, component: ComponentHandle, description: str) -> ContextManager[None]:
        """Scope in which mutations of ``component`` become one undo step.

        Any mutation inside the scope marks the owning persisted scene as
        modified.
        """


class Host(SceneSource, ReflectiveAccessor, TagAccessor, EditTracker):
    """Every collaborator the profiler needs, in one object."""
