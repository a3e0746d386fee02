"""In-memory scene host.

Implements every boundary collaborator over plain Python objects. The CLI
builds one from a JSON scene document (see ``loader``); tests build them
directly.

Writes go through a staging area: ``set_enumerated_value`` stages,
``commit`` applies. ``commit`` marks the owning scene dirty even when the
staged value equals the current one. ``reversible_edit`` records one undo
step per scope that changed anything.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from typing import Any, Iterable, Iterator, Optional, Sequence

from ..exceptions import ReflectionError
from ..logging_config import get_logger
from .protocols import (
    DeclaredType,
    EnumProperty,
    Host,
    Property,
    TaggedField,
)

logger = get_logger(__name__)


@dataclass(eq=False)
class MemoryAsset:
    asset_id: str
    name: str
    path: str = ""


@dataclass
class OpaqueProperty(Property):
    """Property of a kind the core does not read; keeps its raw value."""

    value: Any = None


@dataclass(eq=False)
class MemoryField:
    name: str
    declared_type: Optional[DeclaredType] = None
    tags: tuple[str, ...] = ()


@dataclass(eq=False)
class MemoryScene:
    name: str
    path: str = ""
    loaded: bool = True
    dirty: bool = False
    roots: list[MemoryObject] = field(default_factory=list)


@dataclass(eq=False)
class MemoryObject:
    name: str
    instance_id: int
    scene: Optional[MemoryScene] = None
    parent: Optional[MemoryObject] = None
    children: list[MemoryObject] = field(default_factory=list)
    components: list[MemoryComponent] = field(default_factory=list)

    @property
    def handle(self) -> int:
        return self.instance_id

    def __repr__(self) -> str:
        return f"MemoryObject({self.name!r}, id={self.instance_id})"


@dataclass(eq=False)
class MemoryComponent:
    type_name: str
    namespace: Optional[str] = None
    owner: Optional[MemoryObject] = None
    properties: dict[str, Property] = field(default_factory=dict)
    fields: list[MemoryField] = field(default_factory=list)
    base_types: tuple[str, ...] = ()
    editable: bool = True
    hidden: bool = False
    destroyed: bool = False

    @property
    def qualified_type_name(self) -> str:
        if self.namespace:
            return f"{self.namespace}.{self.type_name}"
        return self.type_name

    @property
    def is_live(self) -> bool:
        return not self.destroyed and self.owner is not None

    def derives_from(self, base_type: str) -> bool:
        return base_type in (self.type_name, self.qualified_type_name) or base_type in self.base_types

    def __repr__(self) -> str:
        owner = self.owner.name if self.owner is not None else None
        return f"MemoryComponent({self.qualified_type_name!r}, owner={owner!r})"


@dataclass
class UndoEntry:
    description: str
    component: MemoryComponent
    properties: dict[str, Property]


def _tag_matches(declared: str, wanted: str) -> bool:
    """Match a field tag against a wanted tag name.

    ``UdonSharp.UdonSyncedAttribute`` matches ``UdonSyncedAttribute`` and
    ``UdonSynced`` as well as itself.
    """
    if declared == wanted:
        return True
    short = wanted.rsplit(".", 1)[-1]
    if declared == short:
        return True
    return short.endswith("Attribute") and declared == short[: -len("Attribute")]


class MemoryHost(Host):
    """Scene host backed by in-memory objects."""

    def __init__(
        self,
        scenes: Optional[Sequence[MemoryScene]] = None,
        assets: Optional[dict[str, MemoryAsset]] = None,
    ):
        self.scenes: list[MemoryScene] = list(scenes or [])
        self.assets: dict[str, MemoryAsset] = dict(assets or {})
        self._pending: dict[int, tuple[MemoryComponent, dict[str, int]]] = {}
        self._undo: list[UndoEntry] = []
        self._next_id = 1
        self._used_ids: set[int] = set()
        self._reserved_ids: set[int] = set()

    # -- construction --

    def add_scene(self, name: str, path: str = "", loaded: bool = True) -> MemoryScene:
        scene = MemoryScene(name=name, path=path, loaded=loaded)
        self.scenes.append(scene)
        return scene

    def add_asset(self, asset_id: str, name: str, path: str = "") -> MemoryAsset:
        asset = MemoryAsset(asset_id=asset_id, name=name, path=path)
        self.assets[asset_id] = asset
        return asset

    def add_object(
        self,
        scene: MemoryScene,
        name: str,
        parent: Optional[MemoryObject] = None,
        instance_id: Optional[int] = None,
    ) -> MemoryObject:
        """Add an object under ``parent``, or as a scene root.

        Raises:
            ValueError: If ``instance_id`` is already taken
        """
        if instance_id is None:
            while self._next_id in self._used_ids or self._next_id in self._reserved_ids:
                self._next_id += 1
            instance_id = self._next_id
        elif instance_id in self._used_ids:
            raise ValueError(f"duplicate object id {instance_id}")
        self._used_ids.add(instance_id)
        self._next_id = max(self._next_id, instance_id + 1)

        obj = MemoryObject(name=name, instance_id=instance_id, scene=scene, parent=parent)
        if parent is None:
            scene.roots.append(obj)
        else:
            parent.children.append(obj)
        return obj

    def reserve_ids(self, ids: Iterable[int]) -> None:
        """Keep automatic ids clear of ids that will be added explicitly later."""
        self._reserved_ids.update(ids)

    def add_component(
        self,
        obj: MemoryObject,
        type_name: str,
        namespace: Optional[str] = None,
        properties: Sequence[Property] = (),
        fields: Sequence[MemoryField] = (),
        base_types: Sequence[str] = (),
        editable: bool = True,
        hidden: bool = False,
    ) -> MemoryComponent:
        component = MemoryComponent(
            type_name=type_name,
            namespace=namespace,
            owner=obj,
            properties={prop.name: prop for prop in properties},
            fields=list(fields),
            base_types=tuple(base_types),
            editable=editable,
            hidden=hidden,
        )
        obj.components.append(component)
        return component

    # -- traversal --

    def iter_objects(self) -> Iterator[MemoryObject]:
        """Pre-order walk over every object of every scene."""
        for scene in self.scenes:
            stack = list(reversed(scene.roots))
            while stack:
                obj = stack.pop()
                yield obj
                stack.extend(reversed(obj.children))

    # -- SceneSource --

    def list_components(self) -> list[MemoryComponent]:
        components = []
        for obj in self.iter_objects():
            if obj.scene is None or not obj.scene.loaded:
                continue
            for component in obj.components:
                if component.destroyed or not component.editable or component.hidden:
                    continue
                components.append(component)
        return components

    # -- ReflectiveAccessor --

    def get_named_property(
        self, component: MemoryComponent, names: Sequence[str]
    ) -> Optional[Property]:
        for name in names:
            prop = component.properties.get(name)
            if prop is not None:
                return self._bind(component, prop)
        return None

    def enumerate_properties(self, component: MemoryComponent) -> Iterator[Property]:
        for prop in list(component.properties.values()):
            if prop.visible:
                yield self._bind(component, prop)

    def set_enumerated_value(self, prop: EnumProperty, index: int) -> None:
        if not isinstance(prop, EnumProperty) or prop.binding is None:
            raise ReflectionError("<unbound>", prop.name, "not a bound enumerated property")

        component, name = prop.binding
        if not 0 <= index < len(prop.labels):
            raise ReflectionError(component.type_name, name, f"option index {index} out of range")

        prop.index = index
        _, staged = self._pending.setdefault(id(component), (component, {}))
        staged[name] = index

    def commit(self, component: MemoryComponent) -> bool:
        entry = self._pending.pop(id(component), None)
        if entry is None:
            return False

        self._mark_dirty(component)
        changed = False
        for name, index in entry[1].items():
            current = component.properties.get(name)
            if isinstance(current, EnumProperty) and current.index != index:
                component.properties[name] = replace(current, index=index)
                changed = True
        return changed

    def asset_path(self, asset: Any) -> str:
        return getattr(asset, "path", "") or ""

    # -- TagAccessor --

    def find_proxy(self, component: MemoryComponent, base_type: str) -> Optional[MemoryComponent]:
        if component.owner is None:
            return None
        for sibling in component.owner.components:
            if not sibling.destroyed and sibling.derives_from(base_type):
                return sibling
        return None

    def find_tagged_fields(self, instance: MemoryComponent, tag: str) -> list[TaggedField]:
        return [
            TaggedField(f.name, f.declared_type)
            for f in instance.fields
            if any(_tag_matches(t, tag) for t in f.tags)
        ]

    # -- EditTracker --

    @contextmanager
    def reversible_edit(self, component: MemoryComponent, description: str) -> Iterator[None]:
        before = dict(component.properties)
        try:
            yield
        finally:
            changed = before.keys() != component.properties.keys() or any(
                component.properties[name] is not prop for name, prop in before.items()
            )
            if changed:
                self._undo.append(UndoEntry(description, component, before))
                self._mark_dirty(component)
                logger.debug(f"Recorded undo step '{description}' on {component!r}")

    # -- undo / dirty tracking --

    @property
    def undo_count(self) -> int:
        return len(self._undo)

    def undo(self) -> Optional[str]:
        """Revert the most recent edit scope. Returns its description."""
        if not self._undo:
            return None
        entry = self._undo.pop()
        entry.component.properties = dict(entry.properties)
        self._mark_dirty(entry.component)
        return entry.description

    def dirty_scenes(self) -> list[MemoryScene]:
        return [scene for scene in self.scenes if scene.dirty]

    def _mark_dirty(self, component: MemoryComponent) -> None:
        if component.owner is not None and component.owner.scene is not None:
            component.owner.scene.dirty = True

    @staticmethod
    def _bind(component: MemoryComponent, prop: Property) -> Property:
        return replace(prop, binding=(component, prop.name))
