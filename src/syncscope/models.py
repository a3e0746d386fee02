"""Data models for a profiling pass.

A scan produces one ScanResult. Everything inside it (object nodes, component
records) belongs to that scan and is replaced wholesale by the next one;
nothing is patched incrementally.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Hashable, Iterator, Optional

from .modes import UNKNOWN_LABEL, SyncCategory, category_of


class ComponentKind(Enum):
    """Which of the two profiled component families a record belongs to."""

    BEHAVIOUR = "behaviour"  # the sync-capable primary behaviour type
    PLATFORM = "platform"  # platform components (sync handled by the platform)


@dataclass(frozen=True)
class VariableDescriptor:
    """A synced variable: its name and, when known, a friendly type name."""

    name: str
    type_name: Optional[str] = None

    def __str__(self) -> str:
        if self.type_name:
            return f"{self.name} : {self.type_name}"
        return self.name


@dataclass(frozen=True)
class ComponentRecord:
    """One attached component as seen by one scan.

    Attributes:
        component_type: Type identifier shown to the user
        kind: Component family
        sync_mode: Raw sync-mode label (see ``syncscope.modes``)
        synced_variables: Discovered synced variables, in discovery order
        program_source: Backing program asset, if any
        program_source_path: Persisted path of the program asset
        instance: Non-owning reference to the live component
    """

    component_type: str
    kind: ComponentKind
    sync_mode: str = UNKNOWN_LABEL
    synced_variables: tuple[VariableDescriptor, ...] = ()
    program_source: Any = field(default=None, compare=False)
    program_source_path: str = ""
    instance: Any = field(default=None, repr=False, compare=False)

    @property
    def synced_variable_count(self) -> int:
        return len(self.synced_variables)

    @property
    def category(self) -> SyncCategory:
        return category_of(self.sync_mode)

    @property
    def is_live(self) -> bool:
        """True while the backing component instance still exists."""
        if self.instance is None:
            return False
        return bool(getattr(self.instance, "is_live", True))


@dataclass(eq=False)
class SceneObjectNode:
    """A scene object that carries at least one profiled component."""

    handle: Hashable
    name: str
    path: str
    obj: Any = field(default=None, repr=False)
    components: list[ComponentRecord] = field(default_factory=list)


@dataclass(eq=False)
class ScriptSummary:
    """Components grouped by script identity.

    Derived on demand for the by-script view; never cached across scans.
    """

    key: str
    display_name: str
    tooltip: str = ""
    bandwidth_kbps: float = 0.0
    components: list[ComponentRecord] = field(default_factory=list)

    @property
    def instance_count(self) -> int:
        return len(self.components)


@dataclass(frozen=True)
class ObjectSummary:
    """One row of the by-object view."""

    node: SceneObjectNode
    bandwidth_kbps: float
    intensity_score: float
    visible_components: tuple[ComponentRecord, ...]


@dataclass(frozen=True)
class SyncCounts:
    """Per-category counts.

    ``continuous``/``manual``/``none``/``unknown`` count primary behaviours;
    ``vrc_managed``/``built_in`` count platform components.
    """

    continuous: int = 0
    manual: int = 0
    none: int = 0
    unknown: int = 0
    vrc_managed: int = 0
    built_in: int = 0


@dataclass(frozen=True)
class ScanResult:
    """Everything one scan produced.

    Attributes:
        objects: Object nodes in first-seen order
        by_handle: Object handle -> node
        counts: Per-category counts
        total_behaviours: Number of primary behaviours
        total_platform_components: Number of platform components
        component_type_counts: Platform component type -> count
        total_synced_variables: Sum of discovered synced variables
    """

    objects: tuple[SceneObjectNode, ...] = ()
    by_handle: dict[Hashable, SceneObjectNode] = field(default_factory=dict)
    counts: SyncCounts = field(default_factory=SyncCounts)
    total_behaviours: int = 0
    total_platform_components: int = 0
    component_type_counts: dict[str, int] = field(default_factory=dict)
    total_synced_variables: int = 0

    def records(self) -> Iterator[ComponentRecord]:
        for node in self.objects:
            yield from node.components

    @property
    def component_count(self) -> int:
        return sum(len(node.components) for node in self.objects)

    @property
    def is_empty(self) -> bool:
        return not self.objects


@dataclass(frozen=True)
class SceneEstimate:
    """Scene-wide bandwidth figures. Advisory only."""

    bandwidth_kbps: float
    intensity_score: float
    intensity_rating: str
    advisories: tuple[str, ...] = ()
