"""Classification strategies.

Sync mode and synced variables are each resolved by an ordered chain of
strategies. A strategy returns a result or signals a miss; the classifier
takes the first result.

Mode strategies return a label, or None to pass to the next strategy.
Variable strategies return a tuple of descriptors; an empty tuple is a miss.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from ..host.protocols import (
    ArrayProperty,
    ComponentHandle,
    EnumProperty,
    Host,
    StringProperty,
)
from ..logging_config import get_logger
from ..models import VariableDescriptor
from ..modes import UNKNOWN_LABEL, is_recognized
from .types import friendly_type_name

logger = get_logger(__name__)


class ModeStrategy(ABC):
    """One stage of the sync-mode chain."""

    name: str = "mode"

    @abstractmethod
    def resolve(self, component: ComponentHandle, host: Host) -> Optional[str]:
        """Return a mode label, or None to defer to the next stage."""


class VariableStrategy(ABC):
    """One stage of the synced-variable chain."""

    name: str = "variables"

    @abstractmethod
    def collect(self, component: ComponentHandle, host: Host) -> tuple[VariableDescriptor, ...]:
        """Return discovered variables; empty means a miss."""


class NamedSelectorStrategy(ModeStrategy):
    """Look the selector up by its known names.

    A property found under one of the names is authoritative: if it is not a
    usable enumerated value the result is Unknown and no later stage runs.
    """

    name = "named-selector"

    def __init__(self, candidate_names: Sequence[str]):
        self.candidate_names = tuple(candidate_names)

    def resolve(self, component: ComponentHandle, host: Host) -> Optional[str]:
        prop = host.get_named_property(component, self.candidate_names)
        if prop is None:
            return None

        if isinstance(prop, EnumProperty):
            label = prop.selected_label
            if label is not None:
                return label

        logger.debug(f"Selector '{prop.name}' on {component.type_name} is not a usable enum")
        return UNKNOWN_LABEL


class DiscoveryScanStrategy(ModeStrategy):
    """Scan visible properties for an enum whose name mentions sync.

    Shallow and single-pass. The first such enum whose selected label is a
    recognised mode wins.
    """

    name = "discovery-scan"

    def __init__(self, keyword: str = "sync"):
        self.keyword = keyword.lower()

    def resolve(self, component: ComponentHandle, host: Host) -> Optional[str]:
        for prop in host.enumerate_properties(component):
            if not isinstance(prop, EnumProperty):
                continue
            if self.keyword not in prop.name.lower():
                continue

            label = prop.selected_label
            if label is not None and is_recognized(label):
                return label
        return None


class TaggedFieldStrategy(VariableStrategy):
    """Collect tagged fields from the authored proxy behaviour."""

    name = "tagged-fields"

    def __init__(self, proxy_base_type: str, synced_tag: str):
        self.proxy_base_type = proxy_base_type
        self.synced_tag = synced_tag

    def collect(self, component: ComponentHandle, host: Host) -> tuple[VariableDescriptor, ...]:
        proxy = host.find_proxy(component, self.proxy_base_type)
        if proxy is None:
            return ()

        return tuple(
            VariableDescriptor(f.name, friendly_type_name(f.declared_type))
            for f in host.find_tagged_fields(proxy, self.synced_tag)
        )


class SerializedArrayStrategy(VariableStrategy):
    """Read synced variable names from a serialized string array."""

    name = "serialized-array"

    def __init__(self, candidate_names: Sequence[str]):
        self.candidate_names = tuple(candidate_names)

    def collect(self, component: ComponentHandle, host: Host) -> tuple[VariableDescriptor, ...]:
        prop = host.get_named_property(component, self.candidate_names)
        if not isinstance(prop, ArrayProperty):
            return ()

        names = []
        for i in range(prop.length):
            element = prop.element(i)
            if isinstance(element, StringProperty):
                names.append(VariableDescriptor(element.value))
        return tuple(names)
