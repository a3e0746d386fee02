"""Sync classifier: mode and synced-variable inventory per component."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Optional, Sequence

from ..config import ProfilerConfig, default_config
from ..host.protocols import ComponentHandle, Host, ReferenceProperty
from ..logging_config import get_logger
from ..models import ComponentKind, ComponentRecord, VariableDescriptor
from ..modes import BUILT_IN_LABEL, UNKNOWN_LABEL, VRC_MANAGED_LABEL, SyncCategory, category_of
from .strategies import (
    DiscoveryScanStrategy,
    ModeStrategy,
    NamedSelectorStrategy,
    SerializedArrayStrategy,
    TaggedFieldStrategy,
    VariableStrategy,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class Classification:
    """Result of classifying one component."""

    mode: str
    variables: tuple[VariableDescriptor, ...] = ()

    @property
    def category(self) -> SyncCategory:
        return category_of(self.mode)


class SyncClassifier:
    """Classifies components through ordered fallback chains.

    Args:
        host: Reflective and tag accessor for the live scene
        config: Candidate names, proxy type and tag
        mode_strategies: Override the sync-mode chain
        variable_strategies: Override the synced-variable chain
    """

    def __init__(
        self,
        host: Host,
        config: ProfilerConfig = default_config,
        mode_strategies: Optional[Sequence[ModeStrategy]] = None,
        variable_strategies: Optional[Sequence[VariableStrategy]] = None,
    ):
        self.host = host
        self.config = config
        self.mode_strategies = list(
            mode_strategies
            if mode_strategies is not None
            else (
                NamedSelectorStrategy(config.sync_selector_names),
                DiscoveryScanStrategy(config.discovery_keyword),
            )
        )
        self.variable_strategies = list(
            variable_strategies
            if variable_strategies is not None
            else (
                TaggedFieldStrategy(config.proxy_base_type, config.synced_field_tag),
                SerializedArrayStrategy(config.synced_array_names),
            )
        )

    def classify(self, component: ComponentHandle) -> Classification:
        """Classify a primary behaviour.

        Never raises: a reflection failure yields Unknown with no variables.
        """
        try:
            mode = self.resolve_mode(component)
            variables = self.discover_variables(component)
        except Exception as e:
            logger.warning(
                f"Could not fully analyze {component.type_name} on {_owner_name(component)}: {e}"
            )
            return Classification(UNKNOWN_LABEL)
        return Classification(mode, variables)

    def resolve_mode(self, component: ComponentHandle) -> str:
        for strategy in self.mode_strategies:
            label = strategy.resolve(component, self.host)
            if label is not None:
                logger.debug(f"{strategy.name} -> {label!r} for {_owner_name(component)}")
                return label
        return UNKNOWN_LABEL

    def discover_variables(self, component: ComponentHandle) -> tuple[VariableDescriptor, ...]:
        for strategy in self.variable_strategies:
            variables = strategy.collect(component, self.host)
            if variables:
                logger.debug(
                    f"{strategy.name} -> {len(variables)} variable(s) for {_owner_name(component)}"
                )
                return variables
        return ()

    def classify_platform(self, type_name: str) -> str:
        """Platform components are not reflected; their mode follows the type name."""
        if any(marker in type_name for marker in self.config.built_in_sync_markers):
            return BUILT_IN_LABEL
        return VRC_MANAGED_LABEL

    def program_source(self, component: ComponentHandle) -> tuple[Any, str]:
        """Backing program asset and its path, or (None, "")."""
        try:
            prop = self.host.get_named_property(component, self.config.program_source_names)
            if not isinstance(prop, ReferenceProperty) or prop.value is None:
                return None, ""
            return prop.value, self.host.asset_path(prop.value)
        except Exception as e:
            logger.warning(
                f"Could not read program source on {_owner_name(component)}: {e}"
            )
            return None, ""

    def annotate(self, record: ComponentRecord) -> ComponentRecord:
        """Return a classified copy of an unclassified record."""
        if record.kind is ComponentKind.PLATFORM:
            return replace(record, sync_mode=self.classify_platform(record.component_type))

        classification = self.classify(record.instance)
        asset, path = self.program_source(record.instance)
        return replace(
            record,
            sync_mode=classification.mode,
            synced_variables=classification.variables,
            program_source=asset,
            program_source_path=path,
        )


def _owner_name(component: ComponentHandle) -> str:
    owner = getattr(component, "owner", None)
    return owner.name if owner is not None else "<detached>"
