"""Object graph indexing.

Groups the flat component list from the scene source into one node per
owning scene object, in first-seen order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Hashable, Iterable, Optional

from .config import ProfilerConfig, default_config
from .host.protocols import ComponentHandle, SceneObjectHandle
from .logging_config import get_logger
from .models import ComponentKind, ComponentRecord, SceneObjectNode

logger = get_logger(__name__)


@dataclass
class ObjectIndex:
    objects: list[SceneObjectNode] = field(default_factory=list)
    by_handle: dict[Hashable, SceneObjectNode] = field(default_factory=dict)


def component_kind(
    component: ComponentHandle, config: ProfilerConfig = default_config
) -> Optional[ComponentKind]:
    """Which profiled family a component belongs to, or None to ignore it."""
    type_name = component.type_name or ""
    if (
        type_name == config.primary_behaviour_type
        or config.primary_behaviour_type in (component.qualified_type_name or "")
    ):
        return ComponentKind.BEHAVIOUR

    prefix = config.platform_type_prefix
    if type_name.startswith(prefix) or prefix in (component.namespace or ""):
        return ComponentKind.PLATFORM
    return None


def hierarchy_path(obj: SceneObjectHandle) -> str:
    """Slash-joined names from the root down to ``obj``."""
    names = []
    current: Optional[SceneObjectHandle] = obj
    while current is not None:
        names.append(current.name)
        current = current.parent
    return "/".join(reversed(names))


def index_objects(
    components: Iterable[Optional[ComponentHandle]],
    config: ProfilerConfig = default_config,
) -> ObjectIndex:
    """Build object nodes carrying unclassified records.

    Components that are None, have no owner, or whose owner cannot be read
    are skipped.
    """
    index = ObjectIndex()

    for component in components:
        if component is None:
            logger.debug("Skipping empty component slot")
            continue

        try:
            kind = component_kind(component, config)
            if kind is None:
                continue
            owner = component.owner
            if owner is None:
                logger.debug(f"Skipping detached component {component.type_name}")
                continue
            handle = owner.handle
        except (AttributeError, LookupError) as e:
            logger.debug(f"Skipping unreadable component: {e}")
            continue

        node = index.by_handle.get(handle)
        if node is None:
            node = SceneObjectNode(
                handle=handle,
                name=owner.name,
                path=hierarchy_path(owner),
                obj=owner,
            )
            index.by_handle[handle] = node
            index.objects.append(node)

        node.components.append(
            ComponentRecord(
                component_type=(
                    config.primary_behaviour_type
                    if kind is ComponentKind.BEHAVIOUR
                    else component.type_name
                ),
                kind=kind,
                instance=component,
            )
        )

    return index
