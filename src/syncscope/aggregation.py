"""By-object and by-script views over a scan result.

Views are recomputed on every call and never cached: they depend on the
current filter and on a scan result that is replaced wholesale by the next
scan.
"""

from __future__ import annotations

from enum import Flag, auto
from typing import Iterable, Optional

from .estimation import BandwidthEstimator
from .models import ComponentRecord, ObjectSummary, ScanResult, ScriptSummary
from .modes import UNKNOWN_LABEL, SyncCategory, category_of


class ModeFilter(Flag):
    """Enabled sync categories of the views."""

    NONE = 0
    CONTINUOUS = auto()
    MANUAL = auto()
    SYNC_NONE = auto()
    VRC_MANAGED = auto()
    BUILT_IN = auto()
    UNKNOWN = auto()
    ALL = CONTINUOUS | MANUAL | SYNC_NONE | VRC_MANAGED | BUILT_IN | UNKNOWN


_CATEGORY_FLAGS = {
    SyncCategory.CONTINUOUS: ModeFilter.CONTINUOUS,
    SyncCategory.MANUAL: ModeFilter.MANUAL,
    SyncCategory.NONE: ModeFilter.SYNC_NONE,
    SyncCategory.VRC_MANAGED: ModeFilter.VRC_MANAGED,
    SyncCategory.BUILT_IN: ModeFilter.BUILT_IN,
    SyncCategory.UNKNOWN: ModeFilter.UNKNOWN,
}

FILTER_NAMES = {
    "continuous": ModeFilter.CONTINUOUS,
    "manual": ModeFilter.MANUAL,
    "none": ModeFilter.SYNC_NONE,
    "vrc-managed": ModeFilter.VRC_MANAGED,
    "built-in": ModeFilter.BUILT_IN,
    "unknown": ModeFilter.UNKNOWN,
    "all": ModeFilter.ALL,
}


def filter_for_category(category: SyncCategory) -> ModeFilter:
    return _CATEGORY_FLAGS[category]


def parse_filter(names: Iterable[str]) -> ModeFilter:
    """Build a filter from category names.

    Names are case-insensitive; ``_`` and ``-`` are interchangeable and
    comma-separated lists are split. An empty input enables nothing.

    Raises:
        ValueError: If a name is not recognised
    """
    result = ModeFilter.NONE
    for chunk in names:
        for raw in chunk.split(","):
            name = raw.strip().lower().replace("_", "-")
            if not name:
                continue
            flag = FILTER_NAMES.get(name)
            if flag is None:
                raise ValueError(
                    f"Unknown sync category: {raw.strip()!r}. "
                    f"Choose from: {', '.join(FILTER_NAMES)}"
                )
            result |= flag
    return result


def is_visible(record: ComponentRecord, mode_filter: ModeFilter) -> bool:
    return bool(filter_for_category(category_of(record.sync_mode)) & mode_filter)


def script_key(record: ComponentRecord) -> str:
    """Script identity: program asset, else its path, else the component type."""
    asset = record.program_source
    if asset is not None:
        asset_id = getattr(asset, "asset_id", None)
        return str(asset_id if asset_id is not None else id(asset))
    if record.program_source_path:
        return record.program_source_path
    if record.component_type:
        return record.component_type
    return UNKNOWN_LABEL


def script_display_name(record: ComponentRecord) -> str:
    if record.program_source is not None:
        name = getattr(record.program_source, "name", None)
        if name:
            return name
    if record.program_source_path:
        return record.program_source_path
    return record.component_type or UNKNOWN_LABEL


def by_object_view(
    result: ScanResult,
    estimator: BandwidthEstimator,
    mode_filter: ModeFilter = ModeFilter.ALL,
) -> list[ObjectSummary]:
    """Objects with at least one visible component, heaviest first.

    An object's bandwidth covers all of its components, visible or not.
    Equal bandwidths keep scan order.
    """
    rows = []
    for node in result.objects:
        visible = tuple(c for c in node.components if is_visible(c, mode_filter))
        if not visible:
            continue
        kbps = estimator.object_kbps(node)
        rows.append(
            ObjectSummary(
                node=node,
                bandwidth_kbps=kbps,
                intensity_score=estimator.intensity_score(kbps),
                visible_components=visible,
            )
        )
    return sorted(rows, key=lambda row: row.bandwidth_kbps, reverse=True)


def by_script_view(
    result: ScanResult,
    estimator: BandwidthEstimator,
    mode_filter: ModeFilter = ModeFilter.ALL,
) -> list[ScriptSummary]:
    """Visible components grouped by script identity, heaviest first.

    Equal bandwidths keep first-seen key order.
    """
    groups: dict[str, ScriptSummary] = {}
    for record in result.records():
        if not is_visible(record, mode_filter):
            continue

        key = script_key(record)
        summary = groups.get(key)
        if summary is None:
            summary = ScriptSummary(
                key=key,
                display_name=script_display_name(record),
                tooltip=record.program_source_path,
            )
            groups[key] = summary

        summary.components.append(record)
        summary.bandwidth_kbps += estimator.component_kbps(record)

    return sorted(groups.values(), key=lambda s: s.bandwidth_kbps, reverse=True)


def find_summary(summaries: Iterable[ScriptSummary], key: str) -> Optional[ScriptSummary]:
    for summary in summaries:
        if summary.key == key:
            return summary
    return None


def can_bulk_edit(summary: ScriptSummary, primary_behaviour_type: str = "UdonBehaviour") -> bool:
    """True when some contributing component is a live primary behaviour."""
    return any(
        c.component_type == primary_behaviour_type and c.is_live for c in summary.components
    )
