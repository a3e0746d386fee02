"""Sync-mode labels and their canonical meaning.

A component's mode is kept as the raw display label its host reports. Its
meaning is re-derived by case-insensitive substring tests against ``none``,
``manual`` and ``continuous``, plus exact matches for the two labels the
profiler assigns itself (``VRC Managed`` and ``Built-in Sync``).

The order of the substring tests differs per call site and is part of the
behaviour: a label such as ``"Manual (was Continuous)"`` counts as Manual in
the summary counts but filters and estimates as Continuous. This is a known
limitation; callers must use the function that matches their purpose.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

NONE_KEYWORD = "none"
MANUAL_KEYWORD = "manual"
CONTINUOUS_KEYWORD = "continuous"

UNKNOWN_LABEL = "Unknown"
VRC_MANAGED_LABEL = "VRC Managed"
BUILT_IN_LABEL = "Built-in Sync"

# Modes a user can bulk-apply to a script group
SYNC_MODE_OPTIONS = ("None", "Manual", "Continuous")


class SyncCategory(Enum):
    """Canonical sync categories.

    NONE - never synced
    MANUAL - synced on explicit request
    CONTINUOUS - synced on a fixed tick
    VRC_MANAGED - platform component, managed by the platform layer
    BUILT_IN - platform component with its own sync
    UNKNOWN - no recognisable mode
    """

    NONE = "none"
    MANUAL = "manual"
    CONTINUOUS = "continuous"
    VRC_MANAGED = "vrc_managed"
    BUILT_IN = "built_in"
    UNKNOWN = "unknown"


def is_sync_mode(label: Optional[str], expected: str) -> bool:
    """Case-insensitive substring test of ``expected`` in ``label``."""
    if not label:
        return False
    return expected in label.lower()


def is_label(label: Optional[str], expected: str) -> bool:
    """Case-insensitive exact comparison."""
    if label is None:
        return False
    return label.casefold() == expected.casefold()


def is_recognized(label: Optional[str]) -> bool:
    """True when the label names one of the three reflected sync modes."""
    return (
        is_sync_mode(label, NONE_KEYWORD)
        or is_sync_mode(label, MANUAL_KEYWORD)
        or is_sync_mode(label, CONTINUOUS_KEYWORD)
    )


def category_of(label: Optional[str]) -> SyncCategory:
    """Category used for filtering and rate lookup.

    Order: continuous, manual, none, then the exact platform labels.
    """
    if is_sync_mode(label, CONTINUOUS_KEYWORD):
        return SyncCategory.CONTINUOUS
    if is_sync_mode(label, MANUAL_KEYWORD):
        return SyncCategory.MANUAL
    if is_sync_mode(label, NONE_KEYWORD):
        return SyncCategory.NONE
    if is_label(label, VRC_MANAGED_LABEL):
        return SyncCategory.VRC_MANAGED
    if is_label(label, BUILT_IN_LABEL):
        return SyncCategory.BUILT_IN
    return SyncCategory.UNKNOWN


def counting_category(label: Optional[str]) -> SyncCategory:
    """Category used for the per-mode behaviour counts.

    Order: none, manual, continuous; anything else is UNKNOWN.
    """
    if is_sync_mode(label, NONE_KEYWORD):
        return SyncCategory.NONE
    if is_sync_mode(label, MANUAL_KEYWORD):
        return SyncCategory.MANUAL
    if is_sync_mode(label, CONTINUOUS_KEYWORD):
        return SyncCategory.CONTINUOUS
    return SyncCategory.UNKNOWN
