"""Bandwidth and intensity estimation.

A deliberately coarse linear model: every component contributes
``rate_hz(mode) * (base + vars * per_var)`` bytes per second. The figures
are meant for prioritising work in a scene, not as a measurement of real
network traffic; the intensity bands are advisory.
"""

from __future__ import annotations

from typing import Iterable

import numpy as np

from .config import DEFAULT_ESTIMATION, EstimationConfig
from .models import ComponentRecord, ScanResult, SceneEstimate, SceneObjectNode
from .modes import (
    BUILT_IN_LABEL,
    CONTINUOUS_KEYWORD,
    MANUAL_KEYWORD,
    NONE_KEYWORD,
    is_label,
    is_sync_mode,
)

# Lower bounds of the intensity bands, highest first
INTENSITY_BANDS = (
    (80.0, "Very High"),
    (60.0, "High"),
    (40.0, "Moderate"),
    (20.0, "Low"),
)
LOWEST_BAND = "Very Low"


def intensity_rating(score: float) -> str:
    """Qualitative band for a 0..100 intensity score."""
    for lower, label in INTENSITY_BANDS:
        if score >= lower:
            return label
    return LOWEST_BAND


class BandwidthEstimator:
    """Estimate sync bandwidth for components, objects and whole scenes."""

    def __init__(
        self,
        config: EstimationConfig = DEFAULT_ESTIMATION,
        primary_behaviour_type: str = "UdonBehaviour",
    ):
        self.config = config
        self.primary_behaviour_type = primary_behaviour_type

    def rate_hz(self, mode: str) -> float:
        """Update rate for a raw mode label.

        Order: continuous, manual, built-in, none; anything else uses the
        managed rate.
        """
        if is_sync_mode(mode, CONTINUOUS_KEYWORD):
            return self.config.continuous_rate_hz
        if is_sync_mode(mode, MANUAL_KEYWORD):
            return self.config.manual_rate_hz
        if is_label(mode, BUILT_IN_LABEL):
            return self.config.built_in_rate_hz
        if is_sync_mode(mode, NONE_KEYWORD):
            return 0.0
        return self.config.managed_rate_hz

    def effective_variable_count(self, record: ComponentRecord) -> int:
        if record.synced_variable_count > 0:
            return record.synced_variable_count
        if record.component_type == self.primary_behaviour_type:
            return 1
        if is_label(record.sync_mode, BUILT_IN_LABEL):
            return 2
        return 1

    def bytes_per_update(self, record: ComponentRecord) -> float:
        return (
            self.config.base_bytes_per_update
            + self.effective_variable_count(record) * self.config.bytes_per_synced_var
        )

    def component_kbps(self, record: ComponentRecord) -> float:
        return self.rate_hz(record.sync_mode) * self.bytes_per_update(record) / 1024.0

    def _total(self, records: Iterable[ComponentRecord]) -> float:
        values = np.fromiter((self.component_kbps(r) for r in records), dtype=float)
        return float(values.sum())

    def object_kbps(self, node: SceneObjectNode) -> float:
        """Sum over all of the object's components, filtered or not."""
        return self._total(node.components)

    def scene_kbps(self, result: ScanResult) -> float:
        return self._total(result.records())

    def intensity_score(self, kbps: float) -> float:
        return float(np.clip(kbps * self.config.intensity_multiplier, 0.0, 100.0))

    def object_intensity_score(self, node: SceneObjectNode) -> float:
        return self.intensity_score(self.object_kbps(node))

    def estimate(self, result: ScanResult) -> SceneEstimate:
        """Scene-wide bandwidth, intensity and advisories."""
        kbps = self.scene_kbps(result)
        score = self.intensity_score(kbps)
        rating = intensity_rating(score)

        advisories = []
        threshold = self.config.continuous_warning_threshold
        if result.counts.continuous > threshold:
            advisories.append(
                f"{result.counts.continuous} continuous sync behaviours detected. "
                "This may cause high network traffic."
            )
        if rating == "Very High":
            advisories.append(
                "Network intensity is very high; reduce continuous sync or synced variables."
            )

        return SceneEstimate(
            bandwidth_kbps=kbps,
            intensity_score=score,
            intensity_rating=rating,
            advisories=tuple(advisories),
        )
