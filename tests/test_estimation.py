"""Tests for the bandwidth model."""

import pytest

from syncscope.config import EstimationConfig
from syncscope.estimation import BandwidthEstimator, intensity_rating
from syncscope.models import (
    ComponentKind,
    ComponentRecord,
    ScanResult,
    SceneObjectNode,
    SyncCounts,
    VariableDescriptor,
)
from syncscope.profiler import scan


def _record(mode, n_vars=0, component_type="UdonBehaviour", kind=ComponentKind.BEHAVIOUR):
    return ComponentRecord(
        component_type=component_type,
        kind=kind,
        sync_mode=mode,
        synced_variables=tuple(VariableDescriptor(f"v{i}") for i in range(n_vars)),
    )


class TestRates:
    @pytest.mark.parametrize(
        "mode,rate",
        [
            ("Continuous", 10.0),
            ("Manual", 0.2),
            ("Built-in Sync", 5.0),
            ("None", 0.0),
            ("VRC Managed", 1.0),
            ("Unknown", 1.0),
            ("Whatever", 1.0),
        ],
    )
    def test_rate_table(self, mode, rate):
        assert BandwidthEstimator().rate_hz(mode) == rate

    def test_configured_rates(self):
        estimator = BandwidthEstimator(EstimationConfig(continuous_rate_hz=20.0))
        assert estimator.rate_hz("Continuous") == 20.0


class TestComponentKbps:
    def test_none_is_zero_for_any_variable_count(self):
        estimator = BandwidthEstimator()
        for n in (0, 1, 50):
            assert estimator.component_kbps(_record("None", n)) == 0.0

    def test_classified_variables(self):
        estimator = BandwidthEstimator()
        assert estimator.component_kbps(_record("Continuous", 3)) == pytest.approx(10 * 60 / 1024)

    def test_defaults_without_variables(self):
        estimator = BandwidthEstimator()
        assert estimator.effective_variable_count(_record("Continuous")) == 1
        built_in = _record("Built-in Sync", component_type="VRCPickup", kind=ComponentKind.PLATFORM)
        assert estimator.effective_variable_count(built_in) == 2
        managed = _record("VRC Managed", component_type="VRCMirror", kind=ComponentKind.PLATFORM)
        assert estimator.effective_variable_count(managed) == 1

    def test_never_negative(self):
        estimator = BandwidthEstimator()
        for mode in ("Continuous", "Manual", "None", "Unknown", "Built-in Sync"):
            assert estimator.component_kbps(_record(mode)) >= 0.0


class TestScenarios:
    def test_three_tagged_fields_unknown_mode(self, builder):
        obj = builder.obj("Door")
        builder.behaviour(obj, mode=None)
        builder.proxy(obj, "DoorController", [("a", "Int32"), ("b", "Int32"), ("c", "Int32")])

        result = scan(builder.host)
        kbps = BandwidthEstimator().scene_kbps(result)
        assert kbps == pytest.approx(0.0586, abs=1e-4)
        assert kbps == pytest.approx((1 * (24 + 3 * 12)) / 1024)

    def test_eleven_continuous(self, builder):
        for i in range(11):
            builder.behaviour(builder.obj(f"Spinner{i}"), "Continuous")

        result = scan(builder.host)
        estimate = BandwidthEstimator().estimate(result)

        assert estimate.bandwidth_kbps == pytest.approx(3.867, abs=1e-3)
        assert estimate.intensity_score == pytest.approx(7.73, abs=0.01)
        assert estimate.intensity_rating == "Very Low"
        assert len(estimate.advisories) == 1
        assert "11 continuous sync behaviours" in estimate.advisories[0]

    def test_ten_continuous_has_no_advisory(self, builder):
        for i in range(10):
            builder.behaviour(builder.obj(f"Spinner{i}"), "Continuous")
        estimate = BandwidthEstimator().estimate(scan(builder.host))
        assert estimate.advisories == ()


class TestAdditivity:
    def test_object_is_sum_of_components(self, sample_scene):
        estimator = BandwidthEstimator()
        result = scan(sample_scene.host)
        for node in result.objects:
            expected = sum(estimator.component_kbps(c) for c in node.components)
            assert estimator.object_kbps(node) == pytest.approx(expected)

    def test_scene_is_sum_of_objects(self, sample_scene):
        estimator = BandwidthEstimator()
        result = scan(sample_scene.host)
        total = sum(estimator.object_kbps(node) for node in result.objects)
        assert estimator.scene_kbps(result) == pytest.approx(total)
        assert estimator.scene_kbps(result) == pytest.approx(0.75234375)

    def test_empty_scene_is_zero(self):
        estimate = BandwidthEstimator().estimate(ScanResult())
        assert estimate.bandwidth_kbps == 0.0
        assert estimate.intensity_score == 0.0
        assert estimate.intensity_rating == "Very Low"


class TestIntensity:
    def test_clamped(self):
        estimator = BandwidthEstimator()
        assert estimator.intensity_score(500.0) == 100.0
        assert estimator.intensity_score(0.0) == 0.0

    @pytest.mark.parametrize(
        "score,rating",
        [
            (0.0, "Very Low"),
            (19.9, "Very Low"),
            (20.0, "Low"),
            (39.9, "Low"),
            (40.0, "Moderate"),
            (60.0, "High"),
            (79.9, "High"),
            (80.0, "Very High"),
            (100.0, "Very High"),
        ],
    )
    def test_bands(self, score, rating):
        assert intensity_rating(score) == rating

    def test_very_high_adds_advisory(self):
        node = SceneObjectNode(handle=1, name="Busy", path="Busy")
        node.components = [_record("Continuous", 400)]
        result = ScanResult(objects=(node,), by_handle={1: node}, counts=SyncCounts(continuous=1))

        estimate = BandwidthEstimator().estimate(result)
        assert estimate.intensity_rating == "Very High"
        assert any("very high" in a for a in estimate.advisories)

    def test_object_intensity(self):
        node = SceneObjectNode(handle=1, name="Door", path="Door")
        node.components = [_record("Continuous", 3)]
        estimator = BandwidthEstimator()
        assert estimator.object_intensity_score(node) == pytest.approx(2 * 600 / 1024)
