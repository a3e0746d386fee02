"""Tests for the formatters package."""

import csv
import io
import json

import pytest
from rich.console import Console

from syncscope.aggregation import ModeFilter
from syncscope.formatters import (
    CsvFormatter,
    JsonFormatter,
    QuietFormatter,
    RichFormatter,
    get_formatter,
)
from syncscope.host import MemoryHost
from syncscope.profiler import DetailsView, ProfilerSession


def _report(builder_or_host, view=DetailsView.BY_OBJECT, mode_filter=ModeFilter.ALL):
    host = getattr(builder_or_host, "host", builder_or_host)
    session = ProfilerSession(host, mode_filter=mode_filter, view=view)
    return session.report()


class TestGetFormatter:
    def test_known_formatters(self):
        for name in ("rich", "json", "csv", "quiet"):
            fmt = get_formatter(name)
            assert fmt is not None

    def test_unknown_formatter(self):
        with pytest.raises(ValueError, match="Unknown formatter"):
            get_formatter("xml")


class TestJsonFormatter:
    def test_format_returns_valid_json(self, sample_scene):
        data = json.loads(JsonFormatter().format(_report(sample_scene)))
        assert data["summary"]["behaviours"] == 4
        assert data["summary"]["counts"]["manual"] == 2
        assert data["estimate"]["intensity_rating"] == "Very Low"
        assert [o["name"] for o in data["objects"]][:2] == ["Door", "Lamp"]
        assert data["objects"][0]["components"][0]["synced_variables"] == ["isOpen", "angle"]
        assert data["scripts"][0] == {
            "key": "DoorProgram",
            "name": "DoorProgram",
            "source": "Assets/Scripts/DoorProgram.asset",
            "instances": 1,
            "bandwidth_kbps": 0.4688,
            "bulk_editable": True,
        }

    def test_filtered_views_keep_totals(self, sample_scene):
        data = json.loads(JsonFormatter().format(_report(sample_scene, mode_filter=ModeFilter.NONE)))
        assert data["objects"] == []
        assert data["scripts"] == []
        assert data["estimate"]["bandwidth_kbps"] == pytest.approx(0.7523, abs=1e-4)


class TestCsvFormatter:
    def test_component_rows(self, sample_scene):
        text = CsvFormatter().format(_report(sample_scene))
        rows = list(csv.reader(io.StringIO(text)))
        assert rows[0][:4] == ["object", "path", "component_type", "sync_mode"]
        assert len(rows) == 1 + 6
        assert rows[1][:4] == ["Door", "Door", "UdonBehaviour", "Continuous"]

    def test_script_rows(self, sample_scene):
        text = CsvFormatter().format(_report(sample_scene, view=DetailsView.BY_SCRIPT))
        rows = list(csv.reader(io.StringIO(text)))
        assert rows[0] == ["key", "name", "instances", "bandwidth_kbps", "bulk_editable"]
        assert rows[1] == ["DoorProgram", "DoorProgram", "1", "0.4688", "yes"]


class TestQuietFormatter:
    def test_object_paths(self, sample_scene):
        text = QuietFormatter().format(_report(sample_scene))
        assert text.splitlines() == ["Door", "Lamp", "Mirror", "Lamp2", "Props/Counter"]

    def test_script_keys(self, sample_scene):
        text = QuietFormatter().format(_report(sample_scene, view=DetailsView.BY_SCRIPT))
        assert text.splitlines()[0] == "DoorProgram"


class TestRichFormatter:
    def _render(self, report):
        console = Console(file=io.StringIO(), width=120, color_system=None)
        RichFormatter(console).render(report)
        return console.file.getvalue()

    def test_summary_and_objects(self, sample_scene):
        out = self._render(_report(sample_scene))
        assert "Behaviour Summary" in out
        assert "Intensity Score" in out
        assert "By Object" in out
        assert "Props/Counter" in out

    def test_scripts_table(self, sample_scene):
        out = self._render(_report(sample_scene, view=DetailsView.BY_SCRIPT))
        assert "By Script" in out
        assert "LampProgram" in out

    def test_advisory_printed(self, builder):
        for i in range(11):
            builder.behaviour(builder.obj(f"Spinner{i}"), "Continuous")
        out = self._render(_report(builder))
        assert "11 continuous sync behaviours detected" in out

    def test_empty_scene(self):
        out = self._render(_report(MemoryHost()))
        assert "No synced behaviours" in out
