"""Tests for the exception hierarchy."""

from pathlib import Path

from syncscope.exceptions import (
    ConfigurationError,
    InvalidConfigError,
    InvalidPathError,
    ReflectionError,
    SceneError,
    SceneLoadError,
    SyncScopeError,
    UnknownScriptError,
)


class TestSyncScopeError:
    def test_message_only(self):
        err = SyncScopeError("Something failed")
        assert str(err) == "Something failed"
        assert err.details == {}

    def test_details_in_str(self):
        err = SyncScopeError("Something failed", details={"key": "door"})
        assert str(err) == "Something failed (key=door)"


class TestHierarchy:
    def test_scene_errors(self):
        for err in (
            SceneLoadError("bad"),
            ReflectionError("UdonBehaviour", "syncMethod", "missing"),
            UnknownScriptError("door"),
        ):
            assert isinstance(err, SceneError)
            assert isinstance(err, SyncScopeError)

    def test_config_errors(self):
        for err in (
            InvalidConfigError("estimation", {}, "bad"),
            InvalidPathError(Path("x"), "missing"),
        ):
            assert isinstance(err, ConfigurationError)
            assert isinstance(err, SyncScopeError)


class TestSceneLoadError:
    def test_source_recorded(self):
        err = SceneLoadError("invalid JSON", source=Path("scene.json"))
        assert err.reason == "invalid JSON"
        assert err.source == Path("scene.json")
        assert err.details["source"] == "scene.json"

    def test_without_source(self):
        assert "source" not in SceneLoadError("bad").details


class TestReflectionError:
    def test_fields(self):
        err = ReflectionError("UdonBehaviour", "syncMethod", "option index 9 out of range")
        assert err.prop == "syncMethod"
        assert "UdonBehaviour.syncMethod" in str(err)


class TestUnknownScriptError:
    def test_key(self):
        err = UnknownScriptError("door")
        assert err.key == "door"
        assert "door" in str(err)
