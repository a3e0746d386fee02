"""Tests for the in-memory host and scene documents."""

import json

import pytest

from syncscope.exceptions import ReflectionError, SceneLoadError
from syncscope.host import (
    ArrayProperty,
    DeclaredType,
    EnumProperty,
    Host,
    MemoryHost,
    ReferenceProperty,
    dump_scene_document,
    load_scene,
    load_scene_document,
    save_scene,
)
from syncscope.profiler import scan

DOCUMENT = {
    "assets": {"door": {"name": "DoorProgram", "path": "Assets/Door.asset"}},
    "scenes": [
        {
            "name": "Main",
            "path": "Assets/Scenes/Main.unity",
            "objects": [
                {
                    "name": "World",
                    "id": 10,
                    "children": [
                        {
                            "name": "Door",
                            "id": 11,
                            "components": [
                                {
                                    "type": "UdonBehaviour",
                                    "namespace": "VRC.Udon",
                                    "properties": [
                                        {
                                            "name": "syncMethod",
                                            "kind": "enum",
                                            "labels": ["None", "Continuous", "Manual"],
                                            "index": 1,
                                        },
                                        {"name": "programSource", "kind": "reference", "asset": "door"},
                                    ],
                                },
                                {
                                    "type": "DoorController",
                                    "base_types": ["UdonSharp.UdonSharpBehaviour"],
                                    "fields": [
                                        {"name": "isOpen", "type": "Boolean", "tags": ["UdonSynced"]},
                                        {
                                            "name": "history",
                                            "type": {"name": "List`1", "args": ["Int32"]},
                                            "tags": ["UdonSharp.UdonSyncedAttribute"],
                                        },
                                    ],
                                },
                                {"type": "VRCPickup", "namespace": "VRC.SDK3.Components"},
                            ],
                        }
                    ],
                }
            ],
        },
        {
            "name": "Unloaded",
            "loaded": False,
            "objects": [{"name": "Far", "components": [{"type": "UdonBehaviour"}]}],
        },
    ],
}


class TestMemoryHost:
    def test_is_a_host(self):
        assert isinstance(MemoryHost(), Host)

    def test_list_components_filters(self, builder):
        obj = builder.obj("Door")
        visible = builder.behaviour(obj)
        builder.host.add_component(obj, "UdonBehaviour", hidden=True)
        builder.host.add_component(obj, "UdonBehaviour", editable=False)
        gone = builder.behaviour(obj)
        gone.destroyed = True
        unloaded = builder.host.add_scene("Other", loaded=False)
        builder.host.add_component(builder.host.add_object(unloaded, "Far"), "UdonBehaviour")

        assert builder.host.list_components() == [visible]

    def test_enumerate_properties_is_restartable(self, builder):
        c = builder.behaviour(builder.obj("Door"), program="P")
        first = [p.name for p in builder.host.enumerate_properties(c)]
        second = [p.name for p in builder.host.enumerate_properties(c)]
        assert first == second == ["syncMethod", "programSource"]

    def test_staged_write_applies_on_commit(self, builder):
        c = builder.behaviour(builder.obj("Door"), "None")
        prop = builder.host.get_named_property(c, ["syncMethod"])
        builder.host.set_enumerated_value(prop, 2)
        assert c.properties["syncMethod"].index == 0

        assert builder.host.commit(c) is True
        assert c.properties["syncMethod"].selected_label == "Manual"
        assert builder.host.commit(c) is False

    def test_unbound_or_out_of_range_write(self, builder):
        c = builder.behaviour(builder.obj("Door"), "None")
        with pytest.raises(ReflectionError):
            builder.host.set_enumerated_value(EnumProperty(name="syncMethod", labels=("None",)), 0)
        prop = builder.host.get_named_property(c, ["syncMethod"])
        with pytest.raises(ReflectionError, match="out of range"):
            builder.host.set_enumerated_value(prop, 9)

    def test_reversible_edit_without_change_records_nothing(self, builder):
        c = builder.behaviour(builder.obj("Door"), "None")
        with builder.host.reversible_edit(c, "noop"):
            pass
        assert builder.host.undo_count == 0
        assert builder.host.dirty_scenes() == []

    def test_automatic_ids_skip_explicit_ones(self, builder):
        builder.host.reserve_ids([1, 2])
        assert builder.obj("A").handle == 3
        assert builder.host.add_object(builder.scene, "B", instance_id=1).handle == 1

    def test_duplicate_explicit_id_rejected(self, builder):
        builder.host.add_object(builder.scene, "A", instance_id=5)
        with pytest.raises(ValueError, match="duplicate object id 5"):
            builder.host.add_object(builder.scene, "B", instance_id=5)

    def test_commit_marks_scene_dirty_without_change(self, builder):
        c = builder.behaviour(builder.obj("Door"), "None")
        prop = builder.host.get_named_property(c, ["syncMethod"])
        builder.host.set_enumerated_value(prop, 0)

        assert builder.host.commit(c) is False
        assert builder.host.dirty_scenes() == [builder.scene]

    def test_find_proxy_and_tagged_fields(self, builder):
        obj = builder.obj("Door")
        c = builder.behaviour(obj)
        proxy = builder.proxy(obj, "DoorController", [("isOpen", "Boolean")], [("speed", "Single")])

        assert builder.host.find_proxy(c, "UdonSharp.UdonSharpBehaviour") is proxy
        fields = builder.host.find_tagged_fields(proxy, "UdonSharp.UdonSyncedAttribute")
        assert [f.name for f in fields] == ["isOpen"]
        assert fields[0].declared_type == DeclaredType("Boolean")


class TestLoader:
    def test_load_document(self):
        host = load_scene_document(DOCUMENT)
        assert [s.name for s in host.scenes] == ["Main", "Unloaded"]

        result = scan(host)
        assert result.total_behaviours == 1
        assert result.total_platform_components == 1
        door = result.objects[0]
        assert door.path == "World/Door"
        assert door.handle == 11

        behaviour = door.components[0]
        assert behaviour.sync_mode == "Continuous"
        assert [str(v) for v in behaviour.synced_variables] == ["isOpen : Boolean", "history : List<Int32>"]
        assert behaviour.program_source.name == "DoorProgram"
        assert behaviour.program_source_path == "Assets/Door.asset"

    def test_property_kinds(self):
        host = load_scene_document(DOCUMENT)
        component = host.scenes[0].roots[0].children[0].components[0]
        assert isinstance(component.properties["syncMethod"], EnumProperty)
        assert isinstance(component.properties["programSource"], ReferenceProperty)

    def test_array_items(self):
        host = load_scene_document({
            "scenes": [{
                "name": "S",
                "objects": [{
                    "name": "O",
                    "components": [{
                        "type": "UdonBehaviour",
                        "properties": [{"name": "syncedVariables", "kind": "array", "items": ["a", "b"]}],
                    }],
                }],
            }],
        })
        prop = host.scenes[0].roots[0].components[0].properties["syncedVariables"]
        assert isinstance(prop, ArrayProperty)
        assert [e.value for e in prop.elements] == ["a", "b"]

    @pytest.mark.parametrize(
        "document,message",
        [
            ([], "root must be an object"),
            ({}, "'scenes' must be a list"),
            ({"scenes": [{}]}, "missing 'name'"),
            ({"scenes": [{"name": "S", "objects": [{"name": "O", "components": [{}]}]}]}, "missing 'type'"),
            (
                {"scenes": [{"name": "S", "objects": [{"name": "O", "components": [
                    {"type": "T", "properties": [{"name": "p", "kind": "weird"}]}]}]}]},
                "unknown kind",
            ),
            (
                {"scenes": [{"name": "S", "objects": [{"name": "O", "components": [
                    {"type": "T", "properties": [{"name": "p", "kind": "reference", "asset": "x"}]}]}]}]},
                "unknown asset",
            ),
        ],
    )
    def test_malformed_documents(self, document, message):
        with pytest.raises(SceneLoadError) as exc_info:
            load_scene_document(document)
        assert message in exc_info.value.reason

    def test_load_scene_file_errors(self, tmp_path):
        with pytest.raises(SceneLoadError, match="Cannot load scene document"):
            load_scene(tmp_path / "missing.json")

        bad = tmp_path / "bad.json"
        bad.write_text("{not json", encoding="utf-8")
        with pytest.raises(SceneLoadError) as exc_info:
            load_scene(bad)
        assert "invalid JSON" in exc_info.value.reason
        assert exc_info.value.source == bad

    def test_save_and_reload(self, tmp_path):
        path = tmp_path / "scene.json"
        path.write_text(json.dumps(DOCUMENT), encoding="utf-8")
        host = load_scene(path)

        door = host.scenes[0].roots[0].children[0].components[0]
        prop = host.get_named_property(door, ["syncMethod"])
        with host.reversible_edit(door, "edit"):
            host.set_enumerated_value(prop, 2)
            host.commit(door)
        assert host.dirty_scenes() == [host.scenes[0]]

        out = tmp_path / "out.json"
        save_scene(host, out)
        assert host.dirty_scenes() == []

        reloaded = load_scene(out)
        assert scan(reloaded).objects[0].components[0].sync_mode == "Manual"
        assert dump_scene_document(reloaded) == dump_scene_document(host)


class TestObjectIds:
    def _doc(self, *objects):
        return {"scenes": [{"name": "S", "objects": list(objects)}]}

    def test_later_explicit_id_does_not_merge_objects(self):
        host = load_scene_document(self._doc(
            {"name": "A", "components": [{"type": "UdonBehaviour"}]},
            {"name": "B", "id": 1, "components": [{"type": "UdonBehaviour"}]},
        ))

        result = scan(host)
        assert [node.name for node in result.objects] == ["A", "B"]
        assert all(len(node.components) == 1 for node in result.objects)
        assert result.objects[1].handle == 1

    def test_nested_explicit_ids_are_reserved(self):
        host = load_scene_document(self._doc(
            {"name": "A"},
            {"name": "Parent", "id": 7, "children": [{"name": "Child", "id": 2}]},
        ))
        handles = [obj.handle for obj in host.iter_objects()]
        assert len(set(handles)) == 3
        assert handles[0] not in (2, 7)

    def test_duplicate_ids_rejected(self):
        with pytest.raises(SceneLoadError) as exc_info:
            load_scene_document(self._doc({"name": "A", "id": 3}, {"name": "B", "id": 3}))
        assert exc_info.value.reason == "object 'B' reuses id 3"
