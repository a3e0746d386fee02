"""JSON scene documents for the in-memory host.

Document layout::

    {
      "assets": {"door": {"name": "DoorProgram", "path": "Assets/Door.asset"}},
      "scenes": [
        {"name": "Main", "path": "Assets/Scenes/Main.unity", "loaded": true,
         "objects": [
           {"name": "Door", "id": 101,
            "components": [
              {"type": "UdonBehaviour", "namespace": "VRC.Udon",
               "properties": [
                 {"name": "syncMethod", "kind": "enum",
                  "labels": ["None", "Continuous", "Manual"], "index": 1},
                 {"name": "programSource", "kind": "reference", "asset": "door"}
               ]},
              {"type": "DoorController", "base_types": ["UdonSharp.UdonSharpBehaviour"],
               "fields": [{"name": "isOpen", "type": "Boolean", "tags": ["UdonSynced"]}]}
            ],
            "children": []}
         ]}
      ]
    }

``dump_scene_document`` writes the same layout back, so a document survives
a load/apply/save cycle.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

from ..exceptions import SceneLoadError
from ..logging_config import get_logger
from .memory import (
    MemoryComponent,
    MemoryField,
    MemoryHost,
    MemoryObject,
    MemoryScene,
    OpaqueProperty,
)
from .protocols import (
    ArrayProperty,
    DeclaredType,
    EnumProperty,
    Property,
    PropertyKind,
    ReferenceProperty,
    StringProperty,
)

logger = get_logger(__name__)


def load_scene(path: Path) -> MemoryHost:
    """Read a scene document from disk.

    Raises:
        SceneLoadError: If the file is missing, not JSON, or malformed
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise SceneLoadError(f"cannot read file: {e.strerror or e}", source=path)

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise SceneLoadError(f"invalid JSON at line {e.lineno}: {e.msg}", source=path)

    try:
        host = load_scene_document(data)
    except SceneLoadError as e:
        raise SceneLoadError(e.reason, source=path)
    except (TypeError, ValueError) as e:
        raise SceneLoadError(f"malformed document: {e}", source=path)

    logger.debug(f"Loaded {len(host.scenes)} scene(s) from {path}")
    return host


def save_scene(host: MemoryHost, path: Path) -> None:
    """Write the host's scenes back to disk as a scene document."""
    Path(path).write_text(json.dumps(dump_scene_document(host), indent=2) + "\n", encoding="utf-8")
    for scene in host.scenes:
        scene.dirty = False


def load_scene_document(data: Any) -> MemoryHost:
    """Build a MemoryHost from a parsed scene document."""
    if not isinstance(data, dict):
        raise SceneLoadError("document root must be an object")

    scenes = data.get("scenes")
    if not isinstance(scenes, list):
        raise SceneLoadError("'scenes' must be a list")

    host = MemoryHost()

    assets = data.get("assets", {})
    if not isinstance(assets, dict):
        raise SceneLoadError("'assets' must be an object")
    for key, spec in assets.items():
        if not isinstance(spec, dict):
            raise SceneLoadError(f"asset '{key}' must be an object")
        host.add_asset(key, name=str(spec.get("name", key)), path=str(spec.get("path", "")))

    host.reserve_ids(_explicit_ids(scenes))

    for scene_spec in scenes:
        _require(scene_spec, "name", "scene")
        scene = host.add_scene(
            scene_spec["name"],
            path=str(scene_spec.get("path", "")),
            loaded=bool(scene_spec.get("loaded", True)),
        )
        for obj_spec in scene_spec.get("objects", []):
            _load_object(host, scene, obj_spec, parent=None)

    return host


def _explicit_ids(specs: Any) -> list[int]:
    ids = []
    for spec in specs if isinstance(specs, list) else []:
        if not isinstance(spec, dict):
            continue
        if isinstance(spec.get("id"), int):
            ids.append(spec["id"])
        ids.extend(_explicit_ids(spec.get("objects", [])))
        ids.extend(_explicit_ids(spec.get("children", [])))
    return ids


def _load_object(
    host: MemoryHost, scene: MemoryScene, spec: Any, parent: Optional[MemoryObject]
) -> None:
    _require(spec, "name", "object")
    instance_id = spec.get("id")
    if instance_id is not None and not isinstance(instance_id, int):
        raise SceneLoadError(f"object '{spec['name']}' has a non-integer id")

    try:
        obj = host.add_object(scene, spec["name"], parent=parent, instance_id=instance_id)
    except ValueError:
        raise SceneLoadError(f"object '{spec['name']}' reuses id {instance_id}") from None

    for component_spec in spec.get("components", []):
        _require(component_spec, "type", f"component on '{obj.name}'")
        host.add_component(
            obj,
            component_spec["type"],
            namespace=component_spec.get("namespace"),
            properties=[
                _load_property(host, p) for p in component_spec.get("properties", [])
            ],
            fields=[_load_field(f) for f in component_spec.get("fields", [])],
            base_types=component_spec.get("base_types", []),
            editable=bool(component_spec.get("editable", True)),
            hidden=bool(component_spec.get("hidden", False)),
        )

    for child_spec in spec.get("children", []):
        _load_object(host, scene, child_spec, parent=obj)


def _load_property(host: MemoryHost, spec: Any, default_name: str = "data") -> Property:
    if isinstance(spec, str):
        return StringProperty(name=default_name, value=spec)
    if not isinstance(spec, dict):
        raise SceneLoadError(f"property must be an object or string, got {type(spec).__name__}")

    name = spec.get("name", default_name)
    kind = spec.get("kind", "other")
    visible = bool(spec.get("visible", True))

    if kind == "enum":
        labels = spec.get("labels", [])
        if not isinstance(labels, list):
            raise SceneLoadError(f"enum property '{name}' needs a list of labels")
        return EnumProperty(
            name=name,
            visible=visible,
            labels=tuple(str(label) for label in labels),
            index=int(spec.get("index", 0)),
        )
    if kind == "array":
        return ArrayProperty(
            name=name,
            visible=visible,
            elements=tuple(_load_property(host, item) for item in spec.get("items", [])),
        )
    if kind == "string":
        return StringProperty(name=name, visible=visible, value=str(spec.get("value", "")))
    if kind == "reference":
        key = spec.get("asset")
        if key is not None and key not in host.assets:
            raise SceneLoadError(f"property '{name}' references unknown asset '{key}'")
        return ReferenceProperty(
            name=name, visible=visible, value=host.assets[key] if key is not None else None
        )
    if kind == "other":
        return OpaqueProperty(name=name, visible=visible, value=spec.get("value"))

    raise SceneLoadError(f"property '{name}' has unknown kind '{kind}'")


def _load_field(spec: Any) -> MemoryField:
    _require(spec, "name", "field")
    return MemoryField(
        name=spec["name"],
        declared_type=_load_type(spec.get("type")),
        tags=tuple(spec.get("tags", [])),
    )


def _load_type(spec: Any) -> Optional[DeclaredType]:
    if spec is None:
        return None
    if isinstance(spec, str):
        return DeclaredType(spec)
    if isinstance(spec, dict) and "name" in spec:
        return DeclaredType(spec["name"], tuple(_load_type(a) for a in spec.get("args", [])))
    raise SceneLoadError(f"invalid field type: {spec!r}")


def _require(spec: Any, key: str, what: str) -> None:
    if not isinstance(spec, dict) or key not in spec:
        raise SceneLoadError(f"{what} is missing '{key}'")


# -- dumping --


def dump_scene_document(host: MemoryHost) -> dict:
    """Serialise a MemoryHost back into the document layout."""
    return {
        "assets": {
            key: {"name": asset.name, "path": asset.path} for key, asset in host.assets.items()
        },
        "scenes": [
            {
                "name": scene.name,
                "path": scene.path,
                "loaded": scene.loaded,
                "objects": [_dump_object(obj) for obj in scene.roots],
            }
            for scene in host.scenes
        ],
    }


def _dump_object(obj: MemoryObject) -> dict:
    return {
        "name": obj.name,
        "id": obj.instance_id,
        "components": [_dump_component(c) for c in obj.components if not c.destroyed],
        "children": [_dump_object(child) for child in obj.children],
    }


def _dump_component(component: MemoryComponent) -> dict:
    data: dict[str, Any] = {"type": component.type_name}
    if component.namespace:
        data["namespace"] = component.namespace
    if component.base_types:
        data["base_types"] = list(component.base_types)
    if not component.editable:
        data["editable"] = False
    if component.hidden:
        data["hidden"] = True
    if component.properties:
        data["properties"] = [_dump_property(p) for p in component.properties.values()]
    if component.fields:
        data["fields"] = [
            {"name": f.name, "type": _dump_type(f.declared_type), "tags": list(f.tags)}
            for f in component.fields
        ]
    return data


def _dump_property(prop: Property) -> dict:
    data: dict[str, Any] = {"name": prop.name, "kind": prop.kind.value}
    if not prop.visible:
        data["visible"] = False

    if isinstance(prop, EnumProperty):
        data["labels"] = list(prop.labels)
        data["index"] = prop.index
    elif isinstance(prop, ArrayProperty):
        data["items"] = [_dump_property(e) for e in prop.elements]
    elif isinstance(prop, StringProperty):
        data["value"] = prop.value
    elif isinstance(prop, ReferenceProperty):
        data["asset"] = prop.value.asset_id if prop.value is not None else None
    elif isinstance(prop, OpaqueProperty):
        data["kind"] = PropertyKind.OTHER.value
        data["value"] = prop.value
    return data


def _dump_type(declared: Optional[DeclaredType]) -> Any:
    if declared is None:
        return None
    if not declared.args:
        return declared.name
    return {"name": declared.name, "args": [_dump_type(a) for a in declared.args]}
