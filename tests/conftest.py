"""Shared test fixtures: in-memory scenes built component by component."""

import pytest

from syncscope.host import (
    ArrayProperty,
    DeclaredType,
    EnumProperty,
    MemoryField,
    MemoryHost,
    ReferenceProperty,
    StringProperty,
)

SYNC_LABELS = ("None", "Continuous", "Manual")
PROXY_BASE = "UdonSharp.UdonSharpBehaviour"


class SceneBuilder:
    """Builds a one-scene MemoryHost."""

    def __init__(self):
        self.host = MemoryHost()
        self.scene = self.host.add_scene("Main", path="Assets/Scenes/Main.unity")

    def obj(self, name, parent=None):
        return self.host.add_object(self.scene, name, parent=parent)

    def asset(self, key):
        existing = self.host.assets.get(key)
        if existing is not None:
            return existing
        return self.host.add_asset(key, name=key, path=f"Assets/Scripts/{key}.asset")

    def behaviour(
        self,
        obj,
        mode="Continuous",
        selector="syncMethod",
        labels=SYNC_LABELS,
        program=None,
        synced_names=None,
        extra=(),
    ):
        """Add a primary behaviour; ``mode=None`` leaves out the selector."""
        properties = []
        if mode is not None:
            properties.append(EnumProperty(name=selector, labels=labels, index=labels.index(mode)))
        if program is not None:
            properties.append(ReferenceProperty(name="programSource", value=self.asset(program)))
        if synced_names is not None:
            properties.append(
                ArrayProperty(
                    name="syncedVariables",
                    elements=tuple(StringProperty(name="data", value=n) for n in synced_names),
                )
            )
        properties.extend(extra)
        return self.host.add_component(obj, "UdonBehaviour", namespace="VRC.Udon", properties=properties)

    def proxy(self, obj, type_name, synced_fields, plain_fields=()):
        """Add an authored proxy behaviour with tagged (synced) fields."""
        fields = [
            MemoryField(name, _declared(t), tags=("UdonSynced",)) for name, t in synced_fields
        ]
        fields.extend(MemoryField(name, _declared(t)) for name, t in plain_fields)
        return self.host.add_component(obj, type_name, fields=fields, base_types=(PROXY_BASE,))

    def platform(self, obj, type_name, namespace="VRC.SDK3.Components"):
        return self.host.add_component(obj, type_name, namespace=namespace)


def _declared(t):
    if t is None or isinstance(t, DeclaredType):
        return t
    return DeclaredType(t)


@pytest.fixture
def builder():
    """Empty one-scene builder."""
    return SceneBuilder()


@pytest.fixture
def sample_scene():
    """A small world.

    Door (Continuous, DoorProgram, 2 array vars)
    Lamp (Manual, LampProgram) with a VRCPickup
    Lamp2 (Manual, LampProgram)
    Mirror: VRCMirrorReflection only
    Counter (None, CounterProgram) under Props
    """
    b = SceneBuilder()
    door = b.obj("Door")
    b.behaviour(door, "Continuous", program="DoorProgram", synced_names=["isOpen", "angle"])

    lamp = b.obj("Lamp")
    b.behaviour(lamp, "Manual", program="LampProgram")
    b.platform(lamp, "VRCPickup")

    lamp2 = b.obj("Lamp2")
    b.behaviour(lamp2, "Manual", program="LampProgram")

    mirror = b.obj("Mirror")
    b.platform(mirror, "VRCMirrorReflection")

    props = b.obj("Props")
    counter = b.obj("Counter", parent=props)
    b.behaviour(counter, "None", program="CounterProgram")
    return b
