"""Friendly rendering of declared field types."""

from __future__ import annotations

from typing import Optional

from ..host.protocols import DeclaredType


def friendly_type_name(declared: Optional[DeclaredType]) -> str:
    """Render a declared type for display.

    Generic arity suffixes are dropped and arguments are rendered
    recursively: ``Dictionary`2[String, List`1[Int32]]`` becomes
    ``Dictionary<String, List<Int32>>``.

    Example:
        >>> friendly_type_name(DeclaredType("List`1", (DeclaredType("Int32"),)))
        'List<Int32>'
    """
    if declared is None:
        return "Unknown"

    name = declared.name
    tick = name.find("`")
    if tick >= 0:
        name = name[:tick]

    if not declared.args:
        return name

    args = ", ".join(friendly_type_name(arg) for arg in declared.args)
    return f"{name}<{args}>"
