"""Generic tree values as decoded from Kubernetes JSON/YAML payloads.

A tree value is one of:

* an object  -- ``dict[str, TreeValue]`` (key order is preserved)
* an array   -- ``list[TreeValue]``
* a scalar   -- ``str | int | float | bool | None``

Projection code only ever descends into objects; arrays and scalars are
opaque leaves.
"""

from __future__ import annotations

from typing import TypeAlias

Scalar: TypeAlias = str | int | float | bool | None
TreeValue: TypeAlias = "dict[str, TreeValue] | list[TreeValue] | Scalar"
TreeObject: TypeAlias = "dict[str, TreeValue]"


def is_object(value: object) -> bool:
    """Return True if *value* is the object variant of a tree value."""
    return isinstance(value, dict)


def deep_copy(value: TreeValue) -> TreeValue:
    """Return an independent copy of *value*.

    Faster than :func:`copy.deepcopy` for plain JSON-shaped data because it
    skips the memo bookkeeping; scalars are immutable and returned as-is.
    """
    match value:
        case dict():
            return {key: deep_copy(child) for key, child in value.items()}
        case list():
            return [deep_copy(item) for item in value]
        case _:
            return value
