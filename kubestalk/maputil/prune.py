"""Pure tree transformations: remove one path, or keep only a set of paths.

Neither function mutates its input. Untouched subtrees are shared between
input and output, so callers that intend to mutate the result must copy it
first (the resource cache only ever hands out copies).
"""

from __future__ import annotations

from collections.abc import Sequence

from kubestalk.maputil.path import Path
from kubestalk.models.tree import TreeObject, TreeValue


class EmptyPathError(ValueError):
    """Raised when remove_path() is given a path without segments."""

    def __init__(self) -> None:
        super().__init__("path cannot be empty")


class EmptyPathSetError(ValueError):
    """Raised when prune_object() is given no paths at all."""

    def __init__(self) -> None:
        super().__init__("paths cannot be empty")


class InvalidPathError(ValueError):
    """Raised when one of the paths given to prune_object() is empty."""

    def __init__(self, index: int) -> None:
        super().__init__(f"path {index + 1} is empty")
        self.index = index


def remove_path(tree: TreeObject, path: Path) -> TreeObject:
    """Return a copy of *tree* without the value addressed by *path*.

    Parents emptied by the removal are removed as well, so removing
    ``a.b`` from ``{"a": {"b": 1}}`` yields ``{}``. An empty object on the
    path is dropped too, even when it did not contain the last segment.
    Missing keys and non-object intermediate values leave the tree unchanged.

    Raises:
        EmptyPathError: *path* has no segments.
    """
    if not path:
        raise EmptyPathError()

    head = path.head()
    tail = path.tail()

    if head not in tree:
        return tree

    if not tail:
        return {key: value for key, value in tree.items() if key != head}

    match tree[head]:
        case dict() as child:
            pruned = remove_path(child, tail)
        case _:
            # arrays and scalars cannot be descended into
            return tree

    # an empty child is dropped even if nothing was removed from it
    if not pruned:
        return {key: value for key, value in tree.items() if key != head}

    if pruned is child:
        return tree

    result = dict(tree)
    result[head] = pruned
    return result


def prune_object(tree: TreeObject, paths: Sequence[Path]) -> TreeObject:
    """Return a copy of *tree* that only contains values reachable by *paths*.

    A path ending at a key keeps that key's whole value, even if longer
    paths with the same prefix were given too (``metadata`` wins over
    ``metadata.name``). Non-object values are kept whole when any path
    reaches them, since they cannot be filtered any further.

    Raises:
        EmptyPathSetError: *paths* is empty.
        InvalidPathError: one of the paths has no segments.
    """
    if not paths:
        raise EmptyPathSetError()

    for index, path in enumerate(paths):
        if not path:
            raise InvalidPathError(index)

    result: TreeObject = {}

    for key, value in tree.items():
        sub_paths = _sub_paths(paths, key)

        # no path goes through this key
        if not sub_paths:
            continue

        pruned = _prune_value(value, sub_paths)
        result[key] = pruned

    return result


def _prune_value(value: TreeValue, sub_paths: list[Path]) -> TreeValue:
    # a path that ended exactly here keeps everything below
    if any(not sub_path for sub_path in sub_paths):
        return value

    match value:
        case dict():
            return prune_object(value, sub_paths)
        case _:
            # e.g. "metadata.name.foo" still keeps metadata.name
            return value


def _sub_paths(paths: Sequence[Path], head: str) -> list[Path]:
    """Tails of all *paths* starting with *head*."""
    return [path.tail() for path in paths if path.head() == head]
