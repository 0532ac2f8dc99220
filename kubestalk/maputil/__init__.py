"""Path parsing and path based pruning of generic object trees."""

from kubestalk.maputil.path import EmptyExpressionError, NoValidSegmentsError, Path
from kubestalk.maputil.prune import (
    EmptyPathError,
    EmptyPathSetError,
    InvalidPathError,
    prune_object,
    remove_path,
)

__all__ = [
    "EmptyExpressionError",
    "EmptyPathError",
    "EmptyPathSetError",
    "InvalidPathError",
    "NoValidSegmentsError",
    "Path",
    "prune_object",
    "remove_path",
]
