"""Core data structures for kubestalk."""

from kubestalk.models.config import DiffConfig, LogConfig, StalkConfig, WatchConfig
from kubestalk.models.events import EventType, ResourceIdentity, WatchEvent
from kubestalk.models.tree import Scalar, TreeObject, TreeValue

__all__ = [
    "DiffConfig",
    "EventType",
    "LogConfig",
    "ResourceIdentity",
    "Scalar",
    "StalkConfig",
    "TreeObject",
    "TreeValue",
    "WatchConfig",
    "WatchEvent",
]
