"""Watch notification data structures."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from kubestalk.errors import MalformedNotificationError
from kubestalk.models.tree import TreeObject


class EventType(StrEnum):
    """Type of a watch notification, as sent by the Kubernetes API."""

    ADDED = "ADDED"
    MODIFIED = "MODIFIED"
    DELETED = "DELETED"


@dataclass(frozen=True)
class ResourceIdentity:
    """Identity of one logical Kubernetes object.

    Two snapshots of the same object always yield equal identities, no matter
    which resourceVersion they carry.
    """

    api_version: str
    kind: str
    namespace: str
    name: str

    @classmethod
    def of(cls, obj: TreeObject) -> ResourceIdentity:
        metadata = obj.get("metadata")
        if not isinstance(metadata, dict):
            metadata = {}
        return cls(
            api_version=str(obj.get("apiVersion") or ""),
            kind=str(obj.get("kind") or ""),
            namespace=str(metadata.get("namespace") or ""),
            name=str(metadata.get("name") or ""),
        )

    @property
    def key(self) -> str:
        """Stable cache key, e.g. ``apps/v1, Kind=Deployment/default/my-app``."""
        return f"{self.api_version}, Kind={self.kind}/{self.namespace}/{self.name}"

    @property
    def display_name(self) -> str:
        """``namespace/name`` for namespaced objects, ``name`` otherwise."""
        if self.namespace:
            return f"{self.namespace}/{self.name}"
        return self.name


@dataclass(frozen=True)
class WatchEvent:
    """A single change notification for one object.

    ``object`` is whatever the transport decoded; it is only a usable
    snapshot if it is a dict (see :meth:`snapshot`).
    """

    type: EventType
    object: object

    def snapshot(self) -> TreeObject:
        """Return the payload as a tree object.

        Raises:
            MalformedNotificationError: if the payload is not an object.
        """
        if not isinstance(self.object, dict):
            raise MalformedNotificationError(
                f"{self.type} notification carries {type(self.object).__name__}, not an object"
            )
        return self.object
