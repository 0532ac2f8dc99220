"""In-memory store of the last seen snapshot per object.

Entries are created on ADDED, replaced on MODIFIED and dropped on DELETED.
There is no expiry; the cache lives as long as the watch does.

Stored snapshots are private copies and are never mutated after being
stored, so copying out of the cache happens outside the lock. The lock
only guards the dictionary itself, which keeps concurrent watch streams
for different objects from waiting on each other's copies.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import UTC, datetime

from kubestalk.models.events import ResourceIdentity
from kubestalk.models.tree import TreeObject, deep_copy
from kubestalk.observability.logging import get_logger

_logger = get_logger("cache.resource_cache")


def identity_key(obj: TreeObject) -> str:
    """Derive the cache key of *obj* from its apiVersion, kind, namespace and name."""
    return ResourceIdentity.of(obj).key


@dataclass(frozen=True)
class CacheEntry:
    """A stored snapshot and the time it was stored."""

    resource: TreeObject
    last_seen: datetime


class ResourceCache:
    """Thread-safe, identity-keyed snapshot cache.

    All methods accept either a precomputed key or the object itself; in the
    latter case the key is derived with :func:`identity_key`.
    """

    def __init__(self) -> None:
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, key_or_obj: str | TreeObject) -> tuple[TreeObject | None, datetime | None]:
        """Return a copy of the stored snapshot and its timestamp.

        Returns ``(None, None)`` if nothing is stored under the key.
        """
        key = self._key(key_or_obj)
        with self._lock:
            entry = self._entries.get(key)

        if entry is None:
            _logger.debug("cache_miss", key=key)
            return None, None

        return deep_copy(entry.resource), entry.last_seen  # type: ignore[return-value]

    def set(self, key_or_obj: str | TreeObject, obj: TreeObject | None = None) -> None:
        """Store a copy of *obj* with the current time, replacing any prior entry.

        ``cache.set(obj)`` is shorthand for ``cache.set(identity_key(obj), obj)``.
        """
        if obj is None:
            if isinstance(key_or_obj, str):
                raise TypeError("set() with a key requires an object")
            obj = key_or_obj

        key = self._key(key_or_obj)
        entry = CacheEntry(resource=deep_copy(obj), last_seen=datetime.now(tz=UTC))  # type: ignore[arg-type]
        with self._lock:
            self._entries[key] = entry

    def delete(self, key_or_obj: str | TreeObject) -> None:
        """Drop the entry for the key; no-op if there is none."""
        key = self._key(key_or_obj)
        with self._lock:
            self._entries.pop(key, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    @staticmethod
    def _key(key_or_obj: str | TreeObject) -> str:
        if isinstance(key_or_obj, str):
            return key_or_obj
        return identity_key(key_or_obj)
