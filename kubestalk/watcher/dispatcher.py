"""Turns change notifications into diffs, using the cache for the "before" side.

ADDED     -- diff (none) → object, then store it.
MODIFIED  -- diff cached → object, then store it. Without a cached copy
             (e.g. the watch started after the object was created) this
             renders like a creation.
DELETED   -- diff object → (none), then forget it.

A failed render is logged and never keeps the cache from being updated.
"""

from __future__ import annotations

from datetime import UTC, datetime

from kubestalk.cache import ResourceCache, identity_key
from kubestalk.diff import Differ
from kubestalk.errors import EncodingError
from kubestalk.models.events import EventType
from kubestalk.models.tree import TreeObject
from kubestalk.observability.logging import get_logger

_logger = get_logger("watcher.dispatcher")


class Dispatcher:
    """Per-notification state machine over a shared :class:`ResourceCache`."""

    def __init__(self, differ: Differ, cache: ResourceCache | None = None) -> None:
        self._differ = differ
        self._cache = cache if cache is not None else ResourceCache()

    @property
    def cache(self) -> ResourceCache:
        return self._cache

    def dispatch(self, event_type: EventType, obj: TreeObject) -> None:
        key = identity_key(obj)

        match event_type:
            case EventType.ADDED:
                self._show(key, None, obj, None)
                self._cache.set(key, obj)

            case EventType.MODIFIED:
                previous, last_seen = self._cache.get(key)
                self._show(key, previous, obj, last_seen)
                self._cache.set(key, obj)

            case EventType.DELETED:
                self._show(key, obj, None, datetime.now(tz=UTC))
                self._cache.delete(key)

    def _show(
        self,
        key: str,
        previous: TreeObject | None,
        current: TreeObject | None,
        last_seen: datetime | None,
    ) -> None:
        try:
            self._differ.print_diff(previous, current, last_seen)
        except EncodingError as exc:
            _logger.error("render_failed", key=key, error=str(exc))
