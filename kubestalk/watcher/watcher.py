"""Consumes one notification stream and feeds matching objects to the dispatcher.

One Watcher task runs per resource kind. Notifications of a stream are
handled strictly one after another; rendering and caching of a single
notification happen synchronously, so cancelling the task never splits them.
"""

from __future__ import annotations

import fnmatch
from collections.abc import AsyncIterable, Sequence

from kubestalk.errors import MalformedNotificationError
from kubestalk.models.events import ResourceIdentity, WatchEvent
from kubestalk.observability.logging import get_logger
from kubestalk.watcher.dispatcher import Dispatcher

_logger = get_logger("watcher.watcher")


def name_matches(name: str, pattern: str) -> bool:
    """Glob match if *pattern* contains ``*``, exact match otherwise."""
    if "*" in pattern:
        return fnmatch.fnmatchcase(name, pattern)
    return name == pattern


def _any_matches(value: str, patterns: Sequence[str]) -> bool:
    # no patterns given, so everything matches
    if not patterns:
        return True
    return any(name_matches(value, pattern) for pattern in patterns)


class Watcher:
    """Filters notifications by name and namespace before dispatching them.

    Args:
        dispatcher: Receives every notification that passes the filters.
        namespaces: Namespace patterns; empty means all namespaces.
        names:      Object name patterns; empty means all objects.
    """

    def __init__(
        self,
        dispatcher: Dispatcher,
        namespaces: Sequence[str] = (),
        names: Sequence[str] = (),
    ) -> None:
        self._dispatcher = dispatcher
        self._namespaces = tuple(namespaces)
        self._names = tuple(names)

    def matches(self, identity: ResourceIdentity) -> bool:
        return _any_matches(identity.name, self._names) and _any_matches(identity.namespace, self._namespaces)

    def handle(self, event: WatchEvent) -> bool:
        """Dispatch *event* if it is well-formed and passes the filters.

        Returns True if the event was dispatched.
        """
        try:
            snapshot = event.snapshot()
        except MalformedNotificationError as exc:
            _logger.debug("notification_skipped", event_type=str(event.type), reason=str(exc))
            return False

        if not self.matches(ResourceIdentity.of(snapshot)):
            return False

        self._dispatcher.dispatch(event.type, snapshot)
        return True

    async def watch(self, stream: AsyncIterable[WatchEvent]) -> int:
        """Consume *stream* until it ends or the task is cancelled.

        Returns the number of dispatched notifications.
        """
        dispatched = 0
        async for event in stream:
            if self.handle(event):
                dispatched += 1
        return dispatched
