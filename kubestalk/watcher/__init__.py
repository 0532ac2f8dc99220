"""Notification handling: filtering, caching and diffing of watch events."""

from kubestalk.watcher.dispatcher import Dispatcher
from kubestalk.watcher.watcher import Watcher, name_matches

__all__ = ["Dispatcher", "Watcher", "name_matches"]
