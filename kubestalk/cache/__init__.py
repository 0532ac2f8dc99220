"""Cache layer for kubestalk.

Holds the last seen snapshot of every watched object so that the next
notification for it can be diffed against it.

Submodules:
    resource_cache  -- Identity-keyed, thread-safe snapshot store.
"""

from kubestalk.cache.resource_cache import CacheEntry, ResourceCache, identity_key

__all__ = ["CacheEntry", "ResourceCache", "identity_key"]
