"""Sources of watch notifications.

Submodules:
    kubernetes -- Dynamic-client watches against a live cluster.
    stdin      -- YAML/JSON documents read from a stream.
"""

from kubestalk.collector.stdin import read_documents, stdin_events

__all__ = ["read_documents", "stdin_events"]
