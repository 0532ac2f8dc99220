"""Error taxonomy for kubestalk.

ConfigurationError  -- invalid options; raised before any watch starts.
EncodingError       -- a snapshot could not be projected or serialised;
                       aborts a single render only.
MalformedNotificationError -- a watch payload is not a structured object;
                       the notification is skipped.
ResolveError        -- a resource kind could not be resolved via discovery.
"""

from __future__ import annotations


class StalkError(Exception):
    """Base class for all kubestalk errors."""


class ConfigurationError(StalkError):
    """Raised when user supplied options cannot be used."""


class EncodingError(StalkError):
    """Raised when a snapshot cannot be turned into diffable text."""


class MalformedNotificationError(StalkError):
    """Raised when a change notification does not carry a structured object."""


class ResolveError(StalkError):
    """Raised when a resource kind argument cannot be mapped to an API resource."""

    def __init__(self, resource: str, cause: Exception | None = None) -> None:
        message = f"unknown resource kind {resource!r}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
        self.resource = resource
        self.cause = cause
