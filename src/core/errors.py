"""Error taxonomy shared by the core and adapters."""

from __future__ import annotations


class SpamscopeError(Exception):
    """Base class for all spamscope errors."""


class InvalidInput(SpamscopeError):
    """Client-caused error, e.g. blank text submitted for classification."""


class PersistenceError(SpamscopeError):
    """The history store could not be reached or the write failed."""


class NotificationError(SpamscopeError):
    """Mail transport failure. Always absorbed, never surfaced to callers."""
