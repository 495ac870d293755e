"""Custom exception hierarchy for pagesync.

Failures of the remote ``find`` call are never wrapped: they reach the
caller exactly as the service raised them.  The classes below cover the
collaborators and configuration only.
"""

from __future__ import annotations


class PageSyncError(Exception):
    """Base class for all custom errors raised by pagesync."""


class ConfigurationError(PageSyncError):
    """Base class for option and configuration failures."""


class OptionsValidationError(ConfigurationError):
    """Raised when find options fail schema validation."""


class StoreError(PageSyncError):
    """Base class for item store failures."""


class MissingIdError(StoreError):
    """Raised when an item without a value for the store's id field is added."""


class InvalidQueryError(PageSyncError):
    """Raised when a query uses an operator the local matcher does not know."""
