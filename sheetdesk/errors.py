"""SheetDesk exception hierarchy.

Each pipeline stage raises its own error type so the user-facing layers
(workspace, API, CLI) can report it without guessing.
"""

from __future__ import annotations


class SheetDeskError(Exception):
    """Base exception for all SheetDesk failures."""


class ParseError(SheetDeskError):
    """Raised when an uploaded file cannot be decoded into a dataset."""


class NotFoundError(SheetDeskError):
    """Raised when an operation names a dataset or row that does not exist."""


class ValidationWarning(SheetDeskError):
    """Raised when user input is refused, e.g. a non-numeric member id."""


class PersistenceError(SheetDeskError):
    """Raised when the key-value storage cannot be read or written."""
