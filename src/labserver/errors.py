"""
=============================================================================
APPLICATION ERRORS
=============================================================================

Exceptions raised by the lab endpoints and the file store.

Each error carries the HTTP status code that should be sent back, the same
way HTTPParseError does for transport-level failures. Handlers and the
error-handling middleware read `status_code` instead of mapping exception
types by hand.

=============================================================================
ERROR TAXONOMY
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │ Exception             │ Status │ Raised when                        │
    ├─────────────────────────────────────────────────────────────────────┤
    │ ValidationError       │  400   │ Required parameter missing/empty,  │
    │                       │        │ filename escapes the base dir      │
    │ NotFoundError         │  404   │ Something the caller named is gone │
    │  └ FileNotFoundInStore│  404   │ The requested file does not exist  │
    │ StorageError          │  500   │ Any other file-system failure      │
    │ (anything else)       │  500   │ Caught at the handler boundary     │
    └─────────────────────────────────────────────────────────────────────┘

StorageError plays the role of an "IOError" in the request flow. It is not
called IOError because that name is a builtin alias of OSError.

=============================================================================
"""

from typing import Optional


class LabServerError(Exception):
    """
    Base class for application errors.

    Args:
        message: Human-readable description (rendered escaped in HTML).
        status_code: HTTP status to answer with.
    """

    status_code: int = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(LabServerError):
    """A request parameter is missing, empty or not acceptable."""

    status_code = 400


class NotFoundError(LabServerError):
    """The named route or resource does not exist."""

    status_code = 404


class FileNotFoundInStore(NotFoundError):
    """
    The file store has no file with the given name.

    Kept distinct from StorageError so the read endpoint can answer
    404 instead of 500.
    """

    def __init__(self, filename: str):
        super().__init__(f"File not found: {filename}")
        self.filename = filename


class StorageError(LabServerError):
    """Any file-system failure other than a missing file."""

    status_code = 500
