"""
=============================================================================
HANDLERS
=============================================================================

Request handlers hold the application logic: each takes an HTTPRequest and
returns an HTTPResponse.

    Request ──► Router ──► handler.handle(request) ──► HTTPResponse

=============================================================================
"""

from .lab import (
    DateHandler,
    WriteFileHandler,
    ReadFileHandler,
    RouteNotFoundHandler,
    LabAPI,
)

__all__ = [
    "DateHandler",
    "WriteFileHandler",
    "ReadFileHandler",
    "RouteNotFoundHandler",
    "LabAPI",
]
