"""
=============================================================================
HTTP PROTOCOL LAYER
=============================================================================

Translates between raw bytes on a socket and structured HTTP messages.

    ┌─────────────────────────────────────────────────────────────────────┐
    │ request.py       bytes → HTTPRequest (RequestParser)                │
    │ response.py      HTTPResponse → bytes (ResponseBuilder)             │
    │ router.py        path → handler (exact and prefix routes)           │
    │ status_codes.py  HTTPStatus enum with reason phrases                │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .request import HTTPRequest, RequestParser, HTTPParseError
from .response import HTTPResponse, ResponseBuilder, html_response
from .router import Router, Route, RouteMatch, RouteType
from .status_codes import HTTPStatus

__all__ = [
    "HTTPRequest",
    "RequestParser",
    "HTTPParseError",
    "HTTPResponse",
    "ResponseBuilder",
    "html_response",
    "Router",
    "Route",
    "RouteMatch",
    "RouteType",
    "HTTPStatus",
]
