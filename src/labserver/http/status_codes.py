"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The subset of RFC 7231 status codes this server can send.

    ┌────────┬──────────────────────────────────────────────────────────┐
    │  2xx   │ 200 OK               - Page rendered                     │
    ├────────┼──────────────────────────────────────────────────────────┤
    │  4xx   │ 400 Bad Request      - Missing text/filename, bad path   │
    │        │ 404 Not Found        - Unknown route, missing file       │
    │        │ 405 Method Not Allowed - Unknown HTTP method             │
    │        │ 408 Request Timeout  - Client too slow to send request   │
    │        │ 413 Payload Too Large - Request over the framing limit   │
    ├────────┼──────────────────────────────────────────────────────────┤
    │  5xx   │ 500 Internal Error   - Storage failure, handler bug      │
    │        │ 503 Service Unavailable - Worker queue full              │
    │        │ 505 HTTP Version Not Supported                           │
    └────────┴──────────────────────────────────────────────────────────┘

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes and reason phrases.

    IntEnum, so members compare equal to plain integers:

        >>> HTTPStatus.OK == 200
        True
        >>> HTTPStatus.NOT_FOUND.phrase
        'Not Found'
    """

    OK = 200

    BAD_REQUEST = 400
    NOT_FOUND = 404
    METHOD_NOT_ALLOWED = 405
    REQUEST_TIMEOUT = 408
    PAYLOAD_TOO_LARGE = 413

    INTERNAL_SERVER_ERROR = 500
    SERVICE_UNAVAILABLE = 503
    HTTP_VERSION_NOT_SUPPORTED = 505

    @property
    def phrase(self) -> str:
        """
        Reason phrase for the status line.

            HTTP/1.1 404 Not Found
                     ─── ─────────
                      │      └── phrase
                      └───────── code
        """
        return _STATUS_PHRASES.get(self, "Unknown")

    @property
    def is_error(self) -> bool:
        """4xx or 5xx. Used to pick the log level for access lines."""
        return self >= 400


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.BAD_REQUEST: "Bad Request",
    HTTPStatus.NOT_FOUND: "Not Found",
    HTTPStatus.METHOD_NOT_ALLOWED: "Method Not Allowed",
    HTTPStatus.REQUEST_TIMEOUT: "Request Timeout",
    HTTPStatus.PAYLOAD_TOO_LARGE: "Payload Too Large",
    HTTPStatus.INTERNAL_SERVER_ERROR: "Internal Server Error",
    HTTPStatus.SERVICE_UNAVAILABLE: "Service Unavailable",
    HTTPStatus.HTTP_VERSION_NOT_SUPPORTED: "HTTP Version Not Supported",
}


def phrase_for(code: int) -> str:
    """Reason phrase for any integer code, "Unknown" if we never send it."""
    try:
        return HTTPStatus(code).phrase
    except ValueError:
        return "Unknown"
