"""
=============================================================================
HTTP RESPONSE BUILDING
=============================================================================

HTTPResponse holds what goes back on the wire; ResponseBuilder assembles
one fluently.

Every page this server produces is HTML, and every page is readable
cross-origin, so the common case is a single call:

    html_response(HTTPStatus.OK, "<p>Hello</p>")

which is shorthand for:

    (ResponseBuilder()
        .status(HTTPStatus.OK)
        .html("<p>Hello</p>")
        .cors("*")
        .build())

=============================================================================
WIRE FORMAT
=============================================================================

    HTTP/1.1 200 OK\r\n
    Content-Type: text/html; charset=utf-8\r\n
    Access-Control-Allow-Origin: *\r\n
    Content-Length: 12\r\n                   ← added by to_bytes()
    Date: Sun, 18 Oct 2026 14:03:22 GMT\r\n  ← added by to_bytes()
    Server: LabServer/1.0\r\n                ← added by to_bytes()
    \r\n
    <p>Hello</p>

The whole response is serialized at once and written with a single
sendall(). There is no streaming and no chunked encoding.

=============================================================================
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Union

from .status_codes import HTTPStatus


HTML_CONTENT_TYPE = "text/html; charset=utf-8"


@dataclass
class HTTPResponse:
    """A response ready to be serialized."""

    status: HTTPStatus = HTTPStatus.OK
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    version: str = "HTTP/1.1"

    @property
    def status_line(self) -> str:
        """e.g. "HTTP/1.1 404 Not Found"."""
        return f"{self.version} {int(self.status)} {self.status.phrase}"

    def set_header(self, name: str, value: str) -> "HTTPResponse":
        """Set a header, returning self for chaining."""
        self.headers[name] = value
        return self

    def has_header(self, name: str) -> bool:
        lower = name.lower()
        return any(key.lower() == lower for key in self.headers)

    @property
    def text(self) -> str:
        """Body decoded as UTF-8."""
        return self.body.decode("utf-8", errors="replace")

    def to_bytes(self, server_name: str = "LabServer/1.0") -> bytes:
        """
        Serialize to bytes for socket.sendall().

        Content-Length, Date and Server are filled in unless already set.
        """
        response_headers = dict(self.headers)

        if not self.has_header("Content-Length"):
            response_headers["Content-Length"] = str(len(self.body))
        if not self.has_header("Date"):
            response_headers["Date"] = format_http_date(datetime.now(timezone.utc))
        if not self.has_header("Server"):
            response_headers["Server"] = server_name

        lines = [self.status_line]
        for name, value in response_headers.items():
            lines.append(f"{name}: {value}")
        lines.append("")

        header_bytes = "\r\n".join(lines).encode("utf-8") + b"\r\n"
        return header_bytes + self.body


class ResponseBuilder:
    """
    Fluent builder for HTTPResponse.

    Every setter returns self; build() returns the response.
    """

    def __init__(self):
        self._status = HTTPStatus.OK
        self._headers: Dict[str, str] = {}
        self._body: bytes = b""

    def status(self, status: Union[HTTPStatus, int]) -> "ResponseBuilder":
        self._status = HTTPStatus(status)
        return self

    def html(self, html: str) -> "ResponseBuilder":
        """HTML body with the UTF-8 text/html content type."""
        self._body = html.encode("utf-8")
        self._headers["Content-Type"] = HTML_CONTENT_TYPE
        return self

    def cors(self, origin: str = "*") -> "ResponseBuilder":
        """Allow cross-origin reads from `origin`."""
        self._headers["Access-Control-Allow-Origin"] = origin
        return self

    def close_connection(self) -> "ResponseBuilder":
        self._headers["Connection"] = "close"
        return self

    def build(self) -> HTTPResponse:
        return HTTPResponse(
            status=self._status,
            headers=self._headers,
            body=self._body,
        )


def format_http_date(dt: datetime) -> str:
    """
    Format a datetime as an RFC 7231 HTTP-date, always in GMT.

        Sun, 18 Oct 2026 14:03:22 GMT

    Day and month names are spelled out here rather than taken from
    strftime, which follows the process locale.
    """
    days = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
    months = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
              "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

    return (
        f"{days[dt.weekday()]}, "
        f"{dt.day:02d} {months[dt.month - 1]} {dt.year} "
        f"{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d} GMT"
    )


def html_response(status: Union[HTTPStatus, int], html: str) -> HTTPResponse:
    """An HTML response readable from any origin."""
    return (ResponseBuilder()
        .status(status)
        .html(html)
        .cors("*")
        .build())
