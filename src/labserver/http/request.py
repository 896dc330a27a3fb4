"""
=============================================================================
HTTP REQUEST PARSING
=============================================================================

Turns the bytes of one request into an HTTPRequest.

    GET /labs/3/getDate/?name=Joey HTTP/1.1\r\n     ← request line
    Host: localhost:3000\r\n                         ← headers
    \r\n
    (body, read for framing and otherwise ignored)

=============================================================================
PATH AND QUERY
=============================================================================

The path is kept exactly as sent, percent-escapes included, and routes
are matched against it literally:

    /labs/3/getDate/        → getDate
    /labs/3/getDate%2F      → no route (404)
    /labs/3/readFile/a%2Fb  → readFile; the handler decodes "a%2Fb" itself

The query string is decoded:

    "?name=Joey"              {"name": ["Joey"]}
    "?name="                  {"name": [""]}          blank values kept
    "?name=a&name=b"          {"name": ["a", "b"]}    get_query → "b"
    "?text=hello+world"       {"text": ["hello world"]}

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, List, Tuple
from urllib.parse import parse_qs, urlsplit


class HTTPParseError(Exception):
    """
    A request that cannot be parsed, with the status to answer:

        400  malformed request line, headers or body framing
        405  method token we do not know
        413  over max_request_size
        505  anything but HTTP/1.0 or HTTP/1.1
    """

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code


@dataclass
class HTTPRequest:
    """
    A parsed request.

    Attributes:
        path:           Raw path, no query string, escapes not decoded
        headers:        Names lower-cased
        query_params:   Decoded name → values in order of appearance
        path_params:    Set by the router ("rest" for prefix routes)
    """

    method: str
    path: str
    version: str = "HTTP/1.1"
    headers: Dict[str, str] = field(default_factory=dict)
    query_params: Dict[str, List[str]] = field(default_factory=dict)
    body: bytes = b""
    path_params: Dict[str, str] = field(default_factory=dict)
    client_address: Tuple[str, int] = ("", 0)

    @property
    def user_agent(self) -> str:
        return self.get_header("user-agent")

    @property
    def is_keep_alive(self) -> bool:
        """HTTP/1.1 stays open unless told to close; HTTP/1.0 the reverse."""
        connection = self.get_header("connection").lower()
        if self.version == "HTTP/1.0":
            return connection == "keep-alive"
        return connection != "close"

    def get_header(self, name: str, default: str = "") -> str:
        return self.headers.get(name.lower(), default)

    def get_query(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """
        Last value given for `name`, possibly "".

            ?name=a&name=b   →   "b"
        """
        values = self.query_params.get(name)
        return values[-1] if values else default


class RequestParser:
    """
    bytes → HTTPRequest, or HTTPParseError carrying the status to send.

    Args:
        max_request_size: Anything larger is refused with 413.
    """

    METHODS = frozenset({
        "GET", "HEAD", "POST", "PUT", "DELETE",
        "PATCH", "OPTIONS", "TRACE", "CONNECT",
    })
    VERSIONS = ("HTTP/1.0", "HTTP/1.1")

    def __init__(self, max_request_size: int = 10 * 1024 * 1024):
        self.max_request_size = max_request_size

    def parse(self, data: bytes, client_address: Tuple[str, int] = ("", 0)) -> HTTPRequest:
        if len(data) > self.max_request_size:
            raise HTTPParseError(f"Request too large: {len(data)} bytes", status_code=413)

        head, sep, body = data.partition(b"\r\n\r\n")
        if not sep:
            raise HTTPParseError("Incomplete request: no header terminator")

        request_line, *header_lines = head.decode("utf-8", errors="replace").split("\r\n")
        method, target, version = self._split_request_line(request_line)
        headers = self._headers(header_lines)

        length_header = headers.get("content-length", "0")
        if not length_header.isdigit():
            raise HTTPParseError(f"Invalid Content-Length: {length_header}")
        length = int(length_header)
        if len(body) < length:
            raise HTTPParseError(f"Incomplete body: expected {length} bytes, got {len(body)}")

        url = urlsplit(target)
        return HTTPRequest(
            method=method,
            path=url.path or "/",
            version=version,
            headers=headers,
            query_params=parse_qs(url.query, keep_blank_values=True),
            body=body[:length],
            client_address=client_address,
        )

    def _split_request_line(self, line: str) -> Tuple[str, str, str]:
        parts = line.split(" ")
        if len(parts) != 3 or not all(parts) or not parts[2].startswith("HTTP/"):
            raise HTTPParseError(f"Invalid request line: {line}")

        method, target, version = parts
        if method not in self.METHODS:
            raise HTTPParseError(f"Invalid method: {method}", status_code=405)
        if version not in self.VERSIONS:
            raise HTTPParseError(f"Unsupported HTTP version: {version}", status_code=505)
        return method, target, version

    @staticmethod
    def _headers(lines: List[str]) -> Dict[str, str]:
        """
        Lower-cased names; repeats joined with ", "; indented lines continue
        the previous header; lines without a colon are dropped.
        """
        headers: Dict[str, str] = {}
        last = None

        for line in lines:
            if line[:1] in (" ", "\t"):
                if last is not None:
                    headers[last] += " " + line.strip()
                continue

            name, colon, value = line.partition(":")
            name = name.strip().lower()
            if not colon or not name:
                continue

            value = value.strip()
            headers[name] = f"{headers[name]}, {value}" if name in headers else value
            last = name

        return headers
