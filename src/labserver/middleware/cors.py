"""
=============================================================================
CORS MIDDLEWARE
=============================================================================

Makes every page readable from scripts on other origins.

    Browser at http://student.example        Server at http://localhost:3000
        fetch("/labs/3/getDate/?name=Joey")
                          ─────────────────►
                          ◄─────────────────
                          Access-Control-Allow-Origin: *

Without the header the browser still sends the request, but refuses to
hand the response to the calling script.

The lab endpoints are plain GETs with no custom headers, which browsers
send without a preflight. OPTIONS is therefore not intercepted here: it is
routed like any other method.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Optional, List

from .base import Middleware, NextHandler
from ..http.request import HTTPRequest
from ..http.response import HTTPResponse


@dataclass
class CORSConfig:
    """
    Attributes:
        allow_origin: Value of Access-Control-Allow-Origin.
        expose_headers: Response headers scripts may read beyond the
                        CORS-safelisted ones.
    """

    allow_origin: str = "*"
    expose_headers: List[str] = field(default_factory=lambda: ["X-Request-ID"])


class CORSMiddleware(Middleware):
    """
    Adds CORS headers to every response passing through.

    Headers already set by a handler are left alone.
    """

    def __init__(self, config: Optional[CORSConfig] = None):
        self.config = config or CORSConfig()

    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        response = next(request)
        self._add_cors_headers(response)
        return response

    def _add_cors_headers(self, response: HTTPResponse) -> None:
        if not response.has_header("Access-Control-Allow-Origin"):
            response.headers["Access-Control-Allow-Origin"] = self.config.allow_origin

        if self.config.expose_headers and not response.has_header("Access-Control-Expose-Headers"):
            response.headers["Access-Control-Expose-Headers"] = ", ".join(
                self.config.expose_headers
            )
