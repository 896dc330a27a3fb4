"""
=============================================================================
ACCESS LOGGING MIDDLEWARE
=============================================================================

Writes one line per request to the "labserver.access" logger and tags the
response with X-Request-ID so a client report can be matched to the line.

    text    127.0.0.1 "GET /labs/3/getDate/?name=Joey" 200 311B 0.84ms [1f3a9c2e]
    json    {"id": "1f3a9c2e", "client": "127.0.0.1", "method": "GET", ...}

Error statuses go out at WARNING, everything else at INFO. Point the
logger somewhere else to split access lines from the server log:

    logging.getLogger("labserver.access").addHandler(file_handler)

=============================================================================
"""

import json
import logging
import time
import uuid

from .base import Middleware, NextHandler
from ..http.request import HTTPRequest
from ..http.response import HTTPResponse
from ..http.status_codes import HTTPStatus


logger = logging.getLogger("labserver.access")


class LoggingMiddleware(Middleware):
    """
    Access log plus X-Request-ID. Add it first so the timing covers the
    other layers too.

    Args:
        log_format: "text" or "json".
    """

    def __init__(self, log_format: str = "text"):
        self.log_format = log_format

    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        request_id = uuid.uuid4().hex[:8]
        started = time.perf_counter()

        try:
            response = next(request)
        except Exception as e:
            logger.error(
                f"[{request_id}] {request.method} {request.path} raised "
                f"{type(e).__name__}: {e}"
            )
            raise

        elapsed_ms = (time.perf_counter() - started) * 1000
        response.headers["X-Request-ID"] = request_id

        level = logging.WARNING if HTTPStatus(response.status).is_error else logging.INFO
        logger.log(level, self._line(request_id, request, response, elapsed_ms))
        return response

    def _line(self, request_id: str, request: HTTPRequest, response: HTTPResponse, elapsed_ms: float) -> str:
        client = request.client_address[0] or "-"
        target = request.path
        if request.query_params:
            target += "?" + "&".join(
                f"{name}={value}"
                for name, values in request.query_params.items()
                for value in values
            )

        if self.log_format == "json":
            return json.dumps({
                "id": request_id,
                "client": client,
                "method": request.method,
                "target": target,
                "status": int(response.status),
                "bytes": len(response.body),
                "ms": round(elapsed_ms, 2),
                "agent": request.user_agent,
            })

        return (
            f'{client} "{request.method} {target}" {int(response.status)} '
            f'{len(response.body)}B {elapsed_ms:.2f}ms [{request_id}]'
        )
