"""
=============================================================================
ERROR HANDLER MIDDLEWARE
=============================================================================

The handler boundary. Nothing raised by the router or a handler gets past
this layer; every exception becomes an HTML error page.

    LabServerError (ValidationError, NotFoundError, StorageError, ...)
        → page with the error's own status_code and message

    anything else
        → logged with traceback, 500 page with the exception message

Messages are escaped before they go into the page. The worker thread that
called the pipeline always gets a response back, so the connection is
always answered.

=============================================================================
"""

import logging
from typing import Optional

from .base import Middleware, NextHandler
from ..dates import DateProvider
from ..errors import LabServerError
from ..http.request import HTTPRequest
from ..http.response import HTTPResponse, html_response
from ..http.status_codes import HTTPStatus
from ..render import escape, render_error, render_server_error


logger = logging.getLogger(__name__)


class ErrorHandlerMiddleware(Middleware):
    """
    Converts exceptions into HTML error responses.

    Args:
        dates: Source of the timestamp printed on error pages.
    """

    def __init__(self, dates: Optional[DateProvider] = None):
        self.dates = dates or DateProvider()

    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        try:
            return next(request)

        except LabServerError as e:
            logger.info(
                f"{request.method} {request.path} -> {e.status_code}: {e.message}"
            )
            return html_response(
                e.status_code,
                render_error(e.status_code, escape(e.message), self.dates.timestamp()),
            )

        except Exception as e:
            logger.exception(f"Unhandled error for {request.method} {request.path}: {e}")
            message = str(e) or type(e).__name__
            return html_response(
                HTTPStatus.INTERNAL_SERVER_ERROR,
                render_server_error(escape(message), self.dates.timestamp()),
            )
