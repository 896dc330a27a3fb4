"""
=============================================================================
MIDDLEWARE BASE
=============================================================================

Middleware wraps the router the way onion layers wrap a core. Each layer
receives the request and a `next` callable; it may act before calling
next, after it, or instead of it.

    pipeline.add(LoggingMiddleware())        first added = outermost
    pipeline.add(CORSMiddleware())
    pipeline.add(ErrorHandlerMiddleware())   last added = closest to router

        ┌──────────────────────────────────────────────────┐
        │ Logging                                          │
        │  ┌────────────────────────────────────────────┐  │
        │  │ CORS                                       │  │
        │  │  ┌──────────────────────────────────────┐  │  │
        │  │  │ ErrorHandler                         │  │  │
        │  │  │  ┌────────────────────────────────┐  │  │  │
        │  │  │  │       router.handle            │  │  │  │
        │  │  │  └────────────────────────────────┘  │  │  │
        │  │  └──────────────────────────────────────┘  │  │
        │  └────────────────────────────────────────────┘  │
        └──────────────────────────────────────────────────┘

Because the error handler sits inside CORS and logging, a 500 page built
from an exception still gets its CORS header and its access-log line.

=============================================================================
"""

from abc import ABC, abstractmethod
from typing import Callable, Iterator, List
import logging

from ..http.request import HTTPRequest
from ..http.response import HTTPResponse


logger = logging.getLogger(__name__)


NextHandler = Callable[[HTTPRequest], HTTPResponse]


class Middleware(ABC):
    """
    Base class for middleware.

    Subclasses implement:

        def __call__(self, request, next) -> HTTPResponse:
            # before
            response = next(request)
            # after
            return response
    """

    @abstractmethod
    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        """Process `request`, normally by calling `next(request)`."""

    @property
    def name(self) -> str:
        return self.__class__.__name__


class MiddlewarePipeline:
    """Ordered middleware around a final handler."""

    def __init__(self):
        self._middleware: List[Middleware] = []

    def add(self, middleware: Middleware) -> "MiddlewarePipeline":
        """Append a layer (inside all previously added ones)."""
        self._middleware.append(middleware)
        logger.debug(f"Added middleware: {middleware.name}")
        return self

    def use(self, *middleware: Middleware) -> "MiddlewarePipeline":
        for mw in middleware:
            self.add(mw)
        return self

    def wrap(self, handler: NextHandler) -> NextHandler:
        """
        Build the chain around `handler`.

        Wrapping happens in reverse so the first-added middleware ends up
        outermost: [A, B, C] becomes A(B(C(handler))).
        """
        current = handler
        for middleware in reversed(self._middleware):
            current = self._create_wrapped_handler(middleware, current)
        return current

    def _create_wrapped_handler(
        self,
        middleware: Middleware,
        next_handler: NextHandler
    ) -> NextHandler:
        def wrapped(request: HTTPRequest) -> HTTPResponse:
            return middleware(request, next_handler)
        return wrapped

    def __len__(self) -> int:
        return len(self._middleware)

    def __iter__(self) -> Iterator[Middleware]:
        return iter(self._middleware)
