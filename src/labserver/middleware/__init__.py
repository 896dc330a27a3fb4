"""
=============================================================================
MIDDLEWARE
=============================================================================

Layers run around the router for every request, outermost first:

    LoggingMiddleware        access log line, X-Request-ID
    CORSMiddleware           Access-Control-Allow-Origin on every response
    ErrorHandlerMiddleware   exceptions → HTML error pages

=============================================================================
"""

from .base import Middleware, MiddlewarePipeline, NextHandler
from .logging import LoggingMiddleware
from .cors import CORSMiddleware, CORSConfig
from .errors import ErrorHandlerMiddleware

__all__ = [
    "Middleware",
    "MiddlewarePipeline",
    "NextHandler",
    "LoggingMiddleware",
    "CORSMiddleware",
    "CORSConfig",
    "ErrorHandlerMiddleware",
]
