"""
=============================================================================
LAB API SERVER
=============================================================================

Ties the pieces together: socket server, thread pool, parser, middleware
and the lab router.

=============================================================================
REQUEST FLOW
=============================================================================

    SocketServer.accept()
        │
        ▼
    ThreadPool.submit(_process_connection)     queue full → 503 page
        │
        ▼  (worker thread)
    Connection.read_request()                  too slow  → 408 page
        │                                      too large → 413 page
        ▼
    RequestParser.parse()                      malformed → 400/405/505 page
        │
        ▼
    LoggingMiddleware → CORSMiddleware → ErrorHandlerMiddleware
        │
        ▼
    Router.handle() → Date / WriteFile / ReadFile / RouteNotFound handler
        │
        ▼
    Connection.send_response()                 one write per request

Every one of those failure paths produces an HTML page with
Access-Control-Allow-Origin: *. If something still escapes the pipeline,
the worker answers with a last-resort 500 page and carries on.

=============================================================================
USAGE
=============================================================================

    from labserver import APIServer, ServerConfig

    server = APIServer(ServerConfig(port=3000, base_dir="/tmp/lab"))
    server.run()          # blocks; Ctrl+C or SIGTERM to stop

From another thread:

    threading.Thread(target=server.run, daemon=True).start()
    server.wait_until_ready(5)
    ...
    server.shutdown()

=============================================================================
"""

import logging
from typing import Callable, Optional, Tuple

from .config import ServerConfig
from .core import SocketServer, Connection, ThreadPool, RequestTooLarge
from .dates import DateProvider
from .handlers import LabAPI
from .http import (
    HTTPRequest, RequestParser, HTTPParseError,
    HTTPResponse, HTTPStatus, Router, ResponseBuilder,
)
from .middleware import (
    MiddlewarePipeline, Middleware,
    LoggingMiddleware, CORSMiddleware, ErrorHandlerMiddleware,
)
from .render import escape, render_error


logger = logging.getLogger(__name__)


class APIServer:
    """
    HTTP/1.1 server for the lab endpoints.

    Args:
        config: Server configuration; defaults if omitted.
        dates: Clock used for page dates and timestamps.
    """

    def __init__(self, config: Optional[ServerConfig] = None, dates: Optional[DateProvider] = None):
        self.config = config or ServerConfig()
        self.config.validate()

        self.dates = dates or DateProvider()

        self._socket_server = SocketServer(self.config)
        self._thread_pool = ThreadPool(
            min_workers=self.config.min_workers,
            max_workers=self.config.max_workers,
            queue_size=self.config.queue_size,
        )
        self._parser = RequestParser(max_request_size=self.config.max_request_size)

        self.api = LabAPI(self.config, dates=self.dates)

        self._middleware = MiddlewarePipeline()
        self._middleware.use(
            LoggingMiddleware(log_format=self.config.log_format),
            CORSMiddleware(),
            ErrorHandlerMiddleware(self.dates),
        )

        self._handler: Optional[Callable[[HTTPRequest], HTTPResponse]] = None
        self._running = False

    # =========================================================================
    # CONFIGURATION
    # =========================================================================

    def use(self, middleware: Middleware) -> "APIServer":
        """Add middleware inside the built-in layers. Call before run()."""
        self._middleware.add(middleware)
        return self

    @property
    def router(self) -> Router:
        return self.api.router

    @property
    def address(self) -> Tuple[str, int]:
        """Bound (host, port); the real port once listening on port 0."""
        return self._socket_server.address

    @property
    def base_url(self) -> str:
        """URL to reach the server from this machine."""
        host, port = self.address
        if host in ("0.0.0.0", ""):
            host = "localhost"
        return f"http://{host}:{port}"

    def handle_request(self, request: HTTPRequest) -> HTTPResponse:
        """Run one parsed request through middleware and router."""
        if self._handler is None:
            self._handler = self._middleware.wrap(self.router.handle)
        return self._handler(request)

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def run(self) -> None:
        """Serve until shutdown() or SIGINT/SIGTERM. Blocks."""
        self._running = True

        self._setup_logging()
        self._handler = self._middleware.wrap(self.router.handle)
        self._thread_pool.start()

        logger.info(f"Starting {self.config.server_name} on {self.config.host}:{self.config.port}")

        try:
            self._socket_server.start(
                self._handle_connection,
                on_ready=self._print_startup_banner,
            )
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            self._shutdown()

    def shutdown(self) -> None:
        """Ask a running server to stop. Returns immediately."""
        self._socket_server.stop()

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """Block until the server is accepting connections."""
        return self._socket_server.wait_until_ready(timeout)

    def _setup_logging(self) -> None:
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)

        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        logging.getLogger("labserver").setLevel(level)

    def _print_startup_banner(self) -> None:
        print()
        print("╔══════════════════════════════════════════════════════════════╗")
        print(f"  {self.config.server_name} running on {self.base_url}")
        print(f"  Files:   {self.api.store.base_dir}")
        print(f"  Workers: {self.config.min_workers}-{self.config.max_workers} threads")
        print("  Test URLs:")
        for url in self.api.example_urls(self.base_url):
            print(f"    - {url}")
        print("  Press Ctrl+C to stop")
        print("╚══════════════════════════════════════════════════════════════╝")

        self.router.print_routes()

    def _shutdown(self) -> None:
        logger.info("Shutting down server...")
        self._running = False
        self._thread_pool.shutdown(wait=True, timeout=self.config.keep_alive_timeout + 1)
        logger.info(f"Server stopped ({self._thread_pool.completed} connections served)")

    # =========================================================================
    # CONNECTION HANDLING
    # =========================================================================

    def _handle_connection(self, conn: Connection) -> None:
        """Queue a new connection for a worker; 503 if the queue is full."""
        submitted = self._thread_pool.submit(
            self._process_connection,
            args=(conn,),
            block=False,
        )

        if not submitted:
            logger.warning(f"[{conn.id}] Thread pool full, rejecting connection")
            self._send_error(conn, HTTPStatus.SERVICE_UNAVAILABLE, "Server overloaded")
            conn.close()

    def _process_connection(self, conn: Connection) -> None:
        """
        Keep-alive loop for one connection (runs on a worker).

        read → parse → handle → send, repeated while both sides want
        keep-alive and the server is running.
        """
        with conn:
            while self._running:
                try:
                    raw_request = conn.read_request()
                    if raw_request is None:
                        break

                    try:
                        request = self._parser.parse(raw_request, conn.address)
                    except HTTPParseError as e:
                        logger.info(f"[{conn.id}] Bad request: {e}")
                        self._send_error(conn, e.status_code, str(e))
                        break

                    try:
                        response = self._handler(request)
                    except Exception as e:
                        logger.exception(f"[{conn.id}] Handler error: {e}")
                        response = self._error_response(
                            HTTPStatus.INTERNAL_SERVER_ERROR, str(e) or type(e).__name__
                        )

                    keep_alive = request.is_keep_alive and self.config.keep_alive and self._running

                    if keep_alive:
                        response.headers.setdefault("Connection", "keep-alive")
                        response.headers.setdefault(
                            "Keep-Alive",
                            f"timeout={int(self.config.keep_alive_timeout)}"
                        )
                    else:
                        response.set_header("Connection", "close")

                    if not conn.send_response(response.to_bytes(self.config.server_name)):
                        break

                    if not keep_alive:
                        break

                except TimeoutError:
                    self._send_error(conn, HTTPStatus.REQUEST_TIMEOUT, "Request timeout")
                    break
                except RequestTooLarge as e:
                    self._send_error(conn, HTTPStatus.PAYLOAD_TOO_LARGE, str(e))
                    break
                except Exception as e:
                    logger.exception(f"[{conn.id}] Connection error: {e}")
                    break

    def _error_response(self, status: int, message: str, close: bool = False) -> HTTPResponse:
        builder = (ResponseBuilder()
            .status(status)
            .html(render_error(status, escape(message), self.dates.timestamp()))
            .cors("*"))
        if close:
            builder.close_connection()
        return builder.build()

    def _send_error(self, conn: Connection, status: int, message: str) -> None:
        """HTML error page for failures outside the pipeline; closes after."""
        response = self._error_response(status, message, close=True)
        conn.send_response(response.to_bytes(self.config.server_name))


def create_app(config: Optional[ServerConfig] = None) -> APIServer:
    """Build an APIServer; `config` defaults to the environment."""
    return APIServer(config or ServerConfig.from_env())
