"""
=============================================================================
LISTENING SOCKET
=============================================================================

Binds the configured address and turns every accepted client into a
Connection for the callback. What happens to it next is the caller's
business (APIServer queues it on the worker pool).

    start(on_connection, on_ready)
        │
        ├── create_server((host, port), backlog)     SO_REUSEADDR on POSIX
        ├── on_ready()                               banner, tests waiting
        │
        └── until stop():
                accept()     wakes every ACCEPT_POLL seconds to check stop
                on_connection(Connection(...))

SIGINT and SIGTERM call stop() while start() runs on the main thread.
Elsewhere (a server thread inside a test) stop() is the only way out.

=============================================================================
"""

import contextlib
import logging
import signal
import socket
import threading
from typing import Callable, Iterator, Optional, Tuple

from ..config import ServerConfig
from .connection import Connection


logger = logging.getLogger(__name__)


ACCEPT_POLL = 1.0


class SocketServer:
    """
    Accept loop for one listening socket.

    Usage:
        server = SocketServer(config)
        server.start(handle)     # blocks until stop()
    """

    def __init__(self, config: ServerConfig):
        self.config = config
        self._listener: Optional[socket.socket] = None
        self._bound: Optional[Tuple[str, int]] = None
        self._ready = threading.Event()
        self._stopping = threading.Event()

    @property
    def address(self) -> Tuple[str, int]:
        """(host, port) actually bound; the OS-chosen port when configured as 0."""
        return self._bound or (self.config.host, self.config.port)

    def start(
        self,
        on_connection: Callable[[Connection], None],
        on_ready: Optional[Callable[[], None]] = None
    ) -> None:
        """
        Listen and accept until stop().

        Raises:
            OSError: The address could not be bound.
        """
        try:
            listener = socket.create_server(
                (self.config.host, self.config.port),
                backlog=self.config.backlog,
            )
        except OSError as e:
            logger.error(f"Cannot listen on {self.config.host}:{self.config.port}: {e}")
            raise

        listener.settimeout(ACCEPT_POLL)
        self._listener = listener
        self._bound = listener.getsockname()[:2]
        self._stopping.clear()

        logger.info(f"Listening on {self._bound[0]}:{self._bound[1]}")

        try:
            with self._stop_on_signals():
                if on_ready:
                    on_ready()
                self._ready.set()
                self._serve(listener, on_connection)
        finally:
            self._ready.clear()
            self._listener = None
            listener.close()
            logger.info("Listening socket closed")

    def _serve(self, listener: socket.socket, on_connection: Callable[[Connection], None]) -> None:
        while not self._stopping.is_set():
            try:
                client, peer = listener.accept()
            except socket.timeout:
                continue
            except OSError as e:
                if not self._stopping.is_set():
                    logger.error(f"accept() failed: {e}")
                return

            client.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
            on_connection(Connection(
                client,
                peer,
                read_timeout=self.config.timeout,
                keep_alive_timeout=self.config.keep_alive_timeout,
                max_request_size=self.config.max_request_size,
                buffer_size=self.config.buffer_size,
            ))

    @contextlib.contextmanager
    def _stop_on_signals(self) -> Iterator[None]:
        if threading.current_thread() is not threading.main_thread():
            yield
            return

        def handle(signum, frame):
            logger.info(f"Received {signal.Signals(signum).name}, shutting down")
            self.stop()

        previous = {sig: signal.signal(sig, handle) for sig in (signal.SIGINT, signal.SIGTERM)}
        try:
            yield
        finally:
            for sig, handler in previous.items():
                signal.signal(sig, handler)

    def stop(self) -> None:
        """Ask the accept loop to exit. Any thread, any number of times."""
        self._stopping.set()

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """Block until accepting. False on timeout."""
        return self._ready.wait(timeout)
