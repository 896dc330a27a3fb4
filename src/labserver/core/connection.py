"""
=============================================================================
CLIENT CONNECTION
=============================================================================

Frames HTTP requests out of one client socket.

A recv() returns whatever bytes have arrived: half a request line, or two
pipelined requests at once. Connection keeps a buffer and hands back
exactly one request per call:

    buffer: "GET /a HTTP/1.1\r\n\r\nGET /b HT"
             └──── returned ─────┘└ kept ┘

A request ends at the blank line after the headers, plus Content-Length
body bytes if that header is present.

=============================================================================
TIMEOUTS
=============================================================================

    first request     read_timeout        silence → TimeoutError (server: 408)
    later requests    keep_alive_timeout  silence → None (close quietly)

=============================================================================
"""

import logging
import re
import socket
import uuid
from typing import Optional, Tuple


logger = logging.getLogger(__name__)


HEADER_END = b"\r\n\r\n"

_CONTENT_LENGTH = re.compile(rb"^content-length:[ \t]*(\d+)[ \t]*\r?$", re.IGNORECASE | re.MULTILINE)


class RequestTooLarge(ValueError):
    """The buffered request grew past max_request_size."""


class Connection:
    """
    One accepted client socket.

    Args:
        sock: The socket returned by accept().
        address: Peer (ip, port).
        read_timeout: Seconds allowed for the first request.
        keep_alive_timeout: Idle seconds allowed between later requests.
        max_request_size: Buffer limit in bytes.
        buffer_size: Bytes asked for per recv().
    """

    def __init__(
        self,
        sock: socket.socket,
        address: Tuple[str, int],
        read_timeout: Optional[float] = 30.0,
        keep_alive_timeout: float = 5.0,
        max_request_size: int = 10 * 1024 * 1024,
        buffer_size: int = 8192,
    ):
        self.sock = sock
        self.address = address
        self.read_timeout = read_timeout
        self.keep_alive_timeout = keep_alive_timeout
        self.max_request_size = max_request_size
        self.buffer_size = buffer_size

        self.id = uuid.uuid4().hex[:8]
        self.requests_handled = 0
        self.closed = False
        self._pending = b""

        self.sock.settimeout(read_timeout)

    def read_request(self) -> Optional[bytes]:
        """
        Block until one full request is buffered and return its bytes.

        Returns:
            None when the peer closed, or stayed silent past the
            keep-alive timeout after an earlier request.

        Raises:
            TimeoutError: The first request did not arrive in time.
            RequestTooLarge: The request outgrew max_request_size.
        """
        if self.requests_handled:
            self.sock.settimeout(self.keep_alive_timeout)

        try:
            if not self._fill_until(lambda: self._pending.find(HEADER_END)):
                return None

            body_start = self._pending.find(HEADER_END) + len(HEADER_END)
            match = _CONTENT_LENGTH.search(self._pending[:body_start])
            end = body_start + (int(match.group(1)) if match else 0)

            # A short body is passed on as is; the parser rejects it.
            self._fill_until(lambda: 0 if len(self._pending) >= end else -1)
        except socket.timeout:
            if self.requests_handled:
                logger.debug(f"[{self.id}] Idle past keep-alive timeout")
                return None
            raise TimeoutError("Request read timeout")
        finally:
            if not self.closed:
                self.sock.settimeout(self.read_timeout)

        request, self._pending = self._pending[:end], self._pending[end:]
        self.requests_handled += 1
        return request

    def _fill_until(self, found) -> bool:
        """recv() until found() is non-negative. False if the peer closed first."""
        while found() < 0:
            try:
                chunk = self.sock.recv(self.buffer_size)
            except (ConnectionResetError, BrokenPipeError):
                chunk = b""
            if not chunk:
                return False
            self._pending += chunk
            if len(self._pending) > self.max_request_size:
                raise RequestTooLarge(f"Request too large: over {self.max_request_size} bytes")
        return True

    def send_response(self, data: bytes) -> bool:
        """sendall() the serialized response. False if the peer is gone."""
        try:
            self.sock.sendall(data)
        except OSError as e:
            logger.warning(f"[{self.id}] Send failed: {e}")
            return False
        return True

    def close(self) -> None:
        """Half-close, drain what the peer still sends for 0.5s, then close."""
        if self.closed:
            return
        self.closed = True

        try:
            self.sock.shutdown(socket.SHUT_WR)
            self.sock.settimeout(0.5)
            while self.sock.recv(1024):
                pass
        except OSError:
            pass
        finally:
            self.sock.close()

        logger.debug(f"[{self.id}] Closed after {self.requests_handled} requests")

    def __enter__(self) -> "Connection":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
