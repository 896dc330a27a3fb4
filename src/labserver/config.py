"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

All tunables in one dataclass, with defaults that work for local use:

    python -m labserver
    # → http://localhost:3000/labs/3/getDate/?name=Joey

=============================================================================
SOURCES AND PRECEDENCE
=============================================================================

    command-line flags   (labserver --port 8000)           highest
    environment          (PORT=8000 labserver)
    dataclass defaults                                     lowest

=============================================================================
ENVIRONMENT VARIABLES
=============================================================================

    PORT              Listening port (default 3000)
    LAB_HOST          Bind address (default 0.0.0.0, all interfaces)
    LAB_BASE_DIR      Directory holding the stored files (default: cwd)
    LAB_ROUTE_PREFIX  URL prefix of the endpoints (default /labs/3)
    LAB_WORKERS       Maximum worker threads (default 16)
    LAB_TIMEOUT       Socket read timeout in seconds (default 30)
    LAB_LOG_LEVEL     DEBUG, INFO, WARNING, ... (default INFO)

=============================================================================
"""

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional


@dataclass
class ServerConfig:
    """Configuration for the lab server."""

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK
    # ─────────────────────────────────────────────────────────────────────

    host: str = "0.0.0.0"
    """Bind address. Every interface by default; "127.0.0.1" keeps it local."""

    port: int = 3000
    """Listening port. 0 lets the OS pick a free one."""

    backlog: int = 128
    """Pending connections the OS queues before refusing new ones."""

    buffer_size: int = 8192
    """Bytes per recv() call."""

    timeout: Optional[float] = 30.0
    """Seconds to wait for the first request on a connection."""

    # ─────────────────────────────────────────────────────────────────────
    # HTTP
    # ─────────────────────────────────────────────────────────────────────

    keep_alive: bool = True
    keep_alive_timeout: float = 5.0
    """Idle seconds before a kept-alive connection is closed."""

    max_request_size: int = 10 * 1024 * 1024
    """Framing guard: larger requests are answered with 413."""

    # ─────────────────────────────────────────────────────────────────────
    # THREAD POOL
    # ─────────────────────────────────────────────────────────────────────

    min_workers: int = 4
    max_workers: int = 16
    queue_size: int = 100
    """Connections waiting for a worker before new ones get 503."""

    # ─────────────────────────────────────────────────────────────────────
    # LAB ENDPOINTS
    # ─────────────────────────────────────────────────────────────────────

    base_dir: str = field(default_factory=os.getcwd)
    """Directory stored files are resolved against."""

    store_filename: str = "file.txt"
    """File the writeFile endpoint appends to."""

    route_prefix: str = "/labs/3"
    """Path prefix of the three endpoints."""

    language: str = "en"
    """Message catalog language."""

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING / IDENTITY
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    log_format: str = "text"
    """"text" or "json" access-log lines."""

    server_name: str = "LabServer/1.0"
    """Value of the Server response header."""

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ServerConfig":
        """
        Build a config from environment variables, defaults elsewhere.

        Args:
            environ: Mapping to read instead of os.environ (for tests).

        Raises:
            ValueError: A numeric variable does not parse.
        """
        env = os.environ if environ is None else environ
        config = cls()

        if env.get("PORT"):
            config.port = int(env["PORT"])
        if env.get("LAB_HOST"):
            config.host = env["LAB_HOST"]
        if env.get("LAB_BASE_DIR"):
            config.base_dir = env["LAB_BASE_DIR"]
        if env.get("LAB_ROUTE_PREFIX"):
            config.route_prefix = env["LAB_ROUTE_PREFIX"]
        if env.get("LAB_WORKERS"):
            config.max_workers = int(env["LAB_WORKERS"])
            config.min_workers = min(config.min_workers, config.max_workers)
        if env.get("LAB_TIMEOUT"):
            config.timeout = float(env["LAB_TIMEOUT"])
        if env.get("LAB_LOG_LEVEL"):
            config.log_level = env["LAB_LOG_LEVEL"]

        return config

    def validate(self) -> None:
        """
        Check values at startup rather than on first use.

        Raises:
            ValueError: Describing the first bad setting.
        """
        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if self.min_workers < 1:
            raise ValueError("min_workers must be >= 1")

        if self.max_workers < self.min_workers:
            raise ValueError("max_workers must be >= min_workers")

        if self.queue_size < 1:
            raise ValueError("queue_size must be >= 1")

        if self.buffer_size < 1024:
            raise ValueError("buffer_size must be >= 1024")

        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0")

        if not self.route_prefix.startswith("/"):
            raise ValueError(f"route_prefix must start with '/': {self.route_prefix!r}")

        if not self.store_filename:
            raise ValueError("store_filename must not be empty")

        if self.log_format not in ("text", "json"):
            raise ValueError(f"log_format must be 'text' or 'json': {self.log_format!r}")
