"""
pytest configuration and fixtures.
"""

import threading
from datetime import datetime
from pathlib import Path
from typing import Generator, Optional

import pytest

# Add src to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from labserver import APIServer, ServerConfig
from labserver.dates import DateProvider


FIXED_NOW = datetime(2026, 1, 15, 12, 30, 45, 123000)


@pytest.fixture
def fixed_dates() -> DateProvider:
    """Clock pinned to FIXED_NOW."""
    return DateProvider(clock=lambda: FIXED_NOW)


@pytest.fixture
def config(tmp_path: Path) -> ServerConfig:
    """Test configuration storing files in a temporary directory."""
    return ServerConfig(
        host="127.0.0.1",
        port=0,  # Let OS pick a free port
        min_workers=2,
        max_workers=4,
        timeout=5.0,
        keep_alive_timeout=1.0,
        base_dir=str(tmp_path),
        log_level="WARNING",
    )


class LiveServer:
    """Runs an APIServer on a background thread."""

    def __init__(self, server: APIServer):
        self.server = server
        self._thread: Optional[threading.Thread] = None

    @property
    def host(self) -> str:
        return self.server.address[0]

    @property
    def port(self) -> int:
        return self.server.address[1]

    @property
    def base_dir(self) -> Path:
        return self.server.api.store.base_dir

    def start(self) -> None:
        self._thread = threading.Thread(target=self.server.run, daemon=True)
        self._thread.start()

        if not self.server.wait_until_ready(5.0):
            raise RuntimeError("Server failed to start")

    def stop(self) -> None:
        self.server.shutdown()

        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)


@pytest.fixture
def live_server(config: ServerConfig) -> Generator[LiveServer, None, None]:
    """A running server bound to a free port, files under tmp_path."""
    live = LiveServer(APIServer(config))
    live.start()

    yield live

    live.stop()
