"""Loopback query API service.

Serves the latest window snapshot and accepts focus requests over a small
JSON HTTP API bound to localhost. The service picks the first free port from
``base_port`` upward and writes it to a port file in the home directory so
other local tools can find it. The werkzeug server closes every connection
after one response.
"""

import logging
import socket
import threading
from collections.abc import Callable, Iterable
from pathlib import Path

from flask import Flask
from werkzeug.serving import BaseWSGIServer, make_server

from ghostty_tracker.exceptions import PortExhaustedError
from ghostty_tracker.models.window import WindowRecord
from ghostty_tracker.routes import register_blueprints

logger = logging.getLogger(__name__)

SnapshotProvider = Callable[[], Iterable[WindowRecord]]
FocusHandler = Callable[[int, int], bool | None]

DEFAULT_BASE_PORT = 49876
DEFAULT_MAX_PORT_ATTEMPTS = 10
DEFAULT_PORT_FILE = "~/.ghostty-api-port"


def create_api_app(
    snapshot_provider: SnapshotProvider | None = None,
    focus_handler: FocusHandler | None = None,
) -> Flask:
    """Create the Flask application for the query API.

    Args:
        snapshot_provider: Returns the windows of the latest snapshot.
        focus_handler: Called with (pid, ax_index) to focus a window.

    Returns:
        Configured Flask application.
    """
    app = Flask(__name__)
    app.extensions["snapshot_provider"] = snapshot_provider
    app.extensions["focus_handler"] = focus_handler
    register_blueprints(app)
    return app


def bind_loopback_socket(host: str, port: int) -> socket.socket:
    """Bind and listen on ``host:port``.

    Raises:
        OSError: If the port cannot be bound.
    """
    family = socket.AF_INET6 if ":" in host else socket.AF_INET
    sock = socket.socket(family, socket.SOCK_STREAM)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((host, port))
        sock.listen(128)
    except OSError:
        sock.close()
        raise
    return sock


class QueryService:
    """Loopback HTTP listener for the window snapshot.

    Lifecycle:
    - start(): bind the first free port in range, write the port file,
      serve on a background thread
    - stop(): shut the server down and remove the port file
    """

    def __init__(
        self,
        snapshot_provider: SnapshotProvider | None = None,
        focus_handler: FocusHandler | None = None,
        host: str = "127.0.0.1",
        base_port: int = DEFAULT_BASE_PORT,
        max_port_attempts: int = DEFAULT_MAX_PORT_ATTEMPTS,
        port_file: str | Path = DEFAULT_PORT_FILE,
    ):
        self.host = host
        self.base_port = base_port
        self.max_port_attempts = max_port_attempts
        self.port_file = Path(port_file).expanduser()
        self.app = create_api_app(snapshot_provider, focus_handler)

        self._server: BaseWSGIServer | None = None
        self._thread: threading.Thread | None = None
        self._port: int | None = None
        self._lock = threading.Lock()

    @property
    def port(self) -> int | None:
        """The bound port, or None when not running."""
        return self._port

    @property
    def is_running(self) -> bool:
        return self._server is not None

    def _bind_first_free_port(self) -> tuple[int, socket.socket]:
        for offset in range(self.max_port_attempts):
            port = self.base_port + offset
            try:
                return port, bind_loopback_socket(self.host, port)
            except OSError as e:
                logger.debug(f"[API] Port {port} unavailable: {e}")
        raise PortExhaustedError(self.base_port, self.max_port_attempts)

    def start(self) -> bool:
        """Start serving.

        Returns:
            True if the server is running, False if no port could be bound.
        """
        with self._lock:
            if self._server is not None:
                return True

            try:
                port, sock = self._bind_first_free_port()
            except PortExhaustedError as e:
                logger.error(f"[API] Failed to start API server: {e}")
                return False

            try:
                server = make_server(self.host, port, self.app, threaded=True, fd=sock.fileno())
            finally:
                # The server holds its own duplicate of the listening socket
                sock.close()

            self._server = server
            self._port = port
            self._thread = threading.Thread(
                target=server.serve_forever, name="query-service", daemon=True
            )
            self._thread.start()
            self._write_port_file()
            logger.info(f"[API] Server started on {self.host}:{port}")
            return True

    def stop(self) -> None:
        """Stop serving and remove the port file."""
        with self._lock:
            if self._server is None:
                return
            self._server.shutdown()
            self._server.server_close()
            if self._thread is not None:
                self._thread.join(timeout=5.0)
            self._server = None
            self._thread = None
            self._port = None
            self._remove_port_file()
            logger.info("[API] Server stopped")

    def _write_port_file(self) -> None:
        try:
            self.port_file.parent.mkdir(parents=True, exist_ok=True)
            self.port_file.write_text(str(self._port))
            logger.info(f"[API] Wrote port file: {self.port_file}")
        except OSError as e:
            logger.error(f"[API] Failed to write port file: {e}")

    def _remove_port_file(self) -> None:
        try:
            self.port_file.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"[API] Failed to remove port file: {e}")
