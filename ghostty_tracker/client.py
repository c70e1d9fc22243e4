"""Client for the tracker's loopback query API.

Used by the CLI and by local integrations (launchers, Stream Deck actions)
that discover the running tracker through its port file.
"""

import logging
from pathlib import Path

import requests

from ghostty_tracker.exceptions import ClientError
from ghostty_tracker.services.query_service import DEFAULT_PORT_FILE

logger = logging.getLogger(__name__)


def read_port(port_file: str | Path = DEFAULT_PORT_FILE) -> int | None:
    """Read the port published by a running tracker, or None if absent."""
    path = Path(port_file).expanduser()
    try:
        return int(path.read_text().strip())
    except (OSError, ValueError):
        return None


class TrackerClient:
    """Thin requests wrapper around the query API."""

    def __init__(
        self,
        port: int | None = None,
        host: str = "127.0.0.1",
        port_file: str | Path = DEFAULT_PORT_FILE,
        timeout: float = 2.0,
    ):
        self.host = host
        self.port = port if port is not None else read_port(port_file)
        self.timeout = timeout

    @property
    def base_url(self) -> str:
        if self.port is None:
            raise ClientError("Tracker port unknown (is the tracker running?)")
        return f"http://{self.host}:{self.port}/api"

    def _request(self, method: str, path: str) -> dict:
        url = f"{self.base_url}{path}"
        try:
            response = requests.request(method, url, timeout=self.timeout)
        except requests.RequestException as e:
            raise ClientError(f"Request to {url} failed: {e}") from e

        try:
            data = response.json()
        except ValueError:
            data = {}
        if response.status_code >= 400:
            raise ClientError(data.get("error") or f"HTTP {response.status_code}")
        return data

    def health(self) -> dict:
        return self._request("GET", "/health")

    def list_windows(self) -> list[dict]:
        return self._request("GET", "/windows").get("windows", [])

    def focus(self, window_id: str) -> bool:
        return bool(self._request("POST", f"/windows/{window_id}/focus").get("success"))
