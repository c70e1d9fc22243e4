"""Registry of windows launched by this application.

When the launcher opens a terminal for a known project it records the new
process id here, so attribution for that window needs no process walk.
"""

import threading


class LaunchRegistry:
    """Thread-safe map of owning pid -> project name."""

    def __init__(self):
        self._lock = threading.Lock()
        self._launched: dict[int, str] = {}

    def register(self, pid: int, project_name: str) -> None:
        with self._lock:
            self._launched[pid] = project_name

    def forget(self, pid: int) -> bool:
        with self._lock:
            return self._launched.pop(pid, None) is not None

    def get(self, pid: int) -> str | None:
        with self._lock:
            return self._launched.get(pid)

    def prune(self, active_pids: set[int]) -> list[int]:
        """Drop entries for pids that no longer own a window.

        Returns:
            The pids that were removed.
        """
        with self._lock:
            stale = [pid for pid in self._launched if pid not in active_pids]
            for pid in stale:
                del self._launched[pid]
        return stale

    def __len__(self) -> int:
        with self._lock:
            return len(self._launched)
