"""Hook state store.

Claude Code hooks write one small JSON file per working directory into the
state directory (``state-<hash>.json``)::

    {"state": "asking", "session_id": "...", "cwd": "/path", "timestamp": 1700000000}

The store reads them once per refresh cycle. For a given cwd an entry only
replaces the cached one when its timestamp is strictly newer, so an
"asking" state survives until a later event supersedes it.
"""

import hashlib
import json
import logging
import os
import tempfile
import time
from pathlib import Path

from ghostty_tracker.models.window import HookStateEntry

logger = logging.getLogger(__name__)

STATE_FILE_PREFIX = "state-"


def state_file_name(cwd: str) -> str:
    """Return the state file name for a cwd.

    Matches the shell hook's ``echo "$CWD" | md5 | cut -c1-8``, which hashes
    the path plus a trailing newline.
    """
    digest = hashlib.md5(f"{cwd}\n".encode()).hexdigest()
    return f"{STATE_FILE_PREFIX}{digest[:8]}.json"


def parse_state_file(text: str) -> HookStateEntry | None:
    """Parse a state file body, returning None if required fields are missing."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        return None
    if not isinstance(data, dict):
        return None

    state = data.get("state")
    cwd = data.get("cwd")
    timestamp = data.get("timestamp")
    if not isinstance(state, str) or not isinstance(cwd, str) or not cwd:
        return None
    if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)):
        return None

    session_id = data.get("session_id")
    return HookStateEntry(
        state=state,
        cwd=cwd,
        timestamp=float(timestamp),
        session_id=session_id if isinstance(session_id, str) and session_id else None,
    )


class HookStateStore:
    """Cache of hook-reported agent states keyed by working directory."""

    def __init__(self, state_dir: str | Path = "~/.claude-states"):
        self.state_dir = Path(state_dir).expanduser()
        self._entries: dict[str, HookStateEntry] = {}

    def merge(self, entry: HookStateEntry) -> bool:
        """Add an entry if it is newer than the cached one for its cwd.

        Returns:
            True if the cache changed.
        """
        existing = self._entries.get(entry.cwd)
        if existing is not None and entry.timestamp <= existing.timestamp:
            return False
        self._entries[entry.cwd] = entry
        return True

    def load(self) -> int:
        """Read all state files from the state directory.

        Returns:
            Number of entries that changed the cache.
        """
        if not self.state_dir.is_dir():
            return 0

        changed = 0
        for path in sorted(self.state_dir.glob("*.json")):
            try:
                text = path.read_text()
            except OSError as e:
                logger.debug(f"[Hooks] Cannot read {path.name}: {e}")
                continue
            entry = parse_state_file(text)
            if entry is None:
                logger.debug(f"[Hooks] Skipping malformed state file {path.name}")
                continue
            if self.merge(entry):
                changed += 1
        return changed

    def lookup(self, cwd: str | None) -> HookStateEntry | None:
        """Find the hook state for a directory.

        An exact key wins. Otherwise any cached directory that is a parent or
        child of ``cwd`` matches (the agent may run one level away from the
        tracked directory); among those the freshest is returned.
        """
        if not cwd:
            return None

        exact = self._entries.get(cwd)
        if exact is not None:
            return exact

        best: HookStateEntry | None = None
        for cached_cwd, entry in self._entries.items():
            if cwd.startswith(cached_cwd + "/") or cached_cwd.startswith(cwd + "/"):
                if best is None or entry.timestamp > best.timestamp:
                    best = entry
        return best

    def state_for(self, cwd: str | None) -> str | None:
        entry = self.lookup(cwd)
        return entry.state if entry else None

    def write_state(
        self,
        cwd: str,
        state: str,
        session_id: str | None = None,
        timestamp: float | None = None,
    ) -> Path:
        """Write a state file the same way the agent hook does.

        The file is written to a temporary name and renamed into place so a
        concurrent reader never sees a partial file.
        """
        self.state_dir.mkdir(parents=True, exist_ok=True)
        payload = {
            "state": state,
            "session_id": session_id or "",
            "cwd": cwd,
            "timestamp": int(timestamp if timestamp is not None else time.time()),
        }
        target = self.state_dir / state_file_name(cwd)
        fd, tmp_name = tempfile.mkstemp(dir=self.state_dir, prefix=".state-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w") as f:
                json.dump(payload, f, indent=2)
            os.replace(tmp_name, target)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        return target

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
