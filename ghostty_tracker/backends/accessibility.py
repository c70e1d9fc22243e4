"""Accessibility (System Events) window backend.

Queries every running instance of the target application for its window list
through AppleScript. Each window's 1-based position within its process's list
is kept as ``ax_index``; together with the pid it addresses the window for
focusing, since accessibility handles are not portable across calls.
"""

import logging
import shutil

from ghostty_tracker import commands
from ghostty_tracker.exceptions import ExternalCommandError, FocusTargetNotFoundError
from ghostty_tracker.models.window import WindowRecord

logger = logging.getLogger(__name__)

# Subroles of windows that are not primary terminal surfaces
EXCLUDED_SUBROLES = frozenset({"AXFloatingWindow", "AXDialog", "AXSystemDialog"})

_LIST_WINDOWS_SCRIPT = """
tell application "System Events"
    set output to ""
    repeat with p in (every application process whose bundle identifier is "{bundle_id}")
        set pid to unix id of p
        repeat with w in windows of p
            set t to ""
            try
                set t to name of w
            end try
            if t is missing value then set t to ""
            set s to ""
            try
                set s to subrole of w
            end try
            if s is missing value then set s to ""
            set output to output & pid & tab & s & tab & t & linefeed
        end repeat
    end repeat
    return output
end tell
"""

_FOCUS_WINDOW_SCRIPT = """
tell application "System Events"
    set p to first application process whose unix id is {pid}
    set frontmost of p to true
    set ws to windows of p
    if {ax_index} > (count of ws) then return "out-of-range"
    perform action "AXRaise" of item {ax_index} of ws
    return "ok"
end tell
"""


def parse_window_listing(output: str) -> list[tuple[int, int, str, str]]:
    """Parse ``pid<TAB>subrole<TAB>title`` lines from the listing script.

    Returns:
        List of (pid, ax_index, subrole, title). ``ax_index`` counts every
        window of the process, including ones that will be filtered out.
    """
    rows = []
    per_process: dict[int, int] = {}
    for line in output.splitlines():
        if not line.strip():
            continue
        parts = line.split("\t", 2)
        if len(parts) < 3:
            continue
        try:
            pid = int(parts[0].strip())
        except ValueError:
            continue
        ax_index = per_process.get(pid, 0) + 1
        per_process[pid] = ax_index
        rows.append((pid, ax_index, parts[1].strip(), parts[2]))
    return rows


class AccessibilityEnumerator:
    """Structured window backend using System Events over osascript."""

    def __init__(self, bundle_id: str = "com.mitchellh.ghostty", timeout: float = commands.DEFAULT_TIMEOUT):
        self.bundle_id = bundle_id
        self.timeout = timeout

    @property
    def name(self) -> str:
        return "accessibility"

    def is_available(self) -> bool:
        return shutil.which("osascript") is not None

    def _list_windows(self) -> str:
        script = _LIST_WINDOWS_SCRIPT.format(
            bundle_id=commands.escape_applescript_string(self.bundle_id)
        )
        returncode, stdout, stderr = commands.run_osascript(script, timeout=self.timeout)
        if returncode != 0:
            raise ExternalCommandError("osascript", stderr.strip())
        return stdout

    def enumerate(self) -> list[WindowRecord]:
        try:
            output = self._list_windows()
        except ExternalCommandError as e:
            logger.debug(f"[Windows] Accessibility listing failed: {e}")
            return []

        windows: list[WindowRecord] = []
        for pid, ax_index, subrole, title in parse_window_listing(output):
            if subrole in EXCLUDED_SUBROLES:
                continue
            windows.append(
                WindowRecord(
                    pid=pid,
                    ax_index=ax_index,
                    title=title or f"Window {len(windows) + 1}",
                )
            )
        return windows

    def focus_window(self, pid: int, ax_index: int) -> None:
        """Activate the owning process, then raise its window at ``ax_index``.

        Raises:
            FocusTargetNotFoundError: If the process or window does not exist.
        """
        if ax_index < 1:
            raise FocusTargetNotFoundError(pid, ax_index)

        script = _FOCUS_WINDOW_SCRIPT.format(pid=int(pid), ax_index=int(ax_index))
        returncode, stdout, stderr = commands.run_osascript(script, timeout=self.timeout)
        if returncode != 0:
            logger.debug(f"[Focus] osascript error for PID {pid}: {stderr.strip()}")
            raise FocusTargetNotFoundError(pid, ax_index)
        if stdout.strip() != "ok":
            raise FocusTargetNotFoundError(pid, ax_index)
