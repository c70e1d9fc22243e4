"""Quartz window-list backend (fallback).

Reads the compositor's flat on-screen window list. It cannot address a
window for focusing the way the accessibility backend can, so it is only
used when the accessibility backend finds nothing. Per-process indices are
assigned by first-seen order within the flat list.
"""

import logging
from collections.abc import Mapping

from ghostty_tracker.models.window import WindowRecord

logger = logging.getLogger(__name__)

# Normal application window layer; overlays and utility panels sit above it
NORMAL_WINDOW_LAYER = 0


def _load_quartz():
    """Import Quartz lazily so the module imports on any platform."""
    try:
        import Quartz  # type: ignore[import-untyped]
    except ImportError:
        return None
    return Quartz


def has_screen_access() -> bool:
    """Return True if screen recording access is currently granted."""
    quartz = _load_quartz()
    if quartz is None:
        return False
    try:
        return bool(quartz.CGPreflightScreenCaptureAccess())
    except AttributeError:
        # Pre-10.15 systems have no screen capture permission to check
        return True


def windows_from_window_list(
    window_list: list[Mapping[str, object]], app_name: str = "Ghostty"
) -> list[WindowRecord]:
    """Filter a CGWindowList dump down to the target app's normal windows."""
    windows: list[WindowRecord] = []
    per_process: dict[int, int] = {}

    for info in window_list:
        if info.get("kCGWindowOwnerName") != app_name:
            continue
        if info.get("kCGWindowLayer") != NORMAL_WINDOW_LAYER:
            continue
        owner_pid = info.get("kCGWindowOwnerPID")
        if not isinstance(owner_pid, int):
            continue

        ax_index = per_process.get(owner_pid, 0) + 1
        per_process[owner_pid] = ax_index
        title = info.get("kCGWindowName") or f"Window {len(windows) + 1}"
        windows.append(WindowRecord(pid=owner_pid, ax_index=ax_index, title=str(title)))

    return windows


class QuartzEnumerator:
    """Flat window backend using CGWindowListCopyWindowInfo."""

    def __init__(self, app_name: str = "Ghostty"):
        self.app_name = app_name

    @property
    def name(self) -> str:
        return "quartz"

    def is_available(self) -> bool:
        return _load_quartz() is not None

    def enumerate(self) -> list[WindowRecord]:
        quartz = _load_quartz()
        if quartz is None:
            return []

        options = quartz.kCGWindowListOptionOnScreenOnly | quartz.kCGWindowListExcludeDesktopElements
        try:
            window_list = quartz.CGWindowListCopyWindowInfo(options, quartz.kCGNullWindowID)
        except RuntimeError as e:
            logger.debug(f"[Windows] Quartz window list failed: {e}")
            return []

        if not window_list:
            return []
        return windows_from_window_list(list(window_list), self.app_name)
