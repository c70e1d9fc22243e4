"""Window enumeration backends."""

from ghostty_tracker.backends.accessibility import (
    EXCLUDED_SUBROLES,
    AccessibilityEnumerator,
    parse_window_listing,
)
from ghostty_tracker.backends.base import WindowEnumerator, select_windows
from ghostty_tracker.backends.quartz import (
    QuartzEnumerator,
    has_screen_access,
    windows_from_window_list,
)

__all__ = [
    "EXCLUDED_SUBROLES",
    "AccessibilityEnumerator",
    "QuartzEnumerator",
    "WindowEnumerator",
    "has_screen_access",
    "parse_window_listing",
    "select_windows",
    "windows_from_window_list",
]
