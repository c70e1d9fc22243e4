"""Window enumeration interface.

Two backends implement the same protocol: a structured, per-process backend
(accessibility) and a flat, compositor-level backend (Quartz window list).
Which one is used is decided at runtime by probing availability and by
whether the preferred backend returned anything.
"""

import logging
from collections.abc import Iterable
from typing import Protocol, runtime_checkable

from ghostty_tracker.models.window import WindowRecord

logger = logging.getLogger(__name__)


@runtime_checkable
class WindowEnumerator(Protocol):
    """Lists the target application's primary windows."""

    @property
    def name(self) -> str:
        """Return the backend identifier (e.g., 'accessibility', 'quartz')."""
        ...

    def is_available(self) -> bool:
        """Check whether this backend can run on this machine."""
        ...

    def enumerate(self) -> list[WindowRecord]:
        """Return unenriched window records, in enumeration order.

        Implementations return an empty list on failure rather than raising.
        """
        ...


def select_windows(enumerators: Iterable[WindowEnumerator]) -> tuple[str | None, list[WindowRecord]]:
    """Return the windows from the first available backend that finds any.

    Results are never merged across backends.

    Returns:
        Tuple of (backend name or None, windows).
    """
    for enumerator in enumerators:
        if not enumerator.is_available():
            continue
        windows = enumerator.enumerate()
        if windows:
            return enumerator.name, windows
        logger.debug(f"[Windows] {enumerator.name} backend returned no windows")
    return None, []
