"""WindowTracker orchestrator.

Runs the refresh cycle on a fixed interval:

    IDLE -> CAPTURING -> ENUMERATING -> ENRICHING -> PUBLISHING -> IDLE

Each cycle builds a fresh list of WindowRecords and publishes it as one
immutable WindowSnapshot. Readers (the query API, the UI) only ever see a
whole snapshot. Nothing carries over between cycles except the attribution
and hook-state caches.
"""

import logging
import threading
import time
from collections.abc import Callable, Sequence
from enum import Enum
from typing import Protocol

from ghostty_tracker.backends.accessibility import AccessibilityEnumerator
from ghostty_tracker.backends.base import WindowEnumerator, select_windows
from ghostty_tracker.backends.quartz import QuartzEnumerator, has_screen_access
from ghostty_tracker.exceptions import FocusTargetNotFoundError, PermissionDeniedError
from ghostty_tracker.models.config import AppConfig
from ghostty_tracker.models.window import (
    ProcessSnapshot,
    WindowRecord,
    WindowSnapshot,
    parse_window_id,
)
from ghostty_tracker.services.attribution import AttributionResolver
from ghostty_tracker.services.classifier import AgentStateClassifier
from ghostty_tracker.services.hook_state import HookStateStore
from ghostty_tracker.services.launch_registry import LaunchRegistry
from ghostty_tracker.services.process_snapshot import ProcessSnapshotter

logger = logging.getLogger(__name__)


class CyclePhase(str, Enum):
    """Phase of the refresh cycle currently executing."""

    IDLE = "idle"
    CAPTURING = "capturing"
    ENUMERATING = "enumerating"
    ENRICHING = "enriching"
    PUBLISHING = "publishing"


class WindowFocuser(Protocol):
    def focus_window(self, pid: int, ax_index: int) -> None: ...


class SnapshotHolder:
    """Single-writer, multi-reader holder for the published snapshot."""

    def __init__(self, initial: WindowSnapshot | None = None):
        self._lock = threading.Lock()
        self._snapshot = initial or WindowSnapshot()

    def get(self) -> WindowSnapshot:
        with self._lock:
            return self._snapshot

    def publish(self, snapshot: WindowSnapshot) -> WindowSnapshot:
        """Replace the published snapshot, returning the previous one."""
        with self._lock:
            previous = self._snapshot
            self._snapshot = snapshot
        return previous


class WindowTracker:
    """Continuously tracks terminal windows and their agent state.

    Responsibilities:
    1. Capture the process table once per cycle
    2. Enumerate windows (accessibility first, Quartz as fallback)
    3. Attribute windows to projects and classify agent state
    4. Evict cache entries for windows that closed
    5. Publish the result atomically and notify subscribers
    6. Focus a window by pid and per-process index
    """

    DEFAULT_SCAN_INTERVAL_SECONDS = 1.0

    def __init__(
        self,
        snapshotter: ProcessSnapshotter | None = None,
        enumerators: Sequence[WindowEnumerator] | None = None,
        resolver: AttributionResolver | None = None,
        classifier: AgentStateClassifier | None = None,
        hook_store: HookStateStore | None = None,
        permission_probe: Callable[[], bool] | None = None,
        focuser: WindowFocuser | None = None,
        scan_interval: float = DEFAULT_SCAN_INTERVAL_SECONDS,
        single_flight: bool = True,
    ):
        """Initialize the WindowTracker.

        Args:
            snapshotter: Process table capture. Defaults to ps.
            enumerators: Window backends in preference order.
            resolver: Project/cwd attribution with its caches.
            classifier: Agent state classifier.
            hook_store: Hook state file store.
            permission_probe: Returns True when window access is granted.
            focuser: Backend that raises a window by (pid, ax_index).
            scan_interval: Seconds between refresh cycles.
            single_flight: Skip a refresh while another is still running.
        """
        accessibility = None
        if enumerators is None or focuser is None:
            accessibility = AccessibilityEnumerator()
        self._snapshotter = snapshotter or ProcessSnapshotter()
        self._enumerators = list(enumerators) if enumerators is not None else [accessibility, QuartzEnumerator()]
        self._resolver = resolver or AttributionResolver()
        self._classifier = classifier or AgentStateClassifier()
        self._hook_store = hook_store or HookStateStore()
        self._permission_probe = permission_probe or has_screen_access
        self._focuser = focuser if focuser is not None else accessibility
        self.scan_interval = scan_interval
        self.single_flight = single_flight

        self._holder = SnapshotHolder()
        self._refresh_lock = threading.Lock()
        self._cycle = 0
        self._phase = CyclePhase.IDLE
        self._last_backend: str | None = None
        self._permission_granted: bool | None = None

        # Threading
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._thread_lock = threading.Lock()

        self._listeners: list[Callable[[WindowSnapshot], None]] = []

    @classmethod
    def from_config(
        cls,
        config: AppConfig,
        launch_registry: LaunchRegistry | None = None,
    ) -> "WindowTracker":
        """Build a tracker with default backends wired from configuration."""
        tracker_config = config.tracker
        accessibility = AccessibilityEnumerator(
            bundle_id=tracker_config.bundle_id,
            timeout=tracker_config.command_timeout,
        )
        return cls(
            snapshotter=ProcessSnapshotter(
                agent_process=tracker_config.agent_process,
                timeout=tracker_config.command_timeout,
            ),
            enumerators=[accessibility, QuartzEnumerator(app_name=tracker_config.app_name)],
            resolver=AttributionResolver(
                projects=config.projects,
                launch_registry=launch_registry,
                timeout=tracker_config.command_timeout,
            ),
            classifier=AgentStateClassifier(
                config=config.classifier,
                max_trace_depth=tracker_config.max_trace_depth,
            ),
            hook_store=HookStateStore(config.hooks.state_dir),
            focuser=accessibility,
            scan_interval=config.scan_interval,
            single_flight=tracker_config.single_flight,
        )

    # =========================================================================
    # Published state
    # =========================================================================

    def snapshot(self) -> WindowSnapshot:
        """Return the latest published snapshot."""
        return self._holder.get()

    def windows(self) -> list[WindowRecord]:
        """Return the windows of the latest published snapshot."""
        return list(self._holder.get().windows)

    @property
    def phase(self) -> CyclePhase:
        return self._phase

    @property
    def last_backend(self) -> str | None:
        """Name of the backend that produced the last published windows."""
        return self._last_backend

    @property
    def permission_granted(self) -> bool | None:
        """Result of the last permission probe (None before the first cycle)."""
        return self._permission_granted

    @property
    def resolver(self) -> AttributionResolver:
        return self._resolver

    def subscribe(self, callback: Callable[[WindowSnapshot], None]) -> None:
        """Register a callback invoked with each newly published snapshot."""
        self._listeners.append(callback)

    def unsubscribe(self, callback: Callable[[WindowSnapshot], None]) -> None:
        self._listeners = [cb for cb in self._listeners if cb != callback]

    # =========================================================================
    # Refresh cycle
    # =========================================================================

    def refresh(self) -> WindowSnapshot | None:
        """Run one refresh cycle.

        Returns:
            The newly published snapshot, or None if the cycle was skipped
            (another refresh in flight, permission missing, no process data,
            or an unexpected error, which is logged).
        """
        if not self._refresh_lock.acquire(blocking=not self.single_flight):
            logger.debug("[Tracker] Previous refresh still running, skipping tick")
            return None
        try:
            return self._refresh_cycle()
        except PermissionDeniedError:
            return None
        except Exception:
            logger.exception("[Tracker] Refresh failed")
            return None
        finally:
            self._phase = CyclePhase.IDLE
            self._refresh_lock.release()

    def _check_permission(self) -> None:
        granted = bool(self._permission_probe())
        if granted != self._permission_granted:
            if granted:
                logger.info("[Tracker] Window access granted")
            else:
                logger.warning("[Tracker] Window access not granted, refresh paused")
        self._permission_granted = granted
        if not granted:
            raise PermissionDeniedError("Screen recording access not granted")

    def _refresh_cycle(self) -> WindowSnapshot | None:
        self._check_permission()

        self._phase = CyclePhase.CAPTURING
        processes = self._snapshotter.capture()
        if len(processes) == 0:
            logger.debug("[Tracker] No process data this cycle, keeping previous snapshot")
            return None

        self._phase = CyclePhase.ENUMERATING
        backend, windows = select_windows(self._enumerators)
        window_pids = {window.pid for window in windows}
        self._resolver.evict(window_pids, processes)

        self._phase = CyclePhase.ENRICHING
        self._hook_store.load()
        for window in windows:
            self._enrich(window, processes, window_pids)

        self._phase = CyclePhase.PUBLISHING
        self._cycle += 1
        snapshot = WindowSnapshot(windows=tuple(windows), cycle=self._cycle)
        self._holder.publish(snapshot)
        if backend != self._last_backend:
            logger.info(f"[Tracker] Using {backend or 'no'} window backend")
        self._last_backend = backend

        for callback in list(self._listeners):
            try:
                callback(snapshot)
            except Exception as e:
                logger.error(f"[Tracker] Snapshot listener failed: {e}")

        return snapshot

    def _enrich(self, window: WindowRecord, processes: ProcessSnapshot, window_pids: set[int]) -> None:
        cwd, project = self._resolver.resolve_project_and_cwd(window, processes)
        window.shell_cwd = cwd
        window.workstream_name = project
        window.has_claude_process = self._classifier.has_agent_process(
            window.pid, processes, window_pids
        )

        hook_cwd = cwd or self._resolver.directory_for_project(project)
        window.hook_state = self._hook_store.state_for(hook_cwd)
        window.claude_state = self._classifier.classify(window, window.hook_state)

    # =========================================================================
    # Focus
    # =========================================================================

    def focus(self, pid: int, ax_index: int) -> bool:
        """Bring a window to the foreground.

        Args:
            pid: Owning process id.
            ax_index: 1-based window index within that process.

        Returns:
            True if the window was raised, False if it could not be found.
        """
        if self._focuser is None:
            logger.warning("[Focus] No focus backend configured")
            return False
        try:
            self._focuser.focus_window(pid, ax_index)
        except FocusTargetNotFoundError as e:
            logger.warning(f"[Focus] {e}")
            return False
        logger.info(f"[Focus] Raised window {pid}-{ax_index}")
        return True

    def focus_window_id(self, window_id: str) -> bool:
        """Focus a window by its ``"<pid>-<ax_index>"`` id."""
        parsed = parse_window_id(window_id)
        if parsed is None:
            logger.warning(f"[Focus] Invalid window id: {window_id}")
            return False
        return self.focus(*parsed)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def start(self) -> None:
        """Start the refresh loop on a background thread."""
        with self._thread_lock:
            if self._thread is not None:
                return
            self._stop_event.clear()
            self._thread = threading.Thread(target=self._run, name="window-tracker", daemon=True)
            self._thread.start()
            logger.info(f"[Tracker] Started (interval: {self.scan_interval}s)")

    def stop(self) -> None:
        """Stop the refresh loop."""
        with self._thread_lock:
            self._stop_event.set()
            if self._thread is not None:
                self._thread.join(timeout=5.0)
                self._thread = None
            logger.info("[Tracker] Stopped")

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def _run(self) -> None:
        next_tick = time.monotonic()
        while not self._stop_event.is_set():
            self.refresh()
            next_tick += self.scan_interval
            delay = next_tick - time.monotonic()
            if delay < 0:
                # Fell behind; realign instead of firing a burst of ticks
                next_tick = time.monotonic()
                delay = 0
            self._stop_event.wait(delay)
