"""Window, process and snapshot models.

Window ids are cycle-scoped: ``"<pid>-<ax_index>"`` where ``ax_index`` is the
1-based position of the window in its owning process's window list. The pair
is re-derived on every refresh and is only meaningful until the next one.
"""

import re
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class AgentState(str, Enum):
    """Derived state of the coding agent inside a terminal window.

    Display priority (highest first):
    ASKING > WAITING > RUNNING > WORKING > NOT_RUNNING
    """

    ASKING = "asking"
    """Agent is waiting on an unanswered question or permission prompt."""

    WAITING = "waiting"
    """Agent is idle at its prompt, ready for input."""

    RUNNING = "running"
    """Agent process is present but its finer state is unknown."""

    WORKING = "working"
    """Agent is busy (spinner in the window title)."""

    NOT_RUNNING = "notRunning"
    """No agent detected in this window."""

    @property
    def priority(self) -> int:
        """Display priority, higher sorts first."""
        return _STATE_PRIORITY[self]


_STATE_PRIORITY = {
    AgentState.ASKING: 4,
    AgentState.WAITING: 3,
    AgentState.RUNNING: 2,
    AgentState.WORKING: 1,
    AgentState.NOT_RUNNING: 0,
}


class HookState(str, Enum):
    """State labels written by the agent's lifecycle hooks."""

    ASKING = "asking"
    WAITING = "waiting"


@dataclass(frozen=True)
class ProcessInfo:
    """One row of the OS process table."""

    pid: int
    ppid: int
    command: str


class ProcessSnapshot(Mapping):
    """Immutable capture of the process table for one refresh cycle.

    Behaves as a read-only mapping of pid -> ProcessInfo. ``agent_pids`` holds
    the pids whose command matched the agent process name at capture time.
    """

    def __init__(
        self,
        processes: Mapping[int, ProcessInfo] | None = None,
        agent_pids: frozenset[int] | None = None,
    ):
        self._processes = dict(processes or {})
        self.agent_pids = frozenset(agent_pids or ())

    @classmethod
    def empty(cls) -> "ProcessSnapshot":
        return cls()

    def __getitem__(self, pid: int) -> ProcessInfo:
        return self._processes[pid]

    def __iter__(self) -> Iterator[int]:
        return iter(self._processes)

    def __len__(self) -> int:
        return len(self._processes)

    def children_of(self, pid: int) -> list[ProcessInfo]:
        """Return direct children of ``pid`` in pid order."""
        return sorted(
            (info for info in self._processes.values() if info.ppid == pid),
            key=lambda info: info.pid,
        )

    def find_child(self, pid: int, command_contains: str | None = None) -> ProcessInfo | None:
        """Return the first child of ``pid``, optionally filtered by command substring."""
        for child in self.children_of(pid):
            if command_contains is None or command_contains in child.command:
                return child
        return None

    def trace_to(self, start_pid: int, targets: set[int] | frozenset[int], max_depth: int = 15) -> int | None:
        """Walk parent links from ``start_pid`` until one of ``targets`` is reached.

        The walk stops after ``max_depth`` hops, on a pid missing from the
        snapshot, or when the parent is pid 1 or lower.

        Returns:
            The target pid that was reached, or None.
        """
        current = start_pid
        for _ in range(max_depth):
            info = self._processes.get(current)
            if info is None:
                return None
            parent = info.ppid
            if parent <= 1:
                return None
            if parent in targets:
                return parent
            current = parent
        return None


@dataclass
class HookStateEntry:
    """A hook-reported agent state for one working directory."""

    state: str
    cwd: str
    timestamp: float
    session_id: str | None = None

    @property
    def is_asking(self) -> bool:
        return self.state == HookState.ASKING.value


@dataclass
class WindowRecord:
    """A terminal window discovered during one refresh cycle.

    Built unenriched by a window enumerator, then filled in by attribution and
    classification before the cycle publishes it.
    """

    pid: int  # Owning process id
    ax_index: int  # 1-based position within the owning process's window list
    title: str  # Raw window title (may start with an agent sigil)
    workstream_name: str | None = None  # Attributed project name
    shell_cwd: str | None = None  # Working directory of the interactive shell
    has_claude_process: bool = False
    hook_state: str | None = None
    claude_state: AgentState = AgentState.NOT_RUNNING

    @property
    def id(self) -> str:
        return f"{self.pid}-{self.ax_index}"

    @property
    def display_name(self) -> str:
        """Project name when attributed, otherwise the raw title."""
        return self.workstream_name or self.title


@dataclass(frozen=True)
class WindowSnapshot:
    """Complete, immutable set of window records published by one refresh."""

    windows: tuple[WindowRecord, ...] = ()
    cycle: int = 0
    generated_at: datetime = field(default_factory=datetime.now)

    def get(self, window_id: str) -> WindowRecord | None:
        for window in self.windows:
            if window.id == window_id:
                return window
        return None

    def __len__(self) -> int:
        return len(self.windows)


_WINDOW_ID_PATTERN = re.compile(r"([0-9]+)-([0-9]+)")


def parse_window_id(window_id: str) -> tuple[int, int] | None:
    """Parse ``"<pid>-<ax_index>"`` into a (pid, ax_index) tuple.

    Returns:
        The parsed pair, or None if the id is not two dash-separated integers.
    """
    match = _WINDOW_ID_PATTERN.fullmatch(window_id)
    if match is None:
        return None
    return int(match.group(1)), int(match.group(2))
