"""Agent state classification for terminal windows.

Signals, strongest first:
1. A "ready" sigil leading the window title. The hook state for the window's
   directory then decides between ASKING and WAITING.
2. A spinner glyph leading the title: WORKING.
3. Process ancestry: an agent process under the window's terminal process
   means RUNNING, otherwise NOT_RUNNING.

A window whose title was fixed externally never shows sigils, so it can only
ever be classified as RUNNING or NOT_RUNNING.
"""

from ghostty_tracker.models.config import ClassifierConfig
from ghostty_tracker.models.window import AgentState, HookState, ProcessSnapshot, WindowRecord


class AgentStateClassifier:
    """Derives an AgentState from title sigils, hook state and process tree."""

    def __init__(self, config: ClassifierConfig | None = None, max_trace_depth: int = 15):
        config = config or ClassifierConfig()
        self.ready_sigils = frozenset(config.ready_sigils)
        self.busy_sigils = frozenset(config.busy_sigils)
        self.max_trace_depth = max_trace_depth

    def title_sigil(self, title: str, sigils: frozenset[str]) -> str | None:
        """Return the sigil from ``sigils`` that leads ``title``, if any."""
        for sigil in sigils:
            if sigil and title.startswith(sigil):
                return sigil
        return None

    def is_ready_title(self, title: str) -> bool:
        return self.title_sigil(title, self.ready_sigils) is not None

    def is_busy_title(self, title: str) -> bool:
        return self.title_sigil(title, self.busy_sigils) is not None

    def has_agent_process(
        self,
        window_pid: int,
        snapshot: ProcessSnapshot,
        window_pids: set[int] | frozenset[int],
    ) -> bool:
        """Check whether any agent process descends from this window's process.

        Each agent pid is traced up to the nearest window-owning ancestor; the
        window matches if that ancestor is its own pid.
        """
        targets = set(window_pids) | {window_pid}
        for agent_pid in snapshot.agent_pids:
            if snapshot.trace_to(agent_pid, targets, self.max_trace_depth) == window_pid:
                return True
        return False

    def classify(self, window: WindowRecord, hook_state: str | None = None) -> AgentState:
        """Classify a window whose ``has_claude_process`` is already set.

        Args:
            window: The window to classify.
            hook_state: Freshest hook state label for the window's directory.
        """
        if self.is_ready_title(window.title):
            if hook_state == HookState.ASKING.value:
                return AgentState.ASKING
            return AgentState.WAITING

        if self.is_busy_title(window.title):
            return AgentState.WORKING

        if window.has_claude_process:
            return AgentState.RUNNING
        return AgentState.NOT_RUNNING
