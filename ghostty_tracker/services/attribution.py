"""Window attribution: which project directory is a terminal window in?

The terminal process spawns a ``login`` child, which in turn runs the
interactive shell. The shell's working directory is the one that matters;
it is read once per shell pid with ``lsof`` and memoized, on the assumption
that a given shell pid's cwd does not need re-reading while it lives.
"""

import logging

from ghostty_tracker import commands
from ghostty_tracker.exceptions import ExternalCommandError, ParseError
from ghostty_tracker.models.config import ProjectConfig
from ghostty_tracker.models.window import ProcessSnapshot, WindowRecord
from ghostty_tracker.services.launch_registry import LaunchRegistry

logger = logging.getLogger(__name__)


class _NoMatch:
    """Sentinel cached when a window's cwd matched no configured project."""

    def __repr__(self) -> str:
        return "NO_MATCH"

    def __bool__(self) -> bool:
        return False


NO_MATCH = _NoMatch()


def _normalize(path: str) -> str:
    stripped = path.rstrip("/")
    return stripped or "/"


def match_project(cwd: str, projects: list[ProjectConfig]) -> str | None:
    """Match a directory against configured projects.

    Exact path equality is tried across all projects before any
    subdirectory match. The first match in configuration order wins.

    Returns:
        The project name, or None if no project matches.
    """
    if not cwd:
        return None
    target = _normalize(cwd)

    for project in projects:
        if project.path and _normalize(project.path) == target:
            return project.name

    for project in projects:
        if not project.path:
            continue
        base = _normalize(project.path)
        prefix = base if base.endswith("/") else base + "/"
        if target.startswith(prefix):
            return project.name

    return None


def parse_lsof_cwd(output: str) -> str:
    """Extract the path from ``lsof -F n`` output.

    Raises:
        ParseError: If no ``n`` field line is present.
    """
    for line in output.splitlines():
        if line.startswith("n") and len(line) > 1:
            return line[1:]
    raise ParseError("lsof output has no name field")


class AttributionResolver:
    """Resolves each window's shell cwd and project name, with caching.

    Caches:
    - shell cwd: shell pid -> path. Dropped when the shell exits or its
      window closes.
    - attribution: window pid -> project name or NO_MATCH. A missing key
      means attribution has not been attempted yet.
    """

    def __init__(
        self,
        projects: list[ProjectConfig] | None = None,
        launch_registry: LaunchRegistry | None = None,
        timeout: float = commands.DEFAULT_TIMEOUT,
    ):
        self.projects = list(projects or [])
        self.launch_registry = launch_registry
        self.timeout = timeout

        self._shell_cwds: dict[int, str] = {}
        self._shell_owners: dict[int, int] = {}  # shell pid -> window pid
        self._attributions: dict[int, object] = {}

    @property
    def shell_cwd_cache(self) -> dict[int, str]:
        return dict(self._shell_cwds)

    @property
    def attribution_cache(self) -> dict[int, object]:
        return dict(self._attributions)

    def directory_for_project(self, name: str | None) -> str | None:
        """Return the configured directory for a project name."""
        if not name:
            return None
        for project in self.projects:
            if project.name == name:
                return project.path
        return None

    def _query_cwd(self, shell_pid: int) -> str:
        returncode, stdout, stderr = commands.run_command(
            "lsof", "-a", "-p", str(shell_pid), "-d", "cwd", "-F", "n", timeout=self.timeout
        )
        if returncode != 0:
            raise ExternalCommandError("lsof", stderr.strip())
        return parse_lsof_cwd(stdout)

    def find_shell(self, window_pid: int, snapshot: ProcessSnapshot) -> int | None:
        """Find the interactive shell under a terminal process.

        Returns:
            The pid of the first child of the window's ``login`` child, or None.
        """
        login = snapshot.find_child(window_pid, command_contains="login")
        if login is None:
            return None
        shell = snapshot.find_child(login.pid)
        if shell is None:
            return None
        return shell.pid

    def shell_cwd(self, window_pid: int, snapshot: ProcessSnapshot) -> str | None:
        """Return the cwd of the window's interactive shell, or None."""
        shell_pid = self.find_shell(window_pid, snapshot)
        if shell_pid is None:
            return None

        cached = self._shell_cwds.get(shell_pid)
        if cached is not None:
            return cached

        try:
            cwd = self._query_cwd(shell_pid)
        except (ExternalCommandError, ParseError) as e:
            logger.debug(f"[Attribution] No cwd for shell {shell_pid}: {e}")
            return None

        self._shell_cwds[shell_pid] = cwd
        self._shell_owners[shell_pid] = window_pid
        return cwd

    def resolve_project_and_cwd(
        self, window: WindowRecord, snapshot: ProcessSnapshot
    ) -> tuple[str | None, str | None]:
        """Resolve a window's working directory and project.

        Returns:
            Tuple of (cwd, project name). Either may be None: no shell, no
            readable cwd and no matching project are all normal outcomes.
        """
        if self.launch_registry is not None:
            launched = self.launch_registry.get(window.pid)
            if launched:
                return self.directory_for_project(launched), launched

        cwd = self.shell_cwd(window.pid, snapshot)

        if window.pid in self._attributions:
            cached = self._attributions[window.pid]
            return cwd, cached if isinstance(cached, str) else None

        if cwd is None:
            return None, None

        project = match_project(cwd, self.projects)
        self._attributions[window.pid] = project if project is not None else NO_MATCH
        return cwd, project

    def evict(self, active_window_pids: set[int], snapshot: ProcessSnapshot | None = None) -> None:
        """Drop cache entries for closed windows and exited shells.

        An empty snapshot means the process table was unavailable, so shell
        liveness is not judged from it.
        """
        for pid in [pid for pid in self._attributions if pid not in active_window_pids]:
            del self._attributions[pid]

        have_processes = snapshot is not None and len(snapshot) > 0
        stale_shells = [
            shell_pid
            for shell_pid, owner in self._shell_owners.items()
            if owner not in active_window_pids or (have_processes and shell_pid not in snapshot)
        ]
        for shell_pid in stale_shells:
            self._shell_owners.pop(shell_pid, None)
            self._shell_cwds.pop(shell_pid, None)
