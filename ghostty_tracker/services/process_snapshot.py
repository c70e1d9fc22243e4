"""Process table capture.

One ``ps`` invocation per refresh cycle. Both the login/shell walk used for
attribution and the agent ancestry trace reuse the same snapshot.
"""

import logging

from ghostty_tracker import commands
from ghostty_tracker.exceptions import ExternalCommandError, ParseError
from ghostty_tracker.models.window import ProcessInfo, ProcessSnapshot

logger = logging.getLogger(__name__)

PS_COMMAND = ("ps", "-eo", "pid,ppid,comm")


def parse_ps_output(output: str, agent_process: str = "claude") -> ProcessSnapshot:
    """Parse ``ps -eo pid,ppid,comm`` output.

    Lines that do not start with two integers (the header, blank lines) are
    skipped. The command column keeps embedded spaces.

    Raises:
        ParseError: If no line could be parsed.
    """
    processes: dict[int, ProcessInfo] = {}
    agent_pids: set[int] = set()
    agent_name = agent_process.lower()

    for line in output.splitlines():
        parts = line.strip().split(None, 2)
        if len(parts) < 3:
            continue
        try:
            pid = int(parts[0])
            ppid = int(parts[1])
        except ValueError:
            continue
        command = parts[2]
        processes[pid] = ProcessInfo(pid=pid, ppid=ppid, command=command)
        if command.lower() == agent_name:
            agent_pids.add(pid)

    if not processes:
        raise ParseError("ps produced no parseable rows")

    return ProcessSnapshot(processes, frozenset(agent_pids))


class ProcessSnapshotter:
    """Captures the OS process table."""

    def __init__(self, agent_process: str = "claude", timeout: float = commands.DEFAULT_TIMEOUT):
        self.agent_process = agent_process
        self.timeout = timeout

    def _list_processes(self) -> str:
        returncode, stdout, stderr = commands.run_command(*PS_COMMAND, timeout=self.timeout)
        if returncode != 0:
            raise ExternalCommandError("ps", stderr.strip())
        return stdout

    def capture(self) -> ProcessSnapshot:
        """Capture the process table.

        Returns:
            The parsed snapshot, or an empty snapshot if ps failed or its
            output could not be parsed.
        """
        try:
            return parse_ps_output(self._list_processes(), self.agent_process)
        except (ExternalCommandError, ParseError) as e:
            logger.debug(f"[Process] Snapshot unavailable: {e}")
            return ProcessSnapshot.empty()
