"""Exception types for the window tracker.

These are raised by the low-level helpers that detect a problem and caught at
component boundaries (process capture, enumeration, refresh, focus, API
start), where they are logged and degraded to "no data for this cycle".
"""


class TrackerError(Exception):
    """Base exception for window tracker errors."""


class PermissionDeniedError(TrackerError):
    """Raised when screen/window access has not been granted."""


class ExternalCommandError(TrackerError):
    """Raised when an external tool (ps, lsof, osascript) fails to run."""

    def __init__(self, command: str, detail: str = ""):
        self.command = command
        self.detail = detail
        message = f"External command failed: {command}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class ParseError(TrackerError):
    """Raised when an external tool produces output of an unexpected shape."""


class FocusTargetNotFoundError(TrackerError):
    """Raised when a focus request names an unknown pid or window index."""

    def __init__(self, pid: int, ax_index: int):
        self.pid = pid
        self.ax_index = ax_index
        super().__init__(f"No window {ax_index} for PID {pid}")


class ClientError(TrackerError):
    """Raised by the API client when the tracker cannot be reached."""


class PortExhaustedError(TrackerError):
    """Raised when the query service cannot bind any port in its range."""

    def __init__(self, base_port: int, attempts: int):
        self.base_port = base_port
        self.attempts = attempts
        super().__init__(
            f"No available port in range {base_port}-{base_port + attempts - 1}"
        )
