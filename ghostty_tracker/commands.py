"""Helpers for running the external tools the tracker depends on."""

import subprocess

DEFAULT_TIMEOUT = 5.0


def run_command(*args: str, timeout: float = DEFAULT_TIMEOUT) -> tuple[int, str, str]:
    """Run an external command and capture its output.

    Args:
        *args: Command and arguments.
        timeout: Command timeout in seconds.

    Returns:
        Tuple of (return_code, stdout, stderr). A command that cannot be
        started or times out reports return code 1.
    """
    try:
        result = subprocess.run(
            list(args),
            capture_output=True,
            text=True,
            timeout=timeout,
        )
        return (result.returncode, result.stdout or "", result.stderr or "")
    except subprocess.TimeoutExpired:
        return (1, "", "Command timed out")
    except FileNotFoundError:
        return (1, "", f"{args[0]} not found")
    except OSError as e:
        return (1, "", str(e))


def run_osascript(script: str, timeout: float = DEFAULT_TIMEOUT) -> tuple[int, str, str]:
    """Run an AppleScript snippet via osascript."""
    return run_command("osascript", "-e", script, timeout=timeout)


def escape_applescript_string(text: str) -> str:
    """Escape text for use inside an AppleScript string literal."""
    return text.replace("\\", "\\\\").replace('"', '\\"')
