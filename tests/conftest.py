"""Pytest configuration and shared fixtures for window tracker tests."""

import tempfile
from pathlib import Path

import pytest

from ghostty_tracker.models.config import ProjectConfig
from ghostty_tracker.models.window import ProcessInfo, ProcessSnapshot, WindowRecord
from ghostty_tracker.services.config_service import reset_config_service


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset module-level singletons between tests."""
    reset_config_service()
    yield
    reset_config_service()


@pytest.fixture
def temp_dir():
    """Create a temporary directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


def _make_snapshot(rows, agent_pids=()):
    processes = {pid: ProcessInfo(pid=pid, ppid=ppid, command=command) for pid, ppid, command in rows}
    return ProcessSnapshot(processes, frozenset(agent_pids))


@pytest.fixture
def make_snapshot():
    """Factory building a ProcessSnapshot from (pid, ppid, command) tuples."""
    return _make_snapshot


@pytest.fixture
def process_tree():
    """Two Ghostty windows: 500 runs claude in /Users/me/proj, 600 is a plain shell.

    500 ghostty
      501 login
        502 -zsh
          503 claude
    600 ghostty
      601 login
        602 -zsh
    """
    return _make_snapshot(
        [
            (1, 0, "launchd"),
            (500, 1, "/Applications/Ghostty.app/Contents/MacOS/ghostty"),
            (501, 500, "/usr/bin/login"),
            (502, 501, "-zsh"),
            (503, 502, "claude"),
            (600, 1, "/Applications/Ghostty.app/Contents/MacOS/ghostty"),
            (601, 600, "/usr/bin/login"),
            (602, 601, "-zsh"),
        ],
        agent_pids=[503],
    )


@pytest.fixture
def projects():
    return [
        ProjectConfig(name="proj", path="/Users/me/proj"),
        ProjectConfig(name="other", path="/Users/me/other"),
    ]


@pytest.fixture
def windows():
    return [
        WindowRecord(pid=500, ax_index=1, title="✳ Claude Code"),
        WindowRecord(pid=600, ax_index=1, title="zsh"),
    ]
