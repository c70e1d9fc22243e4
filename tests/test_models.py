"""Tests for domain models."""

import pytest

from ghostty_tracker.models import (
    AgentState,
    AppConfig,
    HookStateEntry,
    WindowRecord,
    WindowResponse,
    WindowSnapshot,
    parse_window_id,
)


class TestAgentState:
    """Tests for AgentState enum."""

    def test_wire_values(self):
        """States serialize to the API's labels."""
        assert AgentState.ASKING.value == "asking"
        assert AgentState.WAITING.value == "waiting"
        assert AgentState.RUNNING.value == "running"
        assert AgentState.WORKING.value == "working"
        assert AgentState.NOT_RUNNING.value == "notRunning"

    def test_priority_order(self):
        """asking > waiting > running > working > notRunning."""
        ordered = sorted(AgentState, key=lambda s: s.priority, reverse=True)
        assert ordered == [
            AgentState.ASKING,
            AgentState.WAITING,
            AgentState.RUNNING,
            AgentState.WORKING,
            AgentState.NOT_RUNNING,
        ]


class TestWindowRecord:
    """Tests for WindowRecord."""

    def test_id_combines_pid_and_index(self):
        """Window id is '<pid>-<ax_index>'."""
        window = WindowRecord(pid=501, ax_index=2, title="zsh")
        assert window.id == "501-2"

    def test_display_name_prefers_project(self):
        """display_name uses the attributed project when present."""
        window = WindowRecord(pid=1, ax_index=1, title="zsh", workstream_name="api")
        assert window.display_name == "api"

    def test_display_name_falls_back_to_title(self):
        """display_name uses the title when unattributed."""
        window = WindowRecord(pid=1, ax_index=1, title="zsh")
        assert window.display_name == "zsh"

    def test_defaults(self):
        window = WindowRecord(pid=1, ax_index=1, title="zsh")
        assert window.claude_state == AgentState.NOT_RUNNING
        assert window.has_claude_process is False
        assert window.hook_state is None


class TestParseWindowId:
    """Tests for parse_window_id."""

    def test_valid_id(self):
        assert parse_window_id("501-1") == (501, 1)

    @pytest.mark.parametrize(
        "window_id", ["501", "abc-1", "501-x", "1-2-3", "", "-", "+501-1", "501_1-1", "501- 1", "501-1 ", "-1-1"]
    )
    def test_invalid_ids(self, window_id):
        """Anything but two dash-separated integers is rejected."""
        assert parse_window_id(window_id) is None


class TestProcessSnapshot:
    """Tests for ProcessSnapshot."""

    def test_mapping_interface(self, process_tree):
        assert 502 in process_tree
        assert process_tree[502].command == "-zsh"
        assert len(process_tree) == 8

    def test_find_child_by_command(self, process_tree):
        login = process_tree.find_child(500, command_contains="login")
        assert login is not None
        assert login.pid == 501

    def test_find_child_none(self, process_tree):
        assert process_tree.find_child(503) is None

    def test_trace_reaches_target(self, process_tree):
        assert process_tree.trace_to(503, {500, 600}) == 500

    def test_trace_stops_at_init(self, process_tree):
        """Walk stops when the parent is pid 1 or lower."""
        assert process_tree.trace_to(503, {42}) is None

    def test_trace_respects_depth(self, make_snapshot):
        """A chain longer than max_depth is not followed to the end."""
        rows = [(100, 1, "ghostty")] + [(100 + i, 100 + i - 1, f"p{i}") for i in range(1, 20)]
        snapshot = make_snapshot(rows)
        assert snapshot.trace_to(119, {100}, max_depth=15) is None
        assert snapshot.trace_to(119, {100}, max_depth=19) == 100

    def test_empty(self, make_snapshot):
        snapshot = make_snapshot([])
        assert len(snapshot) == 0
        assert snapshot.agent_pids == frozenset()


class TestWindowSnapshot:
    """Tests for WindowSnapshot."""

    def test_get_by_id(self, windows):
        snapshot = WindowSnapshot(windows=tuple(windows), cycle=1)
        assert snapshot.get("600-1").title == "zsh"
        assert snapshot.get("999-1") is None

    def test_empty_snapshot(self):
        snapshot = WindowSnapshot()
        assert len(snapshot) == 0
        assert snapshot.cycle == 0


class TestHookStateEntry:
    def test_is_asking(self):
        assert HookStateEntry(state="asking", cwd="/a", timestamp=1).is_asking
        assert not HookStateEntry(state="waiting", cwd="/a", timestamp=1).is_asking


class TestWindowResponse:
    """Tests for the API wire model."""

    def test_camel_case_aliases(self):
        """Serialized field names match the wire protocol."""
        window = WindowRecord(
            pid=501,
            ax_index=1,
            title="✳ Claude Code",
            workstream_name="proj",
            has_claude_process=True,
            claude_state=AgentState.WAITING,
        )
        data = WindowResponse.from_record(window).model_dump(by_alias=True)
        assert data == {
            "id": "501-1",
            "pid": 501,
            "axIndex": 1,
            "title": "✳ Claude Code",
            "claudeState": "waiting",
            "displayName": "proj",
            "workstreamName": "proj",
            "hasClaudeProcess": True,
        }


class TestAppConfig:
    """Tests for AppConfig defaults."""

    def test_defaults(self):
        config = AppConfig()
        assert config.projects == []
        assert config.scan_interval == 1.0
        assert config.tracker.agent_process == "claude"
        assert config.tracker.max_trace_depth == 15
        assert config.api.base_port == 49876
        assert config.api.max_port_attempts == 10
        assert "✳" in config.classifier.ready_sigils
        assert "⠋" in config.classifier.busy_sigils

    def test_rejects_non_loopback_host(self):
        with pytest.raises(ValueError):
            AppConfig(api={"host": "0.0.0.0"})
