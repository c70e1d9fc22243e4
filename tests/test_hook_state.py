"""Tests for the hook state store."""

import hashlib
import json

from ghostty_tracker.models.window import HookStateEntry
from ghostty_tracker.services.hook_state import HookStateStore, parse_state_file, state_file_name


def write_state(directory, name, **data):
    path = directory / name
    path.write_text(json.dumps(data))
    return path


class TestStateFileName:
    def test_matches_shell_md5(self):
        """Name hashes the cwd with a trailing newline, like `echo | md5`."""
        digest = hashlib.md5(b"/Users/me/proj\n").hexdigest()[:8]
        assert state_file_name("/Users/me/proj") == f"state-{digest}.json"


class TestParseStateFile:
    """Tests for parse_state_file."""

    def test_valid(self):
        entry = parse_state_file(
            json.dumps({"state": "asking", "session_id": "s1", "cwd": "/a", "timestamp": 100})
        )
        assert entry == HookStateEntry(state="asking", cwd="/a", timestamp=100.0, session_id="s1")

    def test_empty_session_id_is_none(self):
        entry = parse_state_file(json.dumps({"state": "waiting", "session_id": "", "cwd": "/a", "timestamp": 1}))
        assert entry.session_id is None

    def test_rejects_malformed(self):
        assert parse_state_file("{not json") is None
        assert parse_state_file("[]") is None
        assert parse_state_file(json.dumps({"state": "asking", "timestamp": 1})) is None
        assert parse_state_file(json.dumps({"state": "asking", "cwd": "/a"})) is None
        assert parse_state_file(json.dumps({"state": "asking", "cwd": "/a", "timestamp": "100"})) is None
        assert parse_state_file(json.dumps({"state": "asking", "cwd": "/a", "timestamp": True})) is None


class TestHookStateStore:
    """Tests for HookStateStore."""

    def test_missing_directory(self, temp_dir):
        store = HookStateStore(temp_dir / "absent")
        assert store.load() == 0
        assert len(store) == 0

    def test_newer_timestamp_wins(self, temp_dir):
        """An older 'asking' never overrides a newer 'waiting' for the same cwd."""
        write_state(temp_dir, "a.json", state="asking", cwd="/p", timestamp=50)
        write_state(temp_dir, "b.json", state="waiting", cwd="/p", timestamp=100)
        store = HookStateStore(temp_dir)

        store.load()

        assert store.state_for("/p") == "waiting"

    def test_equal_timestamp_keeps_existing(self):
        store = HookStateStore()
        assert store.merge(HookStateEntry(state="asking", cwd="/p", timestamp=10))
        assert not store.merge(HookStateEntry(state="waiting", cwd="/p", timestamp=10))
        assert store.state_for("/p") == "asking"

    def test_state_persists_across_loads(self, temp_dir):
        """A cached entry survives until a newer file supersedes it."""
        path = write_state(temp_dir, "a.json", state="asking", cwd="/p", timestamp=100)
        store = HookStateStore(temp_dir)
        store.load()

        path.unlink()
        store.load()
        assert store.state_for("/p") == "asking"

        write_state(temp_dir, "a.json", state="waiting", cwd="/p", timestamp=200)
        store.load()
        assert store.state_for("/p") == "waiting"

    def test_skips_malformed_files(self, temp_dir):
        (temp_dir / "bad.json").write_text("{broken")
        write_state(temp_dir, "good.json", state="waiting", cwd="/p", timestamp=1)
        (temp_dir / "notes.txt").write_text("ignored")
        store = HookStateStore(temp_dir)

        assert store.load() == 1
        assert len(store) == 1

    def test_lookup_exact_first(self):
        store = HookStateStore()
        store.merge(HookStateEntry(state="waiting", cwd="/p", timestamp=1))
        store.merge(HookStateEntry(state="asking", cwd="/p/sub", timestamp=99))
        assert store.state_for("/p") == "waiting"

    def test_lookup_prefix_either_direction(self):
        """Agent may run in a subdirectory or a parent of the window's cwd."""
        store = HookStateStore()
        store.merge(HookStateEntry(state="asking", cwd="/p/sub", timestamp=5))
        assert store.state_for("/p") == "asking"

        store = HookStateStore()
        store.merge(HookStateEntry(state="asking", cwd="/p", timestamp=5))
        assert store.state_for("/p/sub/deeper") == "asking"

    def test_lookup_prefers_freshest_prefix(self):
        store = HookStateStore()
        store.merge(HookStateEntry(state="asking", cwd="/p/a", timestamp=5))
        store.merge(HookStateEntry(state="waiting", cwd="/p/b", timestamp=9))
        assert store.state_for("/p") == "waiting"

    def test_lookup_ignores_sibling_prefix(self):
        store = HookStateStore()
        store.merge(HookStateEntry(state="asking", cwd="/p-other", timestamp=5))
        assert store.lookup("/p") is None
        assert store.lookup(None) is None

    def test_write_state_round_trip(self, temp_dir):
        """Files written by write_state are picked up by load."""
        writer = HookStateStore(temp_dir / "states")
        path = writer.write_state("/Users/me/proj", "asking", session_id="s1", timestamp=1234)

        assert path.name == state_file_name("/Users/me/proj")
        assert json.loads(path.read_text()) == {
            "state": "asking",
            "session_id": "s1",
            "cwd": "/Users/me/proj",
            "timestamp": 1234,
        }
        assert list((temp_dir / "states").glob("*.tmp")) == []

        reader = HookStateStore(temp_dir / "states")
        reader.load()
        assert reader.lookup("/Users/me/proj").session_id == "s1"

    def test_write_state_overwrites_same_cwd(self, temp_dir):
        store = HookStateStore(temp_dir)
        store.write_state("/p", "asking", timestamp=1)
        store.write_state("/p", "waiting", timestamp=2)
        assert len(list(temp_dir.glob("*.json"))) == 1

    def test_clear(self):
        store = HookStateStore()
        store.merge(HookStateEntry(state="asking", cwd="/p", timestamp=1))
        store.clear()
        assert len(store) == 0
