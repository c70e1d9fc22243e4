"""Services for the Ghostty window tracker."""

from ghostty_tracker.services.attribution import (
    NO_MATCH,
    AttributionResolver,
    match_project,
    parse_lsof_cwd,
)
from ghostty_tracker.services.classifier import AgentStateClassifier
from ghostty_tracker.services.config_service import (
    ConfigService,
    get_config_service,
    reset_config_service,
)
from ghostty_tracker.services.hook_state import HookStateStore, parse_state_file, state_file_name
from ghostty_tracker.services.launch_registry import LaunchRegistry
from ghostty_tracker.services.process_snapshot import ProcessSnapshotter, parse_ps_output
from ghostty_tracker.services.query_service import QueryService, create_api_app
from ghostty_tracker.services.window_tracker import CyclePhase, SnapshotHolder, WindowTracker

__all__ = [
    "NO_MATCH",
    "AgentStateClassifier",
    "AttributionResolver",
    "ConfigService",
    "CyclePhase",
    "HookStateStore",
    "LaunchRegistry",
    "ProcessSnapshotter",
    "QueryService",
    "SnapshotHolder",
    "WindowTracker",
    "create_api_app",
    "get_config_service",
    "match_project",
    "parse_lsof_cwd",
    "parse_ps_output",
    "parse_state_file",
    "reset_config_service",
    "state_file_name",
]
