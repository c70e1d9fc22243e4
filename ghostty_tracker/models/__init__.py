"""Domain models for the Ghostty window tracker."""

from ghostty_tracker.models.api import (
    API_VERSION,
    HealthResponse,
    WindowResponse,
    WindowsResponse,
)
from ghostty_tracker.models.config import (
    ApiConfig,
    AppConfig,
    ClassifierConfig,
    HookStateConfig,
    ProjectConfig,
    TrackerConfig,
)
from ghostty_tracker.models.window import (
    AgentState,
    HookState,
    HookStateEntry,
    ProcessInfo,
    ProcessSnapshot,
    WindowRecord,
    WindowSnapshot,
    parse_window_id,
)

__all__ = [
    # Window
    "AgentState",
    "HookState",
    "HookStateEntry",
    "ProcessInfo",
    "ProcessSnapshot",
    "WindowRecord",
    "WindowSnapshot",
    "parse_window_id",
    # API
    "API_VERSION",
    "HealthResponse",
    "WindowResponse",
    "WindowsResponse",
    # Config
    "ApiConfig",
    "AppConfig",
    "ClassifierConfig",
    "HookStateConfig",
    "ProjectConfig",
    "TrackerConfig",
]
