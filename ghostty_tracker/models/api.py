"""Wire models for the query API.

Field names on the wire are camelCase; Python attributes stay snake_case.
"""

from pydantic import BaseModel, ConfigDict, Field

from ghostty_tracker.models.window import WindowRecord

API_VERSION = "1.0.0"


class WindowResponse(BaseModel):
    """One window as served by ``GET /api/windows``."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    pid: int
    ax_index: int = Field(..., alias="axIndex")
    title: str
    claude_state: str = Field(..., alias="claudeState")
    display_name: str = Field(..., alias="displayName")
    workstream_name: str | None = Field(default=None, alias="workstreamName")
    has_claude_process: bool = Field(..., alias="hasClaudeProcess")

    @classmethod
    def from_record(cls, window: WindowRecord) -> "WindowResponse":
        return cls(
            id=window.id,
            pid=window.pid,
            ax_index=window.ax_index,
            title=window.title,
            claude_state=window.claude_state.value,
            display_name=window.display_name,
            workstream_name=window.workstream_name,
            has_claude_process=window.has_claude_process,
        )


class WindowsResponse(BaseModel):
    windows: list[WindowResponse] = Field(default_factory=list)


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = API_VERSION
