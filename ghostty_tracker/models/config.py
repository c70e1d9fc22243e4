"""Application configuration models with Pydantic validation."""

from pydantic import BaseModel, Field

# Title sigils written by the Claude Code CLI. These are an undocumented
# convention of that tool and are kept configurable.
DEFAULT_READY_SIGILS = ["✳"]
DEFAULT_BUSY_SIGILS = ["⠋", "⠙", "⠹", "⠸", "⠼", "⠴", "⠦", "⠧", "⠇", "⠏", "⠂", "⠐"]


class ProjectConfig(BaseModel):
    """A project directory that windows can be attributed to."""

    name: str = Field(..., description="Project name (shown as the window's display name)")
    path: str = Field(..., description="Absolute path to project directory")


class TrackerConfig(BaseModel):
    """Window tracker settings."""

    app_name: str = Field(
        default="Ghostty",
        description="Owner name of the target application's windows",
    )
    bundle_id: str = Field(
        default="com.mitchellh.ghostty",
        description="Bundle identifier of the target application",
    )
    agent_process: str = Field(
        default="claude",
        description="Command name of the agent process (case-insensitive exact match)",
    )
    max_trace_depth: int = Field(
        default=15,
        ge=1,
        le=64,
        description="Maximum parent hops when tracing an agent process to its window",
    )
    single_flight: bool = Field(
        default=True,
        description="Skip a refresh tick while the previous refresh is still running",
    )
    command_timeout: float = Field(
        default=5.0,
        gt=0,
        le=60,
        description="Timeout in seconds for external commands (ps, lsof, osascript)",
    )


class ClassifierConfig(BaseModel):
    """Title sigils used to classify agent state."""

    ready_sigils: list[str] = Field(
        default_factory=lambda: list(DEFAULT_READY_SIGILS),
        description="Leading title characters meaning the agent is ready for input",
    )
    busy_sigils: list[str] = Field(
        default_factory=lambda: list(DEFAULT_BUSY_SIGILS),
        description="Leading title characters meaning the agent is working",
    )


class HookStateConfig(BaseModel):
    """Hook state file store configuration."""

    state_dir: str = Field(
        default="~/.claude-states",
        description="Directory where agent hooks write state-<hash>.json files",
    )


class ApiConfig(BaseModel):
    """Loopback query API configuration."""

    enabled: bool = Field(default=True, description="Whether to start the query API")
    host: str = Field(
        default="127.0.0.1",
        pattern=r"^(127\.0\.0\.1|localhost|::1)$",
        description="Loopback address to bind",
    )
    base_port: int = Field(
        default=49876,
        ge=1024,
        le=65535,
        description="First port to try",
    )
    max_port_attempts: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Number of consecutive ports to try",
    )
    port_file: str = Field(
        default="~/.ghostty-api-port",
        description="File the bound port is written to for discovery",
    )


class AppConfig(BaseModel):
    """Root application configuration.

    Loaded from config.yaml and validated with Pydantic.
    """

    projects: list[ProjectConfig] = Field(
        default_factory=list,
        description="Projects that windows are attributed to",
    )
    scan_interval: float = Field(
        default=1.0,
        ge=0.2,
        le=60,
        description="Interval in seconds between window refreshes",
    )
    tracker: TrackerConfig = Field(default_factory=TrackerConfig)
    classifier: ClassifierConfig = Field(default_factory=ClassifierConfig)
    hooks: HookStateConfig = Field(default_factory=HookStateConfig)
    api: ApiConfig = Field(default_factory=ApiConfig)
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR)$",
        description="Root log level",
    )
