"""Application wiring for the Ghostty window tracker.

Builds the services and connects them:

- WindowTracker: refresh loop producing the published window snapshot
- QueryService: loopback JSON API reading that snapshot and forwarding
  focus requests to the tracker
- LaunchRegistry: windows opened by the launcher, attributed without a
  process walk

Usage:
    from ghostty_tracker.app import create_application
    application = create_application(config)
    application.start()
"""

import logging
from dataclasses import dataclass, field

from ghostty_tracker.models.config import AppConfig
from ghostty_tracker.services.launch_registry import LaunchRegistry
from ghostty_tracker.services.query_service import QueryService
from ghostty_tracker.services.window_tracker import WindowTracker

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass
class Application:
    """The running tracker and its API."""

    config: AppConfig
    tracker: WindowTracker
    query_service: QueryService | None = None
    launch_registry: LaunchRegistry = field(default_factory=LaunchRegistry)

    def start(self) -> None:
        """Run one refresh so the API starts with data, then start both loops."""
        self.tracker.refresh()
        self.tracker.start()

        if self.query_service is not None and not self.query_service.start():
            logger.warning("Query API disabled: no port available")

    def stop(self) -> None:
        if self.query_service is not None:
            self.query_service.stop()
        self.tracker.stop()


def create_application(config: AppConfig, launch_registry: LaunchRegistry | None = None) -> Application:
    """Create and wire the tracker services.

    Args:
        config: Application configuration.
        launch_registry: Shared registry of launcher-opened windows.

    Returns:
        The wired, not yet started, Application.
    """
    registry = launch_registry or LaunchRegistry()
    tracker = WindowTracker.from_config(config, launch_registry=registry)

    query_service = None
    if config.api.enabled:
        query_service = QueryService(
            snapshot_provider=tracker.windows,
            focus_handler=tracker.focus,
            host=config.api.host,
            base_port=config.api.base_port,
            max_port_attempts=config.api.max_port_attempts,
            port_file=config.api.port_file,
        )

    logger.info(f"Services initialized ({len(config.projects)} projects configured)")
    return Application(
        config=config,
        tracker=tracker,
        query_service=query_service,
        launch_registry=registry,
    )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
