"""Command-line interface.

Usage:
    ghostty-tracker                   # Run tracker + query API (same as `serve`)
    ghostty-tracker snapshot          # One refresh, printed as JSON
    ghostty-tracker windows           # Ask a running tracker for its windows
    ghostty-tracker focus 501-1       # Ask a running tracker to focus a window
"""

import argparse
import json
import logging
import signal
import sys
import threading

from ghostty_tracker.app import configure_logging, create_application
from ghostty_tracker.client import TrackerClient
from ghostty_tracker.exceptions import ClientError
from ghostty_tracker.models.api import WindowResponse
from ghostty_tracker.services.config_service import DEFAULT_CONFIG_PATH, get_config_service
from ghostty_tracker.services.window_tracker import WindowTracker

logger = logging.getLogger(__name__)


def _serve(config) -> int:
    application = create_application(config)
    stop_event = threading.Event()

    def handle_signal(signum, _frame):
        logger.info(f"Received signal {signum}, shutting down")
        stop_event.set()

    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)

    application.start()
    try:
        stop_event.wait()
    finally:
        application.stop()
    return 0


def _snapshot(config) -> int:
    tracker = WindowTracker.from_config(config)
    snapshot = tracker.refresh()
    if snapshot is None:
        print("No snapshot: window access not granted or no process data", file=sys.stderr)
        return 1
    windows = [WindowResponse.from_record(w).model_dump(by_alias=True) for w in snapshot.windows]
    print(json.dumps({"windows": windows}, indent=2, ensure_ascii=False))
    return 0


def _windows(client: TrackerClient) -> int:
    for window in client.list_windows():
        print(f"{window['id']:>12}  {window['claudeState']:<10}  {window['displayName']}")
    return 0


def _focus(client: TrackerClient, window_id: str) -> int:
    if client.focus(window_id):
        return 0
    print(f"Window {window_id} not found", file=sys.stderr)
    return 1


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Ghostty window tracker")
    parser.add_argument("--config", default=DEFAULT_CONFIG_PATH, help="Path to config.yaml")
    parser.add_argument("--log-level", help="Override the configured log level")
    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("serve", help="Run the tracker and query API")
    subparsers.add_parser("snapshot", help="Run one refresh and print it")
    subparsers.add_parser("windows", help="List windows from a running tracker")
    focus_parser = subparsers.add_parser("focus", help="Focus a window in a running tracker")
    focus_parser.add_argument("window_id", help='Window id, "<pid>-<axIndex>"')
    args = parser.parse_args(argv)

    config = get_config_service(args.config).get_config()
    configure_logging(args.log_level or config.log_level)

    command = args.command or "serve"
    if command == "serve":
        return _serve(config)
    if command == "snapshot":
        return _snapshot(config)

    client = TrackerClient(host=config.api.host, port_file=config.api.port_file)
    try:
        if command == "windows":
            return _windows(client)
        return _focus(client, args.window_id)
    except ClientError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
