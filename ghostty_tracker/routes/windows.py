"""Window routes for the query API.

Endpoints:
- GET  /api/health                 - Liveness and API version
- GET  /api/windows                - Latest published window snapshot
- POST /api/windows/<id>/focus     - Focus a window by "<pid>-<axIndex>"
"""

import logging

from flask import Blueprint, current_app, jsonify

from ghostty_tracker.models.api import HealthResponse, WindowResponse, WindowsResponse
from ghostty_tracker.models.window import parse_window_id

logger = logging.getLogger(__name__)

windows_bp = Blueprint("windows", __name__)


@windows_bp.route("/health", methods=["GET"])
def health():
    """Return service status and API version."""
    return jsonify(HealthResponse().model_dump())


@windows_bp.route("/windows", methods=["GET"])
def list_windows():
    """List windows from the latest published snapshot.

    Returns:
        JSON object ``{"windows": [...]}`` with one entry per window:
        - id: "<pid>-<axIndex>" (valid until the next refresh)
        - pid, axIndex: Owning process and 1-based window index
        - title: Raw window title
        - claudeState: asking | waiting | running | working | notRunning
        - displayName: Project name if attributed, else the title
        - workstreamName: Attributed project name (or null)
        - hasClaudeProcess: Whether an agent process runs in the window
    """
    provider = current_app.extensions.get("snapshot_provider")
    if provider is None:
        return jsonify({"error": "Window data not available"}), 503

    windows = [WindowResponse.from_record(window) for window in provider()]
    logger.debug(f"[API] GET /windows - returning {len(windows)} windows")
    return jsonify(WindowsResponse(windows=windows).model_dump(by_alias=True))


@windows_bp.route("/windows/<window_id>/focus", methods=["POST"])
def focus_window(window_id: str):
    """Focus a window.

    Args:
        window_id: "<pid>-<axIndex>" as returned by GET /api/windows.

    Returns:
        ``{"success": bool}``; 400 for a malformed id, 503 when no focus
        handler is registered.
    """
    parsed = parse_window_id(window_id)
    if parsed is None:
        return jsonify({"error": "Invalid window ID"}), 400

    handler = current_app.extensions.get("focus_handler")
    if handler is None:
        return jsonify({"error": "Focus handler not available"}), 503

    pid, ax_index = parsed
    try:
        result = handler(pid, ax_index)
    except Exception as e:
        logger.error(f"[API] Focus handler failed for {window_id}: {e}")
        return jsonify({"error": "Focus failed"}), 500

    return jsonify({"success": result is not False})
