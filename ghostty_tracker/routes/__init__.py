"""Flask routes for the query API."""

from flask import Flask, jsonify, request

from ghostty_tracker.routes.windows import windows_bp

__all__ = [
    "CORS_HEADERS",
    "register_blueprints",
    "windows_bp",
]

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


def register_blueprints(app: Flask) -> None:
    """Register blueprints plus the API-wide CORS and error handling.

    Every response is JSON and carries permissive CORS headers. OPTIONS on
    any path is answered with 204; anything unrouted, including a known
    path with the wrong method, is a JSON 404.

    Args:
        app: The Flask application instance.
    """
    app.register_blueprint(windows_bp, url_prefix="/api")

    @app.before_request
    def answer_preflight():
        if request.method == "OPTIONS":
            return app.response_class(status=204)
        return None

    @app.after_request
    def add_api_headers(response):
        response.headers["Content-Type"] = "application/json"
        for key, value in CORS_HEADERS.items():
            response.headers[key] = value
        return response

    def not_found(_error):
        return jsonify({"error": "Not found"}), 404

    app.register_error_handler(404, not_found)
    app.register_error_handler(405, not_found)

    @app.errorhandler(500)
    def internal_error(_error):
        return jsonify({"error": "Internal server error"}), 500
