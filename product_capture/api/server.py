# product_capture/api/server.py

"""Flask endpoint exposing the capture pipeline over HTTP."""

import logging

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from product_capture.config.settings import Settings
from product_capture.services.capture_orchestrator import CaptureOrchestrator

logger = logging.getLogger("product_capture.api")


def create_app(orchestrator: CaptureOrchestrator | None = None) -> Flask:
    """Build the Flask application.

    The orchestrator is created lazily on the first capture request
    unless one is injected, so health probes never touch Playwright
    or the rate provider.
    """
    app = Flask(__name__)
    app.json.sort_keys = False  # type: ignore[attr-defined]
    state: dict[str, CaptureOrchestrator | None] = {
        "orchestrator": orchestrator,
    }

    def get_orchestrator() -> CaptureOrchestrator:
        if state["orchestrator"] is None:
            state["orchestrator"] = CaptureOrchestrator()
        return state["orchestrator"]

    @app.post("/api/capture-product")
    def capture_product():  # type: ignore[no-untyped-def]
        payload = request.get_json(silent=True)
        if not isinstance(payload, dict):
            return jsonify(success=False, error="Invalid JSON body"), 400

        url = payload.get("url")
        if not isinstance(url, str) or not url.strip():
            return (
                jsonify(success=False, error=Settings.MSG_URL_REQUIRED),
                400,
            )

        result = get_orchestrator().capture(url)
        logger.info(
            "POST /api/capture-product %s -> %d", url, result.status_code
        )
        return jsonify(result.to_dict()), result.status_code

    @app.get("/api/health")
    def health():  # type: ignore[no-untyped-def]
        return jsonify(status="ok")

    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException):  # type: ignore[no-untyped-def]
        return jsonify(success=False, error=exc.name), exc.code or 500

    @app.errorhandler(Exception)
    def handle_unexpected(exc: Exception):  # type: ignore[no-untyped-def]
        logger.error("Unhandled error: %s", exc, exc_info=True)
        return jsonify(success=False, error=Settings.MSG_CAPTURE_FAILED), 500

    return app
