# Overview: Shared error-to-JSON mapping for the API blueprints.

from flask import current_app, jsonify

from ..services.reporting_service import ReportError
from ..validation import NotFoundError, ValidationError


def json_error(exc: Exception):
    if isinstance(exc, NotFoundError):
        return jsonify({"error": str(exc)}), 404
    if isinstance(exc, (ValidationError, ReportError)):
        return jsonify({"error": str(exc)}), 400
    current_app.logger.exception("Unhandled API error")
    return jsonify({"error": "Internal server error"}), 500


def listing(items: list[dict]) -> dict:
    return {"items": items, "count": len(items)}
