from __future__ import annotations

from flask import Blueprint, Response, current_app, jsonify, request

from ..services import settings_service
from ._common import json_error


settings_bp = Blueprint("settings", __name__, url_prefix="/api/settings")


def _path() -> str:
    return current_app.config["SETTINGS_PATH"]


@settings_bp.get("")
def get_settings():
    return jsonify(settings_service.get_settings(_path()))


@settings_bp.put("/<section>")
def update_settings_section(section: str):
    payload = request.get_json(silent=True)
    try:
        return jsonify(settings_service.update_settings(_path(), section, payload))
    except Exception as exc:
        return json_error(exc)


@settings_bp.post("/reset")
def reset_settings():
    """Reset everything, or one section with {"section": "<name>"}."""
    payload = request.get_json(silent=True) or {}
    try:
        return jsonify(settings_service.reset_settings(_path(), payload.get("section")))
    except Exception as exc:
        return json_error(exc)


@settings_bp.get("/export")
def export_settings():
    return Response(
        settings_service.export_settings(_path()),
        mimetype="application/json",
        headers={"Content-Disposition": "attachment; filename=dishooom-settings.json"},
    )


@settings_bp.post("/import")
def import_settings():
    try:
        return jsonify(settings_service.import_settings(_path(), request.get_data(as_text=True)))
    except Exception as exc:
        return json_error(exc)
