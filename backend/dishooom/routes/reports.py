from flask import Blueprint, Response, current_app, jsonify, request

from ..extensions import stores
from ..services import reporting_service, settings_service
from ._common import json_error


reports_bp = Blueprint("reports", __name__, url_prefix="/api/reports")


def _currency() -> str:
    code = settings_service.currency_code(current_app.config["SETTINGS_PATH"])
    return reporting_service.currency_symbol(code)


def _build(kind: str) -> dict:
    start, end = reporting_service.parse_range(request.args.get("start"), request.args.get("end"))
    return reporting_service.generate_report(
        stores.registry, kind, start, end, currency=_currency()
    )


@reports_bp.get("/<kind>")
def report(kind: str):
    """
    Build a report. Interval kinds (sales, expenses, overview) need
    ?start= and ?end= (ISO-8601; a bare end date covers the whole day).
    """
    try:
        return jsonify(_build(kind)), 200
    except Exception as exc:
        return json_error(exc)


@reports_bp.get("/<kind>/export.csv")
def export_report(kind: str):
    try:
        body = reporting_service.report_to_csv(_build(kind))
    except Exception as exc:
        return json_error(exc)
    return Response(
        body,
        mimetype="text/csv",
        headers={"Content-Disposition": f"attachment; filename={kind}-report.csv"},
    )
