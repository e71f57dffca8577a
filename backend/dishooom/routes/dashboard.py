# Overview: Dashboard counters endpoint.

from flask import Blueprint

from ..extensions import stores
from ..services.dashboard_service import dashboard_summary

dashboard_bp = Blueprint("dashboard", __name__, url_prefix="/api/dashboard")


@dashboard_bp.get("")
def dashboard():
    return dashboard_summary(stores.registry)
