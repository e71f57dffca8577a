# backend/dishooom/routes/system.py
"""
System health endpoint.

Reports store record counts and how long it took to read them, which is
the closest thing this in-memory backend has to a dependency check.
"""

import time
from flask import Blueprint, current_app

from ..extensions import stores
from ..time_utils import now_iso

system_bp = Blueprint("system", __name__)


def check_store_health() -> dict:
    start_time = time.time()
    try:
        counts = stores.registry.counts()
        elapsed_ms = (time.time() - start_time) * 1000
        return {
            "status": "healthy",
            "latency_ms": round(elapsed_ms, 2),
            "details": counts,
        }
    except Exception:
        elapsed_ms = (time.time() - start_time) * 1000
        current_app.logger.exception("Store health check failed")
        return {
            "status": "unhealthy",
            "latency_ms": round(elapsed_ms, 2),
            "error": "Store error",
        }


@system_bp.get("/health")
def health():
    stores_check = check_store_health()
    ok = stores_check["status"] == "healthy"
    return {
        "status": "ok" if ok else "degraded",
        "time": now_iso(),
        "checks": {"stores": stores_check},
    }, 200 if ok else 503
