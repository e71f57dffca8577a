# Overview: Flask API routes for customers and the lead pipeline.

"""
Customer routes.

- GET    /api/customers                        list (optional ?stage=, ?type=, ?q=)
- POST   /api/customers                        create (pipelineStage defaults to "new")
- GET    /api/customers/<id>                   read
- PUT    /api/customers/<id>                   partial update
- DELETE /api/customers/<id>                   hard delete (orders and invoices keep their snapshots)
- POST   /api/customers/<id>/pipeline-stage    {"stage": "new" | "contacted" | "closed"}
- POST   /api/customers/<id>/advance           next stage along the pipeline
- GET    /api/customers/<id>/invoices          invoices billed to the customer
"""
from flask import Blueprint, request

from ..extensions import stores
from ..validation import ValidationError
from ._common import json_error, listing

customers_bp = Blueprint("customers", __name__, url_prefix="/api/customers")

SEARCH_FIELDS = ("name", "email", "phone")


@customers_bp.get("")
def list_customers():
    stage = request.args.get("stage")
    ctype = request.args.get("type")
    term = (request.args.get("q") or "").strip().lower()

    def _match(c: dict) -> bool:
        if stage and c.get("pipelineStage") != stage:
            return False
        if ctype and c.get("type") != ctype:
            return False
        if not term:
            return True
        return any(term in str(c.get(f) or "").lower() for f in SEARCH_FIELDS)

    return listing(stores.customers.filter(_match))


@customers_bp.post("")
def create_customer_route():
    payload = request.get_json(silent=True) or {}
    try:
        return stores.customers.create(payload), 201
    except Exception as e:
        return json_error(e)


@customers_bp.get("/<int:customer_id>")
def get_customer_route(customer_id: int):
    try:
        return stores.customers.get(customer_id)
    except Exception as e:
        return json_error(e)


@customers_bp.put("/<int:customer_id>")
def update_customer_route(customer_id: int):
    payload = request.get_json(silent=True) or {}
    try:
        return stores.customers.update(customer_id, payload)
    except Exception as e:
        return json_error(e)


@customers_bp.delete("/<int:customer_id>")
def delete_customer_route(customer_id: int):
    try:
        return stores.customers.delete(customer_id)
    except Exception as e:
        return json_error(e)


@customers_bp.post("/<int:customer_id>/pipeline-stage")
def update_pipeline_stage_route(customer_id: int):
    payload = request.get_json(silent=True) or {}
    try:
        stage = payload.get("stage")
        if not stage:
            raise ValidationError("stage is required")
        return stores.customers.update_pipeline_stage(customer_id, stage)
    except Exception as e:
        return json_error(e)


@customers_bp.post("/<int:customer_id>/advance")
def advance_pipeline_stage_route(customer_id: int):
    try:
        return stores.customers.advance_pipeline_stage(customer_id)
    except Exception as e:
        return json_error(e)


@customers_bp.get("/<int:customer_id>/invoices")
def customer_invoices(customer_id: int):
    return listing(stores.invoices.by_customer(customer_id))
