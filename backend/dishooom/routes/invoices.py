# Overview: Flask API routes for invoices; parses input and returns JSON responses.

from flask import Blueprint, request

from ..extensions import stores
from ..validation import ValidationError
from ._common import json_error, listing

invoices_bp = Blueprint("invoices", __name__, url_prefix="/api/invoices")


@invoices_bp.get("")
def list_invoices():
    """List invoices; optional ?status=, ?customer_id=, ?order_id= filters."""
    status = request.args.get("status")
    customer_id = request.args.get("customer_id", type=int)
    order_id = request.args.get("order_id", type=int)

    invoices = stores.invoices.list()
    if status:
        invoices = [i for i in invoices if i.get("paymentStatus") == status]
    if customer_id is not None:
        invoices = [i for i in invoices if i.get("customerId") == customer_id]
    if order_id is not None:
        invoices = [i for i in invoices if i.get("orderId") == order_id]
    return listing(invoices)


@invoices_bp.post("")
def create_invoice_route():
    payload = request.get_json(silent=True) or {}
    try:
        return stores.invoices.create(payload), 201
    except Exception as e:
        return json_error(e)


@invoices_bp.get("/<int:invoice_id>")
def get_invoice_route(invoice_id: int):
    try:
        return stores.invoices.get(invoice_id)
    except Exception as e:
        return json_error(e)


@invoices_bp.put("/<int:invoice_id>")
def update_invoice_route(invoice_id: int):
    payload = request.get_json(silent=True) or {}
    try:
        return stores.invoices.update(invoice_id, payload)
    except Exception as e:
        return json_error(e)


@invoices_bp.delete("/<int:invoice_id>")
def delete_invoice_route(invoice_id: int):
    try:
        return stores.invoices.delete(invoice_id)
    except Exception as e:
        return json_error(e)


@invoices_bp.post("/<int:invoice_id>/payment-status")
def update_invoice_payment_status_route(invoice_id: int):
    payload = request.get_json(silent=True) or {}
    try:
        status = payload.get("status")
        if not status:
            raise ValidationError("status is required")
        return stores.invoices.update_payment_status(invoice_id, status)
    except Exception as e:
        return json_error(e)
