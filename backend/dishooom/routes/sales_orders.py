# Overview: Flask API routes for sales orders; parses input and returns JSON responses.

"""
Sales order routes.

- GET    /api/sales-orders                        list (optional ?status=, ?customer_id=, ?year=&month=)
- POST   /api/sales-orders                        create (assigns invoiceNumber, defaults paymentStatus)
- GET    /api/sales-orders/<id>                   read
- PUT    /api/sales-orders/<id>                   partial update (totalAmount is not recomputed)
- DELETE /api/sales-orders/<id>                   hard delete
- POST   /api/sales-orders/<id>/payment-status    {"status": "pending" | "partial" | "paid"}
- GET    /api/sales-orders/<id>/invoices          invoices raised against the order
"""
from flask import Blueprint, request

from ..extensions import stores
from ..validation import ValidationError
from ._common import json_error, listing

sales_orders_bp = Blueprint("sales_orders", __name__, url_prefix="/api/sales-orders")


@sales_orders_bp.get("")
def list_sales_orders():
    status = request.args.get("status")
    customer_id = request.args.get("customer_id", type=int)
    year = request.args.get("year", type=int)
    month = request.args.get("month", type=int)

    if year and month:
        orders = stores.sales_orders.monthly_orders(year, month)
    else:
        orders = stores.sales_orders.list()

    if status:
        orders = [o for o in orders if o.get("paymentStatus") == status]
    if customer_id is not None:
        orders = [o for o in orders if o.get("customerId") == customer_id]
    return listing(orders)


@sales_orders_bp.post("")
def create_sales_order_route():
    payload = request.get_json(silent=True) or {}
    try:
        return stores.sales_orders.create(payload), 201
    except Exception as e:
        return json_error(e)


@sales_orders_bp.get("/<int:order_id>")
def get_sales_order_route(order_id: int):
    try:
        return stores.sales_orders.get(order_id)
    except Exception as e:
        return json_error(e)


@sales_orders_bp.put("/<int:order_id>")
def update_sales_order_route(order_id: int):
    payload = request.get_json(silent=True) or {}
    try:
        return stores.sales_orders.update(order_id, payload)
    except Exception as e:
        return json_error(e)


@sales_orders_bp.delete("/<int:order_id>")
def delete_sales_order_route(order_id: int):
    try:
        return stores.sales_orders.delete(order_id)
    except Exception as e:
        return json_error(e)


@sales_orders_bp.post("/<int:order_id>/payment-status")
def update_order_payment_status_route(order_id: int):
    payload = request.get_json(silent=True) or {}
    try:
        status = payload.get("status")
        if not status:
            raise ValidationError("status is required")
        return stores.sales_orders.update_payment_status(order_id, status)
    except Exception as e:
        return json_error(e)


@sales_orders_bp.get("/<int:order_id>/invoices")
def order_invoices(order_id: int):
    return listing(stores.invoices.by_order(order_id))
