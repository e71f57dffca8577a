# Overview: Flask API routes for products and stock movements; parses input and returns JSON responses.

"""
Product routes.

- GET    /api/products              list (optional ?category=, ?q= name search)
- GET    /api/products/low-stock    products at or below minStock
- POST   /api/products              create
- GET    /api/products/<id>         read
- PUT    /api/products/<id>         partial update
- DELETE /api/products/<id>         hard delete
- POST   /api/products/<id>/stock   {"quantity": int, "direction": "in" | "out"}
"""
from flask import Blueprint, request

from ..extensions import stores
from ..validation import ValidationError
from ._common import json_error, listing

products_bp = Blueprint("products", __name__, url_prefix="/api/products")


@products_bp.get("")
def list_products():
    category = request.args.get("category")
    term = (request.args.get("q") or "").strip().lower()

    def _match(p: dict) -> bool:
        if category and p.get("category") != category:
            return False
        return not term or term in str(p.get("name") or "").lower()

    return listing(stores.products.filter(_match))


@products_bp.get("/low-stock")
def low_stock_products():
    return listing(stores.products.low_stock_products())


@products_bp.post("")
def create_product_route():
    payload = request.get_json(silent=True) or {}
    try:
        return stores.products.create(payload), 201
    except Exception as e:
        return json_error(e)


@products_bp.get("/<int:product_id>")
def get_product_route(product_id: int):
    try:
        return stores.products.get(product_id)
    except Exception as e:
        return json_error(e)


@products_bp.put("/<int:product_id>")
def update_product_route(product_id: int):
    payload = request.get_json(silent=True) or {}
    try:
        return stores.products.update(product_id, payload)
    except Exception as e:
        return json_error(e)


@products_bp.delete("/<int:product_id>")
def delete_product_route(product_id: int):
    try:
        return stores.products.delete(product_id)
    except Exception as e:
        return json_error(e)


@products_bp.post("/<int:product_id>/stock")
def adjust_stock_route(product_id: int):
    payload = request.get_json(silent=True) or {}
    try:
        quantity = payload.get("quantity")
        if isinstance(quantity, str) and quantity.strip().isdigit():
            quantity = int(quantity.strip())
        direction = payload.get("direction", "in")
        if quantity is None:
            raise ValidationError("quantity is required")
        return stores.products.adjust_stock(product_id, quantity, direction)
    except Exception as e:
        return json_error(e)
