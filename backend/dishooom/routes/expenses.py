# Overview: Flask API routes for expenses; parses input and returns JSON responses.

from flask import Blueprint, request

from ..extensions import stores
from ._common import json_error, listing

expenses_bp = Blueprint("expenses", __name__, url_prefix="/api/expenses")


@expenses_bp.get("")
def list_expenses():
    """List expenses; optional ?category= and ?year=&month= filters."""
    category = request.args.get("category")
    year = request.args.get("year", type=int)
    month = request.args.get("month", type=int)

    if year and month:
        expenses = stores.expenses.monthly_expenses(year, month)
    else:
        expenses = stores.expenses.list()
    if category:
        expenses = [e for e in expenses if e.get("category") == category]
    return listing(expenses)


@expenses_bp.post("")
def create_expense_route():
    payload = request.get_json(silent=True) or {}
    try:
        return stores.expenses.create(payload), 201
    except Exception as e:
        return json_error(e)


@expenses_bp.get("/<int:expense_id>")
def get_expense_route(expense_id: int):
    try:
        return stores.expenses.get(expense_id)
    except Exception as e:
        return json_error(e)


@expenses_bp.put("/<int:expense_id>")
def update_expense_route(expense_id: int):
    payload = request.get_json(silent=True) or {}
    try:
        return stores.expenses.update(expense_id, payload)
    except Exception as e:
        return json_error(e)


@expenses_bp.delete("/<int:expense_id>")
def delete_expense_route(expense_id: int):
    try:
        return stores.expenses.delete(expense_id)
    except Exception as e:
        return json_error(e)
