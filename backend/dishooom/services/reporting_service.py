# Overview: Derived reporting over store snapshots: sales, expenses, inventory and a business overview.

"""
Report Invariants

- Reports read full snapshots from the stores and never mutate them.
- Interval reports keep records whose date lies in [start, end] inclusive;
  records with a missing or unparseable date are left out, not errors.
- Averages and percentages are 0 when their denominator is 0.
- Rankings sort descending by value; ties keep first-encountered order.
- Day buckets are labelled "%b %d" and keep first-seen label order.
- Any exception while building a report is logged and turned into an
  empty, well-formed report whose summary says loading failed.
"""

from __future__ import annotations

import csv
import functools
import io
import logging
import math
from datetime import datetime, timedelta
from typing import Callable, Iterable

from dishooom.time_utils import coerce_datetime, parse_iso_datetime
from .store_service import StoreRegistry

logger = logging.getLogger(__name__)

REPORT_KINDS = ("sales", "expenses", "inventory", "overview")

DAY_LABEL_FORMAT = "%b %d"
TOP_PRODUCTS_LIMIT = 10
HEALTHY_MARGIN_PCT = 10.0

# Stock-level distribution bands used by the inventory chart
HIGH_STOCK_ABOVE = 50
LOW_STOCK_BELOW = 10

CURRENCY_SYMBOLS = {"USD": "$", "INR": "₹", "EUR": "€", "GBP": "£"}


class ReportError(ValueError):
    """Raised for caller errors at the report edge (unknown kind, bad range)."""
    pass


# ---------------------------------------------------------------------------
# Aggregation helpers
# ---------------------------------------------------------------------------

def currency_symbol(code: str | None) -> str:
    if not code:
        return "$"
    return CURRENCY_SYMBOLS.get(code.upper(), f"{code} ")


def format_money(amount: float, symbol: str = "$") -> str:
    return f"{symbol}{amount:,.2f}"


def in_interval(value, start: datetime, end: datetime) -> bool:
    dt = coerce_datetime(value)
    return dt is not None and start <= dt <= end


def filter_interval(records: Iterable[dict], date_field: str, start: datetime, end: datetime) -> list[dict]:
    if start > end:
        raise ReportError("start must not be after end")
    return [r for r in records if in_interval(r.get(date_field), start, end)]


def total_of(records: Iterable[dict], field: str) -> float:
    return sum((r.get(field) or 0) for r in records)


def average(total: float, count: int) -> float:
    return total / count if count else 0


def previous_period(start: datetime, end: datetime) -> tuple[datetime, datetime]:
    """The period of equal length (in whole days, rounded up) ending at start."""
    days = math.ceil((end - start) / timedelta(days=1))
    return start - timedelta(days=days), start


def percent_change(current: float, previous: float) -> float:
    if previous <= 0:
        return 0.0
    return (current - previous) / previous * 100


def bucket_by_day(records: Iterable[dict], date_field: str, value_of: Callable[[dict], float]) -> dict[str, float]:
    buckets: dict[str, float] = {}
    for record in records:
        dt = coerce_datetime(record.get(date_field))
        if dt is None:
            continue
        label = dt.strftime(DAY_LABEL_FORMAT)
        buckets[label] = buckets.get(label, 0) + value_of(record)
    return buckets


def rank_desc(totals: dict, limit: int | None = None) -> list[tuple]:
    # sorted() is stable, also with reverse=True, so ties keep insertion order
    ranked = sorted(totals.items(), key=lambda kv: kv[1], reverse=True)
    return ranked if limit is None else ranked[:limit]


def _metric(title: str, value: str, trend: str = "neutral", trend_value: str = "") -> dict:
    return {"title": title, "value": value, "trend": trend, "trendValue": trend_value}


def _trend_direction(change: float) -> str:
    return "up" if change >= 0 else "down"


def empty_report(kind: str) -> dict:
    return {
        "kind": kind,
        "metrics": [],
        "chartTitle": "",
        "chartData": None,
        "tableTitle": "",
        "tableData": None,
        "summary": f"Error loading {kind} report data.",
        "totals": {},
    }


def degrade_gracefully(kind: str):
    """Turn any failure inside a report builder into empty_report(kind)."""
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except Exception:
                logger.exception("Failed to build %s report", kind)
                return empty_report(kind)
        return wrapper
    return decorator


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------

@degrade_gracefully("sales")
def sales_report(stores: StoreRegistry, start: datetime, end: datetime, *, currency: str = "$") -> dict:
    orders = stores.sales_orders.list()
    products = {p["Id"]: p for p in stores.products.list()}

    current = filter_interval(orders, "orderDate", start, end)
    total_revenue = total_of(current, "totalAmount")
    total_orders = len(current)
    average_order_value = average(total_revenue, total_orders)
    active_customers = len({o.get("customerId") for o in current})

    prev_start, prev_end = previous_period(start, end)
    previous = filter_interval(orders, "orderDate", prev_start, prev_end)
    previous_revenue = total_of(previous, "totalAmount")
    revenue_trend = percent_change(total_revenue, previous_revenue)

    revenue_by_day = bucket_by_day(current, "orderDate", lambda o: o.get("totalAmount") or 0)

    quantity_by_product: dict[str, int] = {}
    for order in current:
        for item in order.get("items") or []:
            product = products.get(item.get("productId"))
            if product is None:
                continue
            name = product.get("name")
            quantity_by_product[name] = quantity_by_product.get(name, 0) + (item.get("quantity") or 0)

    top_products = [
        [name, qty, f"{qty} units"]
        for name, qty in rank_desc(quantity_by_product, TOP_PRODUCTS_LIMIT)
    ]
    top_name = top_products[0][0] if top_products else "N/A"

    return {
        "kind": "sales",
        "metrics": [
            _metric(
                "Total Revenue",
                format_money(total_revenue, currency),
                _trend_direction(revenue_trend),
                f"{abs(revenue_trend):.1f}%",
            ),
            _metric("Total Orders", str(total_orders)),
            _metric("Avg Order Value", format_money(average_order_value, currency)),
            _metric("Active Customers", str(active_customers)),
        ],
        "chartTitle": "Sales Trend",
        "chartData": {
            "categories": list(revenue_by_day.keys()),
            "series": [{"name": "Revenue", "data": list(revenue_by_day.values())}],
        },
        "tableTitle": "Top Products",
        "tableData": {
            "headers": ["Product", "Quantity Sold", "Units"],
            "rows": top_products,
        },
        "summary": (
            f"Generated {total_orders} sales orders with total revenue of "
            f"{format_money(total_revenue, currency)} during the selected period.\n"
            f"Average order value was {format_money(average_order_value, currency)}.\n"
            f"Top performing product: {top_name}."
        ),
        "totals": {
            "totalRevenue": total_revenue,
            "totalOrders": total_orders,
            "averageOrderValue": average_order_value,
            "activeCustomers": active_customers,
            "previousRevenue": previous_revenue,
            "revenueTrend": revenue_trend,
        },
    }


@degrade_gracefully("expenses")
def expense_report(stores: StoreRegistry, start: datetime, end: datetime, *, currency: str = "$") -> dict:
    expenses = stores.expenses.list()

    current = filter_interval(expenses, "date", start, end)
    total_expenses = total_of(current, "amount")
    total_count = len(current)
    average_expense = average(total_expenses, total_count)

    prev_start, prev_end = previous_period(start, end)
    previous_expenses = total_of(filter_interval(expenses, "date", prev_start, prev_end), "amount")

    by_category: dict[str, float] = {}
    for expense in current:
        category = expense.get("category")
        by_category[category] = by_category.get(category, 0) + (expense.get("amount") or 0)

    by_day = bucket_by_day(current, "date", lambda e: e.get("amount") or 0)

    category_rows = [
        [category, format_money(amount, currency), amount]
        for category, amount in rank_desc(by_category)
    ]
    top_category = category_rows[0][0] if category_rows else "N/A"

    return {
        "kind": "expenses",
        "metrics": [
            _metric("Total Expenses", format_money(total_expenses, currency)),
            _metric("Total Transactions", str(total_count)),
            _metric("Average Expense", format_money(average_expense, currency)),
            _metric("Categories", str(len(by_category))),
        ],
        "chartTitle": "Expense Trend",
        "chartData": {
            "categories": list(by_day.keys()),
            "series": [{"name": "Expenses", "data": list(by_day.values())}],
        },
        "tableTitle": "Expenses by Category",
        "tableData": {
            "headers": ["Category", "Amount", "Total"],
            "rows": category_rows,
        },
        "summary": (
            f"Recorded {total_count} expense transactions totaling "
            f"{format_money(total_expenses, currency)} during the selected period.\n"
            f"Average expense amount was {format_money(average_expense, currency)}.\n"
            f"Highest expense category: {top_category}."
        ),
        "totals": {
            "totalExpenses": total_expenses,
            "totalCount": total_count,
            "averageExpense": average_expense,
            "categoryCount": len(by_category),
            "previousExpenses": previous_expenses,
            "expenseTrend": percent_change(total_expenses, previous_expenses),
        },
    }


@degrade_gracefully("inventory")
def inventory_report(stores: StoreRegistry, *, currency: str = "$") -> dict:
    products = stores.products.list()

    total_products = len(products)
    total_value = sum((p.get("sellingPrice") or 0) * (p.get("currentStock") or 0) for p in products)
    low_stock_count = sum(
        1 for p in products if (p.get("currentStock") or 0) <= (p.get("minStock") or 0)
    )
    average_price = average(total_of(products, "sellingPrice"), total_products)

    stock_levels = {
        f"High Stock (>{HIGH_STOCK_ABOVE})": 0,
        f"Medium Stock ({LOW_STOCK_BELOW}-{HIGH_STOCK_ABOVE})": 0,
        f"Low Stock (<{LOW_STOCK_BELOW})": 0,
    }
    high, medium, low = stock_levels.keys()
    by_category: dict[str, int] = {}
    for product in products:
        stock = product.get("currentStock") or 0
        if stock > HIGH_STOCK_ABOVE:
            stock_levels[high] += 1
        elif stock >= LOW_STOCK_BELOW:
            stock_levels[medium] += 1
        else:
            stock_levels[low] += 1
        category = product.get("category")
        by_category[category] = by_category.get(category, 0) + 1

    category_rows = [
        [category, count, f"{count} products"]
        for category, count in rank_desc(by_category)
    ]
    top_category = category_rows[0][0] if category_rows else "N/A"
    restock_line = (
        f"{low_stock_count} products need restocking."
        if low_stock_count
        else "All products are adequately stocked."
    )

    return {
        "kind": "inventory",
        "metrics": [
            _metric("Total Products", str(total_products)),
            _metric("Inventory Value", format_money(total_value, currency)),
            _metric(
                "Low Stock Items",
                str(low_stock_count),
                "down" if low_stock_count else "neutral",
                "Needs attention" if low_stock_count else "",
            ),
            _metric("Average Price", format_money(average_price, currency)),
        ],
        "chartTitle": "Stock Levels Distribution",
        "chartData": {
            "categories": list(stock_levels.keys()),
            "series": [{"name": "Products", "data": list(stock_levels.values())}],
        },
        "tableTitle": "Products by Category",
        "tableData": {
            "headers": ["Category", "Product Count", "Details"],
            "rows": category_rows,
        },
        "summary": (
            f"Managing {total_products} products with total inventory value of "
            f"{format_money(total_value, currency)}.\n"
            f"{restock_line}\n"
            f"Most popular category: {top_category}."
        ),
        "totals": {
            "totalProducts": total_products,
            "inventoryValue": total_value,
            "lowStockCount": low_stock_count,
            "averagePrice": average_price,
        },
    }


@degrade_gracefully("overview")
def business_overview(stores: StoreRegistry, start: datetime, end: datetime, *, currency: str = "$") -> dict:
    sales = sales_report(stores, start, end, currency=currency)["totals"]
    spend = expense_report(stores, start, end, currency=currency)["totals"]
    inventory = inventory_report(stores, currency=currency)["totals"]

    revenue = sales["totalRevenue"]
    expenses = spend["totalExpenses"]
    profit = revenue - expenses
    margin = profit / revenue * 100 if revenue > 0 else 0.0
    healthy = margin >= HEALTHY_MARGIN_PCT

    revenue_trend = sales["revenueTrend"]
    expense_trend = spend["expenseTrend"]

    return {
        "kind": "overview",
        "metrics": [
            _metric(
                "Total Revenue",
                format_money(revenue, currency),
                _trend_direction(revenue_trend),
                f"{abs(revenue_trend):.1f}%",
            ),
            _metric(
                "Total Expenses",
                format_money(expenses, currency),
                _trend_direction(expense_trend),
                f"{abs(expense_trend):.1f}%",
            ),
            _metric(
                "Net Profit",
                format_money(profit, currency),
                _trend_direction(profit),
                f"{abs(margin):.1f}%",
            ),
            _metric("Profit Margin", f"{margin:.1f}%", _trend_direction(margin)),
        ],
        "chartTitle": "Revenue vs Expenses",
        "chartData": {
            "categories": ["Revenue", "Expenses", "Profit"],
            "series": [{"name": "Amount", "data": [revenue, expenses, profit]}],
        },
        "tableTitle": "Business Summary",
        "tableData": {
            "headers": ["Metric", "Current Period", "Status"],
            "rows": [
                ["Revenue", format_money(revenue, currency), "Good"],
                ["Expenses", format_money(expenses, currency), "Controlled"],
                ["Profit", format_money(profit, currency), "Positive" if profit >= 0 else "Negative"],
                ["Profit Margin", f"{margin:.1f}%", "Healthy" if healthy else "Needs Improvement"],
            ],
        },
        "summary": (
            f"Business generated {format_money(revenue, currency)} in revenue with "
            f"{format_money(expenses, currency)} in expenses, resulting in "
            f"{'a profit' if profit >= 0 else 'a loss'} of {format_money(abs(profit), currency)}.\n"
            f"Profit margin is {margin:.1f}%, which is "
            f"{'healthy' if healthy else f'below recommended {HEALTHY_MARGIN_PCT:.0f}%'}.\n"
            f"{inventory['lowStockCount']} products need restocking attention."
        ),
        "totals": {
            "revenue": revenue,
            "expenses": expenses,
            "profit": profit,
            "profitMargin": margin,
            "lowStockCount": inventory["lowStockCount"],
        },
    }


def _parse_bound(value: str | None, *, end_of_day: bool) -> datetime | None:
    if value is None or not value.strip():
        return None
    try:
        dt = parse_iso_datetime(value)
    except ValueError:
        raise ReportError(f"Invalid date '{value}'; expected ISO-8601")
    # A bare date as the upper bound covers the whole day
    if end_of_day and "T" not in value and " " not in value.strip():
        dt = dt + timedelta(days=1) - timedelta(microseconds=1)
    return dt


def parse_range(start: str | None, end: str | None) -> tuple[datetime | None, datetime | None]:
    return _parse_bound(start, end_of_day=False), _parse_bound(end, end_of_day=True)


def generate_report(
    stores: StoreRegistry,
    kind: str,
    start: datetime | None = None,
    end: datetime | None = None,
    *,
    currency: str = "$",
) -> dict:
    """Dispatch by report kind; interval kinds need both start and end."""
    if kind not in REPORT_KINDS:
        raise ReportError(f"Unknown report kind '{kind}'. Must be one of: {', '.join(REPORT_KINDS)}")
    if kind == "inventory":
        return inventory_report(stores, currency=currency)
    if start is None or end is None:
        raise ReportError(f"start and end are required for the {kind} report")
    if start > end:
        raise ReportError("start must not be after end")
    builders = {
        "sales": sales_report,
        "expenses": expense_report,
        "overview": business_overview,
    }
    return builders[kind](stores, start, end, currency=currency)


def report_to_csv(report: dict) -> str:
    """Render a report's table as CSV text (header row first)."""
    buf = io.StringIO()
    writer = csv.writer(buf)
    table = report.get("tableData") or {}
    if table.get("headers"):
        writer.writerow(table["headers"])
    for row in table.get("rows") or []:
        writer.writerow(row)
    return buf.getvalue()
