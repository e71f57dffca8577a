"""
Sales Service: sales orders.

Orders hold denormalized snapshots (customerName, item productName and
unitPrice). Later edits to customers or products never rewrite them, and
deleting a customer leaves its orders untouched. totalAmount is supplied
by the caller and is not recomputed on update. Creating an order does not
move stock.
"""

from __future__ import annotations

import logging
from datetime import datetime

from dishooom.time_utils import coerce_datetime, to_utc_z
from dishooom.validation import DATE, DECIMAL, INT, ITEMS, TEXT, ModelValidationPolicy
from .document_service import format_invoice_number
from .entity_store import EntityStore
from .lifecycle_service import DEFAULT_PAYMENT_STATUS, PAYMENT_STATUSES, validate_payment_status

logger = logging.getLogger(__name__)

_EPOCH = datetime(1970, 1, 1)


class BillingDocumentStore(EntityStore):
    """Shared behaviour of documents that carry an invoice number and a payment status."""

    def _apply_defaults(self, record, record_id, now):
        record["invoiceNumber"] = format_invoice_number(record_id, now.year)
        record["paymentStatus"] = record.get("paymentStatus") or DEFAULT_PAYMENT_STATUS

    def update_payment_status(self, record_id, status: str) -> dict:
        """Direct set; any transition between known statuses is accepted."""
        validate_payment_status(status)
        return self.update(record_id, {"paymentStatus": status})

    def by_payment_status(self, status: str) -> list[dict]:
        return self.filter(lambda r: r.get("paymentStatus") == status)

    def by_customer(self, customer_id) -> list[dict]:
        customer_id = int(customer_id)
        return self.filter(lambda r: r.get("customerId") == customer_id)


SALES_ORDER_POLICY = ModelValidationPolicy(
    entity="Sales order",
    field_types={
        "customerId": INT,
        "customerName": TEXT,
        "items": ITEMS,
        "totalAmount": DECIMAL,
        "paymentStatus": TEXT,
        "invoiceNumber": TEXT,
        "orderDate": DATE,
        "notes": TEXT,
    },
    required_on_create=frozenset({"customerId", "items"}),
    non_negative=frozenset({"totalAmount"}),
    choices={"paymentStatus": frozenset(PAYMENT_STATUSES)},
)


class SalesOrderStore(BillingDocumentStore):
    entity_name = "Sales order"
    policy = SALES_ORDER_POLICY
    seed_file = "salesOrders.json"

    # Older seed files used "date" / "total" for these fields
    LEGACY_FIELDS = {"date": "orderDate", "total": "totalAmount"}

    def _apply_defaults(self, record, record_id, now):
        super()._apply_defaults(record, record_id, now)
        record["orderDate"] = record.get("orderDate") or to_utc_z(now)

    def _migrate_seed_record(self, record: dict) -> dict:
        for legacy, current in self.LEGACY_FIELDS.items():
            if legacy in record:
                value = record.pop(legacy)
                record.setdefault(current, value)
                logger.warning(
                    "Sales order seed %s uses legacy field %r; renamed to %r",
                    record.get("Id"), legacy, current,
                )
        return record

    def monthly_orders(self, year: int, month: int) -> list[dict]:
        """Orders whose orderDate falls in the given calendar month (1-12)."""
        def _in_month(order: dict) -> bool:
            dt = coerce_datetime(order.get("orderDate"))
            return dt is not None and dt.year == year and dt.month == month
        return self.filter(_in_month)

    def recent_orders(self, limit: int = 5) -> list[dict]:
        """Newest first by orderDate; undated orders sort last."""
        orders = self.list()
        orders.sort(key=lambda o: coerce_datetime(o.get("orderDate")) or _EPOCH, reverse=True)
        return orders[:limit]
