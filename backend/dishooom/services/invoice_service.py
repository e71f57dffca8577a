# Overview: Invoices; same numbering and payment-status rules as sales orders, plus tax and due date.

from __future__ import annotations

from datetime import timedelta

from dishooom.time_utils import to_utc_z
from dishooom.validation import DATE, DECIMAL, INT, ITEMS, TEXT, ModelValidationPolicy
from .lifecycle_service import PAYMENT_STATUSES
from .sales_service import BillingDocumentStore

PAYMENT_TERMS_DAYS = 30

INVOICE_POLICY = ModelValidationPolicy(
    entity="Invoice",
    field_types={
        "customerId": INT,
        "customerName": TEXT,
        "orderId": INT,
        "items": ITEMS,
        "subtotal": DECIMAL,
        "taxAmount": DECIMAL,
        "totalAmount": DECIMAL,
        "paymentStatus": TEXT,
        "invoiceNumber": TEXT,
        "invoiceDate": DATE,
        "dueDate": DATE,
        "notes": TEXT,
    },
    required_on_create=frozenset({"customerId", "items"}),
    non_negative=frozenset({"subtotal", "taxAmount", "totalAmount"}),
    choices={"paymentStatus": frozenset(PAYMENT_STATUSES)},
)


def _unlink_empty_order(fields: dict) -> None:
    # The invoice form sends "" when no order is linked
    if fields.get("orderId") == "":
        fields["orderId"] = None


class InvoiceStore(BillingDocumentStore):
    entity_name = "Invoice"
    policy = INVOICE_POLICY
    seed_file = "invoices.json"

    def _apply_defaults(self, record, record_id, now):
        super()._apply_defaults(record, record_id, now)
        record["invoiceDate"] = to_utc_z(now)
        record["dueDate"] = to_utc_z(now + timedelta(days=PAYMENT_TERMS_DAYS))
        _unlink_empty_order(record)

    def update(self, record_id, updates: dict) -> dict:
        if isinstance(updates, dict) and updates.get("orderId") == "":
            updates = dict(updates)
            _unlink_empty_order(updates)
        return super().update(record_id, updates)

    def by_order(self, order_id) -> list[dict]:
        order_id = int(order_id)
        return self.filter(lambda r: r.get("orderId") == order_id)
