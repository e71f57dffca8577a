# Overview: Tests for stock movements, the customer pipeline and payment status.

"""
State-field and stock tests.

Tests:
- Stock in/out arithmetic and the zero floor
- Low stock listing
- Pipeline default, permissive transitions and lastContact refresh
- Payment status transitions on orders and invoices
"""

from datetime import timedelta

import pytest

from dishooom.services.lifecycle_service import (
    LifecycleError,
    next_pipeline_stage,
    validate_payment_status,
)
from dishooom.time_utils import to_utc_z, utcnow
from dishooom.validation import NotFoundError, ValidationError

from conftest import make_order


class TestStockLedger:
    """ProductStore.adjust_stock."""

    def test_stock_in_adds(self, registry):
        product = registry.products.create({"name": "Soap", "currentStock": 10})
        updated = registry.products.adjust_stock(product["Id"], 5, "in")
        assert updated["currentStock"] == 15

    def test_direction_defaults_to_in(self, registry):
        product = registry.products.create({"name": "Soap", "currentStock": 1})
        assert registry.products.adjust_stock(product["Id"], 2)["currentStock"] == 3

    def test_stock_out_subtracts(self, registry):
        product = registry.products.create({"name": "Soap", "currentStock": 10})
        assert registry.products.adjust_stock(product["Id"], 4, "out")["currentStock"] == 6

    def test_stock_out_clamps_at_zero(self, registry):
        """Receive 3 into an empty product, then ship 5: stock ends at 0."""
        product = registry.products.create({"name": "Soap", "currentStock": 0, "minStock": 5})
        assert registry.products.adjust_stock(product["Id"], 3, "in")["currentStock"] == 3
        updated = registry.products.adjust_stock(product["Id"], 5, "out")
        assert updated["currentStock"] == 0
        assert registry.products.low_stock_products()[0]["Id"] == product["Id"]

    def test_stock_movement_stamps_updated_at(self, registry, clock):
        product = registry.products.create({"name": "Soap", "currentStock": 0})
        clock.advance(timedelta(hours=1))
        updated = registry.products.adjust_stock(product["Id"], 1, "in")
        assert updated["updatedAt"] == "2026-10-15T10:30:00.000Z"

    @pytest.mark.parametrize("quantity", [0, -2, 1.5, "3", True, None])
    def test_invalid_quantity_rejected(self, registry, quantity):
        product = registry.products.create({"name": "Soap", "currentStock": 4})
        with pytest.raises(ValidationError):
            registry.products.adjust_stock(product["Id"], quantity, "in")
        assert registry.products.get(product["Id"])["currentStock"] == 4

    def test_invalid_direction_rejected(self, registry):
        product = registry.products.create({"name": "Soap"})
        with pytest.raises(ValidationError, match="direction"):
            registry.products.adjust_stock(product["Id"], 1, "sideways")

    def test_unknown_product(self, registry):
        with pytest.raises(NotFoundError):
            registry.products.adjust_stock(77, 1, "in")

    def test_low_stock_includes_threshold(self, registry):
        registry.products.create({"name": "At", "currentStock": 5, "minStock": 5})
        registry.products.create({"name": "Above", "currentStock": 6, "minStock": 5})
        registry.products.create({"name": "Below", "currentStock": 1, "minStock": 5})
        names = [p["name"] for p in registry.products.low_stock_products()]
        assert names == ["At", "Below"]


class TestCustomerPipeline:
    """CustomerStore pipeline stage handling."""

    def test_new_customer_defaults_to_new(self, registry):
        customer = registry.customers.create({"name": "Acme", "type": "Retailer"})
        assert customer["pipelineStage"] == "new"

    def test_new_customer_stamps_last_contact(self, registry):
        customer = registry.customers.create({"name": "Acme"})
        assert customer["lastContact"] == "2026-10-15T09:30:00.000Z"
        given = registry.customers.create({"name": "Old", "lastContact": "2026-01-02T00:00:00.000Z"})
        assert given["lastContact"] == "2026-01-02T00:00:00.000Z"

    def test_generic_update_of_stage_refreshes_last_contact(self, registry, clock):
        customer = registry.customers.create({"name": "Acme"})
        clock.advance(timedelta(hours=1))
        updated = registry.customers.update(customer["Id"], {"pipelineStage": "closed"})
        assert updated["lastContact"] == "2026-10-15T10:30:00.000Z"

    def test_update_without_stage_change_keeps_last_contact(self, registry, clock):
        customer = registry.customers.create({"name": "Acme"})
        clock.advance(timedelta(hours=1))
        updated = registry.customers.update(customer["Id"], {"pipelineStage": "new", "phone": "123"})
        assert updated["lastContact"] == customer["lastContact"]

    def test_stage_change_refreshes_last_contact(self):
        """Real clock: lastContact is not earlier than the call."""
        from dishooom.services.customer_service import CustomerStore

        customers = CustomerStore()
        customer = customers.create({"name": "Acme"})
        before = to_utc_z(utcnow())
        updated = customers.update_pipeline_stage(customer["Id"], "contacted")
        assert updated["pipelineStage"] == "contacted"
        # Fixed-width ISO strings compare chronologically
        assert updated["lastContact"] >= before

    def test_transitions_are_permissive(self, registry):
        customer = registry.customers.create({"name": "Acme", "pipelineStage": "closed"})
        assert registry.customers.update_pipeline_stage(customer["Id"], "new")["pipelineStage"] == "new"

    def test_invalid_stage_rejected(self, registry):
        customer = registry.customers.create({"name": "Acme"})
        with pytest.raises(LifecycleError):
            registry.customers.update_pipeline_stage(customer["Id"], "won")
        with pytest.raises(ValidationError):
            registry.customers.create({"name": "Other", "pipelineStage": "won"})

    def test_invalid_customer_type_rejected(self, registry):
        with pytest.raises(ValidationError, match="type"):
            registry.customers.create({"name": "Acme", "type": "Distributor"})

    def test_advance_walks_forward_then_stops(self, registry):
        customer = registry.customers.create({"name": "Acme"})
        assert registry.customers.advance_pipeline_stage(customer["Id"])["pipelineStage"] == "contacted"
        assert registry.customers.advance_pipeline_stage(customer["Id"])["pipelineStage"] == "closed"
        with pytest.raises(LifecycleError, match="closed"):
            registry.customers.advance_pipeline_stage(customer["Id"])

    def test_next_pipeline_stage(self):
        assert next_pipeline_stage("new") == "contacted"
        assert next_pipeline_stage("closed") is None

    def test_by_pipeline_stage(self, registry):
        registry.customers.create({"name": "A"})
        registry.customers.create({"name": "B", "pipelineStage": "contacted"})
        assert [c["name"] for c in registry.customers.by_pipeline_stage("new")] == ["A"]


class TestPaymentStatus:
    """Payment status on sales orders and invoices."""

    def test_order_defaults_to_pending(self, registry):
        order = registry.sales_orders.create(make_order())
        assert order["paymentStatus"] == "pending"

    def test_any_known_transition_accepted(self, registry):
        order = registry.sales_orders.create(make_order(paymentStatus="paid"))
        updated = registry.sales_orders.update_payment_status(order["Id"], "pending")
        assert updated["paymentStatus"] == "pending"

    def test_unknown_status_rejected(self, registry):
        order = registry.sales_orders.create(make_order())
        with pytest.raises(LifecycleError):
            registry.sales_orders.update_payment_status(order["Id"], "overdue")
        with pytest.raises(ValidationError):
            validate_payment_status("refunded")

    def test_invoice_status_update(self, registry):
        invoice = registry.invoices.create(make_order())
        updated = registry.invoices.update_payment_status(invoice["Id"], "partial")
        assert updated["paymentStatus"] == "partial"
        assert registry.invoices.by_payment_status("partial")[0]["Id"] == invoice["Id"]
