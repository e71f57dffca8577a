# Overview: Headline counters and recent activity for the dashboard.

from __future__ import annotations

from datetime import datetime

from dishooom.time_utils import utcnow
from .lifecycle_service import DEFAULT_PAYMENT_STATUS, DEFAULT_PIPELINE_STAGE
from .store_service import StoreRegistry

RECENT_ORDERS_LIMIT = 5


def dashboard_summary(stores: StoreRegistry, now: datetime | None = None) -> dict:
    now = now or utcnow()

    pending_orders = stores.sales_orders.by_payment_status(DEFAULT_PAYMENT_STATUS)
    monthly_orders = stores.sales_orders.monthly_orders(now.year, now.month)

    return {
        "totalProducts": len(stores.products),
        "lowStockCount": len(stores.products.low_stock_products()),
        "totalCustomers": len(stores.customers),
        "newLeads": len(stores.customers.by_pipeline_stage(DEFAULT_PIPELINE_STAGE)),
        "pendingPayments": sum((o.get("totalAmount") or 0) for o in pending_orders),
        "monthlySales": sum((o.get("totalAmount") or 0) for o in monthly_orders),
        "recentOrders": stores.sales_orders.recent_orders(RECENT_ORDERS_LIMIT),
    }
