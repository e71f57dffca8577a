# backend/dishooom/services/products_service.py
"""
Products Service: product catalogue and the stock ledger.

STOCK LEDGER: adjust_stock moves currentStock up ("in") or down ("out").
Stock-out is floored at zero and clamps silently; currentStock is never
negative. Sales orders do NOT adjust stock; stock only moves here.
"""
from __future__ import annotations

import logging

from dishooom.validation import (
    BOOL,
    DATE,
    DECIMAL,
    INT,
    TEXT,
    ModelValidationPolicy,
    ValidationError,
)
from .entity_store import EntityStore

logger = logging.getLogger(__name__)

STOCK_DIRECTIONS = ("in", "out")

PRODUCT_POLICY = ModelValidationPolicy(
    entity="Product",
    field_types={
        "name": TEXT,
        "type": TEXT,
        "category": TEXT,
        "currentStock": INT,
        "minStock": INT,
        "unit": TEXT,
        "isWhiteLabelled": BOOL,
        "batchDate": DATE,
        "expiryDate": DATE,
        "costPrice": DECIMAL,
        "sellingPrice": DECIMAL,
    },
    required_on_create=frozenset({"name"}),
    non_negative=frozenset({"currentStock", "minStock", "costPrice", "sellingPrice"}),
)


class ProductStore(EntityStore):
    entity_name = "Product"
    policy = PRODUCT_POLICY
    seed_file = "products.json"

    def low_stock_products(self) -> list[dict]:
        """Products at or below their reorder threshold."""
        return self.filter(
            lambda p: (p.get("currentStock") or 0) <= (p.get("minStock") or 0)
        )

    def adjust_stock(self, product_id, quantity, direction: str = "in") -> dict:
        """
        Apply a stock movement and return the updated product.

        quantity must be a positive integer; direction is "in" or "out".
        An "out" larger than the stock on hand leaves the product at 0.
        """
        if direction not in STOCK_DIRECTIONS:
            raise ValidationError("direction must be 'in' or 'out'")
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise ValidationError("quantity must be a positive integer")

        with self._lock:
            product = self.get(product_id)
            current = product.get("currentStock") or 0
            if direction == "in":
                new_stock = current + quantity
            else:
                new_stock = max(0, current - quantity)
                if current - quantity < 0:
                    logger.info(
                        "Stock-out of %s for product %s clamped at 0 (had %s)",
                        quantity, product["Id"], current,
                    )
            return self.update(product["Id"], {"currentStock": new_stock})
