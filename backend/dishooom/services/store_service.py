# Overview: Builds the per-application set of entity stores and loads their seed data.

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, fields
from pathlib import Path

from dishooom.validation import ValidationError
from .customer_service import CustomerStore
from .entity_store import EntityStore
from .expense_service import ExpenseStore
from .invoice_service import InvoiceStore
from .products_service import ProductStore
from .sales_service import SalesOrderStore

logger = logging.getLogger(__name__)


class SeedError(ValidationError):
    """Raised when a seed file cannot be read or does not hold a JSON array."""
    pass


@dataclass
class StoreRegistry:
    """One store per entity type; created once per application and shared by every handler."""
    products: ProductStore
    customers: CustomerStore
    sales_orders: SalesOrderStore
    invoices: InvoiceStore
    expenses: ExpenseStore

    @classmethod
    def create(cls, *, latency_ms: int = 0, clock=None) -> "StoreRegistry":
        kwargs = {"latency_ms": latency_ms}
        if clock is not None:
            kwargs["clock"] = clock
        return cls(
            products=ProductStore(**kwargs),
            customers=CustomerStore(**kwargs),
            sales_orders=SalesOrderStore(**kwargs),
            invoices=InvoiceStore(**kwargs),
            expenses=ExpenseStore(**kwargs),
        )

    def items(self) -> list[tuple[str, EntityStore]]:
        return [(f.name, getattr(self, f.name)) for f in fields(self)]

    def counts(self) -> dict[str, int]:
        return {name: len(store) for name, store in self.items()}

    def load_seed_dir(self, seed_dir: str | Path) -> dict[str, int]:
        """
        Load every store from <seed_dir>/<store.seed_file>.

        A missing file leaves that store empty. Returns per-store counts.
        """
        seed_path = Path(seed_dir)
        loaded = {}
        for name, store in self.items():
            loaded[name] = load_seed_file(store, seed_path / store.seed_file)
        logger.info(
            "Seed data loaded from %s: %s",
            seed_path,
            ", ".join(f"{k}={v}" for k, v in loaded.items()),
        )
        return loaded

    def reset(self) -> None:
        for _, store in self.items():
            store.clear()


def load_seed_file(store: EntityStore, path: Path) -> int:
    if not path.exists():
        logger.info("No seed file for %s at %s", store.entity_name, path)
        return 0
    try:
        records = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise SeedError(f"Cannot read seed file {path}: {exc}") from exc
    if not isinstance(records, list):
        raise SeedError(f"Seed file {path} must contain a JSON array")
    return store.load_seed(records)
