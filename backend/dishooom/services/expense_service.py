# Overview: Business expenses by category.

from __future__ import annotations

from dishooom.time_utils import coerce_datetime, to_utc_z
from dishooom.validation import DATE, DECIMAL, TEXT, ModelValidationPolicy
from .entity_store import EntityStore

EXPENSE_CATEGORIES = (
    "Raw Materials",
    "Packaging",
    "Transport",
    "Marketing",
    "Utilities",
    "Equipment",
    "Office",
    "Other",
)

EXPENSE_POLICY = ModelValidationPolicy(
    entity="Expense",
    field_types={
        "category": TEXT,
        "amount": DECIMAL,
        "description": TEXT,
        "vendor": TEXT,
        "date": DATE,
    },
    required_on_create=frozenset({"category", "amount"}),
    positive=frozenset({"amount"}),
    choices={"category": frozenset(EXPENSE_CATEGORIES)},
)


class ExpenseStore(EntityStore):
    entity_name = "Expense"
    policy = EXPENSE_POLICY
    seed_file = "expenses.json"

    def _apply_defaults(self, record, record_id, now):
        record["date"] = record.get("date") or to_utc_z(now)

    def by_category(self, category: str) -> list[dict]:
        return self.filter(lambda e: e.get("category") == category)

    def monthly_expenses(self, year: int, month: int) -> list[dict]:
        def _in_month(expense: dict) -> bool:
            dt = coerce_datetime(expense.get("date"))
            return dt is not None and dt.year == year and dt.month == month
        return self.filter(_in_month)
