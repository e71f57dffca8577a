from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any

from dishooom.time_utils import parse_iso_datetime


# Fields owned by the store; never taken from a caller payload
STORE_MANAGED_FIELDS = frozenset({"Id", "createdAt", "updatedAt"})

INT = "int"
DECIMAL = "decimal"
BOOL = "bool"
TEXT = "text"
DATE = "date"
ITEMS = "items"


class ValidationError(ValueError):
    """400-level input problem."""


class NotFoundError(LookupError):
    """404-level lookup failure: no record with the requested id."""


@dataclass(frozen=True)
class ModelValidationPolicy:
    """
    Central policy layer, one per entity type:
    - field_types: known fields and how to coerce them (unknown fields pass through)
    - required_on_create: fields required when creating
    - non_negative / positive: numeric range rules
    - choices: enumerated fields and their allowed values
    """
    entity: str
    field_types: dict[str, str]
    required_on_create: frozenset[str] = frozenset()
    non_negative: frozenset[str] = frozenset()
    positive: frozenset[str] = frozenset()
    choices: dict[str, frozenset[str]] = field(default_factory=dict)


def _coerce_int(key: str, value: Any) -> int:
    # bool is a subclass of int; reject it explicitly
    if isinstance(value, bool):
        raise ValidationError(f"{key} must be an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value.is_integer():
            return int(value)
        raise ValidationError(f"{key} must be an integer, not a decimal")
    if isinstance(value, str):
        stripped = value.strip()
        if "e" in stripped.lower() or "." in stripped:
            raise ValidationError(f"{key} must be a plain integer")
        try:
            return int(stripped)
        except ValueError:
            raise ValidationError(f"{key} must be an integer")
    raise ValidationError(f"{key} must be an integer")


def _coerce_decimal(key: str, value: Any) -> float | int:
    if isinstance(value, bool):
        raise ValidationError(f"{key} must be a number")
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            raise ValidationError(f"{key} must be a number")
    if not isinstance(value, (int, float)):
        raise ValidationError(f"{key} must be a number")
    # NaN compares False against every bound, so range checks cannot catch it
    if isinstance(value, float) and not math.isfinite(value):
        raise ValidationError(f"{key} must be a finite number")
    return value


def _coerce_date(key: str, value: Any) -> str:
    if not isinstance(value, str):
        raise ValidationError(f"{key} must be an ISO-8601 date string")
    if value.strip() == "":
        return value
    try:
        parse_iso_datetime(value)
    except ValueError:
        raise ValidationError(f"{key} must be an ISO-8601 date string")
    return value


def _coerce_items(key: str, value: Any) -> list[dict]:
    if not isinstance(value, list):
        raise ValidationError(f"{key} must be a list")
    items = []
    for i, raw in enumerate(value, start=1):
        if not isinstance(raw, dict):
            raise ValidationError(f"{key}[{i}] must be an object")
        item = dict(raw)
        if "productId" in item and item["productId"] is not None:
            item["productId"] = _coerce_int(f"{key}[{i}].productId", item["productId"])
        if "quantity" in item:
            qty = _coerce_int(f"{key}[{i}].quantity", item["quantity"])
            if qty <= 0:
                raise ValidationError(f"{key}[{i}].quantity must be > 0")
            item["quantity"] = qty
        for money in ("unitPrice", "total"):
            if money in item:
                amount = _coerce_decimal(f"{key}[{i}].{money}", item[money])
                if amount < 0:
                    raise ValidationError(f"{key}[{i}].{money} must be >= 0")
                item[money] = amount
        items.append(item)
    return items


_COERCERS = {
    INT: _coerce_int,
    DECIMAL: _coerce_decimal,
    DATE: _coerce_date,
    ITEMS: _coerce_items,
}


def _coerce_value(key: str, kind: str, value: Any):
    if value is None:
        return None
    if kind == BOOL:
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.lower() in {"true", "false"}:
            return value.lower() == "true"
        raise ValidationError(f"{key} must be a boolean")
    if kind == TEXT:
        return str(value).strip()
    return _COERCERS[kind](key, value)


def validate_payload(*, payload: dict, policy: ModelValidationPolicy, partial: bool) -> dict:
    """
    Validates + normalizes an incoming record against the entity policy.
    Returns a cleaned patch dict; store-managed fields are dropped.

    partial=False: create semantics (enforce required_on_create)
    partial=True: patch semantics (validate only provided keys)
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")

    if not partial:
        missing = sorted(
            f for f in policy.required_on_create
            if payload.get(f) is None or payload.get(f) == ""
        )
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    patch: dict = {}
    for k, raw in payload.items():
        if k in STORE_MANAGED_FIELDS:
            continue
        kind = policy.field_types.get(k)
        val = raw if kind is None else _coerce_value(k, kind, raw)

        # A patch may not blank out a required or enumerated field
        if partial and (k in policy.required_on_create or k in policy.choices):
            if val is None or val == "":
                raise ValidationError(f"{k} cannot be empty")

        if val is not None:
            if k in policy.non_negative and val < 0:
                raise ValidationError(f"{k} must be >= 0")
            if k in policy.positive and val <= 0:
                raise ValidationError(f"{k} must be > 0")
            allowed = policy.choices.get(k)
            if allowed is not None and val not in allowed:
                raise ValidationError(
                    f"Invalid {k} '{val}'. Must be one of: {', '.join(sorted(allowed))}"
                )

        patch[k] = val

    return patch
