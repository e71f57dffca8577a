# Overview: Identity allocation and document numbering for the entity stores.

from __future__ import annotations

from typing import Iterable


INVOICE_PREFIX = "INV"


class DocumentSequenceError(Exception):
    """Raised when document numbering is given invalid input."""
    pass


def next_record_id(existing_ids: Iterable[int], high_water: int = 0) -> int:
    """
    Allocate the next record id for a store.

    The result is strictly greater than every id currently held and than
    high_water, the largest id the store has ever issued. Tracking the
    high-water mark keeps deleted ids from being reissued; for a store that
    has never deleted anything it reduces to max(existing ids) + 1.

    Callers must hold the store lock.
    """
    current_max = max(existing_ids, default=0)
    return max(current_max, high_water, 0) + 1


def format_invoice_number(record_id: int, year: int, *, prefix: str = INVOICE_PREFIX, pad: int = 4) -> str:
    """INV-<year>-<id zero-padded>, e.g. INV-2026-0007."""
    if record_id is None or record_id < 1:
        raise DocumentSequenceError("record_id must be a positive integer")
    return f"{prefix}-{year}-{str(record_id).zfill(pad)}"
