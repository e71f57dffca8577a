# Overview: Enumerated state fields (lead pipeline, payment status) and their transition rules.

"""
Dishooom State Fields

================================================================================
PURPOSE: Name the allowed values of the small state machines on records
================================================================================

CUSTOMER PIPELINE:
    new -> contacted -> closed

PAYMENT STATUS (sales orders and invoices):
    pending -> partial -> paid

RULES:
1. Values must belong to the enumeration.
2. Ordering is NOT enforced: any member-to-member transition is accepted
   (closed -> new, paid -> pending). The screens only offer forward moves;
   the stores stay permissive so corrections are always possible.
3. A pipeline stage change refreshes the customer's lastContact.
================================================================================
"""

from __future__ import annotations
from typing import Literal

from dishooom.validation import ValidationError


PIPELINE_STAGES = ("new", "contacted", "closed")
PipelineStage = Literal["new", "contacted", "closed"]
DEFAULT_PIPELINE_STAGE = "new"

PAYMENT_STATUSES = ("pending", "partial", "paid")
PaymentStatus = Literal["pending", "partial", "paid"]
DEFAULT_PAYMENT_STATUS = "pending"


class LifecycleError(ValidationError):
    """Raised when a state value is outside its enumeration."""
    pass


def validate_pipeline_stage(stage: str) -> str:
    if stage not in PIPELINE_STAGES:
        raise LifecycleError(
            f"Invalid pipeline stage '{stage}'. Must be one of: {', '.join(PIPELINE_STAGES)}"
        )
    return stage


def validate_payment_status(status: str) -> str:
    if status not in PAYMENT_STATUSES:
        raise LifecycleError(
            f"Invalid payment status '{status}'. Must be one of: {', '.join(PAYMENT_STATUSES)}"
        )
    return status


def next_pipeline_stage(stage: str) -> str | None:
    """Forward move offered by the pipeline board; None once closed."""
    validate_pipeline_stage(stage)
    idx = PIPELINE_STAGES.index(stage)
    if idx + 1 < len(PIPELINE_STAGES):
        return PIPELINE_STAGES[idx + 1]
    return None
