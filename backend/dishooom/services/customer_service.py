# Overview: Customer records and the lead pipeline.

from __future__ import annotations

from dishooom.time_utils import to_utc_z
from dishooom.validation import DATE, TEXT, ModelValidationPolicy
from .entity_store import EntityStore
from .lifecycle_service import (
    DEFAULT_PIPELINE_STAGE,
    PIPELINE_STAGES,
    LifecycleError,
    next_pipeline_stage,
    validate_pipeline_stage,
)

CUSTOMER_TYPES = ("Retailer", "Reseller")

CUSTOMER_POLICY = ModelValidationPolicy(
    entity="Customer",
    field_types={
        "name": TEXT,
        "phone": TEXT,
        "email": TEXT,
        "type": TEXT,
        "pipelineStage": TEXT,
        "assignedTo": TEXT,
        "address": TEXT,
        "gstNumber": TEXT,
        "lastContact": DATE,
    },
    required_on_create=frozenset({"name"}),
    choices={
        "type": frozenset(CUSTOMER_TYPES),
        "pipelineStage": frozenset(PIPELINE_STAGES),
    },
)


class CustomerStore(EntityStore):
    entity_name = "Customer"
    policy = CUSTOMER_POLICY
    seed_file = "customers.json"

    def _apply_defaults(self, record, record_id, now):
        record["pipelineStage"] = record.get("pipelineStage") or DEFAULT_PIPELINE_STAGE
        record["lastContact"] = record.get("lastContact") or to_utc_z(now)

    def update(self, customer_id, updates: dict) -> dict:
        """Generic update; a change of pipelineStage also refreshes lastContact."""
        with self._lock:
            if isinstance(updates, dict) and updates.get("pipelineStage") is not None:
                current = self.get(customer_id)
                if updates["pipelineStage"] != current.get("pipelineStage"):
                    updates = {**updates, "lastContact": to_utc_z(self._clock())}
            return super().update(customer_id, updates)

    def by_pipeline_stage(self, stage: str) -> list[dict]:
        return self.filter(lambda c: c.get("pipelineStage") == stage)

    def update_pipeline_stage(self, customer_id, stage: str) -> dict:
        """Set the stage (any transition allowed) and stamp lastContact."""
        validate_pipeline_stage(stage)
        return self.update(customer_id, {"pipelineStage": stage, "lastContact": to_utc_z(self._clock())})

    def advance_pipeline_stage(self, customer_id) -> dict:
        """Move one step forward along new -> contacted -> closed."""
        with self._lock:
            customer = self.get(customer_id)
            target = next_pipeline_stage(customer.get("pipelineStage") or DEFAULT_PIPELINE_STAGE)
            if target is None:
                raise LifecycleError("Customer is already in the closed stage")
            return self.update_pipeline_stage(customer["Id"], target)
