# Overview: Generic in-memory entity store; id-keyed, insertion-ordered, lock-serialized.

"""
Entity Store Invariants (authoritative)

- Records are plain JSON-compatible dicts keyed by their integer "Id".
- Insertion order is the listing order (dicts preserve it).
- Ids are allocated by next_record_id and never reissued, even after delete.
- "Id" is immutable; "createdAt" / "updatedAt" are stamped by the store only.
- Every read returns a deep copy; callers never hold references into the store.
- Every operation runs under the store's lock, so allocation and
  read-modify-write sequences are serialized across request threads.
- No cross-store effects: a store never reads or writes another store.
"""

from __future__ import annotations

import copy
import logging
import threading
import time
from contextlib import contextmanager
from datetime import datetime
from typing import Callable, Iterable, Iterator

from dishooom.time_utils import to_utc_z, utcnow
from dishooom.validation import ModelValidationPolicy, NotFoundError, ValidationError, validate_payload
from .document_service import next_record_id

logger = logging.getLogger(__name__)


class EntityStore:
    """
    CRUD facade over one entity type.

    Subclasses set entity_name, policy and seed_file, and may override
    _apply_defaults (create-time defaults) and _migrate_seed_record.
    """

    entity_name = "Record"
    policy: ModelValidationPolicy | None = None
    seed_file: str | None = None

    def __init__(self, *, latency_ms: int = 0, clock: Callable[[], datetime] = utcnow):
        self._records: dict[int, dict] = {}
        self._high_water = 0
        self._lock = threading.RLock()
        self._latency_ms = latency_ms
        self._clock = clock

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} records={len(self)}>"

    @contextmanager
    def _locked(self) -> Iterator[None]:
        # Cosmetic latency; simulates the round trip of a remote API.
        if self._latency_ms:
            time.sleep(self._latency_ms / 1000.0)
        with self._lock:
            yield

    def _not_found(self) -> NotFoundError:
        return NotFoundError(f"{self.entity_name} not found")

    def _key(self, record_id) -> int:
        try:
            return int(record_id)
        except (TypeError, ValueError):
            raise self._not_found()

    def _validate(self, payload: dict, *, partial: bool) -> dict:
        if self.policy is None:
            return {k: v for k, v in payload.items() if k not in ("Id", "createdAt", "updatedAt")}
        return validate_payload(payload=payload, policy=self.policy, partial=partial)

    def _apply_defaults(self, record: dict, record_id: int, now: datetime) -> None:
        """Hook: fill entity-specific defaults on a new record before validation."""

    def _migrate_seed_record(self, record: dict) -> dict:
        """Hook: rewrite legacy seed fields before the record is loaded."""
        return record

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list(self) -> list[dict]:
        with self._locked():
            return [copy.deepcopy(r) for r in self._records.values()]

    def get(self, record_id) -> dict:
        key = self._key(record_id)
        with self._locked():
            record = self._records.get(key)
            if record is None:
                raise self._not_found()
            return copy.deepcopy(record)

    def filter(self, predicate: Callable[[dict], bool]) -> list[dict]:
        with self._locked():
            return [copy.deepcopy(r) for r in self._records.values() if predicate(r)]

    def ids(self) -> list[int]:
        with self._lock:
            return list(self._records.keys())

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create(self, fields: dict) -> dict:
        if fields is None:
            fields = {}
        if not isinstance(fields, dict):
            raise ValidationError("Invalid JSON payload")

        with self._locked():
            now = self._clock()
            new_id = next_record_id(self._records.keys(), self._high_water)

            raw = dict(fields)
            self._apply_defaults(raw, new_id, now)
            record = self._validate(raw, partial=False)
            record["Id"] = new_id
            record["createdAt"] = to_utc_z(now)

            self._records[new_id] = record
            self._high_water = new_id
            logger.debug("%s created id=%s", self.entity_name, new_id)
            return copy.deepcopy(record)

    def update(self, record_id, updates: dict) -> dict:
        key = self._key(record_id)
        with self._locked():
            current = self._records.get(key)
            if current is None:
                raise self._not_found()

            patch = self._validate(updates or {}, partial=True)
            updated = {**current, **patch}
            updated["Id"] = current["Id"]
            updated["updatedAt"] = to_utc_z(self._clock())

            self._records[key] = updated
            logger.debug("%s updated id=%s fields=%s", self.entity_name, key, ", ".join(sorted(patch)))
            return copy.deepcopy(updated)

    def delete(self, record_id) -> dict:
        key = self._key(record_id)
        with self._locked():
            if key not in self._records:
                raise self._not_found()
            removed = self._records.pop(key)
            logger.debug("%s deleted id=%s", self.entity_name, key)
            return removed

    # ------------------------------------------------------------------
    # Seeding
    # ------------------------------------------------------------------

    def load_seed(self, records: Iterable[dict]) -> int:
        """
        Load initial records, keeping their seed ids verbatim.

        Seed timestamps are kept when present. Returns the number loaded.
        """
        loaded = 0
        with self._lock:
            for raw in records:
                if not isinstance(raw, dict):
                    raise ValidationError(f"{self.entity_name} seed entries must be objects")
                raw = self._migrate_seed_record(dict(raw))
                if "Id" not in raw:
                    raise ValidationError(f"{self.entity_name} seed entry is missing Id")
                try:
                    seed_id = int(raw["Id"])
                except (TypeError, ValueError):
                    raise ValidationError(f"{self.entity_name} seed Id must be an integer")
                if seed_id in self._records:
                    raise ValidationError(f"Duplicate {self.entity_name} seed Id {seed_id}")

                record = self._validate(raw, partial=True)
                record["Id"] = seed_id
                for stamp in ("createdAt", "updatedAt"):
                    if raw.get(stamp):
                        record[stamp] = raw[stamp]

                self._records[seed_id] = record
                self._high_water = max(self._high_water, seed_id)
                loaded += 1
        return loaded

    def clear(self) -> None:
        """Drop every record and reset id allocation (test and demo resets)."""
        with self._lock:
            self._records.clear()
            self._high_water = 0
