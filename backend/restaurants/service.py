from __future__ import annotations

import logging
import threading
import time
from typing import Any, Callable

from ..analytics.store import record_event
from ..store.gateway import RestaurantGateway
from ..store.retry import DEFAULT_RETRY_POLICY, RetryPolicy, fetch_with_retry
from .errors import NetworkError, WriteInProgressError
from .models import RestaurantRecord
from .picker import RandomSource, pick_index
from .reset_guard import ResetGuard
from .validator import validate_records

logger = logging.getLogger(__name__)

NO_VALID_RECORDS = "No valid restaurant records were found."


class LunchService:
    """Owns the in-memory restaurant list and every write back to the store.

    Writes go to the store first; the local list only changes once the store
    has accepted them. Only one write may be outstanding at a time.
    """

    def __init__(
        self,
        gateway: RestaurantGateway,
        rng: RandomSource | None = None,
        retry_policy: RetryPolicy = DEFAULT_RETRY_POLICY,
        sleep: Callable[[float], Any] = time.sleep,
    ) -> None:
        self._gateway = gateway
        self._rng = rng
        self._retry_policy = retry_policy
        self._sleep = sleep
        self._records: list[RestaurantRecord] = []
        self._loaded = False
        self._notice: str | None = None
        self._guard = ResetGuard()
        self._state_lock = threading.Lock()
        self._write_lock = threading.Lock()
        self._load_lock = threading.Lock()

    # ── Reads ────────────────────────────────────────────────────────────

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def notice(self) -> str | None:
        """Non-fatal message from the last load, e.g. when every row was invalid."""
        return self._notice

    @property
    def reset_used(self) -> bool:
        return self._guard.used

    def load(self) -> list[RestaurantRecord]:
        """Replace the list with a fresh copy of the store.

        On failure the previous list is kept as is.
        """
        try:
            raws = fetch_with_retry(self._gateway, self._retry_policy, self._sleep)
        except NetworkError as exc:
            record_event("load_failed", {"error": str(exc)})
            raise
        records = validate_records(raws)
        dropped = len(raws) - len(records)
        if dropped:
            logger.info("Dropped %d invalid restaurant rows", dropped)
        with self._state_lock:
            self._records = records
            self._loaded = True
            self._notice = NO_VALID_RECORDS if raws and not records else None
        record_event("load", {"rows": len(raws), "valid": len(records)})
        return list(records)

    def ensure_loaded(self) -> None:
        if self._loaded:
            return
        with self._load_lock:
            if not self._loaded:
                self.load()

    def records(self) -> list[RestaurantRecord]:
        with self._state_lock:
            return list(self._records)

    def find(self, restaurant_id: str | None) -> RestaurantRecord | None:
        if restaurant_id is None:
            return None
        with self._state_lock:
            for record in self._records:
                if record.id == restaurant_id:
                    return record
        return None

    # ── Writes ───────────────────────────────────────────────────────────

    def _acquire_write(self) -> None:
        if not self._write_lock.acquire(blocking=False):
            raise WriteInProgressError()

    def pick(self) -> RestaurantRecord:
        """Pick a restaurant and bump its count in the store, then locally."""
        self._acquire_write()
        try:
            records = self.records()
            index = pick_index(records, self._rng)
            chosen = records[index]
            new_count = chosen.times_picked + 1
            try:
                self._gateway.update_one(chosen.id, new_count)
            except NetworkError as exc:
                record_event("pick_failed", {"restaurant_id": chosen.id, "error": str(exc)})
                raise
            updated = chosen.model_copy(update={"times_picked": new_count})
            with self._state_lock:
                self._records = [updated if r.id == chosen.id else r for r in self._records]
            record_event("pick", {"restaurant_id": updated.id, "name": updated.name})
            logger.info("Picked %s (%d picks)", updated.name, updated.times_picked)
            return updated
        finally:
            self._write_lock.release()

    def reset_all(self) -> int:
        """Zero every pick count, once per session. Returns how many records were reset."""
        self._guard.check()
        self._acquire_write()
        try:
            self._guard.check()
            try:
                self._gateway.update_all_times_picked(0)
            except NetworkError as exc:
                record_event("reset_failed", {"error": str(exc)})
                raise
            with self._state_lock:
                self._records = [r.model_copy(update={"times_picked": 0}) for r in self._records]
                count = len(self._records)
            self._guard.mark_used()
            record_event("reset", {"records": count})
            logger.info("Reset pick counts for %d restaurants", count)
            return count
        finally:
            self._write_lock.release()
