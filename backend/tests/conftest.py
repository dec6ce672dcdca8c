from __future__ import annotations

from typing import Any, Callable

import pytest

from backend.analytics.store import clear_events
from backend.restaurants.errors import NetworkError


class FakeGateway:
    """In-memory stand-in for the Supabase table."""

    def __init__(
        self,
        rows: list[dict[str, Any]] | None = None,
        fetch_failures: int = 0,
        fail_updates: bool = False,
    ) -> None:
        self.rows = [dict(r) for r in rows or []]
        self.fetch_failures = fetch_failures
        self.fail_updates = fail_updates
        self.fetch_calls = 0
        self.updates: list[tuple] = []
        self.on_update: Callable[[], None] | None = None

    def fetch_all(self) -> list[dict[str, Any]]:
        self.fetch_calls += 1
        if self.fetch_failures > 0:
            self.fetch_failures -= 1
            raise NetworkError("fetch failed")
        return [dict(r) for r in self.rows]

    def update_one(self, restaurant_id: str, times_picked: int) -> None:
        if self.on_update:
            self.on_update()
        if self.fail_updates:
            raise NetworkError("update failed")
        self.updates.append(("one", restaurant_id, times_picked))
        for row in self.rows:
            if row.get("id") == restaurant_id:
                row["times_picked"] = times_picked

    def update_all_times_picked(self, value: int) -> None:
        if self.on_update:
            self.on_update()
        if self.fail_updates:
            raise NetworkError("update failed")
        self.updates.append(("all", value))
        for row in self.rows:
            row["times_picked"] = value


@pytest.fixture
def make_gateway() -> Callable[..., FakeGateway]:
    return FakeGateway


@pytest.fixture(autouse=True)
def _clean_activity_log():
    clear_events()
    yield
    clear_events()
