"""Data Table pipeline: filter, then sort, then paginate."""
from __future__ import annotations

from typing import Any, Sequence

from .errors import InvalidInputError
from .models import (
    SORT_KEYS,
    RestaurantOut,
    RestaurantRecord,
    SortState,
    TablePage,
    ViewState,
)

PAGE_SIZE = 10


def filter_records(records: Sequence[RestaurantRecord], term: str | None) -> list[RestaurantRecord]:
    needle = (term or "").lower()
    if not needle:
        return list(records)
    return [
        r for r in records
        if needle in r.name.lower() or needle in r.type.lower() or needle in r.address.lower()
    ]


def _sort_value(record: RestaurantRecord, key: str) -> Any:
    if key == "reviews":
        return record.rating
    if key == "times_picked":
        return record.times_picked
    value = getattr(record, key)
    return None if value is None else str(value)


def sort_records(
    records: Sequence[RestaurantRecord],
    key: str,
    direction: str = "asc",
) -> list[RestaurantRecord]:
    """Stable sort by *key*; records without a value go last either way."""
    if key not in SORT_KEYS:
        raise InvalidInputError(f"Unknown sort column: {key}")
    if direction not in ("asc", "desc"):
        raise InvalidInputError(f"Unknown sort direction: {direction}")

    present: list[tuple[Any, RestaurantRecord]] = []
    missing: list[RestaurantRecord] = []
    for record in records:
        value = _sort_value(record, key)
        if value is None:
            missing.append(record)
        else:
            present.append((value, record))

    # list.sort stays stable with reverse=True
    present.sort(key=lambda pair: pair[0], reverse=direction == "desc")
    return [record for _, record in present] + missing


def next_sort(current: SortState | None, key: str) -> SortState:
    """Clicking the active ascending column flips it; anything else starts ascending."""
    if current is not None and current.key == key and current.direction == "asc":
        return SortState(key=key, direction="desc")
    return SortState(key=key, direction="asc")


def page_count(total: int, size: int = PAGE_SIZE) -> int:
    return -(-total // size)


def clamp_page(page: int, total: int, size: int = PAGE_SIZE) -> int:
    return min(max(page, 1), max(1, page_count(total, size)))


def paginate(
    records: Sequence[RestaurantRecord],
    page: int,
    size: int = PAGE_SIZE,
) -> list[RestaurantRecord]:
    """Return the 1-based *page*. Clamping is the caller's job."""
    if page < 1:
        raise InvalidInputError("Page numbers start at 1")
    start = (page - 1) * size
    return list(records[start:start + size])


def build_table(
    records: Sequence[RestaurantRecord],
    state: ViewState,
    reset_used: bool = False,
    size: int = PAGE_SIZE,
) -> TablePage:
    rows = filter_records(records, state.search)
    if state.sort is not None:
        rows = sort_records(rows, state.sort.key, state.sort.direction)
    page = clamp_page(state.page, len(rows), size)
    return TablePage(
        rows=[RestaurantOut.from_record(r) for r in paginate(rows, page, size)],
        page=page,
        total_pages=max(1, page_count(len(rows), size)),
        total_rows=len(rows),
        sort=state.sort,
        search=state.search,
        reset_used=reset_used,
    )
