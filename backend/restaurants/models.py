from __future__ import annotations

import re
from typing import Any, Literal
from urllib.parse import quote_plus

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator

SORT_KEYS: tuple[str, ...] = (
    "id",
    "name",
    "reviews",
    "cost",
    "type",
    "address",
    "time",
    "times_picked",
)

SortKey = Literal["id", "name", "reviews", "cost", "type", "address", "time", "times_picked"]
SortDirection = Literal["asc", "desc"]

_REVIEWS_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*\(\s*(\d[\d,]*)\s*\)\s*$")
_MAPS_SEARCH_URL = "https://www.google.com/maps/search/?api=1&query="


def parse_reviews(reviews: str | None) -> tuple[float, int] | None:
    """Split ``"4.2(1,106)"`` into ``(4.2, 1106)``; ``None`` if it does not parse."""
    if reviews is None:
        return None
    match = _REVIEWS_RE.match(reviews)
    if not match:
        return None
    return float(match.group(1)), int(match.group(2).replace(",", ""))


class RestaurantRecord(BaseModel):
    """One row of the remote ``restaurants`` table."""

    model_config = ConfigDict(frozen=True)

    id: StrictStr
    name: StrictStr = Field(..., min_length=1)
    reviews: StrictStr | None = None
    cost: StrictStr | None = None
    type: StrictStr = Field(..., min_length=1)
    address: StrictStr = Field(..., min_length=1)
    time: StrictStr | None = None
    times_picked: int = Field(..., ge=0)

    @field_validator("times_picked", mode="before")
    @classmethod
    def _coerce_times_picked(cls, value: Any) -> Any:
        # bool is an int subclass; a flag is not a counter
        if isinstance(value, bool):
            raise ValueError("times_picked must be a number")
        if isinstance(value, str):
            try:
                value = float(value.strip())
            except ValueError:
                raise ValueError("times_picked must be numeric") from None
        if isinstance(value, float):
            if not value.is_integer():
                raise ValueError("times_picked must be a whole number")
            return int(value)
        if not isinstance(value, int):
            raise ValueError("times_picked must be a number")
        return value

    @property
    def rating(self) -> float | None:
        parsed = parse_reviews(self.reviews)
        return parsed[0] if parsed else None

    @property
    def review_count(self) -> int | None:
        parsed = parse_reviews(self.reviews)
        return parsed[1] if parsed else None


class RestaurantOut(BaseModel):
    id: str
    name: str
    reviews: str | None
    rating: float | None
    review_count: int | None
    cost: str | None
    type: str
    address: str
    time: str | None
    times_picked: int
    map_url: str

    @classmethod
    def from_record(cls, record: RestaurantRecord) -> "RestaurantOut":
        return cls(
            id=record.id,
            name=record.name,
            reviews=record.reviews,
            rating=record.rating,
            review_count=record.review_count,
            cost=record.cost,
            type=record.type,
            address=record.address,
            time=record.time,
            times_picked=record.times_picked,
            map_url=_MAPS_SEARCH_URL + quote_plus(f"{record.name} {record.address}"),
        )


class SortState(BaseModel):
    key: SortKey
    direction: SortDirection = "asc"


class ViewState(BaseModel):
    """Per-browser table state, persisted in the session cookie."""

    sort: SortState | None = None
    search: str = ""
    page: int = Field(default=1, ge=1)
    last_picked_id: str | None = None
    last_error: str | None = None


class SortRequest(BaseModel):
    key: SortKey


class TablePage(BaseModel):
    rows: list[RestaurantOut]
    page: int
    total_pages: int
    total_rows: int
    sort: SortState | None = None
    search: str = ""
    reset_used: bool = False
    notice: str | None = None


class PickResponse(BaseModel):
    restaurant: RestaurantOut


class ResetResponse(BaseModel):
    status: str
    reset_count: int


class StateResponse(BaseModel):
    view: ViewState
    picked: RestaurantOut | None = None
    reset_used: bool
    total_restaurants: int
