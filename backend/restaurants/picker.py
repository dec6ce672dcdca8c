"""Weighted lunch picker; favours restaurants picked least often."""
from __future__ import annotations

import random
from typing import Protocol, Sequence

from .errors import InvalidInputError
from .models import RestaurantRecord


class RandomSource(Protocol):
    def random(self) -> float: ...


def record_weight(record: RestaurantRecord) -> float:
    return 1.0 / (record.times_picked + 1)


def select_index(weights: Sequence[float], draw: float) -> int:
    """Return the first index whose cumulative weight exceeds *draw*."""
    if not weights:
        raise InvalidInputError("Cannot pick from an empty list")
    acc = 0.0
    for i, weight in enumerate(weights):
        acc += weight
        if draw < acc:
            return i
    # draw landed on the total through float rounding
    return len(weights) - 1


def pick_index(
    records: Sequence[RestaurantRecord],
    rng: RandomSource | None = None,
) -> int:
    if not records:
        raise InvalidInputError("Cannot pick from an empty list")
    rng = rng or random
    weights = [record_weight(r) for r in records]
    draw = rng.random() * sum(weights)
    return select_index(weights, draw)


def pick(
    records: Sequence[RestaurantRecord],
    rng: RandomSource | None = None,
) -> RestaurantRecord:
    """Pick one restaurant, favouring those picked least."""
    return records[pick_index(records, rng)]
