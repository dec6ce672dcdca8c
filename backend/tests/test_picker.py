from __future__ import annotations

import random
from collections import Counter
from unittest.mock import MagicMock

import pytest

from backend.restaurants.errors import InvalidInputError
from backend.restaurants.models import RestaurantRecord
from backend.restaurants.picker import pick, pick_index, record_weight, select_index


def _record(rid: str, times_picked: int = 0) -> RestaurantRecord:
    return RestaurantRecord(
        id=rid, name=f"Place {rid}", type="Thai", address=f"{rid} High St", times_picked=times_picked,
    )


def _fixed_draw(fraction: float) -> MagicMock:
    """Random source whose ``random()`` always returns *fraction*."""
    rng = MagicMock()
    rng.random.return_value = fraction
    return rng


def test_weight_is_inverse_of_picks_plus_one():
    assert record_weight(_record("a", 0)) == 1.0
    assert record_weight(_record("a", 1)) == 0.5
    assert record_weight(_record("a", 9)) == pytest.approx(0.1)


def test_select_index_first_cumulative_bucket():
    weights = [1.0, 0.5, 0.25]
    assert select_index(weights, 0.0) == 0
    assert select_index(weights, 0.999) == 0
    assert select_index(weights, 1.0) == 1
    assert select_index(weights, 1.49) == 1
    assert select_index(weights, 1.5) == 2


def test_select_index_draw_at_total_falls_back_to_last():
    assert select_index([0.5, 0.5], 1.0) == 1


def test_select_index_empty():
    with pytest.raises(InvalidInputError):
        select_index([], 0.0)


def test_pick_empty_raises_invalid_input():
    with pytest.raises(InvalidInputError):
        pick([], _fixed_draw(0.5))


def test_zero_draw_selects_unpicked_record():
    records = [_record("1", 0), _record("2", 3)]
    assert pick(records, _fixed_draw(0.0)).id == "1"


def test_midpoint_draw_selects_first_record():
    # weights 1.0 and 0.1, total 1.1, draw 0.55 falls inside [0, 1.0)
    records = [_record("1", 0), _record("2", 9)]
    assert pick_index(records, _fixed_draw(0.5)) == 0
    assert pick(records, _fixed_draw(0.5)).id == "1"


def test_high_draw_selects_heavily_picked_record():
    records = [_record("1", 0), _record("2", 9)]
    assert pick(records, _fixed_draw(0.95)).id == "2"


def test_single_record_always_selected():
    only = [_record("solo", 42)]
    for fraction in (0.0, 0.5, 0.999999):
        assert pick(only, _fixed_draw(fraction)).id == "solo"


def test_pick_does_not_change_counts():
    records = [_record("1", 2)]
    chosen = pick(records, _fixed_draw(0.3))
    assert chosen.times_picked == 2


def test_empirical_distribution_matches_weights():
    records = [_record("a", 0), _record("b", 1), _record("c", 3)]
    weights = [1.0, 0.5, 0.25]
    total = sum(weights)
    rng = random.Random(1234)
    draws = 20000
    counts = Counter(pick(records, rng).id for _ in range(draws))
    for record, weight in zip(records, weights):
        assert counts[record.id] / draws == pytest.approx(weight / total, abs=0.02)


def test_every_record_reachable():
    records = [_record(str(i), i * 5) for i in range(6)]
    rng = random.Random(7)
    seen = {pick(records, rng).id for _ in range(5000)}
    assert seen == {r.id for r in records}
