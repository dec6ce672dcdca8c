from __future__ import annotations

from collections import Counter
from typing import Any


def compute_pick_stats(events: list[dict[str, Any]]) -> dict[str, Any]:
    picks = [e for e in events if e["type"] == "pick"]

    # Most picked restaurants since the process started
    name_counter: Counter[str] = Counter()
    for p in picks:
        name_counter[p.get("name", "unknown")] += 1
    top_restaurants = [{"name": n, "count": c} for n, c in name_counter.most_common(10)]

    failures = Counter(e["type"] for e in events if e["type"].endswith("_failed"))

    return {
        "total_picks": len(picks),
        "top_restaurants": top_restaurants,
        "resets": sum(1 for e in events if e["type"] == "reset"),
        "loads": sum(1 for e in events if e["type"] == "load"),
        "failures": {
            "pick": failures["pick_failed"],
            "reset": failures["reset_failed"],
            "load": failures["load_failed"],
        },
    }
