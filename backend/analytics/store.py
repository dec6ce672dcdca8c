from __future__ import annotations

import threading
import time
from collections import deque
from typing import Any

# Oldest events are discarded once the log is full
MAX_EVENTS = 10_000

_events: deque[dict[str, Any]] = deque(maxlen=MAX_EVENTS)
_lock = threading.Lock()


def record_event(event_type: str, data: dict[str, Any] | None = None) -> None:
    """Append a ``load`` / ``pick`` / ``reset`` / failure event to the activity log."""
    with _lock:
        _events.append({
            "type": event_type,
            "timestamp": time.time(),
            **(data or {}),
        })


def get_events() -> list[dict[str, Any]]:
    with _lock:
        return list(_events)


def clear_events() -> None:
    with _lock:
        _events.clear()
