from __future__ import annotations

import logging
from typing import Any, Iterable

from pydantic import ValidationError

from .errors import RecordValidationError
from .models import RestaurantRecord

logger = logging.getLogger(__name__)


def validate_record(raw: Any) -> RestaurantRecord:
    """Turn one decoded store row into a ``RestaurantRecord``.

    Raises ``RecordValidationError`` when the row has the wrong shape.
    """
    if not isinstance(raw, dict):
        raise RecordValidationError(f"expected an object, got {type(raw).__name__}")
    try:
        return RestaurantRecord.model_validate(raw)
    except ValidationError as exc:
        raise RecordValidationError(str(exc)) from exc


def validate_records(raws: Iterable[Any]) -> list[RestaurantRecord]:
    """Keep the valid rows, in order, dropping malformed ones and repeated ids."""
    records: list[RestaurantRecord] = []
    seen: set[str] = set()
    for raw in raws:
        try:
            record = validate_record(raw)
        except RecordValidationError as exc:
            logger.debug("Dropping invalid restaurant row: %s", exc)
            continue
        if record.id in seen:
            logger.debug("Dropping duplicate restaurant id %s", record.id)
            continue
        seen.add(record.id)
        records.append(record)
    return records
