from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable

from ..restaurants.errors import LoadFailedError, NetworkError
from .gateway import RestaurantGateway

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryPolicy:
    max_retries: int = 3
    base_delay: float = 1.0

    def delay(self, attempt: int) -> float:
        """Seconds to wait after failed *attempt* (0-based): 1s, 2s, 3s, ..."""
        return self.base_delay * (attempt + 1)


DEFAULT_RETRY_POLICY = RetryPolicy()


def fetch_with_retry(
    gateway: RestaurantGateway,
    policy: RetryPolicy = DEFAULT_RETRY_POLICY,
    sleep: Callable[[float], Any] = time.sleep,
) -> list[dict[str, Any]]:
    """Fetch every row, retrying transient failures before giving up."""
    attempt = 0
    while True:
        try:
            return gateway.fetch_all()
        except NetworkError as exc:
            if attempt >= policy.max_retries:
                logger.error("Giving up loading restaurants after %d attempts", attempt + 1)
                raise LoadFailedError() from exc
            delay = policy.delay(attempt)
            logger.warning("Loading restaurants failed (attempt %d), retrying in %.1fs", attempt + 1, delay)
            sleep(delay)
            attempt += 1
