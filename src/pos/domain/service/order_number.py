"""Domain service: order number allocation.

Order numbers read ``yyyyMMdd`` followed by a four-digit random suffix,
e.g. ``202610191234``.  Uniqueness is checked against the order
repository rather than guaranteed by construction; a collision draws a
new suffix, up to a fixed number of attempts.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Callable
from datetime import datetime, timezone

from pos.domain.exceptions import OrderNumberExhaustedError
from pos.domain.repository.order_repository import OrderRepository

logger = logging.getLogger(__name__)

MAX_ORDER_NUMBER_ATTEMPTS = 10


class OrderNumberGenerator:

    def __init__(
        self,
        rng: random.Random | None = None,
        clock: Callable[[], datetime] | None = None,
        max_attempts: int = MAX_ORDER_NUMBER_ATTEMPTS,
    ) -> None:
        self._rng = rng or random.Random()
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._max_attempts = max_attempts

    def now(self) -> datetime:
        return self._clock()

    def candidate(self, day: datetime) -> str:
        return f"{day:%Y%m%d}{self._rng.randint(1000, 9999)}"

    def allocate(self, order_repo: OrderRepository) -> str:
        """Return an order number not yet used by any stored order."""
        day = self._clock()
        for attempt in range(1, self._max_attempts + 1):
            number = self.candidate(day)
            if order_repo.get_by_order_number(number) is None:
                return number
            logger.debug("Order number %s taken (attempt %d)", number, attempt)
        raise OrderNumberExhaustedError(
            f"Could not allocate a unique order number after {self._max_attempts} attempts"
        )
