"""Points service: the three operations exposed to transports."""

import logging
import threading
from datetime import datetime, timezone
from typing import Callable, Optional

from .allocator import Allocator, _utc_now
from .ledger import PointLedger
from .models.ledger import AllocationEntry, PointEvent

logger = logging.getLogger(__name__)


class PointsService:
    """Owns one ledger and serializes every operation on it.

    A single lock guards add, spend and balance so a spend always replays a
    consistent snapshot, even when the HTTP server handles requests on
    several threads.
    """

    def __init__(
        self,
        ledger: Optional[PointLedger] = None,
        clock: Callable[[], datetime] = _utc_now,
    ):
        """Initialize service.

        Args:
            ledger: Ledger to operate on; a fresh empty one if None
            clock: Time source used to stamp spend deductions
        """
        self.ledger = ledger if ledger is not None else PointLedger()
        self.allocator = Allocator(self.ledger, clock=clock)
        self._lock = threading.Lock()

    def add_transaction(self, source: str, points: int, timestamp: datetime | str) -> PointEvent:
        """Record points credited (or refunded) by a payer.

        Args:
            source: Payer name
            points: Signed number of points
            timestamp: Transaction time as a datetime or ISO-8601 string

        Returns:
            The stored PointEvent
        """
        if isinstance(timestamp, str):
            timestamp = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=timezone.utc)

        with self._lock:
            event = self.ledger.append(source, points, timestamp)

        logger.info(f"Added {points:+d} points for {source}")
        return event

    def spend_points(self, points: int) -> list[AllocationEntry]:
        """Spend points oldest-first; see Allocator.spend for the rules."""
        with self._lock:
            return self.allocator.spend(points)

    def get_balances(self) -> dict[str, int]:
        with self._lock:
            return self.ledger.balances()
