"""Append-only in-memory points ledger."""

import logging
from datetime import datetime, timezone

from .models.ledger import PointEvent

logger = logging.getLogger(__name__)


class PointLedger:
    """Append-only ledger of point events.

    Keeps events in insertion order alongside a running total per payer so
    balance lookups do not rescan history. Not thread-safe on its own; the
    owning service serializes access.
    """

    def __init__(self):
        self._events: list[PointEvent] = []
        self._balances: dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._events)

    def append(self, source: str, amount: int, occurred_at: datetime) -> PointEvent:
        """Append an event to the ledger.

        Args:
            source: Payer the points belong to
            amount: Signed number of points; credits and debits are both legal
            occurred_at: Event time; naive datetimes are taken as UTC

        Returns:
            The stored PointEvent
        """
        if occurred_at.tzinfo is None:
            occurred_at = occurred_at.replace(tzinfo=timezone.utc)

        event = PointEvent(source=source, amount=amount, occurred_at=occurred_at)
        self._events.append(event)
        self._balances[source] = self._balances.get(source, 0) + amount

        logger.debug(f"Appended {amount:+d} for {source} at {occurred_at.isoformat()}")
        return event

    def events(self) -> tuple[PointEvent, ...]:
        """Snapshot of all events in insertion order."""
        return tuple(self._events)

    def balance_of(self, source: str) -> int:
        return self._balances.get(source, 0)

    def total_balance(self) -> int:
        return sum(self._balances.values())

    def balances(self) -> dict[str, int]:
        """Balance of every payer that has ever appeared, including zeroes."""
        return dict(self._balances)
