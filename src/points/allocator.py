"""Oldest-first allocation of a spend across payers."""

import logging
from datetime import datetime, timezone
from typing import Callable

from .errors import InsufficientFundsError, InvalidArgumentError
from .ledger import PointLedger
from .models.ledger import AllocationEntry

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Allocator:
    """Spends points from a ledger, oldest credits first.

    Rules:
    1. Points are taken from the oldest transactions first.
    2. No payer is ever charged more than its current balance.

    Deductions are written back to the ledger as debit events that share
    the timestamp of the spend call.
    """

    def __init__(self, ledger: PointLedger, clock: Callable[[], datetime] = _utc_now):
        """Initialize allocator.

        Args:
            ledger: Ledger to read from and record deductions into
            clock: Returns the time stamped on deduction events
        """
        self.ledger = ledger
        self.clock = clock

    def spend(self, amount: int) -> list[AllocationEntry]:
        """Spend points across payers.

        Args:
            amount: Points to spend; must be positive

        Returns:
            One entry per payer drawn from, in the order payers were first
            drawn from. Deducted amounts are negative. Their total is
            normally the full amount, but a refund replayed after a draw
            against a payer already at its final-balance ceiling can leave
            part of the request unallocated; the partial deductions are
            still recorded and a warning is logged.

        Raises:
            InvalidArgumentError: If amount is not positive
            InsufficientFundsError: If all payers together hold less than amount
        """
        # Both guards run before the ledger is touched
        if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
            raise InvalidArgumentError("amount must be positive")

        available = self.ledger.total_balance()
        if available < amount:
            raise InsufficientFundsError(available=available, requested=amount)

        # sorted() is stable, so events with equal timestamps keep insertion order
        timeline = sorted(self.ledger.events(), key=lambda event: event.occurred_at)

        # Ceilings are the payers' final balances, not balances as of each
        # event, even though debits below are replayed in time order. Keep it
        # that way: the reference results depend on this mix.
        ceilings = self.ledger.balances()

        # Insertion order of this dict is the order payers are first drawn from
        allocated: dict[str, int] = {}
        remaining = amount

        for event in timeline:
            if remaining <= 0:
                break

            source = event.source
            ceiling = ceilings.get(source, 0)
            already = allocated.get(source, 0)

            if event.amount > 0:
                draw = min(event.amount, remaining)
                if ceiling - already - draw < 0:
                    # Drain the payer to exactly zero, or skip if nothing is left
                    draw = ceiling - already
                if draw > 0:
                    allocated[source] = already + draw
                    remaining -= draw
            elif event.amount < 0:
                # A debit after earlier draws hands those points back to the pool
                give_back = min(-event.amount, already)
                if give_back > 0:
                    allocated[source] = already - give_back
                    remaining += give_back

        if remaining > 0:
            logger.warning(
                f"Spend of {amount} left {remaining} unallocated after replaying "
                f"{len(timeline)} events"
            )

        entries = [
            AllocationEntry(source=source, amount_deducted=-points)
            for source, points in allocated.items()
            if points > 0
        ]

        spent_at = self.clock()
        for entry in entries:
            self.ledger.append(entry.source, entry.amount_deducted, spent_at)

        logger.info(
            f"Spent {amount} points across {len(entries)} payer(s): "
            + ", ".join(f"{e.source}={e.amount_deducted}" for e in entries)
        )
        return entries
