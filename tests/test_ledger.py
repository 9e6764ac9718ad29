"""Tests for the in-memory ledger."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError


def ts(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def test_append_returns_stored_event(ledger):
    """Test that append returns the event it stored."""
    event = ledger.append("SHOPIFY", 300, ts("2022-10-31T10:00:00Z"))

    assert event.source == "SHOPIFY"
    assert event.amount == 300
    assert event.occurred_at == ts("2022-10-31T10:00:00Z")
    assert ledger.events() == (event,)
    assert len(ledger) == 1


def test_append_accepts_debits(ledger):
    """Test that negative amounts are stored without validation."""
    ledger.append("SHOPIFY", -200, ts("2022-10-31T15:00:00Z"))

    assert ledger.balance_of("SHOPIFY") == -200
    assert ledger.total_balance() == -200


def test_append_naive_timestamp_is_utc(ledger):
    """Test that naive datetimes are stored as UTC."""
    event = ledger.append("EBAY", 5, datetime(2022, 10, 31, 11, 0))
    assert event.occurred_at.tzinfo == timezone.utc


def test_events_keep_insertion_order(ledger):
    """Test that events are kept in insertion order, not time order."""
    ledger.append("A", 1, ts("2022-11-02T00:00:00Z"))
    ledger.append("B", 2, ts("2022-11-01T00:00:00Z"))

    assert [e.source for e in ledger.events()] == ["A", "B"]


def test_events_are_frozen(ledger):
    """Test that stored events cannot be mutated."""
    event = ledger.append("A", 1, ts("2022-11-02T00:00:00Z"))
    with pytest.raises(ValidationError):
        event.amount = 5


def test_events_snapshot_is_detached(ledger):
    """Test that later appends do not change an earlier snapshot."""
    ledger.append("A", 1, ts("2022-11-02T00:00:00Z"))
    snapshot = ledger.events()
    ledger.append("A", 2, ts("2022-11-03T00:00:00Z"))

    assert len(snapshot) == 1
    assert len(ledger.events()) == 2


def test_balances(ledger):
    """Test per-payer and total balances."""
    ledger.append("SHOPIFY", 300, ts("2022-10-31T10:00:00Z"))
    ledger.append("EBAY", 200, ts("2022-10-31T11:00:00Z"))
    ledger.append("SHOPIFY", -300, ts("2022-10-31T15:00:00Z"))

    assert ledger.balance_of("SHOPIFY") == 0
    assert ledger.balance_of("EBAY") == 200
    assert ledger.balance_of("UNKNOWN") == 0
    assert ledger.total_balance() == 200
    # Payers at zero are still listed
    assert ledger.balances() == {"SHOPIFY": 0, "EBAY": 200}


def test_empty_ledger(ledger):
    """Test balances on an empty ledger."""
    assert ledger.balances() == {}
    assert ledger.total_balance() == 0
    assert ledger.events() == ()


def test_balances_returns_copy(ledger):
    """Test that mutating the returned mapping does not touch the ledger."""
    ledger.append("A", 10, ts("2022-11-02T00:00:00Z"))
    balances = ledger.balances()
    balances["A"] = 999

    assert ledger.balance_of("A") == 10
