"""Pytest fixtures for points tests."""

import json
from datetime import datetime, timezone

import pytest

from points.ledger import PointLedger
from points.service import PointsService

SPENT_AT = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

# Added out of time order on purpose; the spend must sort them
REFERENCE_TRANSACTIONS = [
    ("SHOPIFY", 1000, "2022-11-02T14:00:00Z"),
    ("EBAY", 200, "2022-10-31T11:00:00Z"),
    ("SHOPIFY", -200, "2022-10-31T15:00:00Z"),
    ("AMAZON", 10000, "2022-11-01T14:00:00Z"),
    ("SHOPIFY", 300, "2022-10-31T10:00:00Z"),
]


@pytest.fixture
def ledger():
    """Empty ledger."""
    return PointLedger()


@pytest.fixture
def service():
    """Service with an empty ledger and a fixed spend clock."""
    return PointsService(clock=lambda: SPENT_AT)


@pytest.fixture
def reference_service(service):
    """Service loaded with the reference SHOPIFY/EBAY/AMAZON transactions."""
    for payer, points, timestamp in REFERENCE_TRANSACTIONS:
        service.add_transaction(payer, points, timestamp)
    return service


@pytest.fixture
def transactions_file(tmp_path):
    """Write the reference transactions as JSON Lines.

    Args:
        tmp_path: pytest's built-in temporary directory fixture

    Returns:
        Path to the file
    """
    path = tmp_path / "transactions.jsonl"
    lines = [
        json.dumps({"payer": payer, "points": points, "timestamp": timestamp})
        for payer, points, timestamp in REFERENCE_TRANSACTIONS
    ]
    path.write_text("\n".join(lines) + "\n")
    return path
