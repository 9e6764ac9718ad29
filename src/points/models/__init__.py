"""Pydantic models for the points ledger."""

from .ledger import AllocationEntry, PointEvent
from .transactions import (
    SpendRequest,
    SpendResponseItem,
    TransactionRequest,
    TransactionResponse,
)

__all__ = [
    "PointEvent",
    "AllocationEntry",
    # Wire shapes
    "TransactionRequest",
    "TransactionResponse",
    "SpendRequest",
    "SpendResponseItem",
]
