"""Wire-facing request and response shapes."""

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field, StrictInt, field_validator

from .ledger import AllocationEntry, PointEvent


class TransactionRequest(BaseModel):
    """Body of an add-transaction request.

    ``timestamp`` is ISO-8601; a value without an offset is read as UTC.
    """

    payer: str = Field(min_length=1, description="Payer name (e.g. SHOPIFY)")
    points: StrictInt = Field(description="Points to credit, negative for a refund")
    timestamp: datetime = Field(description="ISO-8601 transaction time")

    model_config = {"frozen": True}

    @field_validator("timestamp", mode="before")
    @classmethod
    def _require_iso_string(cls, value: Any) -> Any:
        # Lax mode would otherwise read bare numbers as Unix time
        if not isinstance(value, (str, datetime)):
            raise ValueError("timestamp must be an ISO-8601 string")
        return value

    @field_validator("timestamp")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class SpendRequest(BaseModel):
    """Body of a spend request.

    The sign is not checked here; the service rejects non-positive amounts
    with its own error so every caller gets the same message.
    """

    points: StrictInt = Field(description="Points to spend")

    model_config = {"frozen": True}


class TransactionResponse(BaseModel):
    payer: str
    points: int
    timestamp: datetime

    @classmethod
    def from_event(cls, event: PointEvent) -> "TransactionResponse":
        return cls(payer=event.source, points=event.amount, timestamp=event.occurred_at)


class SpendResponseItem(BaseModel):
    payer: str
    points: int

    @classmethod
    def from_entry(cls, entry: AllocationEntry) -> "SpendResponseItem":
        return cls(payer=entry.source, points=entry.amount_deducted)
