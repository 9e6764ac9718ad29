"""Pydantic models for ledger events and allocation outcomes."""

from datetime import datetime

from pydantic import BaseModel, Field


class PointEvent(BaseModel):
    """Append-only ledger event.

    A positive amount is a credit, a negative amount is a debit (either a
    refund recorded by a payer or a deduction recorded by a spend).
    Never mutate or delete; only append.
    """

    source: str = Field(min_length=1, description="Payer the points belong to")
    amount: int = Field(description="Signed number of points")
    occurred_at: datetime = Field(description="When the points were credited or debited")

    model_config = {"frozen": True}


class AllocationEntry(BaseModel):
    """Points deducted from one payer by a single spend call."""

    source: str = Field(min_length=1, description="Payer the points were taken from")
    amount_deducted: int = Field(lt=0, description="Negative number of points deducted")

    model_config = {"frozen": True}
