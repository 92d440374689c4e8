"""Trade model: canonical record for every trade, imported or entered by hand."""

import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field, Column
from sqlalchemy import JSON


def _new_id() -> str:
    return uuid.uuid4().hex


class Trade(SQLModel, table=True):
    __tablename__ = "trade"

    id: str = Field(default_factory=_new_id, primary_key=True)
    owner_id: str = Field(index=True)
    # Broker-side natural key. Uniqueness per owner is enforced by the
    # import deduplication step, not by a constraint.
    trade_id: str = Field(index=True)

    asset: str
    direction: str  # "call" or "put"
    amount: float = Field(ge=0)
    entry_price: float = Field(gt=0)
    exit_price: float = Field(gt=0)
    entry_time: datetime = Field(index=True)
    exit_time: datetime  # equals entry_time for imported rows

    # Broker-specific fields
    timeframe: str  # e.g. "5M"
    candle_time: str
    refunded: float = Field(default=0.0, ge=0)
    executed: float = Field(default=0.0, ge=0)
    status: str  # "WIN" or "LOSE", broker vocabulary
    result: str  # "win", "loss" or "tie"
    profit: float
    payout: float = 0.0  # profit / amount * 100; 0 when amount is 0

    platform: str
    strategy: str | None = None
    notes: str | None = None
    screenshots: list[str] | None = Field(default=None, sa_column=Column(JSON))

    imported_at: datetime | None = None
    import_batch: str | None = Field(default=None, index=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
