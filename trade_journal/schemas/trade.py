"""Pydantic schemas for trade queries and statistics."""

from datetime import date, datetime

from pydantic import BaseModel, Field, field_validator, model_validator

from trade_journal.utils.constants import PERIOD_DAYS, RESULTS


class TradeFilters(BaseModel):
    start: datetime | None = None
    end: datetime | None = None
    limit: int = Field(default=100, ge=1, le=1000)
    offset: int = Field(default=0, ge=0)
    result: str | None = None
    asset: str | None = None
    strategy: str | None = None

    @field_validator("result")
    @classmethod
    def _validate_result(cls, value: str | None) -> str | None:
        if value is not None and value not in RESULTS:
            allowed = ", ".join(RESULTS)
            raise ValueError(f"must be one of: {allowed}")
        return value

    @model_validator(mode="after")
    def _validate_range(self):
        if self.start and self.end and self.end < self.start:
            raise ValueError("end cannot be before start")
        return self


class TradeRead(BaseModel):
    id: str
    trade_id: str
    asset: str
    direction: str
    amount: float
    entry_price: float
    exit_price: float
    entry_time: datetime
    exit_time: datetime
    timeframe: str
    candle_time: str
    refunded: float
    executed: float
    status: str
    result: str
    profit: float
    payout: float
    platform: str
    strategy: str | None = None
    notes: str | None = None
    screenshots: list[str] | None = None
    imported_at: datetime | None = None
    import_batch: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class TradeStats(BaseModel):
    """Descriptive aggregates over one lookback window. Never persisted."""

    period: str
    total_trades: int = 0
    win_trades: int = 0
    loss_trades: int = 0
    tie_trades: int = 0
    win_rate: float = 0.0
    total_pnl: float = 0.0
    avg_pnl: float = 0.0
    max_drawdown: float = 0.0
    avg_stake: float = 0.0
    max_stake: float = 0.0

    model_config = {"frozen": True}

    @field_validator("period")
    @classmethod
    def _validate_period(cls, value: str) -> str:
        if value not in PERIOD_DAYS:
            allowed = ", ".join(PERIOD_DAYS)
            raise ValueError(f"must be one of: {allowed}")
        return value


class DailyPerformance(BaseModel):
    date: date
    trades: int
    pnl: float


class DashboardResponse(BaseModel):
    period: str
    stats: TradeStats
    performance: list[DailyPerformance]
