"""Dashboard analytics API: statistics and daily performance."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException

from trade_journal.api.deps import get_current_owner, get_trade_store
from trade_journal.errors import ErrorCode
from trade_journal.schemas.trade import DashboardResponse
from trade_journal.services.trade_stats import compute_stats, daily_performance, period_start
from trade_journal.stores.trade_store import SqlTradeStore
from trade_journal.utils.constants import DEFAULT_PERIOD, PERIOD_DAYS

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/analytics", tags=["analytics"])


@router.get("/dashboard", response_model=DashboardResponse)
def dashboard(
    period: str = DEFAULT_PERIOD,
    owner_id: str = Depends(get_current_owner),
    store: SqlTradeStore = Depends(get_trade_store),
):
    """Statistics and per-day P&L for the lookback window."""
    if period not in PERIOD_DAYS:
        allowed = ", ".join(PERIOD_DAYS)
        raise HTTPException(
            status_code=400,
            detail={"error": f"Invalid period. Must be one of: {allowed}",
                    "code": ErrorCode.VALIDATION_ERROR.value},
        )

    now = datetime.now(timezone.utc)
    trades = store.trades_between(owner_id, start=period_start(period, now), end=now)
    return DashboardResponse(
        period=period,
        stats=compute_stats(owner_id, trades, period),
        performance=daily_performance(trades),
    )
