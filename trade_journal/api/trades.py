"""Trade history API."""

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from pydantic import ValidationError

from trade_journal.api.deps import get_current_owner, get_trade_store
from trade_journal.errors import ErrorCode
from trade_journal.schemas.trade import TradeFilters, TradeRead
from trade_journal.stores.trade_store import SqlTradeStore

router = APIRouter(prefix="/api/trades", tags=["trades"])


@router.get("", response_model=list[TradeRead])
def list_trades(
    start: datetime | None = None,
    end: datetime | None = None,
    result: str | None = None,
    asset: str | None = None,
    strategy: str | None = None,
    limit: int = 100,
    offset: int = 0,
    owner_id: str = Depends(get_current_owner),
    store: SqlTradeStore = Depends(get_trade_store),
):
    try:
        filters = TradeFilters(
            start=start, end=end, result=result, asset=asset,
            strategy=strategy, limit=limit, offset=offset,
        )
    except ValidationError as e:
        raise HTTPException(
            status_code=422,
            detail={"error": "Validation failed", "code": ErrorCode.VALIDATION_ERROR.value,
                    "details": e.errors(include_url=False, include_context=False)},
        )
    return store.list_trades(owner_id, filters)


@router.get("/{record_id}", response_model=TradeRead)
def get_trade(
    record_id: str,
    owner_id: str = Depends(get_current_owner),
    store: SqlTradeStore = Depends(get_trade_store),
):
    trade = store.get(owner_id, record_id)
    if not trade:
        raise HTTPException(
            status_code=404,
            detail={"error": "Trade not found", "code": ErrorCode.TRADE_NOT_FOUND.value},
        )
    return trade
