"""Descriptive performance statistics over a set of trades.

All functions are pure computation with no database access.
Callers time-filter the trades (see ``period_start``) before passing them in.
"""

from datetime import datetime, timedelta, timezone
from typing import Iterable, Protocol

import numpy as np
import pandas as pd

from trade_journal.schemas.trade import DailyPerformance, TradeStats
from trade_journal.utils.constants import PERIOD_DAYS


class TradeLike(Protocol):
    owner_id: str
    entry_time: datetime
    amount: float
    profit: float
    result: str


def period_start(period: str, now: datetime | None = None) -> datetime:
    """Start of the lookback window for a period label."""
    if period not in PERIOD_DAYS:
        allowed = ", ".join(PERIOD_DAYS)
        raise ValueError(f"Invalid period '{period}'. Must be one of: {allowed}")
    now = now or datetime.now(timezone.utc)
    return now - timedelta(days=PERIOD_DAYS[period])


def _sort_key(trade: TradeLike):
    ts = trade.entry_time
    # SQLite hands back naive datetimes; treat them as UTC so mixed sets sort
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts


def max_drawdown(profits: Iterable[float]) -> float:
    """Largest fall of cumulative P&L from its running peak.

    The peak starts at 0 (flat account), so a losing first trade already
    counts as drawdown. Always >= 0.
    """
    pnl = np.fromiter(profits, dtype=np.float64)
    if pnl.size == 0:
        return 0.0
    equity = np.cumsum(pnl)
    peaks = np.maximum.accumulate(np.maximum(equity, 0.0))
    return float(np.max(peaks - equity))


def compute_stats(owner_id: str, trades: Iterable[TradeLike], period: str) -> TradeStats:
    """Aggregate counts, win rate, P&L, drawdown and stake stats.

    Trades belonging to other owners are ignored. Empty input gives zeros.
    """
    owned = sorted((t for t in trades if t.owner_id == owner_id), key=_sort_key)
    total = len(owned)
    if total == 0:
        return TradeStats(period=period)

    wins = sum(1 for t in owned if t.result == "win")
    losses = sum(1 for t in owned if t.result == "loss")
    ties = sum(1 for t in owned if t.result == "tie")

    profits = [t.profit or 0.0 for t in owned]
    stakes = np.array([t.amount for t in owned], dtype=np.float64)
    total_pnl = float(sum(profits))

    return TradeStats(
        period=period,
        total_trades=total,
        win_trades=wins,
        loss_trades=losses,
        tie_trades=ties,
        win_rate=wins / total * 100,
        total_pnl=total_pnl,
        avg_pnl=total_pnl / total,
        max_drawdown=max_drawdown(profits),
        avg_stake=float(stakes.mean()),
        max_stake=float(stakes.max()),
    )


def daily_performance(trades: Iterable[TradeLike]) -> list[DailyPerformance]:
    """Trade count and P&L per calendar day (UTC), ascending."""
    rows = [{"entry_time": _sort_key(t), "profit": t.profit or 0.0} for t in trades]
    if not rows:
        return []

    df = pd.DataFrame(rows)
    df["date"] = pd.to_datetime(df["entry_time"], utc=True).dt.date
    grouped = df.groupby("date").agg(trades=("profit", "size"), pnl=("profit", "sum"))
    return [
        DailyPerformance(date=day, trades=int(row.trades), pnl=round(float(row.pnl), 2))
        for day, row in grouped.sort_index().iterrows()
    ]
