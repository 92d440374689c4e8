"""Tests for the statistics engine."""

from datetime import date, datetime, timedelta, timezone
from types import SimpleNamespace

import pytest
from pydantic import ValidationError

from trade_journal.services.trade_stats import (
    compute_stats,
    daily_performance,
    max_drawdown,
    period_start,
)

T0 = datetime(2024, 1, 15, 9, 0, tzinfo=timezone.utc)


def _trade(profit: float, minutes: int = 0, amount: float = 10.0, result: str | None = None, owner_id: str = "alice"):
    if result is None:
        result = "win" if profit > 0 else "loss"
    return SimpleNamespace(
        owner_id=owner_id,
        entry_time=T0 + timedelta(minutes=minutes),
        amount=amount,
        profit=profit,
        result=result,
    )


def test_empty_set_is_all_zero():
    stats = compute_stats("alice", [], "weekly")
    assert stats.model_dump() == {
        "period": "weekly",
        "total_trades": 0,
        "win_trades": 0,
        "loss_trades": 0,
        "tie_trades": 0,
        "win_rate": 0.0,
        "total_pnl": 0.0,
        "avg_pnl": 0.0,
        "max_drawdown": 0.0,
        "avg_stake": 0.0,
        "max_stake": 0.0,
    }


def test_reference_sequence():
    trades = [_trade(p, minutes=i) for i, p in enumerate([20, -30, 28, 16, -50])]
    stats = compute_stats("alice", trades, "weekly")
    assert stats.total_pnl == pytest.approx(-16)
    assert stats.max_drawdown == pytest.approx(50)
    assert stats.total_trades == 5
    assert stats.win_trades == 3
    assert stats.loss_trades == 2
    assert stats.win_rate == pytest.approx(60.0)
    assert stats.avg_pnl == pytest.approx(-3.2)


def test_drawdown_scan_is_chronological():
    ordered = [_trade(p, minutes=i) for i, p in enumerate([20, -30, 28, 16, -50])]
    shuffled = [ordered[i] for i in (4, 0, 3, 1, 2)]
    assert compute_stats("alice", shuffled, "weekly").max_drawdown == pytest.approx(50)


def test_losing_first_trade_counts_as_drawdown():
    assert max_drawdown([-10, 5]) == pytest.approx(10)


def test_drawdown_never_negative():
    assert max_drawdown([5, 5, 5]) == 0.0
    assert max_drawdown([]) == 0.0


def test_stake_stats_and_ties():
    trades = [
        _trade(8.5, 0, amount=10),
        _trade(-20, 1, amount=20),
        _trade(0, 2, amount=30, result="tie"),
    ]
    stats = compute_stats("alice", trades, "monthly")
    assert stats.tie_trades == 1
    assert stats.avg_stake == pytest.approx(20)
    assert stats.max_stake == 30
    assert stats.win_rate == pytest.approx(100 / 3)


def test_other_owners_trades_ignored():
    trades = [_trade(10, 0), _trade(99, 1, owner_id="bob")]
    stats = compute_stats("alice", trades, "weekly")
    assert stats.total_trades == 1
    assert stats.total_pnl == 10


def test_naive_and_aware_timestamps_mix():
    naive = _trade(-5, 5)
    naive.entry_time = naive.entry_time.replace(tzinfo=None)
    stats = compute_stats("alice", [_trade(10, 0), naive], "weekly")
    assert stats.max_drawdown == pytest.approx(5)


def test_unknown_period_rejected():
    with pytest.raises(ValidationError):
        compute_stats("alice", [], "hourly")


@pytest.mark.parametrize("period,days", [("daily", 1), ("weekly", 7), ("monthly", 30), ("yearly", 365)])
def test_period_start(period, days):
    now = datetime(2024, 6, 1, tzinfo=timezone.utc)
    assert period_start(period, now) == now - timedelta(days=days)


def test_period_start_unknown():
    with pytest.raises(ValueError):
        period_start("fortnightly")


def test_daily_performance_groups_by_day():
    trades = [
        _trade(10, 0),
        _trade(-4, 60),
        _trade(7, 60 * 24),
    ]
    perf = daily_performance(trades)
    assert [(p.date, p.trades, p.pnl) for p in perf] == [
        (date(2024, 1, 15), 2, 6.0),
        (date(2024, 1, 16), 1, 7.0),
    ]


def test_daily_performance_empty():
    assert daily_performance([]) == []
